"""Tests for the checkout lock and the mail relay client."""

import pytest

from storefront.domain.errors import CheckoutInProgressError
from storefront.services.mail_client import MailClient


class TestCheckoutLock:
    def test_hold_and_release(self, lock_service, fake_redis):
        with lock_service.hold(7) as token:
            assert fake_redis.store == {"checkout:7:lock": token}
        assert fake_redis.store == {}

    def test_second_holder_rejected(self, lock_service):
        with lock_service.hold(7):
            with pytest.raises(CheckoutInProgressError):
                with lock_service.hold(7):
                    pass

    def test_other_users_not_blocked(self, lock_service):
        with lock_service.hold(7):
            with lock_service.hold(8):
                pass

    def test_release_only_own_token(self, lock_service, fake_redis):
        fake_redis.store["checkout:7:lock"] = "theirs"
        assert lock_service.release(7, "mine") is False
        assert fake_redis.store["checkout:7:lock"] == "theirs"


class _Response:
    content = b'{"id": "m-1"}'

    def raise_for_status(self):
        pass

    def json(self):
        return {"id": "m-1"}


def test_mail_client_posts_json(monkeypatch):
    calls = []

    def fake_post(url, json, timeout):
        calls.append((url, json, timeout))
        return _Response()

    monkeypatch.setattr("storefront.services.mail_client.requests.post", fake_post)
    client = MailClient(base_url="http://relay:8025/", sender="shop@example.com", timeout=3)

    assert client.send(["a@example.com"], "Hi", "Body") == {"id": "m-1"}
    assert calls == [
        (
            "http://relay:8025/messages",
            {"from": "shop@example.com", "to": ["a@example.com"], "subject": "Hi", "body": "Body"},
            3,
        )
    ]
