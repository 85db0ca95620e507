# storefront/services/mail_client.py
import requests

from storefront.utils.retry import http_retry
from storefront.utils.settings import MAIL_API_URL, MAIL_FROM
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class MailClient:
    """Posts rendered messages to the HTTP mail relay."""

    def __init__(self, base_url: str | None = None, sender: str | None = None, timeout: int = 5):
        self.base_url = (base_url or MAIL_API_URL).rstrip("/")
        self.sender = sender or MAIL_FROM
        self.timeout = timeout

    @http_retry()
    def send(self, to: list[str], subject: str, body: str) -> dict:
        url = f"{self.base_url}/messages"
        logger.info(f"MailClient POST {url} to={to}")

        resp = requests.post(
            url,
            json={"from": self.sender, "to": to, "subject": subject, "body": body},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json() if resp.content else {}
