"""
SMS dispatching for the HN Digest pipeline.

Sends the digest through the Twilio REST API. Delivery is a single
attempt and never raises: every failure is reported through a failed
DeliveryResult so that the scheduler keeps running.
"""

import asyncio
import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from ..models.config import SmsConfig
from ..models.delivery import DeliveryResult
from ..utils.error_handling import (
    DeliveryError,
    ErrorCategory,
    ErrorSeverity,
    get_error_tracker,
)

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class TwilioSmsDispatcher:
    """Twilio Programmable Messaging dispatcher."""

    def __init__(
        self,
        config: SmsConfig,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Twilio dispatcher.

        Args:
            config: Twilio account credentials and sender number
            timeout: HTTP timeout in seconds
            session: Pre-built HTTP session (tests inject a mock)
        """
        self.account_sid = config.account_sid
        self.from_number = config.from_number
        self.timeout = timeout
        self.session = session or self._create_session(config)
        self.messages_url = (
            f"{TWILIO_API_BASE}/Accounts/{self.account_sid}/Messages.json"
        )

    def _create_session(self, config: SmsConfig) -> requests.Session:
        session = requests.Session()
        session.auth = (config.account_sid, config.auth_token)

        # No automatic retries: one send per run
        adapter = HTTPAdapter(max_retries=0)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({"User-Agent": "HN-Digest/1.0 (SMS Dispatcher)"})
        return session

    def _send_message(self, to_number: str, body: str) -> str:
        """
        Post one message to Twilio.

        Returns:
            Twilio message SID

        Raises:
            DeliveryError: If the request fails or Twilio rejects it
        """
        try:
            response = self.session.post(
                self.messages_url,
                data={"Body": body, "From": self.from_number, "To": to_number},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise DeliveryError(f"Twilio request failed: {e}") from e

        if response.status_code >= 400:
            detail = response.reason
            try:
                payload = response.json()
                detail = f"{payload.get('code')}: {payload.get('message')}"
            except ValueError:
                pass
            raise DeliveryError(
                f"Twilio API error {response.status_code}: {detail}"
            )

        try:
            sid = response.json().get("sid")
        except ValueError as e:
            raise DeliveryError("Twilio returned a non-JSON response") from e

        if not sid:
            raise DeliveryError("Twilio response did not include a message SID")

        return sid

    async def deliver(self, to_number: str, body: str) -> DeliveryResult:
        """
        Send ``body`` to ``to_number``.

        Args:
            to_number: Recipient phone number (E.164)
            body: Message text

        Returns:
            DeliveryResult carrying the message SID or the failure reason
        """
        try:
            sid = await asyncio.to_thread(self._send_message, to_number, body)
        except Exception as e:
            get_error_tracker().record_error(
                component="pipeline.dispatcher",
                category=ErrorCategory.MESSAGE_DELIVERY,
                severity=ErrorSeverity.HIGH,
                message=f"Error sending SMS: {e}",
                exception=e,
                context={"to": to_number, "body_length": len(body)},
            )
            logger.error(f"Error sending SMS: {e}")
            result = DeliveryResult.failed(str(e) or type(e).__name__)
        else:
            logger.info(f"SMS sent successfully. SID: {sid}")
            result = DeliveryResult.sent(sid)

        result.validate()
        return result

    def test_connection(self) -> bool:
        """Test Twilio credentials by fetching the account resource."""
        try:
            response = self.session.get(
                f"{TWILIO_API_BASE}/Accounts/{self.account_sid}.json",
                timeout=10,
            )
            response.raise_for_status()
            return True

        except Exception as e:
            logger.error(f"Twilio connection test failed: {e}")
            return False
