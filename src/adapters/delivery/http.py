"""
HTTP code sender adapter - Implements CodeSender protocol.

Posts one-time codes to an SMS gateway over HTTP. Delivery is best-effort:
timeouts, transport errors and non-2xx responses are logged and reported
as False, never raised.
"""

import logging

import httpx

logger = logging.getLogger(__name__)


class HttpCodeSender:
    """Implements CodeSender protocol via an HTTP gateway."""

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._url = url
        self._client = client or httpx.Client(timeout=timeout_seconds)

    def send_code(self, destination: str, code: str) -> bool:
        try:
            response = self._client.post(self._url, json={"to": destination, "code": code})
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Code delivery to gateway failed: %s", type(e).__name__)
            return False
        return True

    def close(self) -> None:
        self._client.close()
