# hackathon_service/services/identity_provider.py
"""
Client for the external identity provider's admin API.

Only used for email changes: the provider sends the verification mail and
swaps the address once the user confirms it.
"""

import logging
from typing import Optional

import httpx

from hackathon_service.core.config import settings
from hackathon_service.core.exceptions import EmailChangeRejected, UpstreamFailure

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Too many requests. Please wait a moment before trying again."
EMAIL_TAKEN_MESSAGE = "This email is already associated with another account."


class IdentityProviderClient:
    """Synchronous client, one request per call and no retries."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or settings.IDENTITY_PROVIDER_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.IDENTITY_PROVIDER_API_KEY
        self.timeout = timeout or settings.IDENTITY_PROVIDER_TIMEOUT
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
            headers={
                "apikey": self.api_key,
                "Authorization": f"Bearer {self.api_key}",
            },
        )

    def request_email_change(self, user_id: str, new_email: str) -> None:
        """
        Asks the provider to start verification of ``new_email``.

        Raises:
            EmailChangeRejected: rate limited or address already in use
            UpstreamFailure: anything else went wrong
        """
        try:
            with self._client() as client:
                response = client.put(
                    f"/auth/v1/admin/users/{user_id}",
                    json={"email": new_email},
                )
        except httpx.HTTPError as e:
            logger.error(
                f"Identity provider unreachable for email change of user {user_id}: {str(e)}",
                exc_info=True,
                extra={"user_id": user_id},
            )
            raise UpstreamFailure("send verification email", status_code=502) from e

        if response.is_success:
            logger.info(f"Email change verification sent for user {user_id}")
            return

        message = _error_message(response)
        lowered = message.lower()
        if response.status_code == 429 or "rate limit" in lowered:
            logger.warning(f"Email change rate limited for user {user_id}")
            raise EmailChangeRejected(RATE_LIMITED_MESSAGE)
        if "already registered" in lowered or "already been registered" in lowered:
            logger.info(f"Email change rejected for user {user_id}: address in use")
            raise EmailChangeRejected(EMAIL_TAKEN_MESSAGE)

        logger.error(
            f"Identity provider rejected email change for user {user_id}: "
            f"HTTP {response.status_code} {message}",
            extra={"user_id": user_id, "status_code": response.status_code},
        )
        raise UpstreamFailure("send verification email", status_code=502)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("msg") or body.get("message") or body.get("error_description") or body.get("error") or "")
    return str(body)
