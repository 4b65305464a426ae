"""
Inference webhook client.

POSTs one chat turn as JSON to the configured webhook and returns the raw
response body. The body is treated as opaque text; any envelope it carries
is a rendering concern.

Dependencies: httpx
System role: External inference dispatch boundary
"""

import logging
from typing import Protocol

import httpx

from chatflow.core.exceptions import TransportError
from chatflow.models.chat import InferenceRequest

logger = logging.getLogger(__name__)


class InferenceClient(Protocol):
    """Anything able to turn an InferenceRequest into reply text."""

    async def dispatch(self, request: InferenceRequest) -> str: ...


class WebhookInferenceClient:
    """Single-attempt JSON request/response client for the inference webhook."""

    def __init__(
        self,
        webhook_url: str,
        timeout_seconds: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize webhook client.

        Args:
            webhook_url: Endpoint receiving the chat payload
            timeout_seconds: Transport timeout for one dispatch
            client: Shared httpx client (a private one is created when omitted)
        """
        if not webhook_url:
            raise ValueError("webhook_url is required")

        self.webhook_url = webhook_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def dispatch(self, request: InferenceRequest) -> str:
        """
        Send one turn and return the reply body verbatim.

        Args:
            request: Message, model, chat/user ids and attachment metadata

        Returns:
            str: Raw response text

        Raises:
            TransportError: On connection/timeout errors or a non-2xx status
        """
        payload = request.model_dump(mode="json")
        logger.info(
            f"{__name__}:dispatch - POST chat_id={request.chat_id} "
            f"model={request.model} files={len(request.files)}"
        )

        try:
            response = await self._client.post(self.webhook_url, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"{__name__}:dispatch - {type(e).__name__}: {e}")
            raise TransportError(
                f"Webhook request failed: {type(e).__name__}",
                target=self.webhook_url,
                details={"error": str(e)},
            ) from e

        if not response.is_success:
            logger.error(
                f"{__name__}:dispatch - Webhook returned {response.status_code} "
                f"{response.reason_phrase}"
            )
            raise TransportError(
                f"Webhook request failed: {response.reason_phrase}",
                target=self.webhook_url,
                status_code=response.status_code,
            )

        logger.info(f"{__name__}:dispatch - Reply received len={len(response.text)}")
        return response.text

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()
