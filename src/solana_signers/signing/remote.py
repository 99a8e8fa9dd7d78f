"""Shared plumbing for signers backed by a remote HTTP API."""

import logging
from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from solana_signers.errors import ConfigError, RemoteApiError, from_exception
from solana_signers.signing.base import SignerType, SolanaSigner

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
MAX_RECOMMENDED_DELAY_MS = 3000

ModelT = TypeVar("ModelT", bound=BaseModel)


class RemoteSigner(SolanaSigner):
    """Base for Vault, Privy and Turnkey signers.

    One pooled ``httpx.AsyncClient`` is shared by every call on an instance.
    Pass ``client`` to share a pool across signers or to inject a test
    transport; an injected client is not closed by ``aclose()``.
    """

    def __init__(
        self,
        signer_type: SignerType,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
        request_delay_ms: int = 0,
        unsafe_debug: bool = False,
    ):
        super().__init__(signer_type)

        if request_delay_ms < 0:
            raise ConfigError("request_delay_ms must not be negative")
        if request_delay_ms > MAX_RECOMMENDED_DELAY_MS:
            logger.warning(
                f"request_delay_ms is {request_delay_ms}ms; delays above "
                f"{MAX_RECOMMENDED_DELAY_MS}ms may let blockhashes expire before signing"
            )

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._request_delay_ms = request_delay_ms
        self._unsafe_debug = unsafe_debug

    @property
    def request_delay_ms(self) -> int:
        return self._request_delay_ms

    async def aclose(self) -> None:
        """Close the HTTP client if this signer created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()

    async def _send(self, api_name: str, method: str, url: str, **kwargs) -> httpx.Response:
        """Send a request, mapping failures onto the error taxonomy.

        Raises:
            HttpError: On transport failure
            RemoteApiError: On a non-success status
        """
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{api_name} request failed: {type(e).__name__}")
            raise from_exception(e, f"{api_name} request failed") from e

        if not response.is_success:
            status = response.status_code
            if self._unsafe_debug:
                logger.error(f"{api_name} error - status: {status}, response: {response.text}")
            else:
                logger.error(f"{api_name} error - status: {status}")
            raise RemoteApiError(f"{api_name} error {status}")

        return response

    async def _probe(self, method: str, url: str, **kwargs) -> bool:
        """Health probe: True on a success status, False on anything else."""
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.debug(f"Health probe failed: {type(e).__name__}")
            return False
        return response.is_success

    @staticmethod
    def _parse(response: httpx.Response, model: Type[ModelT], api_name: str) -> ModelT:
        """Parse a JSON response body into a wire model.

        Raises:
            SerializationError: If the body is not UTF-8 JSON or does not match
        """
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise from_exception(e, f"Failed to parse {api_name} response") from e
