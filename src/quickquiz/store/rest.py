"""
HTTP remote store

Talks to the quiz REST API with a bearer credential taken from the session.
"""

import logging
from typing import Optional

import httpx

from ..config import config, StoreConfig
from ..errors import StoreError, UnexpectedRemoteStatus
from ..session import SessionContext
from .base import (
    RemoteStore, StoreResponse, QuizRequest, QuestionRequest, OptionRequest,
    ANSWERED_STATUSES
)

logger = logging.getLogger(__name__)


class HttpQuizStore(RemoteStore):
    """
    Remote store backed by the quiz REST API.

    Requires a session with a credential; the HTTP client is created on
    first use.
    """

    def __init__(
        self,
        session: SessionContext,
        store_config: Optional[StoreConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP store.

        Args:
            session: Session with credential and base URL
            store_config: Endpoint paths and timeouts (defaults to config.store)
            transport: Optional httpx transport (used for testing)
        """
        self._session = session
        self._cfg = store_config or config.store
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Lazy initialization of HTTP client."""
        if self._client is None:
            token = self._session.require_credential()
            self._client = httpx.AsyncClient(
                base_url=self._session.endpoint,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
                timeout=self._cfg.timeout_seconds,
                verify=self._cfg.verify_tls,
                transport=self._transport,
            )
        return self._client

    async def _post(self, path: str, payload: dict) -> StoreResponse:
        """POST a JSON payload and classify the response."""
        client = self._get_client()

        try:
            response = await client.post(path, json=payload)
        except httpx.RequestError as e:
            raise StoreError(f"Request to {path} failed: {e}") from e

        if response.status_code not in ANSWERED_STATUSES:
            logger.error(f"POST {path} returned unexpected status {response.status_code}")
            raise UnexpectedRemoteStatus(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError:
            data = response.text or None

        return StoreResponse(status_code=response.status_code, data=data)

    async def create_quiz(self, request: QuizRequest) -> StoreResponse:
        return await self._post(self._cfg.quizzes_path, request.to_payload())

    async def create_question(self, request: QuestionRequest) -> StoreResponse:
        return await self._post(self._cfg.questions_path, request.to_payload())

    async def create_option(self, request: OptionRequest) -> StoreResponse:
        return await self._post(self._cfg.options_path, request.to_payload())

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
