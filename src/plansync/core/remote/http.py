"""REST document-store adapter."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx

from plansync.core.clock import Clock, now_ms
from plansync.core.contracts.exceptions import RemoteError, RemoteRejectedError, RemoteUnavailableError
from plansync.core.contracts.remote import RemoteDocument, RemoteQuery, RemoteStore
from plansync.core.remote._retrying_transport import RetryingTransport

_LOG = logging.getLogger(__name__)


class HttpRemoteStore(RemoteStore):
    """Remote collection served over a JSON REST API.

    Endpoints, relative to ``{base_url}/collections/{collection}``:

    - ``GET  /documents?includeDeleted=false&where.{field}={value}`` → ``{"documents": [...]}``
    - ``POST /batch`` with ``{"documents": [...]}`` (atomic)
    - ``PATCH /documents/{id}`` with ``{"isDeleted": true, "updatedAt": ms}``
    - ``GET  /documents/{id}`` → document, 404 when absent
    - ``PUT  /documents/{id}`` with the document
    """

    def __init__(
        self,
        *,
        base_url: str,
        collection: str,
        token: str | None = None,
        timeout_seconds: float = 30.0,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Clock = now_ms,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._collection = collection
        self._token = token
        self._timeout_seconds = timeout_seconds
        self._max_retries = max_retries
        self._transport = transport
        self._clock = clock
        self._client: httpx.AsyncClient | None = None

    @property
    def collection(self) -> str:
        return self._collection

    async def __aenter__(self) -> HttpRemoteStore:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}/collections/{quote(self._collection, safe='')}",
            headers=headers,
            transport=RetryingTransport(transport=self._transport, max_retries=self._max_retries),
            timeout=httpx.Timeout(self._timeout_seconds),
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_all(self, query: RemoteQuery) -> list[RemoteDocument]:
        params = {"includeDeleted": "true" if query.include_deleted else "false"}
        params.update({f"where.{field}": value for field, value in query.where.items()})
        payload = await self._request("GET", "/documents", params=params)
        documents = payload.get("documents") if isinstance(payload, dict) else None
        if not isinstance(documents, list):
            raise RemoteUnavailableError("Remote listing is missing a 'documents' array")
        valid = [document for document in documents if isinstance(document, dict)]
        if len(valid) != len(documents):
            _LOG.warning("Ignoring %d non-object entries in remote listing", len(documents) - len(valid))
        return [document for document in valid if query.matches(document)]

    async def batch_write(self, documents: list[RemoteDocument]) -> None:
        if not documents:
            return
        await self._request("POST", "/batch", json={"documents": documents})

    async def soft_delete(self, document_id: str) -> None:
        await self._request(
            "PATCH",
            self._document_path(document_id),
            json={"isDeleted": True, "updatedAt": self._clock()},
        )

    async def get_document(self, document_id: str) -> RemoteDocument | None:
        try:
            payload = await self._request("GET", self._document_path(document_id))
        except RemoteRejectedError as exc:
            if exc.status_code == 404:
                return None
            raise
        if not isinstance(payload, dict):
            raise RemoteUnavailableError(f"Remote document '{document_id}' is not a JSON object")
        return payload

    async def put_document(self, document: RemoteDocument) -> None:
        document_id = document.get("id")
        if not isinstance(document_id, str) or not document_id:
            raise RemoteRejectedError("Document is missing a string 'id'", status_code=400)
        await self._request("PUT", self._document_path(document_id), json=document)

    @staticmethod
    def _document_path(document_id: str) -> str:
        return f"/documents/{quote(document_id, safe='')}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        if self._client is None:
            raise RemoteError("Remote store is not initialized. Use 'async with'.")
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise RemoteUnavailableError(f"{method} {path} failed: {exc}") from exc

        if response.status_code >= 500 or response.status_code == 429:
            raise RemoteUnavailableError(f"{method} {path} failed with HTTP {response.status_code}")
        if response.status_code >= 400:
            raise RemoteRejectedError(
                f"{method} {path} rejected with HTTP {response.status_code}: {self._error_detail(response)}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteUnavailableError(f"{method} {path} returned invalid JSON") from exc

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return response.text.strip() or "no detail"
        if isinstance(payload, dict):
            for key in ("error", "message", "detail"):
                value = payload.get(key)
                if isinstance(value, str) and value:
                    return value
        return str(payload)
