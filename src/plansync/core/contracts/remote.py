"""Remote document store contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any

from pydantic import BaseModel, Field

RemoteDocument = dict[str, Any]


class RemoteQuery(BaseModel):
    include_deleted: bool = False
    # Field equality filters, e.g. ``{"userId": "ada"}``.
    where: dict[str, str] = Field(default_factory=dict)

    def matches(self, document: RemoteDocument) -> bool:
        if not self.include_deleted and document.get("isDeleted") is True:
            return False
        return all(document.get(field) == value for field, value in self.where.items())


class RemoteStore(ABC):
    """One remote collection of JSON documents keyed by ``id``.

    Implementations raise :class:`~plansync.core.contracts.exceptions.RemoteUnavailableError`
    for transport failures and :class:`~plansync.core.contracts.exceptions.RemoteRejectedError`
    when the backend refuses a request.
    """

    @abstractmethod
    async def __aenter__(self) -> RemoteStore: ...  # pragma: no cover

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def fetch_all(self, query: RemoteQuery) -> list[RemoteDocument]: ...  # pragma: no cover

    @abstractmethod
    async def batch_write(self, documents: list[RemoteDocument]) -> None:
        """Write every document or none of them."""
        ...  # pragma: no cover

    @abstractmethod
    async def soft_delete(self, document_id: str) -> None:
        """Mark a document as deleted (``isDeleted = true``) without removing it."""
        ...  # pragma: no cover

    @abstractmethod
    async def get_document(self, document_id: str) -> RemoteDocument | None: ...  # pragma: no cover

    @abstractmethod
    async def put_document(self, document: RemoteDocument) -> None: ...  # pragma: no cover
