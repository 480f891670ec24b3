"""In-memory remote store."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from types import TracebackType

from plansync.core.clock import Clock, now_ms
from plansync.core.contracts.exceptions import RemoteRejectedError
from plansync.core.contracts.remote import RemoteDocument, RemoteQuery, RemoteStore


@dataclass(frozen=True)
class RemoteOperation:
    """Deterministic operation log entry."""

    sequence: int
    name: str
    document_ids: tuple[str, ...]


class InMemoryRemoteStore(RemoteStore):
    """Remote collection held in process memory.

    Documents are never physically removed: ``soft_delete`` sets the
    ``isDeleted`` tombstone, which hides the document from default listings.
    """

    def __init__(self, documents: list[RemoteDocument] | None = None, *, clock: Clock = now_ms) -> None:
        self._documents: dict[str, RemoteDocument] = {}
        self._clock = clock
        self._operation_counter = 0
        self._operations: list[RemoteOperation] = []
        for document in documents or []:
            self._documents[str(document["id"])] = copy.deepcopy(document)

    @property
    def operations(self) -> tuple[RemoteOperation, ...]:
        return tuple(self._operations)

    @property
    def documents(self) -> dict[str, RemoteDocument]:
        return copy.deepcopy(self._documents)

    def _record_operation(self, name: str, document_ids: tuple[str, ...] = ()) -> None:
        self._operation_counter += 1
        self._operations.append(RemoteOperation(sequence=self._operation_counter, name=name, document_ids=document_ids))

    async def __aenter__(self) -> InMemoryRemoteStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        return None

    async def fetch_all(self, query: RemoteQuery) -> list[RemoteDocument]:
        self._record_operation("fetch_all")
        return [
            copy.deepcopy(document)
            for document in self._documents.values()
            if query.matches(document)
        ]

    async def batch_write(self, documents: list[RemoteDocument]) -> None:
        ids = tuple(self._require_id(document) for document in documents)
        self._record_operation("batch_write", ids)
        for document_id, document in zip(ids, documents, strict=True):
            self._documents[document_id] = copy.deepcopy(document)

    async def soft_delete(self, document_id: str) -> None:
        self._record_operation("soft_delete", (document_id,))
        document = self._documents.get(document_id)
        if document is None:
            raise RemoteRejectedError(f"Document not found: {document_id}", status_code=404)
        document["isDeleted"] = True
        document["updatedAt"] = self._clock()

    async def get_document(self, document_id: str) -> RemoteDocument | None:
        self._record_operation("get_document", (document_id,))
        document = self._documents.get(document_id)
        return copy.deepcopy(document) if document is not None else None

    async def put_document(self, document: RemoteDocument) -> None:
        document_id = self._require_id(document)
        self._record_operation("put_document", (document_id,))
        self._documents[document_id] = copy.deepcopy(document)

    @staticmethod
    def _require_id(document: RemoteDocument) -> str:
        document_id = document.get("id")
        if not isinstance(document_id, str) or not document_id:
            raise RemoteRejectedError("Document is missing a string 'id'", status_code=400)
        return document_id
