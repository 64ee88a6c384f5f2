"""
Resource repository over one MongoDB collection.

Every operation returns a RepositoryResult instead of raising, so the caller
decides whether a failed read becomes an empty list or an error response.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pymongo.errors import PyMongoError

from .mongo_adapter import MongoAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RepositoryError(Exception):
    """Raised when a failed RepositoryResult is unwrapped"""

    def __init__(self, operation: str, collection: str, cause: Exception):
        super().__init__(f"{operation} on {collection} failed: {cause}")
        self.operation = operation
        self.collection = collection
        self.cause = cause


@dataclass(frozen=True)
class RepositoryResult(Generic[T]):
    """Value-or-error outcome of a repository call"""
    value: Optional[T] = None
    error: Optional[RepositoryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T]) -> "RepositoryResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: RepositoryError) -> "RepositoryResult[T]":
        return cls(error=error)

    def unwrap(self) -> Optional[T]:
        if self.error is not None:
            raise self.error
        return self.value


class ResourceRepository:
    """Create, list, update and delete documents of one resource kind"""

    def __init__(self, adapter: MongoAdapter, collection: str):
        self.adapter = adapter
        self.collection = collection

    def _run(self, operation: str, func, *args) -> RepositoryResult:
        try:
            return RepositoryResult.success(func(self.collection, *args))
        except PyMongoError as e:
            logger.error("Error during %s on %s: %s", operation, self.collection, e)
            return RepositoryResult.failure(RepositoryError(operation, self.collection, e))

    def create(self, fields: Dict[str, Any]) -> RepositoryResult[Dict[str, Any]]:
        return self._run("create", self.adapter.create_document, fields)

    def list(self) -> RepositoryResult[List[Dict[str, Any]]]:
        return self._run("list", self.adapter.list_documents)

    def get_by_id(self, doc_id: str) -> RepositoryResult[Dict[str, Any]]:
        return self._run("get", self.adapter.get_document, doc_id)

    def update_by_id(self, doc_id: str, fields: Dict[str, Any]) -> RepositoryResult[Dict[str, Any]]:
        """Result value is None when no document has this id"""
        return self._run("update", self.adapter.update_document, doc_id, fields)

    def delete_by_id(self, doc_id: str) -> RepositoryResult[Dict[str, Any]]:
        """Result value is the removed document, or None when nothing matched"""
        return self._run("delete", self.adapter.delete_document, doc_id)
