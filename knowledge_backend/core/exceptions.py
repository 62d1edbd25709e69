"""
Exception hierarchy for the knowledge backend.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class KnowledgeBaseError(Exception):
    """Base exception for all knowledge backend errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class VectorStoreError(KnowledgeBaseError):
    """Raised when vector store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (insert, flush, delete)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class GraphStoreError(KnowledgeBaseError):
    """Raised when graph store transactions fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize graph store error.

        Args:
            message: Error message
            operation: Operation that failed (upsert_chunks, link_sequential, delete)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class StoreConnectionError(KnowledgeBaseError):
    """Raised when a store connection cannot be established."""

    def __init__(
        self,
        message: str,
        store: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if store:
            details["store"] = store
        super().__init__(message, details)


class ChunkStorageError(KnowledgeBaseError):
    """Raised when a cross-store operation fails in at least one store."""

    def __init__(
        self,
        message: str,
        errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize chunk storage error.

        Args:
            message: Error message (first failure)
            errors: Every per-store failure message
            details: Additional context
        """
        details = details or {}
        self.errors = list(errors or [])
        details["errors"] = self.errors
        super().__init__(message, details)


class AnswerSourceError(KnowledgeBaseError):
    """Raised when retrieval or generation for an answer fails."""

    pass


class GenerationTimeoutError(AnswerSourceError):
    """Raised when the generation engine stops producing fragments."""

    def __init__(self, timeout_s: float, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["timeout_s"] = timeout_s
        self.timeout_s = timeout_s
        super().__init__(
            "Query generation timed out. Please try a shorter or simpler question.",
            details,
        )
