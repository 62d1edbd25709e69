"""Application services."""

from knowledge_backend.application.services.answer_stream_service import (
    AnswerSource,
    AnswerStreamService,
    PreparedAnswer,
)

__all__ = ["AnswerSource", "AnswerStreamService", "PreparedAnswer"]
