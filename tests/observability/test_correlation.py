"""
Test suite for correlation ID context and logging filter.

System role: Verification of request tracing helpers
"""

import logging

from knowledge_backend.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from knowledge_backend.observability.log_utils import log_with_context, safe_log_value
from knowledge_backend.observability.logger import CorrelationIdFilter


class TestCorrelationId:
    """Test suite for correlation ID context helpers."""

    def test_set_should_store_given_id(self) -> None:
        assert set_correlation_id("req-1") == "req-1"
        assert get_correlation_id() == "req-1"
        clear_correlation_id()

    def test_set_without_id_should_mint_one(self) -> None:
        minted = set_correlation_id()

        assert minted
        assert get_correlation_id() == minted
        clear_correlation_id()

    def test_clear_should_reset_to_empty(self) -> None:
        set_correlation_id("req-2")

        clear_correlation_id()

        assert get_correlation_id() == ""


class TestCorrelationIdFilter:
    """Test suite for the logging filter."""

    def test_filter_should_attach_current_id(self) -> None:
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
        set_correlation_id("req-3")

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "req-3"
        clear_correlation_id()

    def test_filter_should_use_placeholder_outside_request(self) -> None:
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "-"


class TestSafeLogValue:
    """Test suite for log value summarization."""

    def test_embeddings_should_be_summarized(self) -> None:
        assert safe_log_value([0.1] * 1536) == "list(1536 items)"

    def test_long_strings_should_be_truncated(self) -> None:
        value = safe_log_value("x" * 600, max_length=10)
        assert value.startswith("xxxxxxxxxx... (truncated, 600 total)")


class TestLogWithContext:
    """Test suite for structured log helper."""

    def test_context_should_be_attached_as_safe_values(self, caplog) -> None:
        logger = logging.getLogger("knowledge_backend.tests.log_utils")

        with caplog.at_level(logging.INFO, logger=logger.name):
            log_with_context(
                logger,
                logging.INFO,
                "stored",
                document_url="https://example.org/doc-1",
                embedding=[0.1] * 1536,
            )

        record = caplog.records[-1]
        assert record.getMessage() == "stored"
        assert record.document_url == "https://example.org/doc-1"
        assert record.embedding == "list(1536 items)"
