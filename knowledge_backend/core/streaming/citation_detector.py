"""
Incremental citation detection for streamed answers.

Recognizes citation markers such as "[1]" as generated text arrives,
including markers split across fragments, and reports each eligible
citation at most once per response.

Dependencies: knowledge_backend.models
System role: Streaming citation state machine
"""

import logging
from collections.abc import Iterable

from knowledge_backend.models.citation import Citation

logger = logging.getLogger(__name__)


class CitationDetector:
    """
    Per-response citation detector.

    Only citations passed at construction are ever reported; markers the
    model invents for sources it was not given are ignored. Tokens must be
    processed in arrival order.
    """

    def __init__(
        self,
        citations: Iterable[Citation],
        max_buffer_chars: int | None = None,
    ) -> None:
        """
        Initialize detector with the citations eligible for this response.

        Args:
            citations: Eligible citations; the first entry wins for a repeated marker
            max_buffer_chars: Optional bound on the rolling buffer
        """
        self._citations: dict[str, Citation] = {}
        for citation in citations:
            self._citations.setdefault(citation.id, citation)

        self._max_buffer_chars = max_buffer_chars
        self._tail_chars = max((len(marker) for marker in self._citations), default=1) - 1
        self._buffer = ""
        self._emitted: set[str] = set()

    def process_token(self, token: str) -> list[Citation]:
        """
        Append a token and return citations completed by it.

        Args:
            token: Newly generated text fragment

        Returns:
            list[Citation]: Newly detected citations, ordered by position in the text
        """
        self._buffer += token

        found: list[tuple[int, Citation]] = []
        for marker, citation in self._citations.items():
            if marker in self._emitted:
                continue
            position = self._buffer.find(marker)
            if position >= 0:
                found.append((position, citation))

        found.sort(key=lambda item: item[0])
        detected = [citation for _, citation in found]
        self._emitted.update(citation.id for citation in detected)

        if detected:
            logger.debug(
                "Citations detected in stream",
                extra={"citation_ids": [c.id for c in detected]},
            )

        self._trim_buffer()
        return detected

    def _trim_buffer(self) -> None:
        # Keeping len(longest marker) - 1 chars is enough to complete any split marker.
        if self._max_buffer_chars is None or len(self._buffer) <= self._max_buffer_chars:
            return
        keep = max(self._tail_chars, 0)
        self._buffer = self._buffer[-keep:] if keep else ""

    @property
    def emitted_citation_ids(self) -> frozenset[str]:
        """Markers already emitted in this response."""
        return frozenset(self._emitted)

    def get_emitted_citation_ids(self) -> frozenset[str]:
        """Return markers already emitted in this response."""
        return self.emitted_citation_ids

    def reset(self) -> None:
        """Clear buffer and emission history for reuse on a new response."""
        self._buffer = ""
        self._emitted.clear()
