"""
Chunk identity derivation.

Derives the numeric primary key shared by the vector and graph stores and
the content fingerprint used for deduplication and audit.

Dependencies: hashlib (stdlib)
System role: Deterministic chunk keys for cross-store correlation
"""

import hashlib

# 13 hex digits = 52 bits, inside the 53-bit safe integer range of JSON clients.
CHUNK_KEY_HEX_DIGITS = 13
MAX_CHUNK_KEY = (1 << (CHUNK_KEY_HEX_DIGITS * 4)) - 1

CONTENT_HASH_HEX_DIGITS = 16


def derive_chunk_key(identifier: str) -> int:
    """
    Derive the numeric chunk key from an opaque chunk identifier.

    Args:
        identifier: Chunk identifier assigned by the ingestion pipeline

    Returns:
        int: Unsigned key in [0, MAX_CHUNK_KEY]
    """
    digest = hashlib.sha256(identifier.encode("utf-8")).hexdigest()
    return int(digest[:CHUNK_KEY_HEX_DIGITS], 16)


def derive_content_hash(content: str) -> str:
    """
    Fingerprint chunk content for deduplication.

    Never used as a relationship key; see derive_chunk_key.

    Args:
        content: Chunk text

    Returns:
        str: 16-character lowercase hex digest prefix
    """
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:CONTENT_HASH_HEX_DIGITS]
