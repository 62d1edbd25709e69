"""
Streaming configuration settings.

Latency targets and timeouts for server-sent answer streams.

Dependencies: pydantic, pydantic_settings
System role: Answer streaming configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class StreamingSettings(BaseSettings):
    """Answer streaming configuration."""

    first_token_target_ms: int = Field(
        default=3000,
        description="Target latency for the first streamed token in milliseconds",
        ge=0,
    )
    generation_idle_timeout_s: float | None = Field(
        default=90.0,
        description="Maximum wait between generated fragments (None disables)",
    )
    citation_buffer_chars: int | None = Field(
        default=None,
        description="Bound on the citation detector buffer (None keeps the full response)",
    )

    class Config:
        """Pydantic config."""

        env_prefix = "STREAMING_"
        case_sensitive = False
