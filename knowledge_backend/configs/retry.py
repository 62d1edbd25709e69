"""
Connection retry configuration settings.

Backoff policy applied while establishing store connections.

Dependencies: pydantic, pydantic_settings
System role: Retry policy configuration for boundary clients
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class RetrySettings(BaseSettings):
    """Exponential backoff policy."""

    max_retries: int = Field(default=3, description="Retries after the first attempt", ge=0)
    initial_delay_s: float = Field(default=1.0, description="Delay before first retry", ge=0)
    max_delay_s: float = Field(default=30.0, description="Upper bound for a single delay", ge=0)
    factor: float = Field(default=2.0, description="Delay multiplier per attempt", ge=1)

    class Config:
        """Pydantic config."""

        env_prefix = "RETRY_"
        case_sensitive = False
