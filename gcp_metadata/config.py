from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MetadataSettings(BaseSettings):
    """Environment knobs read by the availability check.

    Empty variables count as unset.
    """

    model_config = SettingsConfigDict(
        extra="ignore", case_sensitive=False, env_ignore_empty=True
    )

    detect_gcp_retries: int = Field(
        0,
        ge=0,
        description="How many times to retry detecting the metadata server.",
    )
    debug_auth: bool = Field(
        False,
        description="Log errors suppressed while detecting the metadata server.",
    )

    @field_validator("debug_auth", mode="before")
    @classmethod
    def any_value_enables(cls, v: Any) -> bool:
        # Any non-empty value turns debugging on, "0" and "false" included
        return bool(v)
