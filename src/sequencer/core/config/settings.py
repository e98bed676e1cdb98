from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SequencerSettings(BaseSettings):
    """
    Process-level configuration for the sequencer.

    Controls:
    - environment selection
    - logging behavior
    - per-step tracing
    """

    model_config = SettingsConfigDict(
        env_prefix="SEQUENCER_",
        env_file=".env",
        extra="ignore",
    )

    # ---- Environment -------------------------------------------------

    env: Literal["local", "staging", "prod"] = "local"

    # ---- Logging -----------------------------------------------------

    log_level: str = "INFO"

    # Emit a debug line for every step entry (noisy for long sequences)
    trace_steps: bool = Field(
        default=False,
        description="Log each step invocation at debug level",
    )


# Singleton settings object
settings = SequencerSettings()
