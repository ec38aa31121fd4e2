"""Pydantic models for dispatcher configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


# --- Wizard ---


class WizardConfig(BaseModel):
    """Universal cancellation handling for wizard scenes."""

    cancel_command: str = Field(default="/cancel", min_length=1, description="Text that aborts any wizard")
    cancel_reply: str = Field(default="Cancelled.", description="Acknowledgment sent on cancel")


# --- Logging ---


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    json_output: bool = Field(default=False, alias="json", description="Render JSON lines instead of console")

    model_config = {"populate_by_name": True}


# --- Top-level ---


class ScenarioConfig(BaseModel):
    """Full configuration loaded from YAML."""

    store_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Upper bound for every Store read/write",
    )
    wizard: WizardConfig = Field(default_factory=WizardConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
