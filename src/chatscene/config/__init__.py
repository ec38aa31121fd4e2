"""Configuration loading and validation."""

from chatscene.config.models import (
    LoggingConfig,
    ScenarioConfig,
    WizardConfig,
)
from chatscene.config.loader import load_config

__all__ = [
    "LoggingConfig",
    "ScenarioConfig",
    "WizardConfig",
    "load_config",
]
