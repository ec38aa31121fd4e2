"""Load and validate scenario config from YAML."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from chatscene.config.models import ScenarioConfig


def load_config(path: str | Path | None = None) -> ScenarioConfig:
    """
    Load YAML file and validate into ScenarioConfig; no path means defaults.
    Raises FileNotFoundError for a missing file, yaml.YAMLError for unparsable
    YAML, ValueError for an empty file or content that fails validation.
    """
    if path is None:
        return ScenarioConfig()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        raise ValueError(f"Config file is empty: {path}")
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config in {path}: top level must be a mapping")

    try:
        return ScenarioConfig.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e
