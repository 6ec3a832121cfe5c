"""Configuration loading and management for read-along.

Handles loading practice settings from a JSON file.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from read_along.errors import ConfigurationError, ResourceError
from read_along.models.passage import DEFAULT_PASSAGES
from read_along.text.distance import COMMON_VARIANTS

# Environment variable naming a config file for the CLI
CONFIG_ENV_VAR = "READ_ALONG_CONFIG"


class MatchingSettings(BaseModel):
    """How spoken words are compared with the passage."""

    # Largest edit distance still counted as a correct word
    max_edit_distance: int = Field(default=1, ge=0)
    # Also accept the hand-authored spellings in `variants`
    use_variant_table: bool = False
    # Reference word -> accepted recognizer spellings
    variants: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in COMMON_VARIANTS.items()}
    )

    def active_variants(self) -> dict[str, list[str]] | None:
        """Variant table to use, or None when disabled."""
        return self.variants if self.use_variant_table else None


class RecognitionSettings(BaseModel):
    """Settings passed to the recognition engine."""

    language: str = "en-US"
    continuous: bool = True
    interim_results: bool = True
    # Ignore spoken words arriving closer together than this; 0 disables
    min_word_interval_ms: int = Field(default=0, ge=0)


class PracticeConfig(BaseModel):
    """Configuration for a reading practice session."""

    passages: list[str] = Field(default_factory=lambda: list(DEFAULT_PASSAGES), min_length=1)
    # Passage shown when a session starts
    initial_passage: int = Field(default=0, ge=0)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    recognition: RecognitionSettings = Field(default_factory=RecognitionSettings)


def default_config() -> PracticeConfig:
    """Return the built-in configuration."""
    return PracticeConfig()


def load_config(path: Path | str) -> PracticeConfig:
    """Load practice configuration from a JSON file.

    Args:
        path: Path to the config file

    Returns:
        PracticeConfig with the file's settings

    Raises:
        ResourceError: If the file doesn't exist
        ConfigurationError: If the file is not valid JSON or fails validation
    """
    path = Path(path)
    if not path.exists():
        raise ResourceError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        config = PracticeConfig(**data)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config: {e}", context={"path": str(path)}) from e
    except (PydanticValidationError, TypeError) as e:
        raise ConfigurationError(f"Invalid config: {e}", context={"path": str(path)}) from e

    if config.initial_passage >= len(config.passages):
        raise ConfigurationError(
            "initial_passage is out of range",
            context={"path": str(path), "passages": len(config.passages)},
        )
    return config


def save_config(config: PracticeConfig, path: Path | str) -> Path:
    """Save configuration to a JSON file with atomic write.

    Args:
        config: Configuration to save
        path: Destination path

    Returns:
        Path to the saved config file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(path.name + ".tmp")

    # Atomic write: write to temp file, then rename
    with open(temp_path, "w", encoding="utf-8") as f:
        json.dump(config.model_dump(), f, indent=2)

    temp_path.replace(path)
    return path


def resolve_config(path: Path | str | None = None) -> PracticeConfig:
    """Load the config from an explicit path, the environment, or defaults."""
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if path:
        return load_config(path)
    return default_config()
