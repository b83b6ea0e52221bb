"""Run settings loading and management for layerlint.

This module provides settings discovery and validation. Settings sources are
merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.layerlint.toml)
    3. Project config (./layerlint.toml)
    4. Explicit config file
    5. Environment variables (LAYERLINT_* prefix)
    6. CLI overrides (passed as kwargs)

Run settings control *how* a project is scanned. The architecture rules
themselves live in the policy (see ``layerlint.policy``).

Example:
    >>> config = load_config(verbose=True, workers=2)
    >>> config.verbosity
    'verbose'
    >>> config.workers
    2
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]
OutputFormat = Literal["text", "json", "github", "quiet"]

OUTPUT_FORMATS = ("text", "json", "github", "quiet")

# Cap on auto-detected workers; extraction is I/O bound past this point
MAX_AUTO_WORKERS = 8


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for a conformance run.

    All fields have sensible defaults. Users typically override only a few
    fields via CLI flags or config file.

    Attributes:
        Performance tuning:
            workers: Number of parallel extraction workers (None = auto-detect)

        File filtering:
            exclude_patterns: Glob patterns to exclude from indexing
            max_file_size_mb: Maximum file size to analyze (MB)
            max_files: Maximum number of files to index
            follow_symlinks: Follow symbolic links during scanning
            allow_hidden_files: Include hidden files and folders (starting with .)

        Output control:
            verbosity: Logging verbosity level
            output_format: Report format (text, json, github, quiet)
            fail_on_warnings: Treat warning-severity violations as failures

        Policy:
            policy_file: Path to the architecture policy (TOML)
    """

    # Performance tuning
    workers: Optional[int] = None

    # File filtering
    exclude_patterns: list[str] = field(
        default_factory=lambda: [
            "*.g.dart",
            "*.freezed.dart",
            "*.gr.dart",
            "*.mocks.dart",
            "*.config.dart",
            "build/*",
            ".dart_tool/*",
            ".git/*",
            "generated/*",
        ]
    )
    max_file_size_mb: float = 10.0
    max_files: int = 20000
    follow_symlinks: bool = False
    allow_hidden_files: bool = False

    # Output control
    verbosity: Verbosity = "normal"
    output_format: OutputFormat = "text"
    fail_on_warnings: bool = False

    # Policy
    policy_file: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")

        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if self.max_files < 1:
            raise ValueError("max_files must be at least 1")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError(f"verbosity must be quiet, normal or verbose, got {self.verbosity!r}")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {', '.join(OUTPUT_FORMATS)}, "
                f"got {self.output_format!r}"
            )

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    @property
    def effective_workers(self) -> int:
        """Worker count with auto-detection applied."""
        if self.workers is not None:
            return self.workers
        return min(os.cpu_count() or 4, MAX_AUTO_WORKERS)


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options never mask file settings.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
    """
    merged: dict = {}

    global_config = Path.home() / ".layerlint.toml"
    if global_config.exists():
        merged.update(_load_config_file(global_config, "global config"))

    project_config = Path.cwd() / "layerlint.toml"
    if project_config.exists():
        merged.update(_load_config_file(project_config, "project config"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_config_file(config_file, "config file"))

    merged.update(_load_env_vars())

    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update(overrides)

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_config_file(path: Path, label: str) -> dict:
    try:
        return _load_toml_file(path)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from LAYERLINT_* environment variables.

    Supported environment variables:
        LAYERLINT_WORKERS: int
        LAYERLINT_MAX_FILE_SIZE_MB: float
        LAYERLINT_MAX_FILES: int
        LAYERLINT_FOLLOW_SYMLINKS: bool (true/false/1/0)
        LAYERLINT_ALLOW_HIDDEN_FILES: bool
        LAYERLINT_VERBOSITY: quiet/normal/verbose
        LAYERLINT_OUTPUT_FORMAT: text/json/github/quiet
        LAYERLINT_FAIL_ON_WARNINGS: bool
        LAYERLINT_POLICY_FILE: str

    Returns:
        Dict of field_name -> parsed_value for any LAYERLINT_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"LAYERLINT_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Args:
        value: Raw string from environment
        type_hint: Type annotation from dataclass

    Returns:
        Parsed value or None if the type is not supported for env vars

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    # List types (exclude_patterns) are too complex for env vars
    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    with open(path, "rb") as f:
        return tomllib.load(f)
