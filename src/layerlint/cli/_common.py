"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config
from ..policy import Policy, load_policy, resolve_policy_path

console = Console()
# Errors go to stderr so machine-readable reports on stdout stay parseable
err_console = Console(stderr=True)


def resolve_settings(
    config: Optional[Path] = None,
    output_format: Optional[str] = None,
    workers: Optional[int] = None,
    strict: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> AnalysisConfig:
    """Build settings from CLI options."""
    overrides = {}
    if output_format is not None:
        overrides["output_format"] = output_format.lower()
    if workers is not None:
        overrides["workers"] = workers
    if strict:
        overrides["fail_on_warnings"] = True
    return load_config(config_file=config, verbose=verbose, quiet=quiet, **overrides)


def resolve_policy(root: Path, policy_file: Optional[Path], settings: AnalysisConfig) -> Policy:
    """Load the policy that applies to ``root``."""
    return load_policy(resolve_policy_path(root, policy_file, settings.policy_file))
