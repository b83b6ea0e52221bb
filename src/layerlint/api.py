"""Public API for layerlint.

Example:
    >>> from layerlint import check
    >>>
    >>> report = check("/path/to/app")
    >>> report.failed()
    False
    >>>
    >>> # With an explicit policy and run settings
    >>> report = check("/path/to/app", policy_file=Path("arch.toml"), workers=2)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config import load_config
from .conformance.models import ConformanceReport
from .core.pipeline import ConformancePipeline
from .logging_config import get_logger
from .policy import load_policy, resolve_policy_path

logger = get_logger(__name__)


def check(
    path: str | Path = ".",
    policy_file: Optional[Path] = None,
    config_file: Optional[Path] = None,
    **overrides,
) -> ConformanceReport:
    """Check a project against its architecture policy.

    Args:
        path: Project root (default: current directory)
        policy_file: Optional explicit policy path; otherwise the
            ``policy_file`` setting, then ``<path>/layerlint.policy.toml``,
            then the built-in policy
        config_file: Optional explicit run settings file
        **overrides: Run setting overrides (e.g. workers=2)

    Returns:
        ConformanceReport with violations sorted deterministically

    Raises:
        PolicyError: If the policy is malformed
        ConfigurationError: If run settings are invalid or the path is not a directory
    """
    root = Path(path)
    settings = load_config(config_file=config_file, **overrides)
    policy = load_policy(resolve_policy_path(root, policy_file, settings.policy_file))
    logger.debug(f"Checking {root} with {len(policy.layers)} layers")
    return ConformancePipeline(root, policy, settings).run()
