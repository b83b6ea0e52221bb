"""Policy loading from TOML.

Example policy file::

    threshold = 300
    common_feature = "core"

    [layers.UI_SCREEN]
    folder = "screens"
    suffix = "Screen"
    allowed = ["CUBIT", "UI_COMPONENT"]

    [severity]
    file_size = "error"

When the file has no ``[layers]`` table the built-in layers are kept and
only the scalars and severities are overridden.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Optional

from ..exceptions import PolicyError
from ..logging_config import get_logger
from ..models import DEFAULT_SEVERITIES, Severity, ViolationKind
from .defaults import default_layers
from .models import LayerRule, NamingRule, Policy

logger = get_logger(__name__)

POLICY_FILENAME = "layerlint.policy.toml"

_SCALAR_KEYS = {
    "threshold",
    "common_feature",
    "features_dir",
    "business_object_layer",
    "part_suffix",
    "language",
}
_LAYER_KEYS = {"folder", "suffix", "prefix", "pattern", "allowed", "forbidden", "feature_private"}


def resolve_policy_path(
    root: Path,
    explicit: Optional[Path] = None,
    configured: Optional[str] = None,
) -> Optional[Path]:
    """Pick the policy file for a run.

    Priority: explicit CLI path, ``policy_file`` setting (relative to the
    project root), ``<root>/layerlint.policy.toml``. Returns None when the
    built-in policy should be used.
    """
    if explicit is not None:
        if not explicit.is_file():
            raise PolicyError("policy file not found", source=explicit)
        return explicit

    if configured:
        path = Path(configured)
        if not path.is_absolute():
            path = root / path
        if not path.is_file():
            raise PolicyError("policy file not found", source=path)
        return path

    candidate = root / POLICY_FILENAME
    if candidate.is_file():
        return candidate
    return None


def load_policy(path: Optional[Path] = None) -> Policy:
    """Load and validate a policy; None means the built-in policy.

    Raises:
        PolicyError: If the file is missing, not valid TOML, or describes an
            inconsistent architecture.
    """
    if path is None:
        logger.debug("Using built-in policy")
        return parse_policy({})

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        raise PolicyError("policy file not found", source=path)
    except OSError as e:
        raise PolicyError(f"cannot read policy file: {e}", source=path)
    except tomllib.TOMLDecodeError as e:
        raise PolicyError(f"invalid TOML: {e}", source=path)

    logger.debug(f"Loaded policy from {path}")
    return parse_policy(data, source=path)


def parse_policy(data: dict[str, Any], source: Optional[Path] = None) -> Policy:
    """Build a Policy from an already-parsed mapping."""
    unknown = set(data) - _SCALAR_KEYS - {"layers", "severity"}
    if unknown:
        raise PolicyError(f"unknown policy keys: {', '.join(sorted(unknown))}", source=source)

    layers_data = data.get("layers")
    if layers_data is None:
        layers = default_layers()
    else:
        if not isinstance(layers_data, dict):
            raise PolicyError("[layers] must be a table", source=source)
        layers = {name: _parse_layer(name, spec, source) for name, spec in layers_data.items()}

    scalars = {key: data[key] for key in _SCALAR_KEYS if key in data}
    for key, value in scalars.items():
        if key != "threshold" and not isinstance(value, str):
            raise PolicyError(f"{key} must be a string, got {value!r}", source=source)

    if "language" in scalars:
        _check_language(scalars["language"], source)

    severities = _parse_severities(data.get("severity", {}), source)

    try:
        return Policy(layers=layers, severities=severities, **scalars)
    except PolicyError as e:
        if source is not None and e.source is None:
            raise PolicyError(e.reason, source=source, layer=e.layer)
        raise


def _parse_layer(name: str, spec: Any, source: Optional[Path]) -> LayerRule:
    if not isinstance(spec, dict):
        raise PolicyError("layer definition must be a table", source=source, layer=name)

    unknown = set(spec) - _LAYER_KEYS
    if unknown:
        raise PolicyError(
            f"unknown layer keys: {', '.join(sorted(unknown))}", source=source, layer=name
        )

    folder = spec.get("folder")
    if not isinstance(folder, str):
        raise PolicyError("layer folder must be a string", source=source, layer=name)

    for key in ("suffix", "prefix", "pattern"):
        if key in spec and not isinstance(spec[key], str):
            raise PolicyError(f"{key} must be a string", source=source, layer=name)
    if not isinstance(spec.get("feature_private", False), bool):
        raise PolicyError("feature_private must be true or false", source=source, layer=name)

    try:
        naming = NamingRule(
            prefix=spec.get("prefix", ""),
            suffix=spec.get("suffix", ""),
            pattern=spec.get("pattern"),
        )
    except PolicyError as e:
        raise PolicyError(e.reason, source=source, layer=name)

    return LayerRule(
        name=name,
        folder=folder,
        naming=naming,
        allowed=_layer_set(spec.get("allowed", []), "allowed", name, source),
        forbidden=_layer_set(spec.get("forbidden", []), "forbidden", name, source),
        feature_private=spec.get("feature_private", False),
    )


def _layer_set(value: Any, key: str, layer: str, source: Optional[Path]) -> frozenset[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise PolicyError(f"{key} must be a list of layer names", source=source, layer=layer)
    return frozenset(value)


def _parse_severities(value: Any, source: Optional[Path]) -> dict[ViolationKind, Severity]:
    if not isinstance(value, dict):
        raise PolicyError("[severity] must be a table", source=source)

    severities = dict(DEFAULT_SEVERITIES)
    for key, level in value.items():
        try:
            kind = ViolationKind(key)
        except ValueError:
            raise PolicyError(f"unknown violation kind in [severity]: {key!r}", source=source)
        try:
            severities[kind] = Severity(level)
        except ValueError:
            raise PolicyError(
                f"severity for {key} must be 'error' or 'warning', got {level!r}", source=source
            )
    return severities


def _check_language(language: str, source: Optional[Path]) -> None:
    from ..scanning.languages import LANGUAGES

    if language not in LANGUAGES:
        raise PolicyError(
            f"unsupported language {language!r} (supported: {', '.join(sorted(LANGUAGES))})",
            source=source,
        )
