"""Architecture policy: layers, folders, naming rules and allowed dependencies."""

from .defaults import LAYER_NAMES, default_policy
from .loader import POLICY_FILENAME, load_policy, parse_policy, resolve_policy_path
from .models import LayerRule, NamingRule, Policy

__all__ = [
    "LAYER_NAMES",
    "POLICY_FILENAME",
    "LayerRule",
    "NamingRule",
    "Policy",
    "default_policy",
    "load_policy",
    "parse_policy",
    "resolve_policy_path",
]
