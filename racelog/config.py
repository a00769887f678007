import os
from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "config.yaml"


def _expand_str(text: str) -> str:
    return os.path.expandvars(os.path.expanduser(text))


def _expand(node):
    """Expand ~ and $VARS in every string of a parsed YAML tree."""
    if isinstance(node, dict):
        return {key: _expand(child) for key, child in node.items()}
    if isinstance(node, list):
        return [_expand(child) for child in node]
    return _expand_str(node) if isinstance(node, str) else node


def load_config(path=None):
    """Load YAML config, expanding ~ and $ENV_VARS in all string values.

    RACELOG_CONFIG overrides the default location when no path is given.
    """
    if path is None:
        path = os.environ.get("RACELOG_CONFIG") or DEFAULT_CONFIG_PATH
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    return _expand(raw)


def get_path(config, key):
    """Return config['paths'][key] as a Path, or None when unset."""
    if not config:
        return None
    value = (config.get("paths") or {}).get(key)
    return Path(value) if value else None
