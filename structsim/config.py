import os
import copy

import yaml

DEFAULT_CONFIG = {
    "tokenizer": {
        "reuse_names": False,  # True: a repeated identifier keeps its first ordinal
        "extended_punctuation": False  # True: `?` and `:` become tokens
    },
    "parser": {
        "max_depth": 100  # capped at 200
    },
    "compare": {
        "method": "levenshtein"  # "levenshtein" or "zhang_shasha"
    },
    "verdict": {
        "high": 0.9,
        "moderate": 0.6,
        "slight": 0.3
    }
}


def _deep_update(dest, src):
    """
    Recursively update dict dest with values from src in-place and return dest.
    """
    if src is None:
        return dest
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dest.get(k), dict):
            _deep_update(dest[k], v)
        else:
            dest[k] = copy.deepcopy(v)
    return dest


def load_config(path=None):
    """
    Load YAML config and deep-merge with defaults.
    Returns a fresh dict (deep copy of DEFAULT_CONFIG updated with user values).
    """
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if path is None:
        return cfg
    if not os.path.exists(path):
        print(f"[config] config file {path} not found, using defaults")
        return cfg
    with open(path, "r", encoding="utf-8") as fh:
        user_cfg = yaml.safe_load(fh) or {}
    if not isinstance(user_cfg, dict):
        raise ValueError(f"config file {path} must contain a mapping")
    _deep_update(cfg, user_cfg)
    return cfg
