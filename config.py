"""
config.py — Lab Settings
=========================
One Settings object shared by the visualizers and the host app.

    from config import load_settings
    settings = load_settings()          # defaults + ALGOLAB_* overrides

Every field can be overridden from the environment with the upper-cased
field name prefixed by ALGOLAB_, e.g. ALGOLAB_LOG_LIMIT=2000.
"""

import os
import secrets
from dataclasses import dataclass, field, fields, replace
from typing import Mapping, Optional


ENV_PREFIX = "ALGOLAB_"


@dataclass(frozen=True)
class Settings:
    log_limit:                int   = 500       # event-log lines kept per visualizer
    highlight_seconds:        float = 2.0       # BST search path, hash insert
    search_highlight_seconds: float = 3.0       # hash search hit
    hash_capacity:            int   = 10
    rr_quantum:               int   = 2
    array_size:               int   = 30
    array_min:                int   = 10
    array_max:                int   = 109
    default_speed:            str   = "medium"
    log_level:                str   = "INFO"
    max_workspaces:           int   = 256       # live sessions kept by the host, oldest evicted first
    secret_key:               str   = field(default_factory=lambda: secrets.token_hex(32))


DEFAULT_SETTINGS = Settings()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Defaults, overridden field by field from ALGOLAB_* variables."""
    environ = os.environ if environ is None else environ
    overrides = {}
    for f in fields(Settings):
        raw = environ.get(ENV_PREFIX + f.name.upper())
        if raw is None:
            continue
        if f.type in (int, "int"):
            overrides[f.name] = int(raw)
        elif f.type in (float, "float"):
            overrides[f.name] = float(raw)
        else:
            overrides[f.name] = raw
    return replace(DEFAULT_SETTINGS, **overrides)
