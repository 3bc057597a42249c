"""Config file discovery and loading.

Walk-up finder locates graphlog.toml, similar to how git finds .git/.
Supports the GRAPHLOG_CONFIG env var and the --config CLI flag.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from graphlog.config.models import GraphlogConfig

CONFIG_FILENAME = "graphlog.toml"
CONFIG_ENV_VAR = "GRAPHLOG_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for graphlog.toml.

    Checks GRAPHLOG_CONFIG first; a path there that is not a file means
    "no config".
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def load_config(path: Path | None = None, cwd: Path | None = None) -> GraphlogConfig:
    """Load and validate the TOML sections only (no env, no CLI flags)."""
    if path is None:
        path = find_config(cwd)
    if path is None:
        return GraphlogConfig()
    data: dict[str, Any] = tomllib.loads(path.read_text(encoding="utf-8"))
    return GraphlogConfig.model_validate(data)
