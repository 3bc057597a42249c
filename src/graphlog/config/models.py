"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, graphlog.toml only contains
overrides. A fresh store needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    dirname: str = ".graph"
    lock_timeout: float = Field(default=10.0, ge=0)
    fsync: bool = True


class GraphConfig(BaseModel):
    """[graph] section."""

    model_config = {"frozen": True}

    # Non-default edge weights are rejected at the boundary unless enabled
    weighted_edges: bool = False


class SearchConfig(BaseModel):
    """[search] section. Zero disables a limit."""

    model_config = {"frozen": True}

    max_expansions: int = Field(default=0, ge=0)
    timeout_seconds: float = Field(default=0.0, ge=0)
    verify_results: bool = True


class GraphlogConfig(BaseModel):
    """Root config model (the whole graphlog.toml)."""

    model_config = {"frozen": True}

    store: StoreConfig = Field(default_factory=StoreConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
