"""Shared primitives used by execution modes.

This module isolates configuration handling (YAML/JSON file -> dict ->
`TabuSearchParams`) and instance discovery so that each mode (single run,
benchmark) builds its search runs uniformly.
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict

import yaml

from jssp_tabu.models import NeighborhoodStructure
from jssp_tabu.search import TabuSearchParams


def load_config(path: str) -> Dict[str, Any]:
    """Load a YAML (``.yml``/``.yaml``) or JSON configuration file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the top level is not a mapping.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    if path.endswith((".yml", ".yaml")):
        cfg = yaml.safe_load(text) or {}
    else:
        cfg = json.loads(text)
    if not isinstance(cfg, dict):
        raise ValueError("Configuration must be a mapping")
    return cfg


def params_from_config(cfg: Dict[str, Any]) -> TabuSearchParams:
    """Build search parameters from the ``tabu`` section of a config."""
    tabu_cfg = cfg.get("tabu", {}) if isinstance(cfg.get("tabu"), dict) else {}
    defaults = TabuSearchParams()
    neighborhood = str(tabu_cfg.get("neighborhood", defaults.neighborhood.value)).lower()
    try:
        structure = NeighborhoodStructure(neighborhood)
    except ValueError:
        raise ValueError(f"Unknown neighborhood: {neighborhood}") from None
    return TabuSearchParams(
        max_iter=int(tabu_cfg.get("max_iter", defaults.max_iter)),
        delta=int(tabu_cfg.get("delta", defaults.delta)),
        safety_factor=int(tabu_cfg.get("safety_factor", defaults.safety_factor)),
        neighborhood=structure,
        construction=str(tabu_cfg.get("construction", defaults.construction)),
    )


def list_instance_files(path: str) -> list[str]:
    """A single file, or every visible file of a directory in name order."""
    if os.path.isdir(path):
        return sorted(
            os.path.join(path, f)
            for f in os.listdir(path)
            if not f.startswith(".") and os.path.isfile(os.path.join(path, f))
        )
    return [path]
