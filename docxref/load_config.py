"""Logic for loading and merging cross-reference engine configuration."""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from docxref.deep_merge import deep_merge

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "url_patterns": {
        "ash": "/api/ash/{{target}}",
        "exdoc": "/api/docs/{{target}}.html",
        "dev": "/dev/{{target}}",
        "user": "/user/{{target}}",
    },
    "exdoc_base_url": None,
    "link_class_pattern": "cross-ref cross-ref-{{type}}",
    "disabled_types": [],
    "skip_validation": [],
    "batch": {
        "concurrency_threshold": 10,
        "timeout_ms": 30_000,
        "max_workers": 4,
    },
    "suggestions": {
        "limit": 3,
        "cutoff": 0.6,
    },
    "cache": {
        "ttl_seconds": None,
        "max_entries": None,
    },
    "watch": {
        "idle_interval_ms": 5_000,
    },
}


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            config = deep_merge(config, user_config)
        else:
            logger.warning("Config file %s not found, using defaults", path)
    return config
