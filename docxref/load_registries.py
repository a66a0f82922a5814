"""Logic for loading per-kind registries from a YAML file."""

import logging
from pathlib import Path
from typing import Any

import yaml

from docxref.ref_kind import RefKind, parse_kind
from docxref.registry import StaticRegistry

logger = logging.getLogger(__name__)


def registries_from_mapping(data: dict[str, Any]) -> dict[RefKind, StaticRegistry]:
    """Build registries from {kind: [targets]} or {kind: {target: metadata}}."""
    registries: dict[RefKind, StaticRegistry] = {}
    for key, entries in (data or {}).items():
        kind = parse_kind(key)
        if kind is None:
            logger.warning("Skipping registry for unknown kind: %s", key)
            continue
        if isinstance(entries, dict):
            registries[kind] = StaticRegistry(entries)
        else:
            registries[kind] = StaticRegistry(str(t) for t in entries or [])
    return registries


def load_registries(path: str | Path) -> dict[RefKind, StaticRegistry]:
    """Load registries from a YAML file.

    Example::

        ash:
          Sertantai.Accounts.User:
            actions: [create, read]
        user:
          - getting-started
    """
    raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    registries = registries_from_mapping(raw)
    logger.debug(
        "Loaded %d registries from %s",
        len(registries),
        path,
    )
    return registries
