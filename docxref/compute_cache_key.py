"""Logic for computing stable cache keys for processed documents."""

import hashlib
import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docxref.process_options import ProcessOptions


def compute_cache_key(text: str, options: "ProcessOptions") -> str:
    """Compute a stable key from document content and resolution options.

    Uses canonical JSON serialization (sorted keys), so two option objects
    with the same effective settings always share a key.
    """
    payload = {
        "content": text,
        "options": options.signature(),
    }
    payload_json = json.dumps(payload, sort_keys=True, ensure_ascii=True)
    return hashlib.sha256(payload_json.encode("utf-8")).hexdigest()
