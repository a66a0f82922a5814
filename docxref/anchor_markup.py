"""Utility for generating the engine's own anchor tags."""

import html

from docxref.cross_reference import CrossReference
from docxref.process_options import DEFAULT_LINK_CLASS_PATTERN
from docxref.ref_kind import is_internal_kind

TYPE_PLACEHOLDER = "{{type}}"


def link_class(kind_name: str, pattern: str = DEFAULT_LINK_CLASS_PATTERN) -> str:
    """Return the CSS class list for a kind; doc-only kinds share one class."""
    css = pattern.replace(TYPE_PLACEHOLDER, kind_name)
    if is_internal_kind(kind_name):
        css = css.replace(f"cross-ref-{kind_name}", "cross-ref-internal")
    return css


def build_anchor(
    reference: CrossReference,
    url: str,
    pattern: str = DEFAULT_LINK_CLASS_PATTERN,
) -> str:
    """Generate <a href=... class=... data-ref-type=... data-ref-target=...>."""
    kind_name = reference.kind_name
    attrs = {
        "href": url,
        "class": link_class(kind_name, pattern),
        "data-ref-type": kind_name,
        "data-ref-target": reference.target,
    }
    rendered = " ".join(
        f'{name}="{html.escape(value, quote=True)}"' for name, value in attrs.items()
    )
    text = html.escape(reference.display_text, quote=False)
    return f"<a {rendered}>{text}</a>"
