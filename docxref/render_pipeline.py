"""Render a document to HTML while keeping cross-references out of the renderer's hands.

The markdown renderer does not know the ``ash:``/``exdoc:``/``dev:``/``user:``
schemes, so every marker is swapped for an opaque alphanumeric token before
rendering and the token is swapped for our own anchor tag afterwards.
"""

import logging
import re
import uuid
from dataclasses import dataclass

from docxref.anchor_markup import build_anchor
from docxref.cross_reference import CrossReference
from docxref.errors import RenderError
from docxref.markdown_renderer import Renderer, markdown_to_html
from docxref.process_options import ProcessOptions
from docxref.ref_kind import RefKind
from docxref.resolve_url import resolve_url
from docxref.scanner import iter_marker_matches

logger = logging.getLogger(__name__)

TOKEN_PREFIX = "XREFTOKEN"
TOKEN_SUFFIX = "END"
TOKEN_RE = re.compile(TOKEN_PREFIX + r"[0-9a-f]{32}" + TOKEN_SUFFIX)


@dataclass(frozen=True)
class RenderedDocument:
    """Final HTML plus the references it links."""

    html: str
    references: list[CrossReference]


def new_token() -> str:
    """Return a fresh placeholder token."""
    return f"{TOKEN_PREFIX}{uuid.uuid4().hex}{TOKEN_SUFFIX}"


def tokenize_markers(
    text: str, options: ProcessOptions | None = None
) -> tuple[str, list[CrossReference], dict[str, str]]:
    """Replace each marker occurrence with a token.

    Returns the tokenized text, the resolved references in document order and
    the token -> anchor markup map. Markers of disabled kinds and markers in
    fenced code are left untouched.
    """
    opts = options or ProcessOptions()
    lines = text.split("\n")
    references: list[CrossReference] = []
    replacements: dict[str, str] = {}

    matches_by_line: dict[int, list[re.Match[str]]] = {}
    for index, m in iter_marker_matches(text):
        matches_by_line.setdefault(index, []).append(m)

    for index, matches in matches_by_line.items():
        line = lines[index]
        pieces: list[str] = []
        pos = 0
        for m in matches:
            kind = RefKind(m.group(2))
            if kind in opts.disabled_types:
                continue
            url = resolve_url(kind, m.group(3), opts)
            ref = CrossReference(
                kind=kind,
                target=m.group(3),
                display_text=m.group(1),
                line_number=index + 1,
                url=url,
            )
            token = new_token()
            replacements[token] = build_anchor(ref, url, opts.link_class_pattern)
            pieces.append(line[pos : m.start()])
            pieces.append(token)
            pos = m.end()
            references.append(ref)
        pieces.append(line[pos:])
        lines[index] = "".join(pieces)

    return "\n".join(lines), references, replacements


def restore_tokens(html: str, replacements: dict[str, str]) -> str:
    """Swap every known token in html for its anchor markup."""
    if not replacements:
        return html
    return TOKEN_RE.sub(lambda m: replacements.get(m.group(0), m.group(0)), html)


def render_document(
    text: str,
    renderer: Renderer | None = None,
    options: ProcessOptions | None = None,
) -> RenderedDocument:
    """Scan, tokenize, render once, and restore anchors.

    Raises RenderError if the renderer fails; partial HTML is never returned.
    """
    render = renderer or markdown_to_html
    tokenized, references, replacements = tokenize_markers(text, options)
    logger.debug("Tokenized %d cross-reference(s)", len(references))
    try:
        html = render(tokenized)
    except Exception as exc:
        msg = f"Markdown renderer failed: {exc}"
        raise RenderError(msg) from exc
    return RenderedDocument(
        html=restore_tokens(html, replacements), references=references
    )

