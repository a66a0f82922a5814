"""Default markdown-to-HTML renderer used when the caller supplies none."""

from collections.abc import Callable

import markdown

Renderer = Callable[[str], str]

# No "toc": header ids would copy placeholder tokens into attributes.
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists"]


def markdown_to_html(text: str) -> str:
    """Render markdown text with Python-Markdown."""
    return markdown.markdown(
        text,
        extensions=MARKDOWN_EXTENSIONS,
        output_format="html5",
    )
