"""Utility for mapping a (kind, target) pair to its canonical URL."""

from docxref.process_options import ProcessOptions
from docxref.ref_kind import RefKind, parse_kind

TARGET_PLACEHOLDER = "{{target}}"

DEFAULT_URL_PATTERNS: dict[RefKind, str] = {
    RefKind.RESOURCE: "/api/ash/{{target}}",
    RefKind.MODULE: "/api/docs/{{target}}.html",
    RefKind.DEV_DOC: "/dev/{{target}}",
    RefKind.USER_DOC: "/user/{{target}}",
}


def resolve_url(
    kind: RefKind | str,
    target: str,
    options: ProcessOptions | None = None,
) -> str:
    """Generate the URL for a cross-reference target.

    Pure substitution: no existence check, and unknown kinds resolve to "#".
    """
    k = parse_kind(kind)
    if k is None:
        return "#"
    opts = options or ProcessOptions()
    # Foo.Bar -> https://hexdocs.pm/app/Foo.Bar.html
    if k is RefKind.MODULE and opts.exdoc_base_url:
        return f"{opts.exdoc_base_url.rstrip('/')}/{target}.html"
    pattern = opts.url_patterns.get(k.value, DEFAULT_URL_PATTERNS[k])
    return pattern.replace(TARGET_PLACEHOLDER, target)
