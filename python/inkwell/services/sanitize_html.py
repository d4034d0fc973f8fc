"""HTML sanitization for rich-text editor content.

Filters untrusted markup (pasted, seeded or persisted editor content) down to
a fixed safe subset:
- Allowlisted tags only; anything else is demoted to its text content
- Allowlisted attributes only, per tag
- No event handlers (on*), whatever the allowlist says
- Inline styles reduced to allowlisted CSS properties
- No javascript:/data: link targets, no javascript: image sources
- Comments and processing instructions dropped

The walk uses an explicit work stack, so nesting depth is bounded by memory,
not by the interpreter's recursion limit.

Any failure while parsing, walking or serializing falls back to stripping
every tag-delimited run from the input. sanitize_html never raises.

This module uses lxml for HTML parsing and serialization.
"""

import re
from types import MappingProxyType

from lxml.html import HtmlElement, document_fromstring, tostring

from inkwell.logging import get_logger

logger = get_logger(__name__)

# Tags allowed in rich-text content
ALLOWED_TAGS = frozenset(
    {
        "p",
        "br",
        "b",
        "i",
        "u",
        "s",
        "em",
        "strong",
        "sub",
        "sup",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "ul",
        "ol",
        "li",
        "blockquote",
        "pre",
        "code",
        "a",
        "span",
        "div",
        "table",
        "thead",
        "tbody",
        "tr",
        "th",
        "td",
        "hr",
        "img",
    }
)

# Allowed attributes per tag. Tags without an entry keep no attributes.
ALLOWED_ATTRS = MappingProxyType(
    {
        "a": frozenset({"href", "title", "target", "rel"}),
        "img": frozenset({"src", "alt", "width", "height"}),
        "td": frozenset({"colspan", "rowspan"}),
        "th": frozenset({"colspan", "rowspan"}),
        "span": frozenset({"style"}),
        "div": frozenset({"style"}),
        "p": frozenset({"style"}),
    }
)

# CSS properties allowed inside a style attribute
ALLOWED_STYLE_PROPERTIES = frozenset(
    {
        "color",
        "background-color",
        "font-size",
        "font-weight",
        "font-style",
        "text-align",
        "text-decoration",
        "margin",
        "padding",
        "margin-left",
        "margin-right",
        "padding-left",
        "padding-right",
    }
)

# Regex to detect event handlers
EVENT_HANDLER_RE = re.compile(r"^on", re.IGNORECASE)

# Blocked URI schemes. href blocks both, src only javascript.
JAVASCRIPT_SCHEME_RE = re.compile(r"^javascript\s*:", re.IGNORECASE)
DATA_SCHEME_RE = re.compile(r"^data\s*:", re.IGNORECASE)

# Browsers drop these from URLs before resolving the scheme
URL_IGNORED_CHARS_RE = re.compile(r"[\t\n\r]")
URL_LEADING_CONTROLS_RE = re.compile(r"^[\x00-\x20]+")

# Style values that can load or evaluate something
UNSAFE_STYLE_VALUE_RE = re.compile(r"url\s*\(|expression\s*\(|javascript\s*:|\\", re.IGNORECASE)

# Fallback: every <...> run goes
TAG_RUN_RE = re.compile(r"<[^>]*>")

# Document end tags in a fragment would close the body early and drop the rest
DOCUMENT_END_TAG_RE = re.compile(r"</\s*(?:body|html)\b[^>]*>", re.IGNORECASE)


def sanitize_html(html: str) -> str:
    """Sanitize untrusted rich-text HTML.

    This function:
    1. Parses the input as a body fragment
    2. Walks the tree pre-order, demoting disallowed elements to text
    3. Filters attributes, styles and URI schemes on allowed elements
    4. Serializes the body contents back to a string

    Args:
        html: Untrusted HTML fragment.

    Returns:
        Sanitized HTML string. If the input cannot be processed, the input
        with all tags stripped.
    """
    if not html:
        return ""

    try:
        body = _parse_fragment(html)
        _walk(body)
        return _serialize(body)
    except Exception as e:
        logger.warning("html_sanitize_fallback", error_type=type(e).__name__)
        return strip_tags(html)


def strip_tags(html: str) -> str:
    """Remove every tag-delimited run. Loses all formatting."""
    return TAG_RUN_RE.sub("", html)


def filter_style(declarations: str) -> str:
    """Reduce a style attribute value to allowlisted declarations.

    Declarations without a property name or with a disallowed property are
    dropped. This is stricter than a property allowlist alone: a declaration
    on an allowed property is still dropped when its value can load or
    evaluate content (``url(``, ``expression(``, ``javascript:``, or a CSS
    escape). Survivors are normalized to ``name: value`` and joined with
    ``"; "``.

    Returns:
        The filtered declaration list; empty if nothing survived.
    """
    kept = []
    for declaration in declarations.split(";"):
        declaration = declaration.strip()
        if not declaration or ":" not in declaration:
            continue

        name, _, value = declaration.partition(":")
        name = name.strip().lower()
        value = value.strip()

        if name not in ALLOWED_STYLE_PROPERTIES:
            continue
        if UNSAFE_STYLE_VALUE_RE.search(value):
            continue

        kept.append(f"{name}: {value}")

    return "; ".join(kept)


def filter_attributes(element: HtmlElement, tag: str) -> None:
    """Strip unsafe attributes from an element whose tag is allowed.

    Modifies the element in-place.
    """
    allowed = ALLOWED_ATTRS.get(tag, frozenset())

    attrs_to_remove = []
    for attr in element.attrib:
        attr_lower = attr.lower()

        # Event handlers go regardless of the allowlist
        if EVENT_HANDLER_RE.match(attr_lower):
            attrs_to_remove.append(attr)
            continue

        if attr_lower not in allowed:
            attrs_to_remove.append(attr)

    for attr in attrs_to_remove:
        del element.attrib[attr]

    style = element.get("style")
    if style is not None:
        filtered = filter_style(style)
        if filtered:
            element.set("style", filtered)
        else:
            del element.attrib["style"]

    href = element.get("href")
    if href is not None:
        scheme_view = _scheme_view(href)
        if JAVASCRIPT_SCHEME_RE.match(scheme_view) or DATA_SCHEME_RE.match(scheme_view):
            del element.attrib["href"]

    # data: stays allowed for src (inline images)
    src = element.get("src")
    if src is not None and JAVASCRIPT_SCHEME_RE.match(_scheme_view(src)):
        del element.attrib["src"]


def _scheme_view(url: str) -> str:
    """Return the URL as a browser would see it when picking the scheme."""
    url = URL_IGNORED_CHARS_RE.sub("", url)
    return URL_LEADING_CONTROLS_RE.sub("", url)


def _parse_fragment(html: str) -> HtmlElement:
    """Parse an HTML fragment and return its body element.

    The wrapper is left open: the parser closes everything at end of input,
    so an unterminated script or textarea cannot swallow a closing tag.
    """
    doc = document_fromstring("<html><body>" + DOCUMENT_END_TAG_RE.sub("", html))
    body = doc.find("body")
    if body is None:
        raise ValueError("Parsed document has no body")
    return body


def _walk(body: HtmlElement) -> None:
    """Sanitize everything below body, pre-order, without recursion.

    Children are snapshotted when their parent is visited and pushed in
    reverse, so siblings are handled left to right and a node's earlier
    siblings are already final when it is replaced.
    """
    stack = list(body)[::-1]
    while stack:
        node = stack.pop()

        # Comments, processing instructions and entities have non-string tags
        if not isinstance(node.tag, str):
            _replace_with_text(node, "")
            continue

        tag = node.tag.lower()
        if tag not in ALLOWED_TAGS:
            _replace_with_text(node, node.text_content())
            continue

        filter_attributes(node, tag)
        stack.extend(list(node)[::-1])


def _replace_with_text(node, text: str) -> None:
    """Replace node with plain text, keeping the text that followed it."""
    parent = node.getparent()
    text = text + (node.tail or "")

    # An empty text node would change how the parent serializes
    if text:
        previous = node.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or "") + text
        else:
            parent.text = (parent.text or "") + text

    # remove() also drops node.tail, which was moved above
    parent.remove(node)


def _serialize(body: HtmlElement) -> str:
    """Serialize the contents of body without the wrapper tag."""
    body.attrib.clear()
    result = tostring(body, encoding="unicode", method="html", with_tail=False)

    if result.startswith("<body>") and result.endswith("</body>"):
        return result[len("<body>") : -len("</body>")]
    raise ValueError("Unexpected body serialization")
