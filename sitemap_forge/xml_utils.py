"""
Helpers for building sitemap XML as text.

Documents are assembled as strings rather than through an element tree so
escaping can be switched off and CDATA sections survive exactly as written.
"""

import re
from typing import Dict, List, Optional
from xml.sax.saxutils import escape

_ENTITIES = {'"': "&quot;", "'": "&#39;"}


def escape_xml(text: str) -> str:
    """Escape the five XML metacharacters."""
    return escape(str(text), _ENTITIES)


def cdata(text: str) -> str:
    """Wrap ``text`` in a CDATA section, splitting any embedded ``]]>``."""
    return "<![CDATA[" + str(text).replace("]]>", "]]]]><![CDATA[>") + "]]>"


def wrap_cdata(text: str) -> str:
    """Use CDATA only when the text would otherwise need entity escaping or spans lines."""
    text = str(text)
    if any(ch in text for ch in ("&", "<", ">", "\n")):
        return cdata(text)
    return escape_xml(text)


def xml_declaration(version: str = "1.0", encoding: str = "UTF-8") -> str:
    return f'<?xml version="{version}" encoding="{encoding}"?>'


def xml_stylesheet(href: str, type: str = "text/xsl", escaping: bool = True) -> str:
    """Generate the xml-stylesheet processing instruction."""
    href = escape_xml(href) if escaping else href
    return f'<?xml-stylesheet href="{href}" type="{type}"?>'


def _attributes(attributes: Optional[Dict[str, str]], escaping: bool = True) -> str:
    if not attributes:
        return ""
    return "".join(
        f' {key}="{escape_xml(value) if escaping else value}"'
        for key, value in attributes.items()
    )


def create_element(
    tag_name: str,
    content: Optional[str] = None,
    attributes: Optional[Dict[str, str]] = None,
    indent: int = 0,
) -> str:
    """Create an element with escaped text content; self-closing when empty."""
    indent_str = "  " * indent
    attr_str = _attributes(attributes)

    if content is None or content == "":
        return f"{indent_str}<{tag_name}{attr_str} />"

    return f"{indent_str}<{tag_name}{attr_str}>{escape_xml(content)}</{tag_name}>"


def create_element_with_children(
    tag_name: str,
    children: List[str],
    attributes: Optional[Dict[str, str]] = None,
    indent: int = 0,
) -> str:
    """Create an element around already-rendered child lines."""
    indent_str = "  " * indent
    attr_str = _attributes(attributes)

    if not children:
        return f"{indent_str}<{tag_name}{attr_str} />"

    children_str = "\n".join(children)
    return f"{indent_str}<{tag_name}{attr_str}>\n{children_str}\n{indent_str}</{tag_name}>"


def create_namespace_declarations(namespaces: Dict[str, str]) -> str:
    """Render ``xmlns`` attributes; ``default`` and ``sitemap`` map to the default namespace."""
    declarations = []
    for prefix, uri in namespaces.items():
        name = "xmlns" if prefix in ("", "default", "sitemap") else f"xmlns:{prefix}"
        declarations.append(f' {name}="{escape_xml(uri)}"')
    return "".join(declarations)


_TAG_SPLIT = re.compile(r">\s*<")
_OPENING_TAG = re.compile(r"^[\w:.-]+(\s[^>]*)?$")


def format_xml(xml: str, indent: str = "  ") -> str:
    """
    Re-indent an XML string one tag per line.

    Only suitable for documents without mixed content; text inside elements
    is kept on the same line as its tags.
    """
    pieces = [piece for piece in _TAG_SPLIT.split(xml.strip()) if piece]
    if not pieces:
        return ""

    lines = []
    level = 0
    last = len(pieces) - 1

    for i, piece in enumerate(pieces):
        tag = piece
        if i > 0:
            tag = "<" + tag
        if i < last:
            tag = tag + ">"

        body = tag[1:-1] if tag.startswith("<") and tag.endswith(">") else tag

        if body.startswith("/"):
            level = max(level - 1, 0)

        lines.append(indent * level + tag)

        # An opening tag without inline content or self-close increases depth
        if not body.startswith(("/", "?", "!")) and not body.endswith("/") and _OPENING_TAG.match(body):
            level += 1

    return "\n".join(lines)
