"""
Unit tests for XML text helpers.
"""

import pytest

from sitemap_forge.types import IMAGE_NAMESPACE, SITEMAP_NAMESPACE
from sitemap_forge.xml_utils import (
    cdata,
    create_element,
    create_element_with_children,
    create_namespace_declarations,
    escape_xml,
    format_xml,
    wrap_cdata,
    xml_declaration,
    xml_stylesheet,
)


class TestEscapeXml:
    """Test escaping of XML metacharacters."""

    def test_all_five_characters(self):
        """Test that every metacharacter is replaced by an entity."""
        escaped = escape_xml("<a href=\"x\">Tom & Jerry's</a>")
        assert escaped == "&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&#39;s&lt;/a&gt;"

    @pytest.mark.parametrize("text", ["<", ">", "&", '"', "'", "a<b>c&d\"e'f"])
    def test_no_raw_characters_remain(self, text):
        escaped = escape_xml(text)
        for raw in "<>\"'":
            assert raw not in escaped
        assert "&" not in escaped.replace("&lt;", "").replace("&gt;", "").replace(
            "&amp;", "").replace("&quot;", "").replace("&#39;", "")

    @pytest.mark.parametrize("text", ["", "plain text", "https://example.com/path?x=1", "Ünïcödé"])
    def test_noop_without_metacharacters(self, text):
        assert escape_xml(text) == text

    def test_ampersand_escaped_once(self):
        assert escape_xml("&amp;") == "&amp;amp;"


class TestCdata:
    """Test CDATA wrapping."""

    def test_unconditional_wrap(self):
        assert cdata("Tom & Jerry") == "<![CDATA[Tom & Jerry]]>"

    def test_terminator_is_split(self):
        """Test that an embedded terminator cannot close the section early."""
        assert cdata("a]]>b") == "<![CDATA[a]]]]><![CDATA[>b]]>"

    def test_wrap_cdata_only_when_needed(self):
        assert wrap_cdata("plain") == "plain"
        assert wrap_cdata("it's") == "it&#39;s"
        assert wrap_cdata("a & b") == "<![CDATA[a & b]]>"
        assert wrap_cdata("line one\nline two") == "<![CDATA[line one\nline two]]>"


class TestDeclarations:
    """Test prolog helpers."""

    def test_xml_declaration(self):
        assert xml_declaration() == '<?xml version="1.0" encoding="UTF-8"?>'
        assert xml_declaration("1.1", "ISO-8859-1") == '<?xml version="1.1" encoding="ISO-8859-1"?>'

    def test_stylesheet_escaped(self):
        assert xml_stylesheet("/s.xsl?a=1&b=2") == '<?xml-stylesheet href="/s.xsl?a=1&amp;b=2" type="text/xsl"?>'

    def test_stylesheet_unescaped(self):
        assert xml_stylesheet("/s.xsl?a=1&b=2", escaping=False) == \
            '<?xml-stylesheet href="/s.xsl?a=1&b=2" type="text/xsl"?>'

    def test_namespace_declarations(self):
        declarations = create_namespace_declarations({"sitemap": SITEMAP_NAMESPACE, "image": IMAGE_NAMESPACE})
        assert declarations == f' xmlns="{SITEMAP_NAMESPACE}" xmlns:image="{IMAGE_NAMESPACE}"'


class TestElements:
    """Test element builders."""

    def test_element_with_content(self):
        assert create_element("loc", "a&b") == "<loc>a&amp;b</loc>"

    def test_empty_element_self_closes(self):
        assert create_element("br") == "<br />"
        assert create_element("br", "") == "<br />"

    def test_attributes_and_indent(self):
        assert create_element("x", "t", {"k": "v<"}, indent=2) == '    <x k="v&lt;">t</x>'

    def test_element_with_children(self):
        xml = create_element_with_children("url", [create_element("loc", "x", indent=1)])
        assert xml == "<url>\n  <loc>x</loc>\n</url>"

    def test_element_without_children(self):
        assert create_element_with_children("url", []) == "<url />"


class TestFormatXml:
    """Test re-indentation."""

    def test_indents_nested_tags(self):
        xml = '<?xml version="1.0"?><urlset><url><loc>x</loc></url></urlset>'
        assert format_xml(xml) == (
            '<?xml version="1.0"?>\n'
            "<urlset>\n"
            "  <url>\n"
            "    <loc>x</loc>\n"
            "  </url>\n"
            "</urlset>"
        )

    def test_custom_indent(self):
        assert format_xml("<a><b>x</b></a>", indent="\t") == "<a>\n\t<b>x</b>\n</a>"

    def test_existing_whitespace_collapsed(self):
        assert format_xml("<a>\n    <b>x</b>\n</a>") == "<a>\n  <b>x</b>\n</a>"

    def test_empty(self):
        assert format_xml("   ") == ""
