"""
Transformer tests - skeleton rewrites

Each rewrite step is exercised on a skeleton directly, with only the
toggles it needs switched on.
"""

import pytest

from markupmin.config import appsettings
from markupmin.lib.transformer import SkeletonTransformer
from markupmin.models import CompressorOptions


def transform(skeleton: str, options: CompressorOptions) -> str:
    return SkeletonTransformer(options).transform(skeleton)


def ph(kind: str, index: int = 0) -> str:
    return appsettings.placeHolder_make(kind, index)


class TestDefaults:
    """Test the default step set: comments, multi-spaces, spaces inside tags"""

    def test_comment_and_spaces(self):
        assert transform("<!-- c --><p>  a   b  </p>", CompressorOptions()) == "<p> a b </p>"

    def test_empty_comment(self):
        assert transform("a<!---->b", CompressorOptions()) == "ab"

    def test_spaces_inside_tags(self):
        assert transform('<a href = "x" >l</a>', CompressorOptions()) == '<a href="x">l</a>'

    def test_self_closing_quoted(self):
        assert transform('<br class="x" />', CompressorOptions()) == '<br class="x"/>'

    def test_self_closing_unquoted_keeps_space(self):
        """<br class=x/> would fold the slash into the value"""
        assert transform("<br class=x />", CompressorOptions()) == "<br class=x />"

    def test_everything_off_only_trims(self):
        source = "  <!-- c -->\n<p  a = 'b' >  x  </p>\n"
        assert transform(source, CompressorOptions.none()) == source.strip()

    def test_trim_disabled(self):
        options = CompressorOptions.none()
        assert SkeletonTransformer(options, trim=False).transform("  x  ") == "  x  "


class TestAttributeRemoval:
    """Test removal of default attribute values"""

    def test_script_type(self):
        options = CompressorOptions(remove_script_attributes=True)
        assert transform('<script type="text/javascript" src="a.js"></script>', options) == '<script src="a.js"></script>'

    def test_script_language(self):
        options = CompressorOptions(remove_script_attributes=True)
        assert transform('<script language="javascript"></script>', options) == "<script></script>"

    def test_script_custom_type_kept(self):
        options = CompressorOptions(remove_script_attributes=True)
        source = '<script type="text/x-custom"></script>'
        assert transform(source, options) == source

    def test_style_type(self):
        options = CompressorOptions(remove_style_attributes=True)
        assert transform('<style type="text/css"></style>', options) == "<style></style>"

    def test_link_stylesheet_type(self):
        options = CompressorOptions(remove_link_attributes=True)
        source = '<link rel="stylesheet" type="text/css" href="a.css">'
        assert transform(source, options) == '<link rel="stylesheet" href="a.css">'

    def test_link_other_rel_kept(self):
        options = CompressorOptions(remove_link_attributes=True)
        source = '<link rel="icon" type="text/css" href="a.css">'
        assert transform(source, options) == source

    def test_form_method(self):
        options = CompressorOptions(remove_form_attributes=True)
        assert transform('<form method="get" action="x">', options) == '<form action="x">'

    def test_form_post_kept(self):
        options = CompressorOptions(remove_form_attributes=True)
        assert transform('<form method="post">', options) == '<form method="post">'

    def test_input_type(self):
        options = CompressorOptions(remove_input_attributes=True)
        assert transform('<input type="text" name="q">', options) == '<input name="q">'

    def test_boolean_attributes_all_simplified(self):
        """Every boolean attribute of a tag is reduced, not just the last"""
        options = CompressorOptions(simple_boolean_attributes=True)
        source = '<input type="checkbox" checked="checked" disabled="disabled">'
        assert transform(source, options) == '<input type="checkbox" checked disabled>'

    def test_doctype(self):
        options = CompressorOptions(simple_doctype=True)
        source = '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Strict//EN"><html>'
        assert transform(source, options) == "<!DOCTYPE html><html>"


class TestProtocolRemoval:
    """Test http:/https: scheme removal"""

    def test_http_removed(self):
        options = CompressorOptions(remove_http_protocol=True)
        assert transform('<a href="http://x.com/">l</a>', options) == '<a href="//x.com/">l</a>'

    def test_rel_external_kept(self):
        options = CompressorOptions(remove_http_protocol=True, remove_https_protocol=True)
        source = '<a rel="external" href="http://x.com/">l</a><a rel="external" href="https://y.com/">m</a>'
        assert transform(source, options) == source

    @pytest.mark.parametrize(
        "toggle, source",
        [
            ("remove_http_protocol", '<link rel="alternate external" href="http://x.com/feed">'),
            ("remove_https_protocol", "<a rel='alternate external' href='https://x.com/'>l</a>"),
        ],
    )
    def test_rel_alternate_external_kept(self, toggle, source):
        assert transform(source, CompressorOptions(**{toggle: True})) == source

    def test_rel_alternate_other_removed(self):
        options = CompressorOptions(remove_https_protocol=True)
        source = '<link rel="alternate" href="https://x.com/feed">'
        assert transform(source, options) == '<link rel="alternate" href="//x.com/feed">'

    def test_http_and_https_independent(self):
        source = '<img src="http://a.com/i.png"><img src="https://b.com/i.png">'
        assert transform(source, CompressorOptions(remove_https_protocol=True)) == (
            '<img src="http://a.com/i.png"><img src="//b.com/i.png">'
        )
        assert transform(source, CompressorOptions(remove_http_protocol=True)) == (
            '<img src="//a.com/i.png"><img src="https://b.com/i.png">'
        )

    def test_text_urls_untouched(self):
        options = CompressorOptions(remove_http_protocol=True)
        assert transform("<p>http://x.com/</p>", options) == "<p>http://x.com/</p>"


class TestIntertagSpaces:
    """Test whitespace removal between tags and placeholders"""

    def test_tag_tag(self):
        options = CompressorOptions.none(remove_intertag_spaces=True)
        assert transform("<div>\n  <p>a</p>  </div>", options) == "<div><p>a</p></div>"

    def test_placeholders_count_as_tags(self):
        options = CompressorOptions.none(remove_intertag_spaces=True)
        skeleton = "<p> " + ph("PRE", 0) + " \n " + ph("PRE", 1) + " </p>"
        assert transform(skeleton, options) == "<p>" + ph("PRE", 0) + ph("PRE", 1) + "</p>"

    def test_text_spaces_kept(self):
        options = CompressorOptions.none(remove_intertag_spaces=True)
        assert transform("<b>a</b> b <i>c</i>", options) == "<b>a</b> b <i>c</i>"


class TestQuotes:
    """Test attribute unquoting"""

    def test_simple_values_unquoted(self):
        options = CompressorOptions(remove_quotes=True)
        source = "<a class=\"foo\" id='b-1' href=\"a/b\">x</a>"
        assert transform(source, options) == '<a class=foo id=b-1 href="a/b">x</a>'

    def test_self_closing_gets_space(self):
        options = CompressorOptions(remove_quotes=True)
        assert transform('<br class="x" />', options) == "<br class=x />"

    def test_text_untouched(self):
        options = CompressorOptions(remove_quotes=True)
        assert transform('<p>say ="hi"</p>', options) == '<p>say ="hi"</p>'


class TestSurroundingSpaces:
    """Test whitespace removal around selected tags"""

    @pytest.mark.parametrize("tags", ["min", "html,head,body,br,p", "p"])
    def test_min_tags(self, tags):
        options = CompressorOptions(remove_surrounding_spaces=tags)
        assert transform("<div> <p> a </p> </div>", options) == "<div><p>a</p></div>"

    def test_inline_tags_kept_with_min(self):
        options = CompressorOptions(remove_surrounding_spaces="min")
        assert transform("a <b> c </b> d", options) == "a <b> c </b> d"

    def test_max_includes_lists(self):
        options = CompressorOptions(remove_surrounding_spaces="max")
        assert transform("x <ul> <li>a</li> </ul> y", options) == "x<ul><li>a</li></ul>y"

    def test_all_tags(self):
        options = CompressorOptions(remove_surrounding_spaces="all")
        assert transform("a <b> c </b> d", options) == "a<b>c</b>d"
