"""
Extractor tests - protected regions become placeholders

Tests rule ordering, category registration, blank-block handling,
<script> routing by type attribute and user preserve patterns.
"""

import re

import pytest

from markupmin.config import appsettings
from markupmin.lib.extractor import BlockExtractor, PreserveRule, htmlRules_build, script_route
from markupmin.lib import patterns
from markupmin.models import CompressorOptions


def ph(kind: str, index: int = 0) -> str:
    return appsettings.placeHolder_make(kind, index)


def extract(source: str, **options):
    return BlockExtractor(htmlRules_build(CompressorOptions(**options))).extract(source)


class TestRuleOrder:
    """Test that categories are registered in extraction order"""

    def test_default_kinds(self):
        """Every HTML category is registered even without matches"""
        result = extract("<p>plain</p>")
        assert result.blocks.kinds == ["SKIP", "COND", "EVENT", "PRE", "SCRIPT", "STYLE", "TEXTAREA"]
        assert len(result.blocks) == 0
        assert result.skeleton == "<p>plain</p>"

    def test_user_patterns_come_first(self):
        """User patterns precede the built-in categories, numbered per rule"""
        result = extract("x", preserve_patterns=[re.compile("a"), re.compile("b")])
        assert result.blocks.kinds[:3] == ["USER0", "USER1", "SKIP"]

    def test_line_breaks_last(self):
        """The line break category is registered last, only when enabled"""
        assert "LT" not in extract("a\nb").blocks.kinds
        assert extract("a\nb", preserve_line_breaks=True).blocks.kinds[-1] == "LT"


class TestBuiltinRegions:
    """Test extraction of the built-in protected regions"""

    def test_pre_body_extracted(self):
        """Tags stay in the skeleton, the body is stored"""
        result = extract("<pre class='x'> a  b </pre>")
        assert result.skeleton == "<pre class='x'>" + ph("PRE") + "</pre>"
        assert result.blocks.blocks_get("PRE") == [" a  b "]

    def test_blank_body_left_in_place(self):
        """Whitespace-only bodies are not worth a placeholder"""
        result = extract("<pre>   </pre><textarea>\n</textarea>")
        assert result.skeleton == "<pre>   </pre><textarea>\n</textarea>"
        assert len(result.blocks) == 0

    def test_indices_follow_discovery_order(self):
        result = extract("<textarea>one</textarea><textarea>two</textarea>")
        assert result.skeleton == (
            "<textarea>" + ph("TEXTAREA", 0) + "</textarea><textarea>" + ph("TEXTAREA", 1) + "</textarea>"
        )
        assert result.blocks.blocks_get("TEXTAREA") == ["one", "two"]

    def test_skip_block(self):
        """Skip markers are dropped, their content is kept"""
        result = extract("a<!-- {{{ --> keep  this <!-- }}} -->b")
        assert result.skeleton == "a" + ph("SKIP") + "b"
        assert result.blocks.blocks_get("SKIP") == [" keep  this "]

    def test_conditional_comment_stored_whole(self):
        result = extract("<!--[if IE]><p>x</p><![endif]-->")
        assert result.skeleton == ph("COND")
        assert result.blocks.blocks_get("COND") == ["<!--[if IE]><p>x</p><![endif]-->"]

    def test_conditional_comment_body_compressed(self):
        """The body goes through the supplied compressor, delimiters do not"""
        rules = htmlRules_build(CompressorOptions(), body_compress=str.upper)
        result = BlockExtractor(rules).extract("<!--[if IE]>body<![endif]-->")
        assert result.blocks.blocks_get("COND") == ["<!--[if IE]>BODY<![endif]-->"]

    def test_event_handlers_both_quotes(self):
        """Only the attribute value is stored, quotes stay in the skeleton"""
        result = extract("<a onclick=\"go( 1 )\" onmouseover='go( 2 )'>x</a>")
        assert result.skeleton == "<a onclick=\"" + ph("EVENT", 0) + "\" onmouseover='" + ph("EVENT", 1) + "'>x</a>"
        assert result.blocks.blocks_get("EVENT") == ["go( 1 )", "go( 2 )"]

    def test_style_extracted(self):
        result = extract("<style> p { color: red } </style>")
        assert result.blocks.blocks_get("STYLE") == [" p { color: red } "]

    def test_line_break_keeps_terminator_only(self):
        """Blanks around a line break run are dropped, one terminator is kept"""
        result = extract("<p>a</p>  \n\n  <p>b</p>", preserve_line_breaks=True)
        assert result.skeleton == "<p>a</p>" + ph("LT") + "<p>b</p>"
        assert result.blocks.blocks_get("LT") == ["\n"]

    def test_line_breaks_inside_pre_untouched(self):
        result = extract("<pre>a\nb</pre>", preserve_line_breaks=True)
        assert result.blocks.blocks_get("PRE") == ["a\nb"]
        assert result.blocks.blocks_get("LT") == []


class TestScriptRouting:
    """Test that <script> bodies are categorized by their type attribute"""

    @pytest.mark.parametrize(
        "tag",
        [
            "<script>",
            '<script type="text/javascript">',
            "<script type='application/javascript'>",
            "<script type=text/javascript>",
        ],
    )
    def test_javascript_goes_to_script(self, tag):
        result = extract(tag + "var a;</script>")
        assert result.blocks.blocks_get("SCRIPT") == ["var a;"]

    def test_unknown_type_goes_to_skip(self):
        """Non-javascript bodies are preserved but never sub-compressed"""
        result = extract('<script type="text/x-custom">raw</script>')
        assert result.blocks.blocks_get("SKIP") == ["raw"]
        assert result.blocks.blocks_get("SCRIPT") == []

    def test_template_left_in_skeleton(self):
        """Client-side templates are compressed with the surrounding markup"""
        source = '<script type="text/x-jquery-tmpl"><p> x </p></script>'
        result = extract(source)
        assert result.skeleton == source
        assert len(result.blocks) == 0

    @pytest.mark.parametrize(
        "tag",
        [
            '<script type="text/plain; charset=utf-8">',
            "<script type='text/x template'>",
            "<script type=module>",
        ],
    )
    def test_other_types_go_to_skip(self, tag):
        """The whole type value decides, spaces and parameters included"""
        result = extract(tag + "a  b</script>")
        assert result.blocks.blocks_get("SKIP") == ["a  b"]
        assert result.blocks.blocks_get("SCRIPT") == []

    def test_type_value_trimmed(self):
        result = extract('<script type=" Text/JavaScript ">var a;</script>')
        assert result.blocks.blocks_get("SCRIPT") == ["var a;"]

    def test_data_type_attribute_ignored(self):
        """Only a real type attribute selects the category"""
        match = patterns.SCRIPT_PATTERN.search('<script data-type="text/x-custom">x</script>')
        assert script_route(match) == "SCRIPT"


class TestUserPatterns:
    """Test user preserve patterns"""

    def test_whole_match_preserved(self):
        result = extract("<p><?php  echo 1; ?></p>", preserve_patterns=[patterns.PHP_TAG_PATTERN])
        assert result.skeleton == "<p>" + ph("USER0") + "</p>"
        assert result.blocks.blocks_get("USER0") == ["<?php  echo 1; ?>"]

    def test_user_pattern_wins_over_builtin(self):
        """A user block inside <pre> is extracted before the <pre> rule runs"""
        result = extract("<pre>{{ x }}</pre>", preserve_patterns=[re.compile(r"\{\{.*?\}\}")])
        assert result.blocks.blocks_get("USER0") == ["{{ x }}"]
        assert result.blocks.blocks_get("PRE") == [ph("USER0")]

    def test_nested_depth_namespace(self):
        """Bodies extracted at depth 1 get placeholders of their own"""
        rules = htmlRules_build(CompressorOptions())
        result = BlockExtractor(rules, depth=1).extract(ph("SKIP") + "<pre>x</pre>")
        assert result.skeleton == ph("SKIP") + "<pre>" + appsettings.placeHolder_make("PRE", 0, 1) + "</pre>"
        assert result.blocks.depth == 1

    def test_custom_rule(self):
        """BlockExtractor accepts arbitrary rules"""
        rule = PreserveRule("digits", re.compile(r"\d+"), "NUM")
        result = BlockExtractor([rule]).extract("a1b22")
        assert result.skeleton == "a" + ph("NUM", 0) + "b" + ph("NUM", 1)
        assert result.blocks.blocks_get("NUM") == ["1", "22"]
