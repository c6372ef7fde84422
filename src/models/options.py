"""
Compressor option models

Immutable configuration values consulted by the extraction, transformation
and restoration stages. A single options value is shared by every stage of
one compress() call and is never mutated; derived configurations (e.g. for
nested conditional-comment bodies) are made with copy().
"""

import dataclasses
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Tuple, runtime_checkable


# Tag lists for remove_surrounding_spaces
BLOCK_TAGS_MIN = "html,head,body,br,p"
BLOCK_TAGS_MAX = (
    BLOCK_TAGS_MIN
    + ",h1,h2,h3,h4,h5,h6,blockquote,center,dl,fieldset,form,frame,frameset,hr,noframes,ol,table,tbody,tr,td,th,tfoot,thead,ul"
)
ALL_TAGS = "all"


@runtime_checkable
class Compressor(Protocol):
    """
    Anything that turns a source string into a smaller equivalent string.

    Implemented by the markup compressors themselves and by the pluggable
    JavaScript/CSS sub-compressors.
    """

    def compress(self, source: str) -> str:
        ...


@dataclass(frozen=True)
class CompressorOptions:
    """
    Toggle set for HtmlCompressor.

    Defaults mirror the classic HTML compressor: comments and repeated
    whitespace are removed, everything more aggressive is opt-in.

    Attributes:
        enabled: When False, compress() returns its input unchanged
        remove_comments: Drop <!-- ... --> comments (conditional comments excluded)
        remove_multi_spaces: Collapse whitespace runs to a single space
        remove_intertag_spaces: Drop whitespace between adjacent tags/placeholders
        remove_spaces_inside_tags: Drop spaces around '=' and before '>' or '/>'
        remove_quotes: Unquote simple attribute values
        preserve_line_breaks: Keep line terminators out of whitespace collapsing
        simple_doctype: Replace any doctype with <!DOCTYPE html>
        remove_script_attributes: Drop default type/language on <script>
        remove_style_attributes: Drop default type on <style>
        remove_link_attributes: Drop default type on stylesheet <link>
        remove_form_attributes: Drop method="get" on <form>
        remove_input_attributes: Drop type="text" on <input>
        simple_boolean_attributes: checked="checked" -> checked (and friends)
        remove_javascript_protocol: Strip "javascript:" from inline event values
        remove_http_protocol: href="http://x" -> href="//x" (rel="external" exempt)
        remove_https_protocol: href="https://x" -> href="//x" (rel="external" exempt)
        remove_surrounding_spaces: "min", "max", "all" or a comma separated tag list
        preserve_patterns: Compiled user patterns whose matches are kept verbatim
        compress_javascript: Minify inline <script> bodies
        compress_css: Minify inline <style> bodies
        javascript_compressor: Custom JS Compressor (rjsmin-based when None)
        css_compressor: Custom CSS Compressor (rcssmin-based when None)
        generate_statistics: Record CompressorStatistics for each call
    """

    enabled: bool = True

    # default settings
    remove_comments: bool = True
    remove_multi_spaces: bool = True
    remove_spaces_inside_tags: bool = True

    # optional settings
    remove_intertag_spaces: bool = False
    remove_quotes: bool = False
    preserve_line_breaks: bool = False
    simple_doctype: bool = False
    remove_script_attributes: bool = False
    remove_style_attributes: bool = False
    remove_link_attributes: bool = False
    remove_form_attributes: bool = False
    remove_input_attributes: bool = False
    simple_boolean_attributes: bool = False
    remove_javascript_protocol: bool = False
    remove_http_protocol: bool = False
    remove_https_protocol: bool = False
    remove_surrounding_spaces: Optional[str] = None
    preserve_patterns: Tuple["re.Pattern[str]", ...] = field(default_factory=tuple)

    # sub-compressors
    compress_javascript: bool = False
    compress_css: bool = False
    javascript_compressor: Optional[Compressor] = None
    css_compressor: Optional[Compressor] = None

    # statistics
    generate_statistics: bool = False

    def __post_init__(self) -> None:
        # accept any iterable of patterns, store a tuple
        if not isinstance(self.preserve_patterns, tuple):
            object.__setattr__(self, "preserve_patterns", tuple(self.preserve_patterns))

    @classmethod
    def none(cls, **changes: Any) -> "CompressorOptions":
        """
        Options with every rewrite toggle switched off.

        Compressing with these options only trims the document. Keyword
        arguments switch individual toggles back on.

        Example:
            >>> CompressorOptions.none(remove_comments=True).remove_multi_spaces
            False
        """
        off = {
            f.name: False
            for f in dataclasses.fields(cls)
            if f.type in (bool, "bool") and f.name != "enabled"
        }
        off.update(changes)
        return cls(**off)

    @property
    def collapses_whitespace(self) -> bool:
        """True when any toggle rewrites plain whitespace in the skeleton"""
        return (
            self.remove_multi_spaces
            or self.remove_intertag_spaces
            or self.remove_surrounding_spaces is not None
        )

    def copy(self, **changes: Any) -> "CompressorOptions":
        """
        Return a duplicate of these options with ``changes`` applied.

        Returns:
            A new CompressorOptions instance; self is left untouched.
        """
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class XmlCompressorOptions:
    """
    Toggle set for XmlCompressor.

    Attributes:
        enabled: When False, compress() returns its input unchanged
        remove_comments: Drop <!-- ... --> comments
        remove_intertag_spaces: Drop whitespace between adjacent tags
    """

    enabled: bool = True
    remove_comments: bool = True
    remove_intertag_spaces: bool = True

    def copy(self, **changes: Any) -> "XmlCompressorOptions":
        """Return a duplicate of these options with ``changes`` applied"""
        return dataclasses.replace(self, **changes)
