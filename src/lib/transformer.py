"""
Skeleton transformation for HTML compression

Rewrites the placeholder-laden skeleton produced by the extractor. Protected
content never reaches this module, so every step may treat the skeleton as
plain tags and text.

Steps run in a fixed order, each gated by its own CompressorOptions toggle:
    1. remove_comments
    2. simple_doctype
    3. remove_{script,style,link,form,input}_attributes
    4. simple_boolean_attributes
    5. remove_http_protocol / remove_https_protocol
    6. remove_intertag_spaces
    7. remove_multi_spaces
    8. remove_spaces_inside_tags
    9. remove_quotes
   10. remove_surrounding_spaces
   11. trim
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..config import appsettings
from ..models.options import CompressorOptions
from . import patterns


@dataclass(frozen=True)
class TransformStep:
    """
    A single skeleton rewrite

    Attributes:
        name: Step name (the option toggling it, where there is one)
        enabled: Decides from the options whether the step runs
        apply: Pure function skeleton -> skeleton
    """
    name: str
    enabled: Callable[[CompressorOptions], bool]
    apply: Callable[[str], str]


def toggle(name: str) -> Callable[[CompressorOptions], bool]:
    """Gate a step on the boolean option ``name``"""
    return lambda options: bool(getattr(options, name))


class SkeletonTransformer:
    """
    Applies the ordered rewrite steps to a skeleton

    Example:
        >>> transformer = SkeletonTransformer(CompressorOptions())
        >>> transformer.transform("<!-- c --><p>  a   b  </p>")
        '<p> a b </p>'
    """

    def __init__(self, options: CompressorOptions, trim: bool = True) -> None:
        """
        Initialize transformer

        Args:
            options: Compressor options gating each step
            trim: Strip leading/trailing whitespace as the final step
        """
        self.options = options
        self.trim = trim

        prefix = re.escape(appsettings.placeholder_prefix)
        suffix = re.escape(appsettings.placeholder_suffix)
        self.intertag_tagPlaceholder = re.compile(r">\s+" + prefix)
        self.intertag_placeholderTag = re.compile(suffix + r"\s+<")
        self.intertag_placeholderPlaceholder = re.compile(suffix + r"\s+" + prefix)

        self.surroundingSpaces: Optional["re.Pattern[str]"] = None
        if options.remove_surrounding_spaces:
            self.surroundingSpaces = patterns.surroundingSpaces_pattern(options.remove_surrounding_spaces)

        self.steps = self.steps_build()

    def steps_build(self) -> List[TransformStep]:
        """Rewrite steps in execution order"""
        return [
            TransformStep("remove_comments", toggle("remove_comments"), self.comments_remove),
            TransformStep("simple_doctype", toggle("simple_doctype"), self.doctype_simplify),
            TransformStep("remove_script_attributes", toggle("remove_script_attributes"), self.scriptAttributes_remove),
            TransformStep("remove_style_attributes", toggle("remove_style_attributes"), self.styleAttributes_remove),
            TransformStep("remove_link_attributes", toggle("remove_link_attributes"), self.linkAttributes_remove),
            TransformStep("remove_form_attributes", toggle("remove_form_attributes"), self.formAttributes_remove),
            TransformStep("remove_input_attributes", toggle("remove_input_attributes"), self.inputAttributes_remove),
            TransformStep("simple_boolean_attributes", toggle("simple_boolean_attributes"), self.booleanAttributes_simplify),
            TransformStep("remove_http_protocol", toggle("remove_http_protocol"), self.httpProtocol_remove),
            TransformStep("remove_https_protocol", toggle("remove_https_protocol"), self.httpsProtocol_remove),
            TransformStep("remove_intertag_spaces", toggle("remove_intertag_spaces"), self.intertagSpaces_remove),
            TransformStep("remove_multi_spaces", toggle("remove_multi_spaces"), self.multiSpaces_remove),
            TransformStep("remove_spaces_inside_tags", toggle("remove_spaces_inside_tags"), self.spacesInsideTags_remove),
            TransformStep("remove_quotes", toggle("remove_quotes"), self.quotes_remove),
            TransformStep(
                "remove_surrounding_spaces",
                lambda options: self.surroundingSpaces is not None,
                self.surroundingSpaces_remove,
            ),
            TransformStep("trim", lambda options: self.trim, str.strip),
        ]

    def transform(self, skeleton: str) -> str:
        """
        Run every enabled step over ``skeleton``.

        Args:
            skeleton: Document with protected regions replaced by placeholders

        Returns:
            Rewritten skeleton
        """
        for step in self.steps:
            if step.enabled(self.options):
                skeleton = step.apply(skeleton)
        return skeleton

    def comments_remove(self, skeleton: str) -> str:
        # conditional comments are already placeholders; <!--[ is never matched
        return patterns.COMMENT_PATTERN.sub("", skeleton)

    def doctype_simplify(self, skeleton: str) -> str:
        return patterns.DOCTYPE_PATTERN.sub("<!DOCTYPE html>", skeleton)

    def scriptAttributes_remove(self, skeleton: str) -> str:
        """Drop type="text/javascript" and language="javascript" from <script>"""
        skeleton = patterns.JS_TYPE_ATTR_PATTERN.sub(r"\1\3", skeleton)
        return patterns.JS_LANG_ATTR_PATTERN.sub(r"\1\3", skeleton)

    def styleAttributes_remove(self, skeleton: str) -> str:
        return patterns.STYLE_TYPE_ATTR_PATTERN.sub(r"\1\3", skeleton)

    def linkAttributes_remove(self, skeleton: str) -> str:
        """Drop type="text/css" from <link> tags, stylesheets only"""

        def linkType_remove(match: "re.Match[str]") -> str:
            if patterns.LINK_REL_ATTR_PATTERN.fullmatch(match.group(0)):
                return match.group(1) + match.group(3)
            return match.group(0)

        return patterns.LINK_TYPE_ATTR_PATTERN.sub(linkType_remove, skeleton)

    def formAttributes_remove(self, skeleton: str) -> str:
        return patterns.FORM_METHOD_ATTR_PATTERN.sub(r"\1\3", skeleton)

    def inputAttributes_remove(self, skeleton: str) -> str:
        return patterns.INPUT_TYPE_ATTR_PATTERN.sub(r"\1\3", skeleton)

    def booleanAttributes_simplify(self, skeleton: str) -> str:
        """
        Reduce checked="checked" (and selected, disabled, readonly) to the bare name.

        One pass rewrites at most one attribute per tag, so passes repeat
        until nothing is left to simplify. Each rewrite removes an '=',
        which bounds the loop.
        """
        count = 1
        while count:
            skeleton, count = patterns.BOOLEAN_ATTR_PATTERN.subn(r"\1\2\4", skeleton)
        return skeleton

    def httpProtocol_remove(self, skeleton: str) -> str:
        return self.protocol_remove(patterns.HTTP_PROTOCOL_PATTERN, skeleton)

    def httpsProtocol_remove(self, skeleton: str) -> str:
        return self.protocol_remove(patterns.HTTPS_PROTOCOL_PATTERN, skeleton)

    def protocol_remove(self, pattern: "re.Pattern[str]", skeleton: str) -> str:
        """
        Strip a URL scheme matched by ``pattern`` unless the tag is rel="external".

        Args:
            pattern: HTTP_PROTOCOL_PATTERN or HTTPS_PROTOCOL_PATTERN; group 1
                     is everything up to the scheme, group 2 everything after
            skeleton: Skeleton to rewrite
        """

        def scheme_remove(match: "re.Match[str]") -> str:
            if patterns.REL_EXTERNAL_PATTERN.fullmatch(match.group(0)):
                return match.group(0)
            return match.group(1) + match.group(2)

        return pattern.sub(scheme_remove, skeleton)

    def intertagSpaces_remove(self, skeleton: str) -> str:
        """
        Remove whitespace between tags.

        Placeholders count as tag boundaries: tag-tag, tag-placeholder,
        placeholder-tag and placeholder-placeholder gaps are all closed.
        """
        prefix = appsettings.placeholder_prefix
        suffix = appsettings.placeholder_suffix

        skeleton = patterns.INTERTAG_TAG_TAG_PATTERN.sub("><", skeleton)
        skeleton = self.intertag_tagPlaceholder.sub(lambda m: ">" + prefix, skeleton)
        skeleton = self.intertag_placeholderTag.sub(lambda m: suffix + "<", skeleton)
        return self.intertag_placeholderPlaceholder.sub(lambda m: suffix + prefix, skeleton)

    def multiSpaces_remove(self, skeleton: str) -> str:
        return patterns.MULTISPACE_PATTERN.sub(" ", skeleton)

    def spacesInsideTags_remove(self, skeleton: str) -> str:
        """
        Remove spaces around '=' and before the end of tags.

        A space before '/>' is kept when the last attribute value is
        unquoted, since <a href=x/> would fold the slash into the value.
        """
        skeleton = patterns.TAG_PROPERTY_PATTERN.sub(r"\1=", skeleton)

        def tagEnd_tighten(match: "re.Match[str]") -> str:
            if match.group(2).startswith("/") and patterns.TAG_LAST_UNQUOTED_VALUE_PATTERN.search(match.group(1)):
                return match.group(1) + " " + match.group(2)
            return match.group(1) + match.group(2)

        return patterns.TAG_END_SPACE_PATTERN.sub(tagEnd_tighten, skeleton)

    def quotes_remove(self, skeleton: str) -> str:
        """Unquote attribute values made only of letters, digits, '-' and '_'"""

        def quote_remove(match: "re.Match[str]") -> str:
            if not match.group(3):
                return "=" + match.group(2)
            return "=" + match.group(2) + " " + match.group(3)

        return patterns.TAG_QUOTE_PATTERN.sub(quote_remove, skeleton)

    def surroundingSpaces_remove(self, skeleton: str) -> str:
        return self.surroundingSpaces.sub(r"\1", skeleton)
