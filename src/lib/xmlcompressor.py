"""
XML compressor

Runs the same extract → transform → restore pipeline as HtmlCompressor with
a much smaller rule set: CDATA sections are the only protected regions, and
the rewrites are limited to comments, inter-tag whitespace and whitespace
inside tags. Text content between tags is never collapsed.
"""

from typing import List, Optional

from ..models.blocks import BlockKind
from ..models.options import XmlCompressorOptions
from . import patterns
from .extractor import BlockExtractor, PreserveRule
from .restorer import BlockRestorer
from .transformer import TransformStep


XML_RULES: List[PreserveRule] = [
    PreserveRule("cdata", patterns.CDATA_BLOCK_PATTERN, BlockKind.CDATA.value, keep_blank=True),
]


class XmlCompressor:
    """
    Compresses XML documents while keeping CDATA sections intact

    Example:
        >>> XmlCompressor().compress('<a>\\n  <b  x = "1" />\\n</a>')
        '<a><b x="1"/></a>'
    """

    def __init__(self, options: Optional[XmlCompressorOptions] = None) -> None:
        self.options = options or XmlCompressorOptions()
        self.steps = [
            TransformStep("remove_comments", lambda o: o.remove_comments, self.comments_remove),
            TransformStep("remove_intertag_spaces", lambda o: o.remove_intertag_spaces, self.intertagSpaces_remove),
            TransformStep("remove_spaces_inside_tags", lambda o: True, self.spacesInsideTags_remove),
        ]

    def compress(self, source: Optional[str]) -> Optional[str]:
        """
        Compress an XML document.

        Returns:
            Compressed document; ``source`` itself when it is None or empty
            or when the compressor is disabled
        """
        if not self.options.enabled or not source:
            return source

        extracted = BlockExtractor(XML_RULES).extract(source)

        skeleton = extracted.skeleton
        for step in self.steps:
            if step.enabled(self.options):
                skeleton = step.apply(skeleton)

        return BlockRestorer().restore(skeleton, extracted.blocks).strip()

    def comments_remove(self, skeleton: str) -> str:
        return patterns.XML_COMMENT_PATTERN.sub("", skeleton)

    def intertagSpaces_remove(self, skeleton: str) -> str:
        return patterns.INTERTAG_TAG_TAG_PATTERN.sub("><", skeleton)

    def spacesInsideTags_remove(self, skeleton: str) -> str:
        """Collapse whitespace inside tags, then drop it around '=' and before '>'"""
        skeleton = patterns.XML_MULTISPACE_PATTERN.sub(" ", skeleton)
        skeleton = patterns.TAG_PROPERTY_PATTERN.sub(r"\1=", skeleton)
        return patterns.TAG_END_SPACE_PATTERN.sub(r"\1\2", skeleton)
