"""
Block restoration for markup compression

Mirror image of the extractor: substitutes every placeholder with its stored
block, walking the categories in reverse extraction order. A block captured
by a late rule may contain placeholders of earlier rules (e.g. a user
pattern inside a <script> body), so late categories are put back first.
"""

import re

from ..config import appsettings
from ..models.blocks import ExtractedBlocks
from .log import LOG


class BlockRestorer:
    """Puts extracted blocks back into a compressed skeleton"""

    def restore(self, skeleton: str, blocks: ExtractedBlocks) -> str:
        """
        Replace all placeholders in ``skeleton`` with their blocks.

        For HTML the category order is LT, TEXTAREA, STYLE, SCRIPT, PRE,
        EVENT, COND, SKIP, then user patterns from the last registered to
        the first.

        Args:
            skeleton: Transformed document containing placeholders
            blocks: Blocks extracted from the same document

        Returns:
            The restored document
        """
        for kind in reversed(blocks.kinds):
            skeleton = self.kind_restore(skeleton, kind, blocks.blocks_get(kind), blocks.depth)
        return skeleton

    def kind_restore(self, skeleton: str, kind: str, stored: list, depth: int = 0) -> str:
        """
        Restore the placeholders of a single category.

        A placeholder whose index is outside ``stored`` is left in place as
        literal text.
        """
        if not stored:
            return skeleton

        def block_return(match: "re.Match[str]") -> str:
            index = int(match.group(1))
            if index < len(stored):
                return stored[index]
            LOG(f"No {kind} block stored at index {index}; placeholder left as is", level=3)
            return match.group(0)

        return appsettings.placeHolder_pattern(kind, depth).sub(block_return, skeleton)
