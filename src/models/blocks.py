"""
Preserved block models

Type-safe structures shared by the extraction and restoration stages.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Tuple


class BlockKind(str, Enum):
    """
    Categories of protected content

    The value is the tag embedded in the placeholder token, so every
    category has its own placeholder namespace. User pattern categories are
    not enum members: they are numbered per rule (see user_kind()).
    """
    COND = "COND"            # <!--[if IE]> ... <![endif]-->
    PRE = "PRE"              # <pre> bodies
    TEXTAREA = "TEXTAREA"    # <textarea> bodies
    SCRIPT = "SCRIPT"        # javascript bodies (sub-compressed)
    STYLE = "STYLE"          # <style> bodies (sub-compressed)
    EVENT = "EVENT"          # on*="..." attribute values
    SKIP = "SKIP"            # opaque blocks, never analyzed
    LINE_BREAK = "LT"        # preserved line terminators
    CDATA = "CDATA"          # xml <![CDATA[ ... ]]> sections


def user_kind(rule_index: int) -> str:
    """Placeholder tag for the user preserve pattern at ``rule_index``"""
    return f"USER{rule_index}"


@dataclass
class ExtractedBlocks:
    """
    Ordered storage for every block pulled out of one document

    Attributes:
        kinds: Category tags in registration order (= extraction order).
               Restoration walks this list backwards.
        lists: Category tag -> blocks in discovery order. The position of a
               block in its list is the index embedded in its placeholder.
        depth: Conditional comment nesting depth of the document; selects
               the placeholder namespace

    Example:
        After extracting "<pre> a </pre><pre> b </pre>":
        ExtractedBlocks(kinds=[..., "PRE", ...], lists={"PRE": [" a ", " b "], ...})
    """
    kinds: List[str] = field(default_factory=list)
    lists: Dict[str, List[str]] = field(default_factory=dict)
    depth: int = 0

    def kind_register(self, kind: str) -> None:
        """Register a category; registering twice keeps the first position"""
        if kind not in self.lists:
            self.kinds.append(kind)
            self.lists[kind] = []

    def block_add(self, kind: str, content: str) -> int:
        """
        Append a block to its category list.

        Returns:
            Index of the new block within its category
        """
        self.kind_register(kind)
        blocks = self.lists[kind]
        blocks.append(content)
        return len(blocks) - 1

    def blocks_get(self, kind: str) -> List[str]:
        """Blocks stored for ``kind`` (empty list for unknown categories)"""
        return self.lists.get(kind, [])

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        for kind in self.kinds:
            yield kind, self.lists[kind]

    def __len__(self) -> int:
        return sum(len(blocks) for blocks in self.lists.values())


@dataclass
class ExtractionResult:
    """
    Result of running every preserve rule over a document

    Attributes:
        skeleton: Document with protected regions replaced by placeholders
        blocks: The protected regions, ready for processing and restoration
    """
    skeleton: str
    blocks: ExtractedBlocks
