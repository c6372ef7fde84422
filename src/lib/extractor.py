"""
Block extraction for markup compression

Pulls every region that must survive compression byte-for-byte out of a
document and replaces it with a placeholder token, producing the skeleton
that the transformer is allowed to rewrite.

Extraction is driven by an ordered list of PreserveRule objects. Each rule
scans the output of the previous one, so a later rule only ever sees the
placeholders of earlier rules as opaque text; ordering is the sole guard
against one category's pattern splitting another category's block.

HTML rule order:
    1. user preserve patterns (USER0, USER1, ...)
    2. <!-- {{{ --> ... <!-- }}} --> skip blocks
    3. conditional comments (body compressed recursively)
    4. inline event handler values, double then single quoted
    5. <pre> bodies
    6. <script> bodies (routed by type attribute)
    7. <style> bodies
    8. <textarea> bodies
    9. line breaks (only with preserve_line_breaks)

Example:
    >>> extractor = BlockExtractor(htmlRules_build(CompressorOptions()))
    >>> result = extractor.extract("<pre> a </pre>")
    >>> result.skeleton
    '<pre>%%%~COMPRESS~PRE~0~%%%</pre>'
    >>> result.blocks.blocks_get("PRE")
    [' a ']
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..config import appsettings
from ..models.blocks import BlockKind, ExtractedBlocks, ExtractionResult, user_kind
from ..models.options import CompressorOptions
from .log import LOG, WARN
from . import patterns


@dataclass(frozen=True)
class PreserveRule:
    """
    One extraction pass: a pattern and the category its matches go to

    Attributes:
        name: Human-readable rule name (logging)
        pattern: Compiled pattern scanned over the current skeleton
        kind: Category tag receiving the matches
        group: Group holding the protected content (0 = whole match)
        wrapped: Keep groups 1 and 3 (e.g. the surrounding tags or quotes)
                 in the skeleton around the placeholder
        keep_blank: Preserve matches whose content is blank after strip()
        route: Optional per-match category override; returning None leaves
               the match in the skeleton
        store: Optional function computing the stored value from the match
               (defaults to the content group)
        extra_kinds: Further categories that route() may return
    """
    name: str
    pattern: "re.Pattern[str]"
    kind: str
    group: int = 0
    wrapped: bool = False
    keep_blank: bool = False
    route: Optional[Callable[["re.Match[str]"], Optional[str]]] = None
    store: Optional[Callable[["re.Match[str]"], str]] = None
    extra_kinds: Tuple[str, ...] = ()

    @property
    def kinds(self) -> Tuple[str, ...]:
        """Every category this rule can populate, primary first"""
        return (self.kind,) + self.extra_kinds


def script_route(match: "re.Match[str]") -> Optional[str]:
    """
    Pick the category of a <script> body from its opening tag's type.

    Returns:
        SCRIPT for javascript (or no type), None for client-side templates
        (compressed with the surrounding markup), SKIP for anything else
    """
    type_match = patterns.TYPE_ATTR_PATTERN.search(match.group(1))
    script_type = ""
    if type_match:
        value = type_match.group(2) if type_match.group(1) else type_match.group(3)
        script_type = value.strip().lower()

    if script_type in patterns.JAVASCRIPT_TYPES:
        return BlockKind.SCRIPT.value
    if script_type in patterns.TEMPLATE_TYPES:
        return None
    return BlockKind.SKIP.value


def htmlRules_build(
    options: CompressorOptions,
    body_compress: Optional[Callable[[str], str]] = None,
) -> List[PreserveRule]:
    """
    Build the ordered HTML preserve rules for ``options``.

    Args:
        options: Compressor options (user patterns, line break preservation)
        body_compress: Compresses conditional comment bodies; bodies are
                       stored unchanged when omitted

    Returns:
        Rules in extraction order
    """
    body_compress = body_compress or (lambda body: body)

    def condComment_store(match: "re.Match[str]") -> str:
        return match.group(1) + body_compress(match.group(2)) + match.group(3)

    rules = [
        PreserveRule(name=f"user pattern {index}", pattern=pattern, kind=user_kind(index))
        for index, pattern in enumerate(options.preserve_patterns)
    ]

    rules += [
        PreserveRule("skip block", patterns.SKIP_PATTERN, BlockKind.SKIP.value, group=1),
        PreserveRule(
            "conditional comment", patterns.COND_COMMENT_PATTERN, BlockKind.COND.value,
            group=2, store=condComment_store,
        ),
        PreserveRule(
            "event handler (double quoted)", patterns.EVENT_DOUBLE_QUOTED_PATTERN, BlockKind.EVENT.value,
            group=2, wrapped=True,
        ),
        PreserveRule(
            "event handler (single quoted)", patterns.EVENT_SINGLE_QUOTED_PATTERN, BlockKind.EVENT.value,
            group=2, wrapped=True,
        ),
        PreserveRule("pre", patterns.PRE_PATTERN, BlockKind.PRE.value, group=2, wrapped=True),
        PreserveRule(
            "script", patterns.SCRIPT_PATTERN, BlockKind.SCRIPT.value,
            group=2, wrapped=True, route=script_route, extra_kinds=(BlockKind.SKIP.value,),
        ),
        PreserveRule("style", patterns.STYLE_PATTERN, BlockKind.STYLE.value, group=2, wrapped=True),
        PreserveRule("textarea", patterns.TEXTAREA_PATTERN, BlockKind.TEXTAREA.value, group=2, wrapped=True),
    ]

    if options.preserve_line_breaks:
        # only the terminator is stored, blanks around it are dropped
        rules.append(
            PreserveRule(
                "line break", patterns.LINE_BREAK_PATTERN, BlockKind.LINE_BREAK.value,
                group=1, keep_blank=True,
            )
        )

    return rules


class BlockExtractor:
    """
    Replaces protected regions with placeholders, one rule at a time

    The extractor itself is stateless between calls: every extract() call
    creates its own ExtractedBlocks.
    """

    def __init__(self, rules: List[PreserveRule], depth: int = 0) -> None:
        """
        Initialize extractor

        Args:
            rules: Preserve rules in extraction order
            depth: Conditional comment nesting depth; bodies (depth > 0)
                   get their own placeholder namespace and skip the sigil
                   check
        """
        self.rules = rules
        self.depth = depth

    def extract(self, source: str) -> ExtractionResult:
        """
        Run every rule over ``source``.

        Args:
            source: Raw document

        Returns:
            ExtractionResult with the placeholder-laden skeleton and the
            extracted blocks, categories registered in rule order
        """
        if not self.depth and appsettings.sigil_check and appsettings.placeholder_prefix in source:
            WARN(
                f"Document already contains the placeholder sigil "
                f"{appsettings.placeholder_prefix!r}; output may be corrupted"
            )

        blocks = ExtractedBlocks(depth=self.depth)
        skeleton = source
        for rule in self.rules:
            skeleton = self.rule_apply(rule, skeleton, blocks)
        return ExtractionResult(skeleton=skeleton, blocks=blocks)

    def rule_apply(self, rule: PreserveRule, skeleton: str, blocks: ExtractedBlocks) -> str:
        """
        Apply a single rule, appending its matches to ``blocks``.

        Matches with blank content (unless rule.keep_blank) and matches
        that rule.route() declines are left in the skeleton untouched.

        Returns:
            Skeleton with this rule's matches replaced by placeholders
        """
        for kind in rule.kinds:
            blocks.kind_register(kind)

        preserved = 0

        def block_preserve(match: "re.Match[str]") -> str:
            nonlocal preserved
            content = match.group(rule.group)
            if not rule.keep_blank and not content.strip():
                return match.group(0)

            kind = rule.route(match) if rule.route else rule.kind
            if kind is None:
                return match.group(0)

            stored = rule.store(match) if rule.store else content
            placeholder = appsettings.placeHolder_make(kind, blocks.block_add(kind, stored), blocks.depth)
            preserved += 1

            if rule.wrapped:
                return match.group(1) + placeholder + match.group(3)
            return placeholder

        skeleton = rule.pattern.sub(block_preserve, skeleton)
        if preserved:
            LOG(f"Preserved {preserved} block(s) with rule '{rule.name}'", level=3)
        return skeleton
