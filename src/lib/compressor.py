"""
HTML compressor

Entry point of the compression pipeline:

    source
      → BlockExtractor      protected regions become placeholders
      → SkeletonTransformer whitespace/attribute/protocol rewrites
      → blocks_process      sub-compression of script/style/event blocks
      → BlockRestorer       placeholders become blocks again
      → result

Conditional comment bodies are compressed by a fresh HtmlCompressor built
from a copy of the options, so the recursion shares no state with the
outer call. Each nesting level uses its own placeholder namespace: a body
already holds the outer document's skip and user placeholders, and the
nested restore must not touch them.

Example:
    >>> compressor = HtmlCompressor(CompressorOptions(remove_intertag_spaces=True))
    >>> compressor.compress("<div>\\n  <pre> keep  me </pre>\\n</div>")
    '<div><pre> keep  me </pre></div>'
"""

import time
from typing import Optional

from ..models.blocks import BlockKind, ExtractedBlocks
from ..models.options import CompressorOptions
from ..models.statistics import CompressorStatistics
from .extractor import BlockExtractor, htmlRules_build
from .log import LOG
from .patterns import EMPTY_CHAR_PATTERN, EVENT_JS_PROTOCOL_PATTERN
from .restorer import BlockRestorer
from .subcompressor import CssCompressor, JavaScriptCompressor, block_compress
from .transformer import SkeletonTransformer


class HtmlCompressor:
    """
    Compresses HTML while keeping <pre>, <textarea>, <script>, <style>,
    conditional comments, skip blocks and user patterns intact

    Attributes:
        options: Immutable CompressorOptions used for every call
        statistics: CompressorStatistics of the last call when
                    options.generate_statistics is set, None otherwise.
                    Shared instance state: do not compress concurrently
                    with one instance while statistics are enabled.
    """

    def __init__(self, options: Optional[CompressorOptions] = None, depth: int = 0) -> None:
        """
        Initialize compressor

        Args:
            options: Compressor options (defaults: remove comments and
                     multi-spaces only)
            depth: Conditional comment nesting depth (0 for a document)
        """
        self.options = options or CompressorOptions()
        self.depth = depth
        self.statistics: Optional[CompressorStatistics] = None

        self.javascript_compressor = self.options.javascript_compressor or JavaScriptCompressor()
        self.css_compressor = self.options.css_compressor or CssCompressor()

    def compress(self, source: Optional[str]) -> Optional[str]:
        """
        Compress an HTML document.

        Args:
            source: Document to compress

        Returns:
            Compressed document; ``source`` itself when it is None or empty
            or when the compressor is disabled
        """
        if not self.options.enabled or not source:
            return source

        started = time.perf_counter()
        statistics = self.statistics_init(source)

        extractor = BlockExtractor(htmlRules_build(self.options, self.condCommentBody_compress), self.depth)
        extracted = extractor.extract(source)
        LOG(f"Extracted {len(extracted.blocks)} protected block(s)", level=2)

        # bodies stay untrimmed unless whitespace is collapsed, so all-off output equals input.strip()
        trim = not self.depth or self.options.collapses_whitespace
        skeleton = SkeletonTransformer(self.options, trim=trim).transform(extracted.skeleton)

        self.blocks_process(extracted.blocks, statistics)

        result = BlockRestorer().restore(skeleton, extracted.blocks)

        self.statistics_end(statistics, result, started)
        LOG(f"Compressed {len(source)} -> {len(result)} characters", level=2)
        return result

    def condCommentBody_compress(self, body: str) -> str:
        """Compress a conditional comment body with an independent compressor"""
        nested = HtmlCompressor(self.options.copy(generate_statistics=False), depth=self.depth + 1)
        return nested.compress(body)

    def blocks_process(self, blocks: ExtractedBlocks, statistics: Optional[CompressorStatistics]) -> None:
        """
        Sub-compress script, style and event blocks in place and account
        block sizes in ``statistics``.

        Args:
            blocks: Blocks extracted from the current document
            statistics: Statistics of the current call, or None
        """
        options = self.options

        for kind, stored in blocks.items():
            original_size = sum(len(block) for block in stored)

            if kind == BlockKind.SCRIPT.value:
                if options.compress_javascript:
                    stored[:] = [block_compress(block, self.javascript_compressor, "JavaScript") for block in stored]
                elif statistics:
                    statistics.preserved_size += original_size
                if statistics:
                    statistics.original_metrics.inline_script_size += original_size
                    statistics.compressed_metrics.inline_script_size += sum(len(block) for block in stored)

            elif kind == BlockKind.STYLE.value:
                if options.compress_css:
                    stored[:] = [block_compress(block, self.css_compressor, "CSS") for block in stored]
                elif statistics:
                    statistics.preserved_size += original_size
                if statistics:
                    statistics.original_metrics.inline_style_size += original_size
                    statistics.compressed_metrics.inline_style_size += sum(len(block) for block in stored)

            elif kind == BlockKind.EVENT.value:
                if options.remove_javascript_protocol:
                    stored[:] = [self.javascriptProtocol_remove(block) for block in stored]
                if statistics:
                    compressed_size = sum(len(block) for block in stored)
                    statistics.preserved_size += compressed_size
                    statistics.original_metrics.inline_event_size += original_size
                    statistics.compressed_metrics.inline_event_size += compressed_size

            elif statistics:
                statistics.preserved_size += original_size

    def javascriptProtocol_remove(self, source: str) -> str:
        """
        Strip a leading "javascript:" from an inline event handler value.

        Example:
            "javascript: alert(1)" -> "alert(1)"
        """
        match = EVENT_JS_PROTOCOL_PATTERN.fullmatch(source)
        return match.group(1) if match else source

    def statistics_init(self, source: str) -> Optional[CompressorStatistics]:
        """Start a fresh statistics record for ``source`` (None when disabled)"""
        if not self.options.generate_statistics:
            self.statistics = None
            return None

        statistics = CompressorStatistics()
        statistics.original_metrics.filesize = len(source)
        statistics.original_metrics.empty_chars = len(EMPTY_CHAR_PATTERN.findall(source))
        self.statistics = statistics
        return statistics

    def statistics_end(self, statistics: Optional[CompressorStatistics], result: str, started: float) -> None:
        if statistics is None:
            return
        statistics.time = (time.perf_counter() - started) * 1000
        statistics.compressed_metrics.filesize = len(result)
        statistics.compressed_metrics.empty_chars = len(EMPTY_CHAR_PATTERN.findall(result))
