"""
Models package for markupmin

Contains data structures and type definitions for the compression pipeline.
"""

from .state import ProgramState, pipeline
from .options import (
    Compressor,
    CompressorOptions,
    XmlCompressorOptions,
    BLOCK_TAGS_MIN,
    BLOCK_TAGS_MAX,
    ALL_TAGS,
)
from .blocks import BlockKind, ExtractedBlocks, ExtractionResult, user_kind
from .statistics import CompressorStatistics, HtmlMetrics

__all__ = [
    "ProgramState",
    "pipeline",
    "Compressor",
    "CompressorOptions",
    "XmlCompressorOptions",
    "BLOCK_TAGS_MIN",
    "BLOCK_TAGS_MAX",
    "ALL_TAGS",
    "BlockKind",
    "ExtractedBlocks",
    "ExtractionResult",
    "user_kind",
    "CompressorStatistics",
    "HtmlMetrics",
]
