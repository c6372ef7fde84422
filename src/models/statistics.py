"""
Compression statistics models

Counters collected by HtmlCompressor when generate_statistics is enabled.
"""

from dataclasses import dataclass, field


@dataclass
class HtmlMetrics:
    """
    Size measurements of one side (original or compressed) of a document

    Attributes:
        filesize: Document length in characters
        empty_chars: Number of whitespace characters
        inline_script_size: Total length of preserved inline javascript
        inline_style_size: Total length of preserved inline css
        inline_event_size: Total length of inline event handler values
    """
    filesize: int = 0
    empty_chars: int = 0
    inline_script_size: int = 0
    inline_style_size: int = 0
    inline_event_size: int = 0

    def __str__(self) -> str:
        return (
            f"Filesize={self.filesize}, Empty Chars={self.empty_chars}, "
            f"Script Size={self.inline_script_size}, Style Size={self.inline_style_size}, "
            f"Event Handler Size={self.inline_event_size}"
        )


@dataclass
class CompressorStatistics:
    """
    Statistics of a single compress() call

    Attributes:
        original_metrics: Measurements of the input document
        compressed_metrics: Measurements of the output document
        time: Wall-clock compression time in milliseconds
        preserved_size: Total length of blocks restored without modification
    """
    original_metrics: HtmlMetrics = field(default_factory=HtmlMetrics)
    compressed_metrics: HtmlMetrics = field(default_factory=HtmlMetrics)
    time: float = 0.0
    preserved_size: int = 0

    @property
    def savings(self) -> int:
        """Characters removed by compression"""
        return self.original_metrics.filesize - self.compressed_metrics.filesize

    def __str__(self) -> str:
        return (
            f"Time={self.time:.0f}, Preserved={self.preserved_size}, "
            f"Original={{{self.original_metrics}}}, Compressed={{{self.compressed_metrics}}}"
        )
