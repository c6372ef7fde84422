"""
markupmin - HTML/XML minifier with block preservation

Removes comments, whitespace and redundant markup while keeping <pre>,
<textarea>, <script>, <style>, conditional comments and user-defined
blocks byte-for-byte.
"""

__version__ = "1.0.0"

from .compressor import HtmlCompressor
from .xmlcompressor import XmlCompressor
from .subcompressor import JavaScriptCompressor, CssCompressor
from .patterns import (
    PreservePatternError,
    PHP_TAG_PATTERN,
    SERVER_SCRIPT_TAG_PATTERN,
    SERVER_SIDE_INCLUDE_PATTERN,
)
from .log import LOG, WARN, state_connectToLogger

__all__ = [
    "HtmlCompressor",
    "XmlCompressor",
    "JavaScriptCompressor",
    "CssCompressor",
    "PreservePatternError",
    "PHP_TAG_PATTERN",
    "SERVER_SCRIPT_TAG_PATTERN",
    "SERVER_SIDE_INCLUDE_PATTERN",
    "LOG",
    "WARN",
    "state_connectToLogger",
    "__version__",
]
