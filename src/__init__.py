"""
markupmin - HTML/XML minifier with block preservation

Removes comments, whitespace and redundant markup while keeping <pre>,
<textarea>, <script>, <style>, conditional comments and user-defined
blocks byte-for-byte.
"""

__version__ = "1.0.0"

from .lib import HtmlCompressor, XmlCompressor, LOG, state_connectToLogger
from .models import CompressorOptions, XmlCompressorOptions

__all__ = [
    "HtmlCompressor",
    "XmlCompressor",
    "CompressorOptions",
    "XmlCompressorOptions",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
