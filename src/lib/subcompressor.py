"""
JavaScript/CSS sub-compression of preserved blocks

Inline <script> and <style> bodies are minified by pluggable Compressor
objects before they are restored. The default implementations delegate to
rjsmin and rcssmin; any object with a compress(source) -> str method can be
plugged in through CompressorOptions instead.

A failing sub-compressor never fails the document: block_compress() logs
the problem and returns the block unchanged.
"""

import importlib
from types import ModuleType

from ..models.options import Compressor
from .log import WARN
from .patterns import CDATA_WRAPPER_PATTERN


class SubCompressorError(Exception):
    """Raised when a JavaScript/CSS compressor cannot process a block"""
    pass


class SubCompressorUnavailable(SubCompressorError):
    """Raised when the library backing a compressor is not installed"""
    pass


def module_import(name: str) -> ModuleType:
    """
    Import the library backing a sub-compressor.

    Raises:
        SubCompressorUnavailable: If ``name`` cannot be imported
    """
    try:
        return importlib.import_module(name)
    except ImportError as e:
        raise SubCompressorUnavailable(f"{name} is not installed: {e}") from e


class JavaScriptCompressor:
    """
    Inline javascript minifier backed by rjsmin

    Attributes:
        keep_bang_comments: Keep /*! ... */ license comments
    """

    def __init__(self, keep_bang_comments: bool = False) -> None:
        self.keep_bang_comments = keep_bang_comments

    def compress(self, source: str) -> str:
        rjsmin = module_import("rjsmin")
        return rjsmin.jsmin(source, keep_bang_comments=self.keep_bang_comments)


class CssCompressor:
    """
    Inline stylesheet minifier backed by rcssmin

    Attributes:
        keep_bang_comments: Keep /*! ... */ license comments
    """

    def __init__(self, keep_bang_comments: bool = False) -> None:
        self.keep_bang_comments = keep_bang_comments

    def compress(self, source: str) -> str:
        rcssmin = module_import("rcssmin")
        return rcssmin.cssmin(source, keep_bang_comments=self.keep_bang_comments)


def cdata_compress(source: str, compressor: Compressor) -> str:
    """
    Compress ``source``, looking through an optional CDATA wrapper.

    Example:
        "<![CDATA[ var a = 1; ]]>" is unwrapped, its inner text compressed,
        and the result wrapped again: "<![CDATA[var a=1;]]>"
    """
    match = CDATA_WRAPPER_PATTERN.fullmatch(source)
    inner = match.group(1) if match else source

    result = compressor.compress(inner)
    if not isinstance(result, str):
        raise SubCompressorError(f"{type(compressor).__name__} returned {type(result).__name__}, not str")

    if match is None:
        return result
    return "<![CDATA[" + result + "]]>"


def block_compress(source: str, compressor: Compressor, language: str) -> str:
    """
    Compress one preserved block, falling back to the original on failure.

    Args:
        source: Block content (script or style body)
        compressor: Compressor to apply
        language: "JavaScript" or "CSS" (reporting only)

    Returns:
        Compressed block, or ``source`` unchanged if compression failed
    """
    try:
        return cdata_compress(source, compressor)
    except SubCompressorUnavailable as e:
        WARN(f"{language} compression skipped: {e}")
    except Exception as e:  # noqa: BLE001
        WARN(f"{language} compression failed, block left unchanged: {e}")
    return source
