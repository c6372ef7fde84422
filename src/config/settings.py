"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MARKUPMIN_ prefix (e.g., MARKUPMIN_PLACEHOLDER_PREFIX=@@X~).

Settings can also be loaded from a .env file in the project root.

Per-document compression toggles do not live here: they are carried by the
immutable CompressorOptions value passed to each compressor.
"""

import re

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MARKUPMIN_ prefix.

    Examples:
        MARKUPMIN_PLACEHOLDER_PREFIX=%%%~COMPRESS~
        MARKUPMIN_DEFAULT_MASK=*.htm
        MARKUPMIN_SIGIL_CHECK=false
    """

    model_config = SettingsConfigDict(
        env_prefix="MARKUPMIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Placeholder configuration
    placeholder_prefix: str = Field(
        default="%%%~COMPRESS~",
        min_length=1,
        description="Leading sigil of preserved-block placeholders (assumed never to occur in markup)",
    )

    placeholder_suffix: str = Field(
        default="~%%%",
        min_length=1,
        description="Trailing sigil of preserved-block placeholders",
    )

    sigil_check: bool = Field(
        default=True,
        description="Warn when the placeholder prefix already occurs in a document",
    )

    # Command line defaults
    default_mask: str = Field(
        default="*.html",
        description="Glob used to select input files when --mask is not given",
    )

    default_charset: str = Field(
        default="utf-8",
        description="Encoding used to read and write documents",
    )

    def placeHolder_tag(self, kind: str, depth: int = 0) -> str:
        """
        Category tag embedded in a placeholder.

        Top-level documents use the bare kind. Conditional comment bodies
        compressed at ``depth`` > 0 get "KIND^depth", so their placeholders
        never match those of an enclosing document.

        Example:
            >>> AppSettings().placeHolder_tag("SKIP", 1)
            'SKIP^1'
        """
        return kind if not depth else f"{kind}^{depth}"

    def placeHolder_make(self, kind: str, index: int, depth: int = 0) -> str:
        """
        Generate the placeholder for the block stored at ``index`` of ``kind``.

        Args:
            kind: Block category tag (e.g., "PRE", "USER0")
            index: Zero-based position of the block in its category list
            depth: Conditional comment nesting depth of the document

        Returns:
            Placeholder string (e.g., "%%%~COMPRESS~PRE~0~%%%")

        Example:
            >>> settings = AppSettings()
            >>> settings.placeHolder_make("SCRIPT", 3)
            '%%%~COMPRESS~SCRIPT~3~%%%'
        """
        return f"{self.placeholder_prefix}{self.placeHolder_tag(kind, depth)}~{index}{self.placeholder_suffix}"

    def placeHolder_pattern(self, kind: str, depth: int = 0) -> "re.Pattern[str]":
        """
        Compile a pattern matching every placeholder of ``kind`` at ``depth``.

        Group 1 of each match holds the decimal block index.

        Example:
            >>> pattern = AppSettings().placeHolder_pattern("PRE")
            >>> pattern.search("<pre>%%%~COMPRESS~PRE~12~%%%</pre>").group(1)
            '12'
        """
        return re.compile(
            re.escape(self.placeholder_prefix)
            + re.escape(self.placeHolder_tag(kind, depth))
            + r"~(\d+)"
            + re.escape(self.placeholder_suffix)
        )


# Singleton instance - import this in your code
appsettings = AppSettings()
