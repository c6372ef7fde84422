"""
Regular expressions used by the compressors

Every pattern the extraction and transformation stages apply lives here,
compiled once at import time. The module also provides the built-in
preserve patterns for server-side template blocks and the loader for
user-supplied preserve pattern files.

Pattern files come in two flavours:
    - plain text: one regular expression per non-empty line
    - YAML (.yml/.yaml): a list whose items are either a regular expression
      string or a mapping {pattern: ..., flags: [IGNORECASE, DOTALL, ...]}

Example:
    >>> patterns = patterns_load(Path("preserve.yaml"))
    >>> options = CompressorOptions(preserve_patterns=patterns)
"""

import re
from pathlib import Path
from typing import Any, Iterable, List

import yaml

from ..models.options import ALL_TAGS, BLOCK_TAGS_MAX, BLOCK_TAGS_MIN


class PreservePatternError(ValueError):
    """Raised when a user-supplied preserve pattern cannot be compiled or loaded"""
    pass


# Built-in preserve patterns
PHP_TAG_PATTERN = re.compile(r"<\?php.*?\?>", re.S | re.I)                # <?php ... ?>
SERVER_SCRIPT_TAG_PATTERN = re.compile(r"<%.*?%>", re.S)                  # <% ... %>
SERVER_SIDE_INCLUDE_PATTERN = re.compile(r"<!--\s*#.*?-->", re.S)         # <!--# ... -->

# Protected regions
SKIP_PATTERN = re.compile(r"<!--\s*\{\{\{\s*-->(.*?)<!--\s*\}\}\}\s*-->", re.S | re.I)
COND_COMMENT_PATTERN = re.compile(r"(<!(?:--)?\[[^\]]+?]>)(.*?)(<!\[[^\]]+]-->)", re.S | re.I)
EVENT_DOUBLE_QUOTED_PATTERN = re.compile(r'(\son[a-z]+\s*=\s*")([^"\\\r\n]*(?:\\.[^"\\\r\n]*)*)(")', re.I)
EVENT_SINGLE_QUOTED_PATTERN = re.compile(r"(\son[a-z]+\s*=\s*')([^'\\\r\n]*(?:\\.[^'\\\r\n]*)*)(')", re.I)
PRE_PATTERN = re.compile(r"(<pre[^>]*?>)(.*?)(</pre>)", re.S | re.I)
TEXTAREA_PATTERN = re.compile(r"(<textarea[^>]*?>)(.*?)(</textarea>)", re.S | re.I)
SCRIPT_PATTERN = re.compile(r"(<script[^>]*?>)(.*?)(</script>)", re.S | re.I)
STYLE_PATTERN = re.compile(r"(<style[^>]*?>)(.*?)(</style>)", re.S | re.I)
LINE_BREAK_PATTERN = re.compile(r"(?:[ \t]*(\r?\n)[ \t]*)+")
CDATA_BLOCK_PATTERN = re.compile(r"<!\[CDATA\[.*?\]\]>", re.S | re.I)

# Script routing
TYPE_ATTR_PATTERN = re.compile(r"(?<![\w-])type\s*=\s*(?:([\"'])(.*?)\1|([^\s>]+))", re.I | re.S)  # quoted: 2, bare: 3
JAVASCRIPT_TYPES = frozenset({"", "text/javascript", "application/javascript"})
TEMPLATE_TYPES = frozenset({"text/x-jquery-tmpl"})

# CDATA wrapper around script/style bodies
CDATA_WRAPPER_PATTERN = re.compile(r"\s*<!\[CDATA\[(.*?)\]\]>\s*", re.S | re.I)

# Skeleton rewrites
COMMENT_PATTERN = re.compile(r"<!---->|<!--[^\[].*?-->", re.S | re.I)
DOCTYPE_PATTERN = re.compile(r"<!DOCTYPE[^>]*>", re.S | re.I)
JS_TYPE_ATTR_PATTERN = re.compile(
    r"(<script[^>]*)type\s*=\s*([\"']*)(?:text|application)/javascript\2([^>]*>)", re.S | re.I
)
JS_LANG_ATTR_PATTERN = re.compile(r"(<script[^>]*)language\s*=\s*([\"']*)javascript\2([^>]*>)", re.S | re.I)
STYLE_TYPE_ATTR_PATTERN = re.compile(r"(<style[^>]*)type\s*=\s*([\"']*)text/css\2([^>]*>)", re.S | re.I)
LINK_TYPE_ATTR_PATTERN = re.compile(r"(<link[^>]*)type\s*=\s*([\"']*)text/(?:css|plain)\2([^>]*>)", re.S | re.I)
LINK_REL_ATTR_PATTERN = re.compile(
    r"<link(?:[^>]*)rel\s*=\s*([\"']*)(?:alternate\s+)?stylesheet\1(?:[^>]*)>", re.S | re.I
)
FORM_METHOD_ATTR_PATTERN = re.compile(r"(<form[^>]*)method\s*=\s*([\"']*)get\2([^>]*>)", re.S | re.I)
INPUT_TYPE_ATTR_PATTERN = re.compile(r"(<input[^>]*)type\s*=\s*([\"']*)text\2([^>]*>)", re.S | re.I)
BOOLEAN_ATTR_PATTERN = re.compile(
    r"(<\w+[^>]*\s)(checked|selected|disabled|readonly)\s*=\s*([\"']*)\w*\3([^>]*>)", re.S | re.I
)
EVENT_JS_PROTOCOL_PATTERN = re.compile(r"^javascript:\s*(.+)", re.S | re.I)
HTTP_PROTOCOL_PATTERN = re.compile(r"(<[^>]+?(?:href|src|cite|action)\s*=\s*['\"])http:(//[^>]+?>)", re.S | re.I)
HTTPS_PROTOCOL_PATTERN = re.compile(r"(<[^>]+?(?:href|src|cite|action)\s*=\s*['\"])https:(//[^>]+?>)", re.S | re.I)
REL_EXTERNAL_PATTERN = re.compile(r"<(?:[^>]*)rel\s*=\s*([\"']*)(?:alternate\s+)?external\1(?:[^>]*)>", re.S | re.I)
INTERTAG_TAG_TAG_PATTERN = re.compile(r">\s+<", re.S)
MULTISPACE_PATTERN = re.compile(r"\s+", re.S)
TAG_PROPERTY_PATTERN = re.compile(r"(\s\w+)\s*=\s*(?=[^<]*?>)", re.I)
TAG_END_SPACE_PATTERN = re.compile(r"(<(?:[^>]+?))(?:\s+?)(/?>)", re.S | re.I)
TAG_LAST_UNQUOTED_VALUE_PATTERN = re.compile(r"=\s*[a-z0-9_-]+$", re.I)
TAG_QUOTE_PATTERN = re.compile(r"\s*=\s*([\"'])([a-z0-9_-]+?)\1(/?)(?=[^<]*?>)", re.I)
SURROUNDING_SPACES_ALL_PATTERN = re.compile(r"\s*(<[^>]+>)\s*", re.S | re.I)

# Xml-only rewrites
XML_COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.S | re.I)
XML_MULTISPACE_PATTERN = re.compile(r"\s+(?=[^<]*?>)", re.S)

# Whitespace characters counted by statistics
EMPTY_CHAR_PATTERN = re.compile(r"\s")


def surroundingSpaces_pattern(tags: str) -> "re.Pattern[str]":
    """
    Build the pattern removing whitespace around the given tags.

    Args:
        tags: "min", "max", "all", one of the predefined tag lists, or any
              comma separated list of tag names

    Returns:
        Pattern whose group 1 is the tag that must be kept

    Example:
        >>> surroundingSpaces_pattern("p,br").sub(r"\\1", "a <p> b </p> c")
        'a<p>b</p>c'
    """
    selector = tags.strip().lower()
    if selector == ALL_TAGS:
        return SURROUNDING_SPACES_ALL_PATTERN
    if selector in ("min", BLOCK_TAGS_MIN):
        tags = BLOCK_TAGS_MIN
    elif selector in ("max", BLOCK_TAGS_MAX):
        tags = BLOCK_TAGS_MAX

    names = "|".join(re.escape(name.strip()) for name in tags.split(",") if name.strip())
    return re.compile(r"\s*(</?(?:" + names + r")(?:>|[\s/][^>]*>))\s*", re.S | re.I)


def pattern_compile(source: str, flags: int = 0) -> "re.Pattern[str]":
    """
    Compile a user-supplied preserve pattern.

    Raises:
        PreservePatternError: If the expression is not a valid regular expression
    """
    try:
        return re.compile(source, flags)
    except re.error as e:
        raise PreservePatternError(f"Regular expression compilation error in {source!r}: {e}") from e


def flags_parse(names: Iterable[str]) -> int:
    """
    Turn flag names (e.g. ["IGNORECASE", "S"]) into an re flag mask.

    Raises:
        PreservePatternError: For names that are not re flags
    """
    mask = 0
    for name in names:
        flag = getattr(re.RegexFlag, str(name).upper(), None)
        if flag is None:
            raise PreservePatternError(f"Unknown regular expression flag: {name}")
        mask |= flag
    return mask


def patterns_load(path: Path, encoding: str = "utf-8") -> List["re.Pattern[str]"]:
    """
    Read preserve patterns from a plain text or YAML file.

    Args:
        path: Pattern file; .yml/.yaml files are parsed as YAML
        encoding: File encoding

    Returns:
        Compiled patterns in file order

    Raises:
        PreservePatternError: If the file cannot be read or parsed, or any
                              expression fails to compile
    """
    try:
        text = path.read_text(encoding=encoding)
    except OSError as e:
        raise PreservePatternError(f"Unable to read custom pattern definitions file: {e}") from e

    if path.suffix.lower() not in (".yml", ".yaml"):
        return [pattern_compile(line) for line in text.splitlines() if line]

    try:
        entries: Any = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise PreservePatternError(f"Invalid pattern definitions file {path}: {e}") from e

    if entries is None:
        return []
    if not isinstance(entries, list):
        raise PreservePatternError(f"Pattern definitions file {path} must contain a list")

    patterns = []
    for entry in entries:
        if isinstance(entry, str):
            patterns.append(pattern_compile(entry))
        elif isinstance(entry, dict) and isinstance(entry.get("pattern"), str):
            patterns.append(pattern_compile(entry["pattern"], flags_parse(entry.get("flags") or [])))
        else:
            raise PreservePatternError(f"Invalid pattern entry in {path}: {entry!r}")
    return patterns
