"""
Comment Stripper - Blanks out comments before pattern detection.

This is a lexical heuristic, not a tokenizer. A comment marker inside a
string literal (``"http://host"``, ``"#fff"``) is treated as a comment, and
a multi-line string that looks like a block comment is blanked too. Both are
known limitations of regex-based scanning.
"""

import re

# Only \n ends a line; a \r before it belongs to the line ending
_LINE_BREAKS = frozenset("\r\n")


def _blank(match: re.Match) -> str:
    return "".join(c if c in _LINE_BREAKS else " " for c in match.group(0))


def strip_comments(content: str, comment_regex: re.Pattern | None) -> str:
    """
    Replace every comment span with spaces.

    Line breaks inside comments are kept, so the result has exactly the same
    lines as the input and line numbers found in it map 1:1 to the original.

    Args:
        content: Source text
        comment_regex: Alternation of the language's comment patterns, or None

    Returns:
        Content with comments blanked (unchanged when comment_regex is None)
    """
    if comment_regex is None or not content:
        return content
    return comment_regex.sub(_blank, content)


def split_lines(content: str) -> list[str]:
    """
    Split content into lines on ``\\n`` only, dropping a trailing ``\\r``.

    Form feeds, vertical tabs and Unicode separators such as U+2028 stay
    inside their line, unlike with str.splitlines().
    """
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]
