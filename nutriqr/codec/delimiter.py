"""Escape-aware packing of two text fields into one.

The brand/product slot of a NutriQR record holds "<manufacturer>|<product>".
A literal delimiter inside either part is written as an escaped delimiter
("\\|"). Whether a delimiter is escaped depends on the run of escape
characters directly in front of it: an odd run escapes it, an even run
(including none) leaves it live.

Splitting is strict. A string is split only when it contains exactly one
live delimiter; zero or several live delimiters are rejected rather than
guessed at.
"""

from typing import List, Optional, Tuple

ESCAPE_CHAR = "\\"
DEFAULT_DELIMITER = "|"


def _preceding_escapes(text: str, position: int) -> int:
    """Count consecutive escape characters directly before position."""
    count = 0
    j = position - 1
    while j >= 0 and text[j] == ESCAPE_CHAR:
        count += 1
        j -= 1
    return count


def find_unescaped_delimiters(text: str, delimiter: str = DEFAULT_DELIMITER) -> List[int]:
    """Return the positions of every live (unescaped) delimiter in text."""
    positions = []
    for i, char in enumerate(text):
        if char == delimiter and _preceding_escapes(text, i) % 2 == 0:
            positions.append(i)
    return positions


def unescape_delimiter(text: str, delimiter: str = DEFAULT_DELIMITER) -> str:
    """Turn every escaped delimiter back into a literal delimiter.

    Only the escape directly in front of a delimiter is removed; no other
    escape sequence is interpreted.
    """
    return text.replace(ESCAPE_CHAR + delimiter, delimiter)


def escape_delimiter(text: str, delimiter: str = DEFAULT_DELIMITER) -> str:
    """Escape every live delimiter in text.

    Delimiters already escaped (odd escape run in front) are left as they
    are, so escaping is idempotent.
    """
    live = set(find_unescaped_delimiters(text, delimiter))
    if not live:
        return text
    parts = []
    for i, char in enumerate(text):
        if i in live:
            parts.append(ESCAPE_CHAR)
        parts.append(char)
    return "".join(parts)


def split_escaped_delimiter(
    text: str, delimiter: str = DEFAULT_DELIMITER
) -> Optional[Tuple[str, str]]:
    """Split text on its single live delimiter.

    Args:
        text: Packed field, e.g. "Brand|Product"
        delimiter: Delimiter character

    Returns:
        (left, right), each unescaped and stripped of surrounding whitespace,
        or None unless exactly one live delimiter exists.
    """
    positions = find_unescaped_delimiters(text, delimiter)
    if len(positions) != 1:
        return None

    idx = positions[0]
    left = unescape_delimiter(text[:idx], delimiter).strip()
    right = unescape_delimiter(text[idx + 1:], delimiter).strip()
    return left, right


def join_escaped_delimiter(left: str, right: str, delimiter: str = DEFAULT_DELIMITER) -> str:
    """Escape both parts and join them with a live delimiter."""
    return f"{escape_delimiter(left, delimiter)}{delimiter}{escape_delimiter(right, delimiter)}"
