"""
Text Utilities
Grapheme-aware truncation and sequence chunking
"""

from typing import List, Sequence, TypeVar

import regex

T = TypeVar("T")

# Extended grapheme clusters (flags, ZWJ sequences, skin tones, combining marks)
GRAPHEME_REGEX = regex.compile(r"\X")


def graphemes(text: str) -> List[str]:
    """
    Split text into user-perceived characters.

    Args:
        text: Text to split

    Returns:
        List of grapheme clusters
    """
    return GRAPHEME_REGEX.findall(text)


def grapheme_length(text: str) -> int:
    """Count the display characters of a string."""
    return len(graphemes(text))


def truncate(text: str, length: int, end: str = "...") -> str:
    """
    Truncate text to a number of display characters.

    The end marker is only appended when it fits inside the limit;
    otherwise the text is hard-cut at the limit.

    Args:
        text: Text to truncate
        length: Maximum number of grapheme clusters
        end: Marker appended to truncated text

    Returns:
        Text of at most ``length`` grapheme clusters
    """
    if length <= 0:
        return ""

    text_graphemes = graphemes(text)
    if len(text_graphemes) <= length:
        return text

    end_graphemes = graphemes(end)
    if len(end_graphemes) >= length:
        return "".join(text_graphemes[:length])

    return "".join(text_graphemes[: length - len(end_graphemes)]) + end


def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    """
    Split a sequence into consecutive pages.

    Args:
        items: Sequence to split
        size: Page size (must be positive)

    Returns:
        Pages in original order; only the last may be shorter than ``size``
    """
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]
