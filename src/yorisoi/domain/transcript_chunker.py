"""Sentence-aware splitting of long transcripts."""

SENTENCE_ENDINGS = frozenset("。．.！？!?\n")
CLOSING_MARKS = frozenset("」』）)】\"'")


def _sentence_cut(text: str, boundary: int, lookahead: int, floor: int) -> int | None:
    """Returns the cut index after the sentence end nearest the margin's far edge."""
    upper = min(len(text), boundary + lookahead)
    lower = max(floor, boundary - lookahead)
    for i in range(upper - 1, lower - 1, -1):
        if text[i] in SENTENCE_ENDINGS:
            cut = i + 1
            while cut < len(text) and text[cut] in CLOSING_MARKS:
                cut += 1
            return cut
    return None


def _merge_blank_pieces(pieces: list[str]) -> list[str]:
    merged: list[str] = []
    pending = ""
    for piece in pieces:
        if not piece.strip():
            if merged:
                merged[-1] += piece
            else:
                pending += piece
            continue
        merged.append(pending + piece)
        pending = ""
    return merged


def split_transcript(text: str, max_chars: int, lookahead: int = 200) -> list[str]:
    """
    Splits a transcript into segments of about ``max_chars`` characters.

    Each window of ``max_chars`` characters is cut after the sentence end
    closest to ``max_chars + lookahead`` (searching back to
    ``max_chars - lookahead``), or at the raw boundary when the margin holds
    no sentence end. Nothing is trimmed, so joining the segments gives back
    the input; whitespace-only pieces are folded into a neighbour so every
    segment has visible content.

    Args:
        text: The transcript.
        max_chars: Target segment length.
        lookahead: Margin searched on both sides of each boundary.

    Returns:
        The ordered segments; empty for blank input.
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be positive")
    lookahead = max(0, min(lookahead, max_chars - 1))

    pieces = []
    start = 0
    while start < len(text):
        if len(text) - start <= max_chars:
            pieces.append(text[start:])
            break
        boundary = start + max_chars
        cut = _sentence_cut(text, boundary, lookahead, start + 1) or boundary
        pieces.append(text[start:cut])
        start = cut
    return _merge_blank_pieces(pieces)
