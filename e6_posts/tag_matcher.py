from __future__ import annotations

WILDCARD = "*"
TAG_SEPARATOR = " "


def _is_tag_start(text: str, pos: int) -> bool:
    return pos == 0 or text[pos - 1] == TAG_SEPARATOR


def _is_tag_end(text: str, pos: int) -> bool:
    return pos == len(text) or text[pos] == TAG_SEPARATOR


def _find_tag_start(text: str, prefix: str) -> int:
    pos = text.find(prefix)
    while pos != -1 and not _is_tag_start(text, pos):
        pos = text.find(prefix, pos + 1)
    return pos


def _ends_at_tag_end(text: str, suffix: str, lower: int) -> bool:
    # Some tag end e with text[e - len(suffix):e] == suffix, starting at or after lower.
    end = lower + len(suffix)
    while end <= len(text):
        if _is_tag_end(text, end):
            if text.startswith(suffix, end - len(suffix)):
                return True
            if end == len(text):
                return False
            end += 1
        nxt = text.find(TAG_SEPARATOR, end)
        end = len(text) if nxt == -1 else nxt
    return False


class TagMatcher:
    """
    Reusable predicate for one wildcard pattern.

    `*` stands for any run of characters, every other character is literal.
    The match is anchored on tag boundaries of the joined tag string: it must
    start where a tag starts and end where a tag ends, while `*` itself may
    run across spaces. Matching is a single left-to-right scan over the tag
    string, so patterns with many stars stay linear.
    """

    __slots__ = ("pattern", "_chunks")

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern or ""
        self._chunks = tuple(self.pattern.split(WILDCARD))

    def __repr__(self) -> str:
        return f"TagMatcher({self.pattern!r})"

    def matches(self, tag_string: str) -> bool:
        text = tag_string or ""
        if len(self._chunks) == 1:
            return self._matches_literal(text, self._chunks[0])

        first, middle, last = self._chunks[0], self._chunks[1:-1], self._chunks[-1]

        # The leftmost valid start leaves the most room for the remaining
        # chunks, so one greedy pass decides the match.
        start = _find_tag_start(text, first)
        if start == -1:
            return False

        pos = start + len(first)
        for chunk in middle:
            found = text.find(chunk, pos)
            if found == -1:
                return False
            pos = found + len(chunk)

        return _ends_at_tag_end(text, last, pos)

    @staticmethod
    def _matches_literal(text: str, literal: str) -> bool:
        pos = text.find(literal)
        while pos != -1:
            if _is_tag_start(text, pos) and _is_tag_end(text, pos + len(literal)):
                return True
            pos = text.find(literal, pos + 1)
        return False


def has_wildcard(term: str) -> bool:
    """True when `term` must be matched as a pattern instead of a whole tag."""
    return WILDCARD in (term or "")
