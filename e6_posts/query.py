from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .tag_matcher import TagMatcher, has_wildcard

NEGATION_PREFIX = "-"


@dataclass(frozen=True)
class FilterTerm:
    """One whitespace-delimited term of a tag query."""

    text: str
    negated: bool = False
    matcher: TagMatcher | None = None

    def raw_match(self, tags: Sequence[str], tag_string: str) -> bool:
        if self.matcher is not None:
            return self.matcher.matches(tag_string)
        # Without a wildcard the term must equal a whole tag.
        return self.text in tags

    def matches(self, tags: Sequence[str], tag_string: str) -> bool:
        return self.raw_match(tags, tag_string) != self.negated


def parse_term(raw: str) -> FilterTerm:
    negated = raw.startswith(NEGATION_PREFIX)
    text = raw[len(NEGATION_PREFIX) :] if negated else raw
    matcher = TagMatcher(text) if has_wildcard(text) else None
    return FilterTerm(text=text, negated=negated, matcher=matcher)


def parse_query(query: str) -> tuple[FilterTerm, ...]:
    return tuple(parse_term(raw) for raw in (query or "").split())


class FilterEvaluator:
    """
    A parsed tag query that can be evaluated against many posts.

    All terms must pass. Terms are checked left to right and evaluation
    stops at the first one that fails.
    """

    def __init__(self, query: str) -> None:
        self.query = query or ""
        self.terms = parse_query(self.query)

    def __repr__(self) -> str:
        return f"FilterEvaluator({self.query!r})"

    @property
    def is_empty(self) -> bool:
        return not self.terms

    def matches(self, tag_string: str) -> bool:
        if not self.terms:
            return True

        tag_string = tag_string or ""
        tags = tag_string.split()
        for term in self.terms:
            if not term.matches(tags, tag_string):
                return False
        return True


def tags_match_filter(query: str, tag_string: str) -> bool:
    return FilterEvaluator(query).matches(tag_string)
