from __future__ import annotations

import time
import unittest

from e6_posts.query import tags_match_filter
from e6_posts.tag_matcher import TagMatcher, has_wildcard


class TestTagMatcher(unittest.TestCase):
    def test_trailing_wildcard_matches_token_prefix(self) -> None:
        self.assertTrue(TagMatcher("fo*").matches("fox canine"))
        self.assertTrue(TagMatcher("can*").matches("fox canine"))

    def test_inner_wildcard(self) -> None:
        self.assertTrue(TagMatcher("f*x").matches("fox canine"))
        self.assertFalse(TagMatcher("f*z").matches("fox canine"))

    def test_anchored_to_tag_boundaries(self) -> None:
        self.assertFalse(TagMatcher("ox*").matches("fox canine"))
        self.assertFalse(TagMatcher("*ani").matches("fox canine"))
        self.assertTrue(TagMatcher("*nine").matches("fox canine"))

    def test_pattern_may_span_tokens(self) -> None:
        self.assertTrue(TagMatcher("fox*canine").matches("fox canine"))
        self.assertTrue(TagMatcher("fox *").matches("fox canine"))

    def test_regex_characters_are_literal(self) -> None:
        self.assertTrue(TagMatcher("cat_(species)*").matches("cat_(species)_x"))
        self.assertFalse(TagMatcher("a.c*").matches("abcd"))
        self.assertTrue(TagMatcher("a.c*").matches("a.cd"))
        self.assertTrue(TagMatcher("1+1=*").matches("1+1=2"))

    def test_lone_star_matches_anything(self) -> None:
        self.assertTrue(TagMatcher("*").matches("fox"))
        self.assertTrue(TagMatcher("*").matches(""))

    def test_literal_pattern_needs_a_whole_tag(self) -> None:
        self.assertTrue(TagMatcher("canine").matches("fox canine"))
        self.assertFalse(TagMatcher("can").matches("fox canine"))
        self.assertTrue(TagMatcher("fox canine").matches("red fox canine"))

    def test_many_stars_on_a_long_tag_string_stay_fast(self) -> None:
        tags = " ".join(["a"] * 300)
        started = time.perf_counter()
        self.assertFalse(tags_match_filter("*a*a*a*a*z", tags))
        self.assertFalse(TagMatcher("a*a*a*a*a*a*a*a*b").matches(tags))
        self.assertTrue(TagMatcher("a*a*a*a*a").matches(tags))
        self.assertLess(time.perf_counter() - started, 1.0)

    def test_last_chunk_may_not_overlap_earlier_chunks(self) -> None:
        self.assertFalse(TagMatcher("ab*ba").matches("aba"))
        self.assertTrue(TagMatcher("ab*ba").matches("abba"))
        self.assertTrue(TagMatcher("ab*ba").matches("ab ba"))

    def test_has_wildcard(self) -> None:
        self.assertTrue(has_wildcard("fo*"))
        self.assertFalse(has_wildcard("fox"))
        self.assertFalse(has_wildcard(""))


if __name__ == "__main__":
    unittest.main()
