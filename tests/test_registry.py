from __future__ import annotations

import json
import tempfile
import unittest
import warnings
from pathlib import Path

from e6_posts.page import HtmlPage
from e6_posts.post import PostKind, TagCategory
from e6_posts.registry import PostRegistry
from e6_posts.run_log import RunLogger

_ENTRY = '<article class="post-preview" data-id="{id}" data-tags="{tags}" data-rating="s"></article>'


def _listing(*posts: tuple[int, str]) -> str:
    entries = "".join(_ENTRY.format(id=i, tags=t) for i, t in posts)
    return f'<html><body><div id="posts-container">{entries}</div></body></html>'


_VIEWING = """\
<html><body>
<div id="image-container" data-id="5" data-tags="artistA fox" data-rating="e"></div>
<div id="tag-list">
  <ul class="artist-tag-list"><li><a class="search-tag">artistA</a></li></ul>
  <ul class="species-tag-list"><li><a class="search-tag">fox</a></li></ul>
</div>
</body></html>
"""


class _SwappablePage:
    """Delegates to an HtmlPage that tests can replace to simulate page changes."""

    def __init__(self, html: str) -> None:
        self.current = HtmlPage(html, features="html.parser")
        self.scans = 0

    def is_viewing_page(self) -> bool:
        return self.current.is_viewing_page()

    def viewing_element(self):
        return self.current.viewing_element()

    def listing_elements(self):
        self.scans += 1
        return self.current.listing_elements()

    def tag_group(self, category: TagCategory) -> list[str]:
        return self.current.tag_group(category)

    def is_favorited(self) -> bool:
        return self.current.is_favorited()

    def is_upvoted(self, post_id: int) -> bool:
        return self.current.is_upvoted(post_id)

    def is_downvoted(self, post_id: int) -> bool:
        return self.current.is_downvoted(post_id)


class TestFetchPosts(unittest.TestCase):
    def test_listing_posts_in_document_order(self) -> None:
        registry = PostRegistry(HtmlPage(_listing((3, "a"), (1, "b"), (2, "c"))))
        posts = registry.fetch_posts()
        self.assertEqual([p.id for p in posts], [3, 1, 2])
        self.assertTrue(all(p.kind is PostKind.BASIC for p in posts))

    def test_zero_entries(self) -> None:
        registry = PostRegistry(HtmlPage("<html><body><p>nothing</p></body></html>"))
        self.assertEqual(registry.fetch_posts(), ())
        self.assertTrue(registry.is_cached)

    def test_viewing_page_yields_one_viewing_post(self) -> None:
        registry = PostRegistry(HtmlPage(_VIEWING))
        posts = registry.fetch_posts()

        self.assertEqual(len(posts), 1)
        post = posts[0]
        self.assertIs(post.kind, PostKind.VIEWING)
        self.assertEqual(post.id, 5)
        self.assertEqual(post.tags_from_type("species"), ("fox",))
        self.assertEqual(post.tags_from_type("artist"), ("artistA",))
        self.assertEqual(post.tags_from_type("lore"), ())

    def test_cache_returns_same_instances(self) -> None:
        page = _SwappablePage(_listing((1, "fox"), (2, "wolf")))
        registry = PostRegistry(page)
        self.assertFalse(registry.is_cached)

        first = registry.fetch_posts()
        second = registry.fetch_posts()
        self.assertIs(first, second)
        self.assertEqual(page.scans, 1)

    def test_use_cache_false_rescans(self) -> None:
        page = _SwappablePage(_listing((1, "fox")))
        registry = PostRegistry(page)
        first = registry.fetch_posts()
        second = registry.fetch_posts(use_cache=False)
        self.assertEqual(page.scans, 2)
        self.assertIsNot(first[0], second[0])
        self.assertEqual(first[0], second[0])

    def test_invalidate_cache_picks_up_page_changes(self) -> None:
        page = _SwappablePage(_listing((1, "fox")))
        registry = PostRegistry(page)
        self.assertEqual([p.id for p in registry.fetch_posts()], [1])

        page.current = HtmlPage(_listing((1, "fox"), (2, "wolf")), features="html.parser")
        self.assertEqual([p.id for p in registry.fetch_posts()], [1])

        registry.invalidate_cache()
        self.assertFalse(registry.is_cached)
        self.assertEqual([p.id for p in registry.fetch_posts(True)], [1, 2])
        self.assertTrue(registry.is_cached)

    def test_registries_are_independent(self) -> None:
        a = PostRegistry(HtmlPage(_listing((1, "fox"))))
        b = PostRegistry(HtmlPage(_listing((2, "wolf"))))
        self.assertEqual([p.id for p in a.fetch_posts()], [1])
        self.assertEqual([p.id for p in b.fetch_posts()], [2])
        a.invalidate_cache()
        self.assertTrue(b.is_cached)


class TestDeprecatedAccessors(unittest.TestCase):
    def test_get_visible_posts_warns(self) -> None:
        registry = PostRegistry(HtmlPage(_listing((1, "fox"))))
        with self.assertWarns(DeprecationWarning):
            posts = registry.get_visible_posts()
        self.assertEqual([p.id for p in posts], [1])

    def test_get_viewing_post(self) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", DeprecationWarning)
            self.assertIsNone(PostRegistry(HtmlPage(_listing((1, "fox")))).get_viewing_post())
            post = PostRegistry(HtmlPage(_VIEWING)).get_viewing_post()

        assert post is not None
        self.assertEqual(post.id, 5)


class TestApplyFilter(unittest.TestCase):
    def test_hides_non_matching_posts(self) -> None:
        page = HtmlPage(_listing((1, "fox canine"), (2, "wolf canine"), (3, "fox suggestive")))
        registry = PostRegistry(page)

        shown = registry.apply_filter("fox -suggestive")
        self.assertEqual(shown, 1)
        self.assertEqual([p.is_visible() for p in registry.fetch_posts()], [True, False, False])
        self.assertEqual(page.html().count('class="post-preview filtered"'), 2)

        self.assertEqual(registry.apply_filter(""), 3)
        self.assertNotIn("filtered", page.html())

    def test_logs_scan_and_filter(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            log_path = Path(td) / "run.log"
            with RunLogger.open(log_path) as log:
                registry = PostRegistry(HtmlPage(_listing((1, "fox"), (2, "wolf"))), logger=log)
                registry.apply_filter("fox")

            records = [json.loads(ln) for ln in log_path.read_text(encoding="utf-8").splitlines()]

        self.assertEqual([r["event"] for r in records], ["posts_scanned", "filter_applied"])
        self.assertEqual(records[0]["data"], {"mode": "listing", "count": 2})
        self.assertEqual(records[1]["data"]["shown"], 1)
        self.assertEqual(records[1]["data"]["hidden"], 1)


if __name__ == "__main__":
    unittest.main()
