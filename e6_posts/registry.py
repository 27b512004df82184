from __future__ import annotations

import warnings

from .config_schema import PageSelectors
from .normalize import post_from_element, viewing_post_from_page
from .page import PostPage
from .post import Post
from .query import FilterEvaluator
from .run_log import RunLogger


class PostRegistry:
    """
    Owns the posts found on one page.

    The registry is either empty or holds the full set of posts from its
    last scan. Callers that change the page structurally (for example by
    appending results) must call `invalidate_cache`.
    """

    def __init__(
        self,
        page: PostPage,
        *,
        selectors: PageSelectors | None = None,
        logger: RunLogger | None = None,
    ) -> None:
        self.page = page
        self.selectors = selectors or PageSelectors()
        self._logger = logger
        self._posts: tuple[Post, ...] | None = None

    @property
    def is_cached(self) -> bool:
        return self._posts is not None

    def fetch_posts(self, use_cache: bool = True) -> tuple[Post, ...]:
        if self._posts is not None and use_cache:
            return self._posts

        self._posts = self._scan()
        return self._posts

    def invalidate_cache(self) -> None:
        self._posts = None

    def get_visible_posts(self) -> tuple[Post, ...]:
        warnings.warn(
            "get_visible_posts() is deprecated, use fetch_posts()",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.fetch_posts()

    def get_viewing_post(self) -> Post | None:
        warnings.warn(
            "get_viewing_post() is deprecated, use fetch_posts()",
            DeprecationWarning,
            stacklevel=2,
        )
        if not self.page.is_viewing_page():
            return None
        posts = self.fetch_posts()
        return posts[0] if posts else None

    def apply_filter(self, query: str) -> int:
        """
        Show posts matching `query` and hide the rest.

        Returns the number of posts left visible.
        """
        evaluator = FilterEvaluator(query)
        shown = 0
        for post in self.fetch_posts():
            visible = post.tags_matches_filter(evaluator)
            post.set_visibility(visible)
            shown += int(visible)

        if self._logger is not None:
            self._logger.info(
                "filter_applied",
                query=evaluator.query,
                terms=len(evaluator.terms),
                shown=shown,
                hidden=len(self._posts or ()) - shown,
            )
        return shown

    def _scan(self) -> tuple[Post, ...]:
        sel = self.selectors
        posts: tuple[Post, ...]

        if self.page.is_viewing_page():
            post = viewing_post_from_page(
                self.page,
                favorites_selector=sel.favorite_count,
                score_selector=sel.score_count,
            )
            posts = (post,) if post is not None else ()
            mode = "viewing"
        else:
            posts = tuple(
                post_from_element(
                    element,
                    favorites_selector=sel.favorite_count,
                    score_selector=sel.score_count,
                )
                for element in self.page.listing_elements()
            )
            mode = "listing"

        if self._logger is not None:
            self._logger.info("posts_scanned", mode=mode, count=len(posts))
        return posts
