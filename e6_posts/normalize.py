from __future__ import annotations

import re
from dataclasses import replace

from .page import PostElement, PostPage
from .post import Post, PostRating, TagCategory, ViewingDetails

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

FAVORITES_SELECTOR = ".post-score-faves"
SCORE_SELECTOR = ".post-score-score"


def parse_int(value: str | None) -> int | None:
    """Parse a leading integer, ignoring trailing text ("12 faves" -> 12)."""
    if value is None:
        return None
    m = _LEADING_INT_RE.match(value)
    if m is None:
        return None
    return int(m.group(1))


def _coerce_str(value: str | None) -> str:
    return (value or "").strip()


def _count_from(element: PostElement, attribute: str, fallback_selector: str) -> int | None:
    primary = _coerce_str(element.attr(attribute))
    if primary:
        return parse_int(primary)

    # Listing thumbnails render the count as "<icon><number>"; drop the icon.
    text = element.text_of(fallback_selector)
    if text is None:
        return None
    return parse_int(text.strip()[1:])


def normalize_tag(value: str) -> str:
    return (value or "").strip().replace(" ", "_")


def post_from_element(
    element: PostElement,
    *,
    favorites_selector: str = FAVORITES_SELECTOR,
    score_selector: str = SCORE_SELECTOR,
    viewing: ViewingDetails | None = None,
) -> Post:
    """
    Build a Post from the data-* attributes of a post element.

    Favorite and score counts fall back to the rendered counters when the
    attributes are missing; any other missing attribute is left empty.
    """
    post_id = parse_int(element.attr("data-id"))
    if post_id is None:
        raise ValueError(f"post element has no usable data-id: {element!r}")

    return Post(
        id=post_id,
        tags=" ".join(_coerce_str(element.attr("data-tags")).split()),
        rating=PostRating.from_code(element.attr("data-rating")),
        favorites=_count_from(element, "data-fav-count", favorites_selector),
        score=_count_from(element, "data-score", score_selector),
        file_url=_coerce_str(element.attr("data-file-url")),
        sample_url=_coerce_str(element.attr("data-large-file-url")),
        preview_url=_coerce_str(element.attr("data-preview-file-url")),
        file_extension=_coerce_str(element.attr("data-file-ext")),
        uploader_id=parse_int(element.attr("data-uploader-id")),
        uploader_name=_coerce_str(element.attr("data-uploader")),
        has_sound=_coerce_str(element.attr("data-has-sound")) == "true",
        flags=" ".join(_coerce_str(element.attr("data-flags")).split()),
        viewing=viewing,
        element=element,
    )


def viewing_details_from_page(page: PostPage, post_id: int) -> ViewingDetails:
    groups = {
        category: tuple(normalize_tag(t) for t in page.tag_group(category))
        for category in TagCategory
    }
    return ViewingDetails(
        is_faved=page.is_favorited(),
        is_upvoted=page.is_upvoted(post_id),
        is_downvoted=page.is_downvoted(post_id),
        tag_groups=groups,
    )


def viewing_post_from_page(
    page: PostPage,
    *,
    favorites_selector: str = FAVORITES_SELECTOR,
    score_selector: str = SCORE_SELECTOR,
) -> Post | None:
    element = page.viewing_element()
    if element is None:
        return None

    post = post_from_element(
        element,
        favorites_selector=favorites_selector,
        score_selector=score_selector,
    )
    return replace(post, viewing=viewing_details_from_page(page, post.id))
