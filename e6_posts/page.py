from __future__ import annotations

import re
from pathlib import Path
from typing import Protocol

from bs4 import BeautifulSoup, FeatureNotFound, Tag

from .config_schema import AppConfig, PageSelectors
from .errors import PageError
from .post import TagCategory

_DISPLAY_NONE_RE = re.compile(r"(?:^|;)\s*display\s*:\s*none\s*(?:!important\s*)?(?:;|$)", re.I)


class PostElement(Protocol):
    """The element backing one post, as seen by the core."""

    def attr(self, name: str) -> str | None: ...

    def text_of(self, selector: str) -> str | None: ...

    def is_hidden(self) -> bool: ...

    def set_hidden(self, hidden: bool) -> None: ...


class PostPage(Protocol):
    """The document the posts are read from."""

    def is_viewing_page(self) -> bool: ...

    def viewing_element(self) -> PostElement | None: ...

    def listing_elements(self) -> list[PostElement]: ...

    def tag_group(self, category: TagCategory) -> list[str]: ...

    def is_favorited(self) -> bool: ...

    def is_upvoted(self, post_id: int) -> bool: ...

    def is_downvoted(self, post_id: int) -> bool: ...


def _classes(tag: Tag) -> list[str]:
    value = tag.get("class")
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return list(value)


class HtmlPostElement:
    """PostElement over a BeautifulSoup tag."""

    def __init__(self, tag: Tag, *, hidden_class: str = "filtered") -> None:
        self.tag = tag
        self.hidden_class = hidden_class

    def __repr__(self) -> str:
        return f"HtmlPostElement(<{self.tag.name} data-id={self.attr('data-id')!r}>)"

    def attr(self, name: str) -> str | None:
        value = self.tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def text_of(self, selector: str) -> str | None:
        found = self.tag.select_one(selector)
        if found is None:
            return None
        return found.get_text()

    def is_hidden(self) -> bool:
        return self.hidden_class in _classes(self.tag)

    def set_hidden(self, hidden: bool) -> None:
        classes = [c for c in _classes(self.tag) if c != self.hidden_class]
        if hidden:
            classes.append(self.hidden_class)

        if classes:
            self.tag["class"] = classes
        elif "class" in self.tag.attrs:
            del self.tag["class"]


class HtmlPage:
    """
    PostPage backed by a parsed HTML document.

    Visibility changes are applied to the parsed tree; `html()` returns the
    document with those changes.
    """

    def __init__(
        self,
        html: str,
        *,
        selectors: PageSelectors | None = None,
        features: str = "lxml",
    ) -> None:
        self.selectors = selectors or PageSelectors()
        try:
            self.soup = BeautifulSoup(html or "", features)
        except FeatureNotFound as e:
            raise PageError(f"HTML parser not available: {features}") from e

    @classmethod
    def from_config(cls, html: str, config: AppConfig) -> "HtmlPage":
        return cls(html, selectors=config.page, features=config.parser.features)

    @classmethod
    def from_path(cls, path: str | Path, config: AppConfig | None = None) -> "HtmlPage":
        cfg = config or AppConfig()
        p = Path(path)
        try:
            html = p.read_text(encoding=cfg.parser.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise PageError(f"Failed to read HTML file: {p}") from e
        return cls.from_config(html, cfg)

    def html(self) -> str:
        return str(self.soup)

    def _wrap(self, tag: Tag) -> HtmlPostElement:
        return HtmlPostElement(tag, hidden_class=self.selectors.hidden_class)

    def is_viewing_page(self) -> bool:
        return self.soup.select_one(self.selectors.image_container) is not None

    def viewing_element(self) -> HtmlPostElement | None:
        found = self.soup.select_one(self.selectors.image_container)
        if found is None:
            return None
        return self._wrap(found)

    def listing_elements(self) -> list[HtmlPostElement]:
        sel = self.selectors
        found = self.soup.select(f"{sel.posts_container} > {sel.post_entry}")
        return [self._wrap(tag) for tag in found]

    def tag_group(self, category: TagCategory) -> list[str]:
        sel = self.selectors
        group = sel.tag_group.format(category=category.value)

        out: list[str] = []
        for item in self.soup.select(f"{sel.tag_list} {group} > *"):
            found = item.select_one(sel.search_tag)
            if found is None:
                continue
            text = found.get_text().strip()
            if text:
                out.append(text)
        return out

    def is_favorited(self) -> bool:
        # The "add to favorites" button is hidden once the post is favorited.
        found = self.soup.select_one(self.selectors.add_to_favorites)
        if found is None:
            return False
        return _DISPLAY_NONE_RE.search(str(found.get("style") or "")) is not None

    def is_upvoted(self, post_id: int) -> bool:
        sel = self.selectors
        return self._has_class(sel.vote_up.format(post_id=post_id), sel.upvoted_class)

    def is_downvoted(self, post_id: int) -> bool:
        sel = self.selectors
        return self._has_class(sel.vote_down.format(post_id=post_id), sel.downvoted_class)

    def _has_class(self, selector: str, class_name: str) -> bool:
        found = self.soup.select_one(selector)
        return found is not None and class_name in _classes(found)
