from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from .query import FilterEvaluator

if TYPE_CHECKING:
    from .page import PostElement


class PostRating(Enum):
    SAFE = "s"
    QUESTIONABLE = "q"
    EXPLICIT = "e"

    @classmethod
    def from_code(cls, code: str | None) -> PostRating | None:
        value = (code or "").strip().lower()
        for rating in cls:
            if rating.value == value:
                return rating
        return None


class PostKind(Enum):
    BASIC = "basic"
    VIEWING = "viewing"


class TagCategory(Enum):
    ARTIST = "artist"
    CHARACTER = "character"
    COPYRIGHT = "copyright"
    SPECIES = "species"
    GENERAL = "general"
    META = "meta"
    LORE = "lore"

    @classmethod
    def parse(cls, value: TagCategory | str) -> TagCategory | None:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


@dataclass(frozen=True)
class ViewingDetails:
    """State only available when a single post is being viewed."""

    is_faved: bool = False
    is_upvoted: bool = False
    is_downvoted: bool = False
    # Compared, but excluded from the hash (mappingproxy is unhashable).
    tag_groups: Mapping[TagCategory, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )

    def __post_init__(self) -> None:
        groups: dict[TagCategory, tuple[str, ...]] = {cat: () for cat in TagCategory}
        for key, values in self.tag_groups.items():
            cat = TagCategory.parse(key)
            if cat is not None:
                groups[cat] = tuple(values)
        object.__setattr__(self, "tag_groups", MappingProxyType(groups))

    def tags_from_type(self, category: TagCategory | str) -> tuple[str, ...]:
        cat = TagCategory.parse(category)
        if cat is None:
            return ()
        return self.tag_groups[cat]


@dataclass(frozen=True)
class Post:
    """
    Normalized metadata for one post on the page.

    Record fields never change after construction. Only the visibility of
    the backing element is mutable, through `set_visibility`.
    """

    id: int
    tags: str = ""
    rating: PostRating | None = None
    favorites: int | None = None
    score: int | None = None

    file_url: str = ""
    sample_url: str = ""
    preview_url: str = ""
    file_extension: str = ""

    uploader_id: int | None = None
    uploader_name: str = ""

    has_sound: bool = False
    flags: str = ""

    viewing: ViewingDetails | None = None
    element: PostElement | None = field(default=None, compare=False, repr=False)
    _hidden: bool = field(default=False, init=False, compare=False, repr=False)

    @property
    def kind(self) -> PostKind:
        return PostKind.BASIC if self.viewing is None else PostKind.VIEWING

    @property
    def is_viewing(self) -> bool:
        return self.viewing is not None

    @property
    def tag_list(self) -> tuple[str, ...]:
        return tuple(self.tags.split())

    @property
    def flag_list(self) -> tuple[str, ...]:
        return tuple(self.flags.split())

    def tags_matches_filter(self, query: str | FilterEvaluator) -> bool:
        """
        Check whether the site would return this post for `query`.

        Accepts a query string or an already parsed FilterEvaluator.
        """
        evaluator = query if isinstance(query, FilterEvaluator) else FilterEvaluator(query)
        return evaluator.matches(self.tags)

    def tags_from_type(self, category: TagCategory | str) -> tuple[str, ...]:
        if self.viewing is None:
            return ()
        return self.viewing.tags_from_type(category)

    def is_visible(self) -> bool:
        if self.element is not None:
            return not self.element.is_hidden()
        return not self._hidden

    def set_visibility(self, visible: bool = True) -> None:
        hidden = not visible
        object.__setattr__(self, "_hidden", hidden)
        if self.element is not None:
            self.element.set_hidden(hidden)
