from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

_QUERY_NAME_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$")


def _normalize_query(value: str) -> str:
    return " ".join((value or "").split())


def _require_placeholder(value: str, placeholder: str) -> str:
    template = (value or "").strip()
    if placeholder not in template:
        raise ValueError(f"must contain the {placeholder} placeholder")
    return template


class PageSelectors(BaseModel):
    """CSS selectors and class names used to locate posts in a page."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    image_container: str = "#image-container"
    posts_container: str = "#posts-container"
    post_entry: str = ".post-preview"

    favorite_count: str = ".post-score-faves"
    score_count: str = ".post-score-score"

    tag_list: str = "#tag-list"
    tag_group: str = ".{category}-tag-list"
    search_tag: str = ".search-tag"

    add_to_favorites: str = "#add-to-favorites"
    vote_up: str = "#post-vote-up-{post_id}"
    vote_down: str = "#post-vote-down-{post_id}"
    upvoted_class: str = "score-positive"
    downvoted_class: str = "score-negative"

    hidden_class: str = "filtered"

    @field_validator("tag_group")
    @classmethod
    def _tag_group_needs_category(cls, v: str) -> str:
        return _require_placeholder(v, "{category}")

    @field_validator("vote_up", "vote_down")
    @classmethod
    def _vote_needs_post_id(cls, v: str) -> str:
        return _require_placeholder(v, "{post_id}")

    @field_validator("hidden_class", "upvoted_class", "downvoted_class")
    @classmethod
    def _class_name_is_single_token(cls, v: str) -> str:
        name = (v or "").strip()
        if not name or len(name.split()) != 1:
            raise ValueError("must be a single class name")
        return name


class ParserConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    features: Literal["lxml", "html.parser"] = "lxml"
    encoding: str = "utf-8"


class FiltersConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    default_query: str = ""
    saved_queries: dict[str, str] = Field(default_factory=dict)

    @field_validator("default_query")
    @classmethod
    def _normalize_default(cls, v: str) -> str:
        return _normalize_query(v)

    @field_validator("saved_queries")
    @classmethod
    def _normalize_saved(cls, v: dict[str, str]) -> dict[str, str]:
        out: dict[str, str] = {}
        for name, query in v.items():
            key = (name or "").strip()
            if not _QUERY_NAME_RE.fullmatch(key):
                raise ValueError(f"invalid saved query name: {name!r}")
            out[key] = _normalize_query(query)
        return out


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    page: PageSelectors = Field(default_factory=PageSelectors)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    filters: FiltersConfig = Field(default_factory=FiltersConfig)

