from __future__ import annotations

from .config import load_config, resolve_query
from .config_schema import AppConfig
from .errors import ConfigError, PageError
from .page import HtmlPage, PostElement, PostPage
from .post import Post, PostKind, PostRating, TagCategory, ViewingDetails
from .query import FilterEvaluator, tags_match_filter
from .registry import PostRegistry
from .tag_matcher import TagMatcher

__all__ = [
    "AppConfig",
    "ConfigError",
    "FilterEvaluator",
    "HtmlPage",
    "PageError",
    "Post",
    "PostElement",
    "PostKind",
    "PostPage",
    "PostRating",
    "PostRegistry",
    "TagCategory",
    "TagMatcher",
    "ViewingDetails",
    "load_config",
    "resolve_query",
    "tags_match_filter",
]
