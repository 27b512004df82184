from __future__ import annotations

import argparse
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import ContextManager, Sequence

from .config import config_sha256, load_config, resolve_query
from .errors import ConfigError, PageError
from .page import HtmlPage
from .post import Post, TagCategory
from .registry import PostRegistry
from .run_log import RunLogger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="e6_posts")

    subparsers = parser.add_subparsers(dest="command", required=True)

    flt = subparsers.add_parser(
        "filter",
        help="Match the posts of a saved page against a tag query.",
    )
    flt.add_argument("--html", required=True, help="Path to a saved posts page.")
    flt.add_argument("--config", help="Path to YAML config file.")
    which = flt.add_mutually_exclusive_group()
    which.add_argument("--query", help="Tag query, e.g. 'fox -suggestive'.")
    which.add_argument("--saved", help="Name of a saved query from the config.")
    flt.add_argument("--log", help="Write a JSON-lines event log to this path.")
    flt.add_argument(
        "--write-html",
        help="Write the page with non-matching posts marked hidden.",
    )
    flt.set_defaults(_handler=_cmd_filter)

    show = subparsers.add_parser(
        "show",
        help="Print the posts found on a saved page.",
    )
    show.add_argument("--html", required=True, help="Path to a saved page.")
    show.add_argument("--config", help="Path to YAML config file.")
    show.set_defaults(_handler=_cmd_show)

    return parser


def _eprint(message: str) -> None:
    print(message, file=sys.stderr)


def _open_log(path: str | None) -> ContextManager[RunLogger | None]:
    if not path:
        return nullcontext(None)
    return RunLogger.open(path, overwrite=True)


def _cmd_filter(args: argparse.Namespace) -> int:
    with _open_log(args.log) as log:
        if log is not None:
            log.info("filter_command_started", html=str(args.html), config=args.config)

        try:
            cfg = load_config(args.config)
            query = resolve_query(cfg, query=args.query, saved=args.saved)
            page = HtmlPage.from_path(args.html, cfg)

            if log is not None:
                log.info("config_loaded", config_sha256=config_sha256(cfg), query=query)

            registry = PostRegistry(page, selectors=cfg.page, logger=log)
            posts = registry.fetch_posts()
            registry.apply_filter(query)
            matched = [p.id for p in posts if p.is_visible()]

            if args.write_html:
                out = Path(args.write_html)
                out.parent.mkdir(parents=True, exist_ok=True)
                out.write_text(page.html(), encoding="utf-8")
                if log is not None:
                    log.info("html_written", path=str(out))

            print(f"query={query}")
            print(f"posts={len(posts)}")
            print(f"matched={len(matched)}")
            print(f"matched_ids={','.join(str(i) for i in matched)}")
            return 0
        except Exception as e:
            if log is not None:
                log.exception("filter_command_failed", exc=e)
            raise


def _print_post(post: Post) -> None:
    rating = post.rating.name.lower() if post.rating is not None else "unknown"
    print(f"id={post.id}")
    print(f"kind={post.kind.value}")
    print(f"rating={rating}")
    print(f"score={'' if post.score is None else post.score}")
    print(f"favorites={'' if post.favorites is None else post.favorites}")
    print(f"file_extension={post.file_extension}")
    print(f"tags={post.tags}")

    if post.viewing is None:
        return

    print(f"is_faved={str(post.viewing.is_faved).lower()}")
    print(f"is_upvoted={str(post.viewing.is_upvoted).lower()}")
    print(f"is_downvoted={str(post.viewing.is_downvoted).lower()}")
    for category in TagCategory:
        print(f"{category.value}_tags={' '.join(post.tags_from_type(category))}")


def _cmd_show(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    page = HtmlPage.from_path(args.html, cfg)
    posts = PostRegistry(page, selectors=cfg.page).fetch_posts()

    print(f"posts={len(posts)}")
    for post in posts:
        print("---")
        _print_post(post)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        handler = getattr(args, "_handler")
        return int(handler(args))
    except ConfigError as e:
        _eprint(str(e))
        return 2
    except PageError as e:
        _eprint(str(e))
        return 3
    except KeyboardInterrupt:
        _eprint("Interrupted")
        return 130
    except Exception as e:
        _eprint(f"Unexpected error: {e}")
        return 1
