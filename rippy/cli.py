"""Command-line front door for rippy.

Parses CLI options (over persisted defaults) into a ``RippyConfig``, runs the
pipeline, writes the optional JSON export, then prints the tree and summary.
Fatal errors exit with status 1 before anything is printed to stdout.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO

from . import __version__
from .app import run
from .config import DEFAULT_INDENT, DEFAULT_WINDOW_RADIUS, PathMode, RippyConfig, load_persisted_defaults
from .errors import ExportIOError, FatalConfigurationError
from .export import write_export
from .filtering import split_pattern_list
from .render.tree import format_summary, write_tree
from .tree_model.sorting import SortKey, parse_sort_key
from .ui_theme import available_theme_names, resolve_theme

logger = logging.getLogger(__name__)


def _non_negative_int(value: str) -> int:
    """argparse type for integer values >= 0."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _sort_key(value: str) -> SortKey:
    try:
        return parse_sort_key(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rippy",
        description=(
            "Crawl a directory, optionally searching file contents for a pattern, "
            "and print the results as a pruned tree."
        ),
        epilog='For example, run `rippy ./` to display a tree of the current directory.',
    )
    parser.add_argument("directory", help="Root directory to crawl.")
    parser.add_argument("pattern", nargs="?", default=None, help="Pattern to search file contents for.")
    parser.add_argument("-a", "--all", dest="show_all", action="store_true", help="Include hidden files and directories.")
    parser.add_argument(
        "-b",
        "--sort-by",
        "--sort",
        dest="sort_by",
        type=_sort_key,
        default=None,
        metavar="KEY",
        help='Sort by "date", "name" (default), "size" or "type".',
    )
    parser.add_argument("-L", "--max-depth", type=_non_negative_int, default=None, metavar="DEPTH", help="Maximum directory depth to descend.")
    parser.add_argument(
        "-i",
        "--ignore",
        action="append",
        default=[],
        metavar="PAT1,...,PATN",
        help="Ignore names or paths matching these globs (repeatable).",
    )
    parser.add_argument(
        "-x",
        "--include",
        action="append",
        default=[],
        metavar="PAT1,...,PATN",
        help="Restrict files to names matching these globs (repeatable).",
    )
    parser.add_argument("-r", "--window-radius", type=_non_negative_int, default=None, metavar="RADIUS", help="Character radius of the match snippet window.")
    parser.add_argument("-m", "--max-files", type=_non_negative_int, default=None, metavar="FILES", help="Maximum files to display per directory.")
    parser.add_argument("-o", "--output", type=Path, default=None, metavar="FILENAME", help="Export the results as JSON to FILENAME.")
    parser.add_argument("-n", "--indent", type=_non_negative_int, default=None, metavar="WIDTH", help="Width of each tree depth indentation.")
    parser.add_argument("-c", "--case-insensitive", action="store_true", help="Case-insensitive pattern matching.")
    parser.add_argument("-F", "--fixed-strings", action="store_true", help="Treat PATTERN as a literal string.")
    parser.add_argument("-l", "--follow-links", action="store_true", help="Follow symbolic links to directories.")
    parser.add_argument("-p", "--relative-path", action="store_true", help="Display paths relative to the root.")
    parser.add_argument("-k", "--full-path", action="store_true", help="Display full absolute paths.")
    parser.add_argument("-z", "--reverse", action="store_true", help="Reverse the sort order.")
    parser.add_argument("-s", "--size", action="store_true", help="Display file sizes.")
    parser.add_argument("-d", "--date", action="store_true", help="Display last modified date and time.")
    parser.add_argument("-y", "--short-date", action="store_true", help="Display last modified date as YYYY-MM-DD.")
    parser.add_argument("-e", "--enumerate", action="store_true", help="Number entries within their parent.")
    parser.add_argument("-t", "--time", action="store_true", help="Display the elapsed run time.")
    parser.add_argument("-g", "--no-gitignore", "--no-ignore", action="store_true", help="Do not filter with .gitignore files.")
    parser.add_argument("-G", "--gray", "--grayscale", action="store_true", help="Display results without color.")
    parser.add_argument("-q", "--quote", action="store_true", help="Wrap displayed paths in double quotes.")
    parser.add_argument("-f", "--flat", action="store_true", help="Display a flat list without tree glyphs.")
    parser.add_argument("-u", "--dir-detail", action="store_true", help="Show size and date details for directories too.")
    parser.add_argument("-w", "--windowless", action="store_true", help="Show matches without snippet windows.")
    parser.add_argument("-j", "--just-counts", "--counts", action="store_true", help="Only print the summary counts.")
    parser.add_argument("--workers", type=_non_negative_int, default=None, help="Search worker threads (default: CPU count).")
    parser.add_argument("--theme", default=None, help=f"Color theme ({', '.join(available_theme_names())}).")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Report skipped entries (-vv for debug output).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(
    args: argparse.Namespace,
    persisted: dict[str, object] | None = None,
    stdout: TextIO | None = None,
) -> RippyConfig:
    """Merge parsed arguments over persisted defaults into a ``RippyConfig``."""
    defaults = persisted if persisted is not None else {}
    stream = stdout if stdout is not None else sys.stdout

    sort_key = args.sort_by
    if sort_key is None:
        try:
            sort_key = parse_sort_key(str(defaults.get("sort_by", SortKey.NAME.value)))
        except ValueError:
            sort_key = SortKey.NAME

    if args.full_path:
        path_mode = PathMode.FULL
    elif args.relative_path:
        path_mode = PathMode.RELATIVE
    else:
        path_mode = PathMode.NAME

    is_tty = bool(getattr(stream, "isatty", lambda: False)())
    directory = args.directory.replace("\\", "/")
    return RippyConfig(
        root=Path(directory),
        pattern=args.pattern,
        ignore_case=args.case_insensitive,
        fixed_strings=args.fixed_strings,
        max_depth=args.max_depth,
        show_all=args.show_all or bool(defaults.get("show_all", False)),
        sort_key=sort_key,
        reverse=args.reverse or bool(defaults.get("reverse", False)),
        ignore_patterns=split_pattern_list(args.ignore),
        include_patterns=split_pattern_list(args.include),
        use_ignore_files=not args.no_gitignore and bool(defaults.get("use_ignore_files", True)),
        follow_links=args.follow_links,
        max_files=args.max_files,
        window_radius=args.window_radius if args.window_radius is not None else int(defaults.get("window_radius", DEFAULT_WINDOW_RADIUS)),
        windowless=args.windowless,
        path_mode=path_mode,
        quote=args.quote,
        output=args.output,
        workers=args.workers or None,
        indent=args.indent if args.indent is not None else int(defaults.get("indent", DEFAULT_INDENT)),
        show_size=args.size,
        show_date=args.date or args.short_date,
        short_date=args.short_date,
        dir_detail=args.dir_detail,
        enumerate_entries=args.enumerate,
        flat=args.flat,
        show_elapsed=args.time,
        just_counts=args.just_counts,
        grayscale=args.gray or not is_tty,
        theme=args.theme if args.theme is not None else str(defaults.get("theme", "default")),
        verbosity=args.verbose,
    )


def configure_logging(verbosity: int) -> None:
    """Route diagnostics to stderr; ``-v`` shows skipped entries, ``-vv`` debug."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, run rippy, and print the tree and summary."""
    args = build_parser().parse_args(argv)
    config = config_from_args(args, load_persisted_defaults())
    configure_logging(config.verbosity)

    try:
        result = run(config)
    except FatalConfigurationError as exc:
        raise SystemExit(f"error: {exc}") from None

    theme = resolve_theme(config.theme, grayscale=config.grayscale)
    if config.output is not None:
        try:
            write_export(result.tree, config.output)
        except ExportIOError as exc:
            sys.stderr.write(f"error: {exc}\n")

    out = sys.stdout
    if not config.just_counts:
        write_tree(result.tree, config, out, theme)
        out.write("\n")
    out.write(format_summary(config, result.counts, result.stats, theme, result.elapsed_seconds) + "\n")
    out.flush()


if __name__ == "__main__":
    main()
