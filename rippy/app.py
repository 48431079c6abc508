"""One invocation of the walk → search → prune → aggregate → sort pipeline.

Everything is scoped to the ``run`` call: no state survives between runs.
Fatal configuration errors (bad pattern, unreadable root) are raised before
any traversal or scanning output exists.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from .config import RippyConfig
from .errors import RecoverableEntryError
from .filtering import FilterEngine
from .search.content import SearchEngine, SearchStats, compile_pattern
from .tree_model.build import aggregate, cap_files, count_tree, drop_empty_directories, iter_file_entries, prune
from .tree_model.sorting import sort_tree
from .tree_model.types import Entry, TreeCounts
from .tree_model.walk import Walker

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Finished tree plus everything renderers need to report on it."""

    tree: Entry
    counts: TreeCounts
    stats: SearchStats | None = None
    errors: list[RecoverableEntryError] = field(default_factory=list)
    elapsed_seconds: float = 0.0


def run(config: RippyConfig) -> RunResult:
    """Build the sorted, filtered (and, when searching, pruned) result tree."""
    started = time.perf_counter()
    pattern = None
    if config.pattern is not None:
        pattern = compile_pattern(
            config.pattern,
            ignore_case=config.ignore_case,
            fixed_strings=config.fixed_strings,
        )

    walker = Walker(config, FilterEngine(config))
    tree = walker.walk()
    errors = list(walker.errors)

    stats: SearchStats | None = None
    if pattern is not None:
        engine = SearchEngine(config)
        stats = engine.search(list(iter_file_entries(tree)), pattern)
        errors.extend(engine.errors)
        prune(tree)
    elif config.include_patterns:
        drop_empty_directories(tree)

    aggregate(tree)
    sort_tree(tree, config.sort_key, config.reverse)
    if config.max_files is not None:
        cap_files(tree, config.max_files)
        aggregate(tree)
        sort_tree(tree, config.sort_key, config.reverse)

    counts = count_tree(tree)
    if errors:
        logger.info("%d entries skipped", len(errors))
    return RunResult(
        tree=tree,
        counts=counts,
        stats=stats,
        errors=errors,
        elapsed_seconds=time.perf_counter() - started,
    )
