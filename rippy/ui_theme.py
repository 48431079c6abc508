"""Tree palettes and selection helpers.

A palette maps semantic roles (root, directory, match, ...) to ANSI color
prefixes. ``None`` means "no color"; the grayscale palette is all ``None``
and is forced whenever output is not a terminal.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the tree renderer and summary line."""

    name: str
    root: str | None
    directory: str | None
    executable: str | None
    file: str | None
    symlink: str | None
    detail: str | None
    match: str | None
    searched: str | None
    zero: str | None
    muted: str | None
    error: str | None
    bold: bool = True


DEFAULT_THEME = UITheme(
    name="default",
    root="\033[38;5;220m",
    directory="\033[38;5;80m",
    executable="\033[38;5;211m",
    file=None,
    symlink="\033[38;5;147m",
    detail="\033[38;5;248m",
    match="\033[38;5;42m",
    searched="\033[38;5;220m",
    zero="\033[38;5;220m",
    muted="\033[38;5;244m",
    error="\033[38;5;203m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    root="\033[38;5;45m",
    directory="\033[38;5;39m",
    executable="\033[38;5;176m",
    file="\033[38;5;252m",
    symlink="\033[38;5;117m",
    detail="\033[38;5;109m",
    match="\033[38;5;48m",
    searched="\033[38;5;153m",
    zero="\033[38;5;153m",
    muted="\033[38;5;110m",
    error="\033[38;5;203m",
)

GRAYSCALE_THEME = UITheme(
    name="grayscale",
    root=None,
    directory=None,
    executable=None,
    file=None,
    symlink=None,
    detail=None,
    match=None,
    searched=None,
    zero=None,
    muted=None,
    error=None,
    bold=False,
)

_THEMES: dict[str, UITheme] = {
    theme.name: theme for theme in (DEFAULT_THEME, OCEAN_THEME, GRAYSCALE_THEME)
}


def available_theme_names() -> tuple[str, ...]:
    """Return registered palette names in stable order."""
    return tuple(_THEMES.keys())


def resolve_theme(name: str | None, grayscale: bool = False) -> UITheme:
    """Return the named palette, falling back to default for unknown names."""
    if grayscale:
        return GRAYSCALE_THEME
    if not name:
        return DEFAULT_THEME
    return _THEMES.get(name.strip().lower(), DEFAULT_THEME)
