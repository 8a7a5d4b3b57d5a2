"""Configuration system for DazzleWalk.

This module defines how users specify their traversal requirements:
depth limit, filters, symlink and error policy, ordering, and metadata
collection. All validation happens here, once, so the walker can assume
a well-formed TraversalConfig.
"""

import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from .cancellation import CancellationToken
from .errors import ConfigurationError
from .matching import MATCH_ALL, FilterRule, make_rule


class SortMode(Enum):
    """How siblings are ordered within one directory."""
    NONE = "none"        # Filesystem order, streamed
    ASC = "asc"          # Locale-aware ascending by name
    DESC = "desc"        # Locale-aware descending by name
    CUSTOM = "custom"    # Caller-supplied comparator


@dataclass(frozen=True)
class TraversalConfig:
    """Complete, validated configuration for one traversal.

    Build with sanitize_options(); constructing directly skips validation.
    """

    max_depth: Optional[int] = None              # None means unbounded
    include: FilterRule = MATCH_ALL
    exclude: FilterRule = MATCH_ALL
    yield_directories: bool = False
    follow_symlinks: bool = False
    suppress_errors: bool = True                 # Skip permission-denied subtrees
    cancellation_token: Optional[CancellationToken] = None
    sort: SortMode = SortMode.NONE
    comparator: Optional[Callable[[Any, Any], int]] = None   # Only for SortMode.CUSTOM
    on_progress: Optional[Callable[[Any], None]] = None
    with_stats: bool = False

    def allows_depth(self, depth: int) -> bool:
        """Check if a directory frame at this depth may be opened.

        Args:
            depth: Frame depth (root is 0)

        Returns:
            True if within the configured limit
        """
        return self.max_depth is None or depth <= self.max_depth

    def to_options(self) -> dict:
        """Return the user-facing option mapping for this config."""
        return {
            'max_depth': self.max_depth,
            'include': self.include,
            'exclude': self.exclude,
            'yield_directories': self.yield_directories,
            'follow_symlinks': self.follow_symlinks,
            'suppress_errors': self.suppress_errors,
            'cancellation_token': self.cancellation_token,
            'sort': self.comparator if self.sort is SortMode.CUSTOM else self.sort,
            'on_progress': self.on_progress,
            'with_stats': self.with_stats,
        }


DEFAULT_OPTIONS: Mapping[str, Any] = MappingProxyType({
    'max_depth': math.inf,       # How deep to recurse (or "unbounded")
    'include': None,             # Rule to include (str, regex, callable)
    'exclude': None,             # Rule to exclude (str, regex, callable)
    'yield_directories': False,  # Yield directory entries too
    'follow_symlinks': False,    # Follow symlinked directories (cycle-safe)
    'suppress_errors': True,     # Skip permission-denied subtrees
    'cancellation_token': None,  # CancellationToken to stop the walk
    'sort': None,                # None, 'asc', 'desc', or a comparator
    'on_progress': None,         # Called with each yielded entry
    'with_stats': False,         # Attach os.stat_result to entries
})

_BOOLEAN_OPTIONS = ('yield_directories', 'follow_symlinks', 'suppress_errors', 'with_stats')


def _validate_max_depth(value: Any) -> Optional[int]:
    if value is None or value == 'unbounded':
        return None
    if isinstance(value, bool):
        raise ConfigurationError("max_depth must be a non-negative integer or math.inf")
    if isinstance(value, float):
        if value == math.inf:
            return None
        raise ConfigurationError(
            f"max_depth must be a non-negative integer or math.inf, got {value!r}"
        )
    if not isinstance(value, int) or value < 0:
        raise ConfigurationError("max_depth must be a non-negative integer or math.inf")
    return value


def _validate_sort(value: Any):
    if value is None:
        return SortMode.NONE, None
    if isinstance(value, SortMode):
        if value is SortMode.CUSTOM:
            raise ConfigurationError("SortMode.CUSTOM requires passing the comparator as sort")
        return value, None
    if isinstance(value, str):
        try:
            mode = SortMode(value)
        except ValueError:
            mode = None
        if mode is None or mode is SortMode.CUSTOM:
            raise ConfigurationError("sort must be 'asc', 'desc', 'none', a comparator, or None")
        return mode, None
    if callable(value):
        return SortMode.CUSTOM, value
    raise ConfigurationError("sort must be 'asc', 'desc', 'none', a comparator, or None")


def sanitize_options(options: Optional[Any] = None, **overrides: Any) -> TraversalConfig:
    """Merge user options with defaults and validate them.

    Args:
        options: Mapping of options, an existing TraversalConfig, or None
        **overrides: Individual options, applied on top of ``options``

    Returns:
        A fully populated TraversalConfig

    Raises:
        ConfigurationError: If any option is unknown or invalid
    """
    if isinstance(options, TraversalConfig):
        if not overrides:
            return options
        options = options.to_options()
    elif options is not None and not isinstance(options, Mapping):
        raise ConfigurationError(
            f"options must be a mapping or TraversalConfig, got {type(options).__name__}"
        )

    merged = dict(DEFAULT_OPTIONS)
    for source in (options or {}, overrides):
        unknown = set(source) - set(DEFAULT_OPTIONS)
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(sorted(unknown))}")
        merged.update(source)

    max_depth = _validate_max_depth(merged['max_depth'])
    sort, comparator = _validate_sort(merged['sort'])

    token = merged['cancellation_token']
    if token is not None and not isinstance(token, CancellationToken):
        raise ConfigurationError("cancellation_token must be a CancellationToken or None")

    for name in _BOOLEAN_OPTIONS:
        if not isinstance(merged[name], bool):
            raise ConfigurationError(f"{name} must be a boolean")

    on_progress = merged['on_progress']
    if on_progress is not None and not callable(on_progress):
        raise ConfigurationError("on_progress must be callable or None")

    return TraversalConfig(
        max_depth=max_depth,
        include=make_rule(merged['include']),
        exclude=make_rule(merged['exclude']),
        yield_directories=merged['yield_directories'],
        follow_symlinks=merged['follow_symlinks'],
        suppress_errors=merged['suppress_errors'],
        cancellation_token=token,
        sort=sort,
        comparator=comparator,
        on_progress=on_progress,
        with_stats=merged['with_stats'],
    )

