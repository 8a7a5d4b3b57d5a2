"""Shell-glob support for DazzleWalk filters.

Supports ``*``, ``**``, ``?``, ``[...]`` (with ``!`` negation) and
``{a,b,c}`` alternation. Globs compile to anchored regular expressions that
can be used directly as filter rules, or matched against relative paths
with match_glob().
"""

import re
from typing import Callable, Iterable, Optional, Pattern, Tuple, Union

from cachetools import LRUCache, cached

from .matching import FilterRule, RuleKind

GlobPatterns = Union[str, Iterable[str]]

_WILDCARD = re.compile(r'[*?\[\]{]')


def _as_tuple(patterns: Optional[GlobPatterns]) -> Tuple[str, ...]:
    if not patterns:
        return ()
    if isinstance(patterns, str):
        return (patterns,)
    return tuple(patterns)


def _translate_class(body: str) -> str:
    """Translate the inside of a ``[...]`` class to regex syntax."""
    negate = body.startswith('!')
    if negate:
        body = body[1:]

    if not body:
        # "[]" can never match; "[!]" matches any single character
        return r'[\s\S]' if negate else '(?!)'

    escaped = ''.join('\\' + ch if ch in '\\[]^&~|' else ch for ch in body)
    return '[' + ('^' if negate else '') + escaped + ']'


def _translate(pattern: str) -> str:
    parts = ['^']
    i = 0
    length = len(pattern)

    while i < length:
        char = pattern[i]

        if char == '*':
            if pattern[i + 1:i + 2] == '*':
                if pattern[i + 2:i + 3] == '/':
                    # "**/" matches zero or more leading segments
                    parts.append('(?:.*/)?')
                    i += 3
                else:
                    parts.append('.*')
                    i += 2
            else:
                parts.append('[^/]*')
                i += 1

        elif char == '?':
            parts.append('[^/]')
            i += 1

        elif char == '[':
            close = pattern.find(']', i + 1)
            if close == -1:
                parts.append(re.escape(char))
                i += 1
            else:
                parts.append(_translate_class(pattern[i + 1:close]))
                i = close + 1

        elif char == '{':
            close = pattern.find('}', i + 1)
            if close == -1:
                parts.append(re.escape(char))
                i += 1
            else:
                options = pattern[i + 1:close].split(',')
                parts.append('(?:' + '|'.join(re.escape(opt) for opt in options) + ')')
                i = close + 1

        else:
            parts.append(re.escape(char))
            i += 1

    parts.append(r'\Z')
    return ''.join(parts)


@cached(cache=LRUCache(maxsize=512))
def glob_to_regex(pattern: str, nocase: bool = False) -> Pattern:
    """Convert a glob pattern to an anchored regular expression.

    Compiled expressions are memoized, so repeated matching against the
    same glob does not recompile.

    Args:
        pattern: Glob pattern using ``/`` as separator
        nocase: Compile case-insensitively

    Returns:
        Compiled regex that must match the whole string
    """
    return re.compile(_translate(pattern), re.IGNORECASE if nocase else 0)


def compile_glob(pattern: str, nocase: bool = False) -> FilterRule:
    """Compile a glob into a filter rule usable as include/exclude.

    Args:
        pattern: Glob pattern
        nocase: Compile case-insensitively

    Returns:
        A REGEX FilterRule anchored to the full name
    """
    return FilterRule(RuleKind.REGEX, glob_to_regex(pattern, nocase))


def match_glob(
    path: str,
    patterns: GlobPatterns,
    dot: bool = False,
    nocase: bool = False,
    match_base: bool = False
) -> bool:
    """Match a path against one or more glob patterns.

    When a pattern has no separator but contains wildcards, and the path
    does contain a separator, only the basename is compared. This keeps
    ``"*.js"`` matching ``"src/app.js"``.

    Args:
        path: Path to test; backslashes are treated as separators
        patterns: A glob or an iterable of globs (any match wins)
        dot: Allow basenames starting with a dot to match
        nocase: Case-insensitive comparison
        match_base: Always compare against the basename only

    Returns:
        True if any pattern matches
    """
    normalized = str(path).replace('\\', '/')
    patterns = _as_tuple(patterns)

    basename = normalized.rsplit('/', 1)[-1]
    if not dot and basename.startswith('.'):
        return False

    for pattern in patterns:
        normalized_pattern = pattern.replace('\\', '/')
        regex = glob_to_regex(normalized_pattern, nocase)

        target = normalized
        if match_base:
            target = basename
        elif ('/' not in normalized_pattern and '/' in normalized
              and _WILDCARD.search(normalized_pattern)):
            target = basename

        if target and regex.match(target):
            return True

    return False


def create_glob_filter(
    include: Optional[GlobPatterns] = None,
    exclude: Optional[GlobPatterns] = None,
    dot: bool = False,
    nocase: bool = False,
    match_base: bool = False
) -> Callable[[str], bool]:
    """Create a path predicate from include/exclude globs.

    Exclusion is checked first; an excluded path never matches. Without
    include patterns every non-excluded path matches.

    Returns:
        Callable taking a path and returning True if it passes
    """
    options = {'dot': dot, 'nocase': nocase, 'match_base': match_base}
    include = _as_tuple(include)
    exclude = _as_tuple(exclude)

    def glob_filter(path: str) -> bool:
        if exclude and match_glob(path, exclude, **options):
            return False
        if include:
            return match_glob(path, include, **options)
        return True

    return glob_filter


PATTERNS = {
    'python': ('**/*.py', '**/*.pyi'),
    'javascript': ('**/*.js', '**/*.mjs', '**/*.cjs'),
    'typescript': ('**/*.ts', '**/*.tsx'),
    'web': ('**/*.{js,ts,jsx,tsx,css,html}',),
    'images': ('**/*.{jpg,jpeg,png,gif,svg,webp}',),
    'documents': ('**/*.{pdf,doc,docx,txt,md}',),
    'node_modules': ('**/node_modules/**',),
    'dotfiles': ('**/.*',),
    'tests': ('**/test_*.py', '**/*_test.py', '**/*.test.{js,ts}', '**/*.spec.{js,ts}'),
}
