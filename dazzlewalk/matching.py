"""Filter rules for include/exclude matching.

A filter rule is one of four shapes: absent (match everything), a literal
substring, a compiled regular expression, or a predicate called with the
entry name. Rules are built only through make_rule(), which rejects any
other shape so that a bad filter fails loudly instead of matching all.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Pattern, Union

from .errors import InvalidPatternError


class RuleKind(Enum):
    """Shape of a filter rule."""
    ABSENT = "absent"
    SUBSTRING = "substring"
    REGEX = "regex"
    PREDICATE = "predicate"


@dataclass(frozen=True)
class FilterRule:
    """Validated filter rule. Build with make_rule()."""

    kind: RuleKind
    value: Any = None

    def matches(self, name: str) -> bool:
        """Check a name against this rule.

        Args:
            name: Entry name (not the full path)

        Returns:
            True if the name matches
        """
        if self.kind is RuleKind.ABSENT:
            return True
        if self.kind is RuleKind.SUBSTRING:
            return self.value in name
        if self.kind is RuleKind.REGEX:
            return self.value.search(name) is not None
        return bool(self.value(name))


RuleSpec = Union[None, str, Pattern, Callable[[str], Any], FilterRule]

MATCH_ALL = FilterRule(RuleKind.ABSENT)


def make_rule(spec: RuleSpec) -> FilterRule:
    """Build a FilterRule from a user-supplied rule.

    Args:
        spec: None, a non-empty string, a compiled regex, a callable,
              or an existing FilterRule

    Returns:
        The validated rule

    Raises:
        InvalidPatternError: If the rule is an empty string or has any
            other unsupported shape
    """
    if spec is None:
        return MATCH_ALL
    if isinstance(spec, FilterRule):
        return spec
    if isinstance(spec, re.Pattern):
        return FilterRule(RuleKind.REGEX, spec)
    if isinstance(spec, str):
        if spec == '':
            raise InvalidPatternError(
                'Pattern cannot be an empty string (use None for "match all")'
            )
        return FilterRule(RuleKind.SUBSTRING, spec)
    if callable(spec):
        return FilterRule(RuleKind.PREDICATE, spec)

    raise InvalidPatternError(
        "Pattern must be a string, compiled regex, callable, or None. "
        f"Got: {type(spec).__name__}"
    )


def matches(name: str, rule: RuleSpec) -> bool:
    """Check if a name matches a rule.

    Args:
        name: Entry name (not the full path)
        rule: Filter rule or anything make_rule() accepts

    Returns:
        True if the name matches
    """
    return make_rule(rule).matches(name)


def apply_filters(
    name: str,
    include: Optional[FilterRule] = None,
    exclude: Optional[FilterRule] = None
) -> bool:
    """Apply include/exclude rules to a name.

    Exclusion is checked first and always wins.

    Args:
        name: Entry name
        include: Rule the name must match (None means match all)
        exclude: Rule the name must not match (None means exclude nothing)

    Returns:
        True if the name passes both rules
    """
    if exclude is not None and exclude.kind is not RuleKind.ABSENT and exclude.matches(name):
        return False
    if include is not None and not include.matches(name):
        return False
    return True
