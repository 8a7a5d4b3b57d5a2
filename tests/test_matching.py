"""Tests for filter rules and include/exclude matching."""

import re
import unittest

from dazzlewalk import (
    ConfigurationError,
    FilterRule,
    InvalidPatternError,
    MATCH_ALL,
    RuleKind,
    apply_filters,
    make_rule,
    matches,
)


class TestMakeRule(unittest.TestCase):
    """Test rule construction."""

    def test_none_matches_all(self):
        self.assertIs(make_rule(None), MATCH_ALL)
        self.assertTrue(MATCH_ALL.matches('anything'))

    def test_shapes(self):
        self.assertIs(make_rule('.py').kind, RuleKind.SUBSTRING)
        self.assertIs(make_rule(re.compile('x')).kind, RuleKind.REGEX)
        self.assertIs(make_rule(str.isupper).kind, RuleKind.PREDICATE)

    def test_existing_rule_passes_through(self):
        rule = make_rule('abc')
        self.assertIs(make_rule(rule), rule)

    def test_empty_string_rejected(self):
        with self.assertRaisesRegex(InvalidPatternError, 'empty string'):
            make_rule('')

    def test_unsupported_shapes_rejected(self):
        for spec in (42, ['a'], b'bytes', 3.0):
            with self.subTest(spec=spec):
                with self.assertRaises(InvalidPatternError):
                    make_rule(spec)

    def test_invalid_pattern_error_family(self):
        self.assertTrue(issubclass(InvalidPatternError, ConfigurationError))
        self.assertTrue(issubclass(InvalidPatternError, TypeError))


class TestMatches(unittest.TestCase):
    """Test single-rule matching against names."""

    def test_substring(self):
        self.assertTrue(matches('report.txt', 'port'))
        self.assertFalse(matches('report.txt', 'csv'))

    def test_regex_searches_anywhere(self):
        self.assertTrue(matches('test_walker.py', re.compile(r'walk')))
        self.assertTrue(matches('main.py', re.compile(r'\.py$')))
        self.assertFalse(matches('main.pyc', re.compile(r'\.py$')))

    def test_predicate_result_is_truthy(self):
        self.assertTrue(matches('abc', len))
        self.assertFalse(matches('', len))

    def test_invalid_rule_raises_on_evaluation(self):
        with self.assertRaises(InvalidPatternError):
            matches('name', 7)

    def test_rule_object(self):
        rule = FilterRule(RuleKind.SUBSTRING, 'log')
        self.assertTrue(rule.matches('app.log'))


class TestApplyFilters(unittest.TestCase):
    """Test combined include/exclude decisions."""

    def test_no_rules_pass_everything(self):
        self.assertTrue(apply_filters('x'))
        self.assertTrue(apply_filters('x', MATCH_ALL, MATCH_ALL))

    def test_include_only(self):
        include = make_rule('.py')
        self.assertTrue(apply_filters('a.py', include))
        self.assertFalse(apply_filters('a.txt', include))

    def test_exclude_only(self):
        exclude = make_rule('node_modules')
        self.assertFalse(apply_filters('node_modules', exclude=exclude))
        self.assertTrue(apply_filters('src', exclude=exclude))

    def test_exclude_wins_over_include(self):
        rule = make_rule('.py')
        self.assertFalse(apply_filters('a.py', include=rule, exclude=rule))
        self.assertFalse(apply_filters(
            'test_a.py', include=make_rule('.py'), exclude=make_rule('test_')
        ))

    def test_predicate_errors_propagate(self):
        def broken(name):
            raise ZeroDivisionError(name)

        with self.assertRaises(ZeroDivisionError):
            apply_filters('a', include=make_rule(broken))


if __name__ == '__main__':
    unittest.main()
