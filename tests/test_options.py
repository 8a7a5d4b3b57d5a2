"""Tests for option sanitizing and TraversalConfig."""

import math
import re
import unittest

from dazzlewalk import (
    CancellationToken,
    ConfigurationError,
    DEFAULT_OPTIONS,
    InvalidPatternError,
    MATCH_ALL,
    RuleKind,
    SortMode,
    TraversalConfig,
    sanitize_options,
)


class TestDefaults(unittest.TestCase):
    """Test the default configuration."""

    def test_no_options_gives_defaults(self):
        config = sanitize_options()
        self.assertIsNone(config.max_depth)
        self.assertIs(config.include, MATCH_ALL)
        self.assertIs(config.exclude, MATCH_ALL)
        self.assertFalse(config.yield_directories)
        self.assertFalse(config.follow_symlinks)
        self.assertTrue(config.suppress_errors)
        self.assertIsNone(config.cancellation_token)
        self.assertIs(config.sort, SortMode.NONE)
        self.assertIsNone(config.comparator)
        self.assertIsNone(config.on_progress)
        self.assertFalse(config.with_stats)

    def test_empty_mapping_equals_defaults(self):
        self.assertEqual(sanitize_options({}), sanitize_options())

    def test_default_options_are_read_only(self):
        with self.assertRaises(TypeError):
            DEFAULT_OPTIONS['max_depth'] = 3
        self.assertEqual(DEFAULT_OPTIONS['max_depth'], math.inf)

    def test_direct_config_matches_sanitized_defaults(self):
        self.assertEqual(TraversalConfig(), sanitize_options())


class TestMaxDepth(unittest.TestCase):
    """Test max_depth validation."""

    def test_unbounded_spellings(self):
        for value in (None, math.inf, 'unbounded'):
            with self.subTest(value=value):
                self.assertIsNone(sanitize_options(max_depth=value).max_depth)

    def test_non_negative_integers(self):
        self.assertEqual(sanitize_options(max_depth=0).max_depth, 0)
        self.assertEqual(sanitize_options(max_depth=7).max_depth, 7)

    def test_invalid_values(self):
        for value in (-1, 1.5, -math.inf, 'deep', True, [2]):
            with self.subTest(value=value):
                with self.assertRaises(ConfigurationError):
                    sanitize_options(max_depth=value)

    def test_allows_depth(self):
        config = sanitize_options(max_depth=1)
        self.assertTrue(config.allows_depth(0))
        self.assertTrue(config.allows_depth(1))
        self.assertFalse(config.allows_depth(2))
        self.assertTrue(sanitize_options().allows_depth(10_000))


class TestSort(unittest.TestCase):
    """Test sort validation."""

    def test_named_modes(self):
        self.assertIs(sanitize_options(sort='asc').sort, SortMode.ASC)
        self.assertIs(sanitize_options(sort='desc').sort, SortMode.DESC)
        self.assertIs(sanitize_options(sort='none').sort, SortMode.NONE)
        self.assertIs(sanitize_options(sort=SortMode.DESC).sort, SortMode.DESC)

    def test_comparator_sets_custom(self):
        def by_length(a, b):
            return len(a.name) - len(b.name)

        config = sanitize_options(sort=by_length)
        self.assertIs(config.sort, SortMode.CUSTOM)
        self.assertIs(config.comparator, by_length)

    def test_invalid_sort(self):
        for value in ('sideways', 'custom', SortMode.CUSTOM, 42):
            with self.subTest(value=value):
                with self.assertRaises(ConfigurationError):
                    sanitize_options(sort=value)


class TestValidation(unittest.TestCase):
    """Test rejection of malformed options."""

    def test_unknown_option(self):
        with self.assertRaisesRegex(ConfigurationError, 'maxdepth'):
            sanitize_options({'maxdepth': 2})
        with self.assertRaises(ConfigurationError):
            sanitize_options(recursive=True)

    def test_options_must_be_mapping(self):
        with self.assertRaises(ConfigurationError):
            sanitize_options(['max_depth', 2])

    def test_empty_include_is_rejected(self):
        with self.assertRaises(InvalidPatternError):
            sanitize_options(include='')
        with self.assertRaises(ConfigurationError):
            sanitize_options(exclude='')

    def test_unsupported_rule_shape(self):
        with self.assertRaises(InvalidPatternError):
            sanitize_options(include=42)

    def test_cancellation_token_type(self):
        with self.assertRaises(ConfigurationError):
            sanitize_options(cancellation_token=True)
        token = CancellationToken()
        self.assertIs(sanitize_options(cancellation_token=token).cancellation_token, token)

    def test_booleans_must_be_bool(self):
        for name in ('yield_directories', 'follow_symlinks', 'suppress_errors', 'with_stats'):
            with self.subTest(option=name):
                with self.assertRaises(ConfigurationError):
                    sanitize_options(**{name: 1})

    def test_on_progress_must_be_callable(self):
        with self.assertRaises(ConfigurationError):
            sanitize_options(on_progress='print')

    def test_rules_are_built(self):
        pattern = re.compile(r'\.py$')
        config = sanitize_options(include=pattern, exclude='test_')
        self.assertIs(config.include.kind, RuleKind.REGEX)
        self.assertIs(config.include.value, pattern)
        self.assertIs(config.exclude.kind, RuleKind.SUBSTRING)


class TestMerging(unittest.TestCase):
    """Test how options, overrides and configs combine."""

    def test_overrides_win_over_mapping(self):
        config = sanitize_options({'max_depth': 1, 'sort': 'asc'}, max_depth=3)
        self.assertEqual(config.max_depth, 3)
        self.assertIs(config.sort, SortMode.ASC)

    def test_config_passes_through(self):
        config = sanitize_options(max_depth=2)
        self.assertIs(sanitize_options(config), config)

    def test_config_with_overrides(self):
        def newest_first(a, b):
            return 0

        config = sanitize_options(max_depth=2, include='.py', sort=newest_first)
        updated = sanitize_options(config, with_stats=True)
        self.assertTrue(updated.with_stats)
        self.assertEqual(updated.max_depth, 2)
        self.assertEqual(updated.include, config.include)
        self.assertIs(updated.comparator, newest_first)
        self.assertFalse(config.with_stats)

    def test_to_options_round_trip(self):
        config = sanitize_options(max_depth=4, exclude='.git', sort='desc')
        self.assertEqual(sanitize_options(config.to_options()), config)


if __name__ == '__main__':
    unittest.main()
