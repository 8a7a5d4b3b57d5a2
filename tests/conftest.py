"""Shared fixtures for the DazzleWalk test suite."""

import pytest

from dazzlewalk.testing import make_tree


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: builds large trees; skipped by run_tests.py")


SAMPLE_LAYOUT = {
    'a.txt': 'alpha',
    'b.py': 'print("beta")\n',
    'empty': {},
    'sub': {
        'c.txt': 'gamma gamma',
        'deep': {
            'd.py': 'import os\n',
        },
    },
}


@pytest.fixture
def sample_tree(tmp_path):
    """Small tree with files at three depths and one empty directory."""
    return make_tree(tmp_path / 'root', SAMPLE_LAYOUT)
