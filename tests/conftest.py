"""
Shared fixtures for the preprocessor tests.
"""
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture
def write_script():
    """Write a file under a directory, creating parent directories, and return its path."""
    def _write(directory, relative_path, content):
        path = os.path.normpath(os.path.join(directory, relative_path))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w') as f:
            f.write(content)
        return path
    return _write
