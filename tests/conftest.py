"""
Shared pytest fixtures for the dupsweep tests.

This file contains:
- PYTHONPATH setup (repo root)
- Logging reset per test
- File trees used by the tests
"""

import sys
from pathlib import Path

import pytest

# ==========================================
# PYTHONPATH Setup
# ==========================================

# Add repo root to PYTHONPATH (once for all tests)
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from dupsweep.config.logging import configure_logging  # noqa: E402
from tests.helpers.file_factory import write_file  # noqa: E402

# ==========================================
# Logging
# ==========================================


@pytest.fixture(autouse=True)
def fresh_logging(capsys):
    """Bind the package log handler to this test's captured stderr."""
    configure_logging()


# ==========================================
# File trees
# ==========================================


@pytest.fixture
def scenario_tree(tmp_path):
    """
    a.txt unique, b.txt / b2.txt / b3.txt identical copies.

    Files are small (< 1 KB) so a 10M floor excludes everything.
    """
    root = tmp_path / "tree"
    write_file(root / "a.txt", b"unique content of a\n" * 4)
    for name in ("b.txt", "b2.txt", "b3.txt"):
        write_file(root / name, b"shared content of b\n" * 4)
    return root


@pytest.fixture
def nested_tree(tmp_path):
    """Duplicates spread over subdirectories."""
    root = tmp_path / "nested"
    write_file(root / "top.bin", b"payload" * 50)
    write_file(root / "sub" / "copy.bin", b"payload" * 50)
    write_file(root / "sub" / "deeper" / "copy2.bin", b"payload" * 50)
    write_file(root / "sub" / "other.bin", b"something else" * 10)
    return root
