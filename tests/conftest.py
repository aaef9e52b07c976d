"""Pytest configuration to ensure tests use local source code."""

import logging
import sys
import tempfile
from pathlib import Path

import pytest

# Add src directory to Python path to ensure tests use local source code
# instead of installed package
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def sample_tree(temp_dir):
    """
    Small tree used by most scan tests.

        root/
            file0             1 byte
            sub_dir/
                file1        81 bytes
                file2       100 bytes
    """
    (temp_dir / "file0").write_bytes(b"x")
    sub_dir = temp_dir / "sub_dir"
    sub_dir.mkdir()
    (sub_dir / "file1").write_bytes(b"x" * 81)
    (sub_dir / "file2").write_bytes(b"x" * 100)
    return temp_dir


@pytest.fixture(autouse=True)
def fresh_logger_handlers():
    """Drop handlers bound to streams of earlier tests."""
    logger = logging.getLogger("bigfind")
    logger.handlers.clear()
    yield
    logger.handlers.clear()
