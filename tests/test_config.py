"""Tests for configuration validation."""

import pytest

from bigfind.config import DEFAULT_MIN_SIZE, Config
from bigfind.filters import FilterCriteria, Mode


def test_defaults():
    config = Config()

    assert config.paths == ["."]
    assert config.max_depth is None
    assert config.min_size == DEFAULT_MIN_SIZE == 100 * 1024 * 1024
    assert config.limit is None
    assert config.mode is Mode.FILE


def test_validate_builds_criteria(sample_tree):
    config = Config(
        paths=[str(sample_tree)],
        min_size=10,
        pattern="file",
        min_age=1,
        max_age=2,
        same_filesystem=True,
        mode=Mode.DIRECTORY,
    )

    criteria = config.validate()

    assert isinstance(criteria, FilterCriteria)
    assert criteria.min_size == 10
    assert criteria.pattern.search("file0")
    assert criteria.same_filesystem
    assert criteria.mode is Mode.DIRECTORY


def test_missing_root(temp_dir):
    with pytest.raises(FileNotFoundError):
        Config(paths=[str(temp_dir / "missing")]).validate()


def test_root_is_a_file(sample_tree):
    with pytest.raises(NotADirectoryError):
        Config(paths=[str(sample_tree / "file0")]).validate()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"paths": []},
        {"max_depth": -1},
        {"limit": 0},
        {"min_size": -5},
        {"pattern": "["},
        {"min_age": -1},
    ],
)
def test_invalid_values(sample_tree, kwargs):
    kwargs.setdefault("paths", [str(sample_tree)])
    with pytest.raises(ValueError):
        Config(**kwargs).validate()


def test_nested_roots(sample_tree):
    config = Config(paths=[str(sample_tree), str(sample_tree / "sub_dir")])

    assert config.nested_roots() == [(str(sample_tree), str(sample_tree / "sub_dir"))]


def test_duplicate_roots_reported_once(sample_tree):
    config = Config(paths=[str(sample_tree), str(sample_tree)])

    assert config.nested_roots() == [(str(sample_tree), str(sample_tree))]


def test_symlinked_root_overlaps_its_target(sample_tree, temp_dir):
    link = temp_dir / "link"
    link.symlink_to(sample_tree / "sub_dir")

    config = Config(paths=[str(sample_tree), str(link)])

    assert config.nested_roots() == [(str(sample_tree), str(sample_tree / "sub_dir"))]


def test_sibling_roots_with_common_prefix_do_not_overlap(temp_dir):
    (temp_dir / "data").mkdir()
    (temp_dir / "data2").mkdir()

    config = Config(paths=[str(temp_dir / "data"), str(temp_dir / "data2")])

    assert config.nested_roots() == []
