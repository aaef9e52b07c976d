"""Tests for entity resolution."""

import os

import pytest

from bigfind.entity import (
    EntityNotFound,
    FsEntity,
    FsKind,
    MetadataUnavailable,
    canonicalize,
    resolve,
    resolve_canonical,
    resolve_root,
)


@pytest.mark.asyncio
async def test_resolve_file(sample_tree):
    entity = await resolve(sample_tree / "sub_dir" / "file1")

    assert entity.kind is FsKind.FILE
    assert entity.is_file
    assert entity.size == 81
    assert entity.path == str(sample_tree / "sub_dir" / "file1")
    assert entity.name == "file1"


@pytest.mark.asyncio
async def test_resolve_directory_has_zero_size(sample_tree):
    entity = await resolve(sample_tree)

    assert entity.kind is FsKind.DIRECTORY
    assert entity.is_dir
    assert entity.size == 0


@pytest.mark.asyncio
async def test_resolve_missing_path(temp_dir):
    with pytest.raises(EntityNotFound):
        await resolve(temp_dir / "foo")


@pytest.mark.asyncio
async def test_resolve_missing_path_is_file_not_found(temp_dir):
    with pytest.raises(FileNotFoundError):
        await resolve(temp_dir / "foo")


@pytest.mark.asyncio
@pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
async def test_resolve_unreadable_metadata(temp_dir):
    locked = temp_dir / "locked"
    locked.mkdir()
    (locked / "inner").write_text("x")
    locked.chmod(0o000)
    try:
        with pytest.raises(MetadataUnavailable):
            await resolve(locked / "inner")
    finally:
        locked.chmod(0o755)


@pytest.mark.asyncio
async def test_resolve_relative_path_is_canonical(sample_tree, monkeypatch):
    monkeypatch.chdir(sample_tree / "sub_dir")

    entity = await resolve("../file0")

    assert entity.path == str(sample_tree / "file0")


@pytest.mark.asyncio
async def test_symlink_is_other_and_not_dereferenced(sample_tree):
    link = sample_tree / "link"
    link.symlink_to(sample_tree / "sub_dir" / "file2")

    entity = await resolve(link)

    assert entity.kind is FsKind.OTHER
    assert entity.size == 0
    assert entity.path == str(link)


def test_canonicalize_keeps_final_symlink(sample_tree):
    link = sample_tree / "link_dir"
    link.symlink_to(sample_tree / "sub_dir")

    assert canonicalize(link) == str(link)
    assert canonicalize(link / "file1") == str(sample_tree / "sub_dir" / "file1")


def test_canonicalize_root():
    assert canonicalize("/") == "/"


def test_resolve_root_follows_final_symlink(sample_tree, temp_dir):
    link = temp_dir / "root_link"
    link.symlink_to(sample_tree / "sub_dir")

    assert resolve_root(link) == str(sample_tree / "sub_dir")
    assert resolve_root(str(sample_tree) + os.sep) == str(sample_tree)


@pytest.mark.asyncio
async def test_resolve_canonical_keeps_path_as_given(sample_tree):
    link = sample_tree / "link"
    link.symlink_to(sample_tree / "file0")

    entity = await resolve_canonical(str(link))

    assert entity.path == str(link)
    assert entity.kind is FsKind.OTHER


@pytest.mark.asyncio
async def test_resolve_canonical_missing_path(temp_dir):
    with pytest.raises(EntityNotFound):
        await resolve_canonical(str(temp_dir / "missing"))


@pytest.mark.asyncio
async def test_parent(sample_tree):
    entity = await resolve(sample_tree / "sub_dir" / "file1")

    parent = await entity.parent()

    assert parent.path == str(sample_tree / "sub_dir")
    assert parent.kind is FsKind.DIRECTORY


@pytest.mark.asyncio
async def test_parent_of_filesystem_root_is_none():
    root = await resolve("/")

    assert root.parent_path is None
    assert await root.parent() is None


def test_identity_and_ordering_by_path():
    a1 = FsEntity(path="/a", size=1, kind=FsKind.FILE)
    a2 = FsEntity(path="/a", size=99, kind=FsKind.DIRECTORY, mod_time=5.0)
    b = FsEntity(path="/b", size=0)

    assert a1 == a2
    assert hash(a1) == hash(a2)
    assert a1 < b
    assert sorted([b, a1]) == [a1, b]
    assert len({a1, a2, b}) == 2


def test_from_stat_mod_time(sample_tree):
    path = sample_tree / "file0"
    os.utime(path, (1000, 2000))

    entity = FsEntity.from_stat(str(path), os.stat(path, follow_symlinks=False))

    assert entity.mod_time == 2000
    assert entity.device == os.stat(path).st_dev
