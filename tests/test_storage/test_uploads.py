"""Tests for per-request temporary upload files."""

import io

import pytest

from artpivot.storage.uploads import cleanup_temp_file, temporary_upload


class TestTemporaryUpload:
    def test_file_exists_inside_block_only(self, tmp_path):
        with temporary_upload(io.BytesIO(b"IMAGES:"), tmp_path, ".txt") as path:
            assert path.parent == tmp_path
            assert path.suffix == ".txt"
            assert path.read_bytes() == b"IMAGES:"
        assert not path.exists()

    def test_removed_when_block_raises(self, tmp_path):
        with pytest.raises(RuntimeError):
            with temporary_upload(io.BytesIO(b"x"), tmp_path) as path:
                raise RuntimeError("extraction failed")
        assert list(tmp_path.iterdir()) == []

    def test_concurrent_uploads_get_distinct_paths(self, tmp_path):
        with temporary_upload(io.BytesIO(b"a"), tmp_path) as first:
            with temporary_upload(io.BytesIO(b"b"), tmp_path) as second:
                assert first != second
                assert first.read_bytes() == b"a"

    def test_creates_upload_dir(self, tmp_path):
        target = tmp_path / "nested" / "uploads"
        with temporary_upload(io.BytesIO(b"x"), target) as path:
            assert path.parent == target


class TestCleanup:
    def test_missing_file_is_fine(self, tmp_path):
        cleanup_temp_file(tmp_path / "never-created")
        cleanup_temp_file(None)
