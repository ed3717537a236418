"""Tests for UploadStore."""

import base64

import pytest

from ffmpeg_tools.core.errors import ValidationError
from ffmpeg_tools.core.uploads import UploadStore


@pytest.fixture
def store(config):
    return UploadStore(config)


class TestUploadStore:
    """Tests for UploadStore."""

    def test_save_creates_directory_and_file(self, store, upload_dir):
        assert not upload_dir.exists()
        saved = store.save_file("Clip 01.MP4", base64.b64encode(b"\x00\x01video").decode())

        assert saved == "clip_01.mp4"
        assert (upload_dir / saved).read_bytes() == b"\x00\x01video"

    def test_wrapped_base64_accepted(self, store, upload_dir):
        encoded = base64.encodebytes(b"x" * 200).decode()
        assert "\n" in encoded
        saved = store.save_file("long.bin", encoded)
        assert (upload_dir / saved).read_bytes() == b"x" * 200

    def test_invalid_base64_rejected(self, store, upload_dir):
        with pytest.raises(ValidationError, match="Invalid base64 content"):
            store.save_file("clip.mp4", "not base64!!")
        assert not (upload_dir / "clip.mp4").exists()

    def test_overwrites_existing_file(self, store, upload_dir):
        store.save_file("a.txt", base64.b64encode(b"first").decode())
        store.save_file("a.txt", base64.b64encode(b"second").decode())
        assert (upload_dir / "a.txt").read_bytes() == b"second"
