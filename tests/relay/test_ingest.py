"""Tests for storing uploads and guaranteed temp-file cleanup."""

import logging
import os
from unittest.mock import AsyncMock, MagicMock

import pytest

from relay.audio.ingest import TemporaryArtifacts, remove_quietly, store_upload
from relay.errors import MissingInputError


class TestStoreUpload:
    @pytest.mark.asyncio
    async def test_writes_unique_file_with_extension(self, temp_dir):
        first = await store_upload(b"audio", "recording.webm", temp_dir)
        second = await store_upload(b"audio", "recording.webm", temp_dir)

        assert first != second
        assert first.parent == temp_dir
        assert first.suffix == ".webm"
        assert first.read_bytes() == b"audio"

    @pytest.mark.asyncio
    async def test_defaults_to_webm_suffix(self, temp_dir):
        path = await store_upload(b"audio", None, temp_dir)
        assert path.suffix == ".webm"

    @pytest.mark.asyncio
    async def test_creates_missing_directory(self, tmp_path):
        path = await store_upload(b"audio", "clip.ogg", tmp_path / "nested" / "dir")
        assert path.exists()
        assert path.suffix == ".ogg"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("data", [None, b""])
    async def test_rejects_missing_data(self, temp_dir, data):
        with pytest.raises(MissingInputError):
            await store_upload(data, "recording.webm", temp_dir)
        assert os.listdir(temp_dir) == []


class TestRemoveQuietly:
    def test_removes_existing_file(self, tmp_path):
        path = tmp_path / "a.webm"
        path.write_bytes(b"x")
        assert remove_quietly(path) is True
        assert not path.exists()

    def test_missing_file_is_ignored(self, tmp_path):
        assert remove_quietly(tmp_path / "gone.webm") is False

    def test_none_is_ignored(self):
        assert remove_quietly(None) is False

    def test_other_os_errors_are_logged_not_raised(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING)
        # unlinking a directory raises an OSError other than FileNotFoundError
        directory = tmp_path / "a-directory"
        directory.mkdir()
        assert remove_quietly(directory) is False
        assert "Error deleting temp file" in caplog.text


class TestTemporaryArtifacts:
    @pytest.mark.asyncio
    async def test_deletes_registered_files_on_success(self, tmp_path):
        upload = tmp_path / "upload.webm"
        mp3 = tmp_path / "upload.mp3"
        upload.write_bytes(b"x")
        mp3.write_bytes(b"y")

        async with TemporaryArtifacts(upload) as artifacts:
            artifacts.add(mp3)
            assert artifacts.paths == [upload, mp3]

        assert not upload.exists()
        assert not mp3.exists()

    @pytest.mark.asyncio
    async def test_deletes_registered_files_on_error(self, tmp_path):
        upload = tmp_path / "upload.webm"
        upload.write_bytes(b"x")

        with pytest.raises(RuntimeError):
            async with TemporaryArtifacts(upload):
                raise RuntimeError("provider exploded")

        assert not upload.exists()

    @pytest.mark.asyncio
    async def test_cleanup_tolerates_already_deleted_files(self, tmp_path):
        async with TemporaryArtifacts(tmp_path / "never-created.mp3", None):
            pass

    def test_add_ignores_duplicates_and_none(self, tmp_path):
        artifacts = TemporaryArtifacts()
        path = tmp_path / "a.mp3"
        artifacts.add(path)
        artifacts.add(path)
        artifacts.add(None)
        assert artifacts.paths == [path]


def make_async_client():
    client = MagicMock()
    client.__aenter__.return_value = client
    client.__aexit__.return_value = False
    return client


class TestRequestClients:
    @pytest.mark.asyncio
    async def test_open_client_enters_once_and_closes_on_exit(self):
        client = make_async_client()
        factory = MagicMock(return_value=client)

        async with TemporaryArtifacts() as artifacts:
            first = await artifacts.open_client("groq", factory)
            second = await artifacts.open_client("groq", factory)
            assert first is second is client
            client.__aexit__.assert_not_awaited()

        factory.assert_called_once()
        client.__aenter__.assert_awaited_once()
        client.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_clients_close_before_error_propagates(self, tmp_path):
        client = make_async_client()
        close = AsyncMock()
        mp3 = tmp_path / "speech.mp3"
        mp3.write_bytes(b"x")

        with pytest.raises(RuntimeError):
            async with TemporaryArtifacts(mp3) as artifacts:
                await artifacts.open_client("hf", lambda: client)
                artifacts.on_close(close)
                raise RuntimeError("translation failed")

        client.__aexit__.assert_awaited_once()
        close.assert_awaited_once()
        assert not mp3.exists()

    @pytest.mark.asyncio
    async def test_close_failure_is_logged_not_raised(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING, logger="relay.audio.ingest")
        mp3 = tmp_path / "speech.mp3"
        mp3.write_bytes(b"x")

        async with TemporaryArtifacts(mp3) as artifacts:
            artifacts.on_close(AsyncMock(side_effect=OSError("channel already closed")))

        assert "Error closing client" in caplog.text
        assert not mp3.exists()

    def test_shared_builds_once(self):
        artifacts = TemporaryArtifacts()
        factory = MagicMock(return_value=object())

        assert artifacts.shared("oci", factory) is artifacts.shared("oci", factory)
        factory.assert_called_once()
