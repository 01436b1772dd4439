"""
Audio ingestion: uploaded blobs become request-owned temporary files.

Every file created here belongs to exactly one request and is removed by a
TemporaryArtifacts scope on every exit path, together with the service clients
the request opened. Removal and close failures are logged and
never raised, so they cannot mask the error that ended the request.
"""

import asyncio
import logging
import os
import uuid
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Any, AsyncContextManager, Awaitable, Callable, Dict, List, Optional, TypeVar, Union

from relay.errors import MissingInputError

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = ".webm"

PathLike = Union[str, Path]
T = TypeVar("T")


def _suffix_for(filename: Optional[str]) -> str:
    suffix = Path(filename or "").suffix.lower()
    return suffix if suffix else DEFAULT_SUFFIX


async def store_upload(data: Optional[bytes], filename: Optional[str], temp_dir: PathLike) -> Path:
    """Write an uploaded audio blob to a uniquely named file in ``temp_dir``.

    Args:
        data: Uploaded bytes
        filename: Client-side filename, used only for its extension
        temp_dir: Directory for request-scoped audio files

    Returns:
        Path of the stored file. The caller owns it.

    Raises:
        MissingInputError: If no data was uploaded
    """
    if not data:
        raise MissingInputError()

    directory = Path(temp_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"upload-{uuid.uuid4().hex}{_suffix_for(filename)}"
    await asyncio.to_thread(path.write_bytes, data)
    logger.debug(f"Stored upload {filename!r} as {path} ({len(data)} bytes)")
    return path


def remove_quietly(path: Optional[PathLike]) -> bool:
    """Delete ``path`` if it exists. Returns True when a file was removed."""
    if not path:
        return False
    try:
        os.unlink(path)
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning(f"Error deleting temp file {path}: {e}")
        return False


class TemporaryArtifacts:
    """Async context manager owning one request's files and service clients.

    Registered files are deleted on exit. Clients opened through
    ``open_client`` are entered once per scope, shared by every stage of the
    request and closed before the files are removed.

    Example:
        async with TemporaryArtifacts(upload_path) as artifacts:
            mp3_path = artifacts.add(await to_compact_mono_16k_mp3(upload_path))
            client = await artifacts.open_client("groq", lambda: create_groq_client(key, 120.0))
            ...
    """

    def __init__(self, *paths: Optional[PathLike]):
        self._paths: List[PathLike] = []
        self._resources: Dict[str, Any] = {}
        self._stack = AsyncExitStack()
        for path in paths:
            self.add(path)

    def add(self, path: Optional[PathLike]) -> Optional[PathLike]:
        if path and path not in self._paths:
            self._paths.append(path)
        return path

    @property
    def paths(self) -> List[PathLike]:
        return list(self._paths)

    def shared(self, key: str, factory: Callable[[], T]) -> T:
        """Return the object cached under ``key``, building it on first use."""
        if key not in self._resources:
            self._resources[key] = factory()
        return self._resources[key]

    async def open_client(self, key: str, factory: Callable[[], AsyncContextManager[T]]) -> T:
        """Enter the async client built by ``factory`` once for this scope.

        The client is closed when the scope exits, on success or failure.
        """
        if key not in self._resources:
            self._resources[key] = await self._stack.enter_async_context(factory())
        return self._resources[key]

    def on_close(self, callback: Callable[[], Awaitable[Any]]) -> None:
        """Await ``callback`` when the scope exits."""
        self._stack.push_async_callback(callback)

    async def close_clients(self) -> None:
        self._resources.clear()
        try:
            await self._stack.aclose()
        except Exception as e:
            logger.warning(f"Error closing client: {e}")

    def cleanup(self) -> None:
        while self._paths:
            remove_quietly(self._paths.pop())

    async def __aenter__(self) -> "TemporaryArtifacts":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        try:
            await self.close_clients()
        finally:
            self.cleanup()
        return False
