"""File resource service.

Metadata lives on the API host (``files/{id}``); content is written to the
storage host, which has its own URL layout:

    PUT {storage_url}resources/{resource_id}/providers/{provider}/?kind=file&name={name}
"""

from __future__ import annotations

import logging
import os
from os import PathLike
from typing import TYPE_CHECKING, BinaryIO

from osfapi.schemas.file import TYPE_FILES, File, FileLinks, build_file
from osfapi.schemas.jsonapi import SinglePayload
from osfapi.transport import RequestDescriptor, build_url, iter_chunks

if TYPE_CHECKING:
    from osfapi.client import OSFClient
    from osfapi.transport import Cancellation

logger = logging.getLogger(__name__)


def _stream_size(stream: BinaryIO) -> int | None:
    """Bytes left to read in ``stream``, or ``None`` if it cannot tell."""
    try:
        return os.fstat(stream.fileno()).st_size - stream.tell()
    except (AttributeError, OSError, ValueError):
        pass
    try:
        position = stream.tell()
        end = stream.seek(0, os.SEEK_END)
        stream.seek(position)
    except (AttributeError, OSError, ValueError):
        return None
    return end - position


def resolve_file_name(source: str | PathLike[str] | BinaryIO, name: str | None = None) -> str:
    """Return the stored file name for an upload of ``source``.

    An explicit ``name`` wins; otherwise the base name of the path, or of a
    stream's string ``name``. Streams opened from a file descriptor carry
    an int ``name`` and count as unnamed.

    Raises:
        ValueError: If no file name can be determined.
    """
    if name:
        return name
    candidate = source if isinstance(source, (str, PathLike)) else getattr(source, "name", None)
    if isinstance(candidate, PathLike):
        candidate = os.fspath(candidate)
    if isinstance(candidate, str) and candidate:
        return os.path.basename(candidate)
    raise ValueError("a file name is required when uploading an unnamed stream")


class FileService:
    """Service for file metadata and primary-file uploads.

    Args:
        client: The owning client (request building, transport, codec).
    """

    def __init__(self, client: OSFClient) -> None:
        self.client = client

    def get_file(self, file_id: str) -> tuple[File, SinglePayload[File, FileLinks]]:
        """Fetch file metadata by id."""
        return self.get_file_by_url(build_url(self.client.base_url, f"files/{file_id}/"))

    def get_file_by_url(self, url: str) -> tuple[File, SinglePayload[File, FileLinks]]:
        """Fetch file metadata from an absolute API URL (e.g. a related link)."""
        request = self.client.new_request("GET", url)
        result = self.client.codec.execute_single(
            self.client.transport,
            request,
            File,
            FileLinks,
            resource_type=TYPE_FILES,
            build=build_file,
        )
        return result.value, result.payload

    def upload_file(
        self,
        resource_id: str,
        source: str | PathLike[str] | BinaryIO,
        name: str | None = None,
        *,
        cancellation: Cancellation | None = None,
    ) -> tuple[File, SinglePayload[File, FileLinks]]:
        """Stream a new file into the storage provider of a resource.

        Args:
            resource_id: Id of the resource (e.g. a preprint) owning the file.
            source: Filesystem path or binary stream. Streams are read in
                chunks and never buffered whole.
            name: Stored file name. Defaults to the base name of the path or
                of the stream's ``name``.
            cancellation: Optional cancel flag / deadline.

        Returns:
            Tuple of (uploaded file, payload). ``File.id`` is the raw storage
            id, provider prefix included.

        Raises:
            ValueError: If no file name can be determined.
        """
        if isinstance(source, (str, PathLike)):
            with open(source, "rb") as stream:
                return self.upload_file(resource_id, stream, name, cancellation=cancellation)

        name = resolve_file_name(source, name)

        settings = self.client.settings
        url = build_url(
            settings.storage_url,
            f"resources/{resource_id}/providers/{settings.storage_provider}/",
            [("kind", "file"), ("name", name)],
        )
        headers = {"Accept": "*/*", "Content-Type": "application/octet-stream"}
        if settings.user_agent:
            headers["User-Agent"] = settings.user_agent
        size = _stream_size(source)
        if size is not None:
            headers["Content-Length"] = str(size)

        logger.info("Uploading '%s' (%s bytes) to resource %s", name, size, resource_id)
        request = RequestDescriptor(
            method="PUT",
            url=url,
            headers=headers,
            content=iter_chunks(source),
        )
        result = self.client.codec.execute_single(
            self.client.transport,
            request,
            File,
            FileLinks,
            resource_type=TYPE_FILES,
            build=build_file,
            cancellation=cancellation,
        )
        return result.value, result.payload
