"""Destinations for finished tax pack archives."""

import logging
from pathlib import Path
from typing import Protocol, Union

logger = logging.getLogger(__name__)


class DownloadSink(Protocol):
    """Anything that can accept a finished archive for download."""

    def deliver(self, filename: str, payload: bytes) -> None:
        """Hand over the archive bytes under the given file name."""
        ...


class MemoryDownloadSink:
    """Keeps delivered archives in memory (HTTP responses, tests)."""

    def __init__(self):
        self.downloads: list[tuple[str, bytes]] = []

    def deliver(self, filename: str, payload: bytes) -> None:
        self.downloads.append((filename, payload))

    @property
    def last(self) -> tuple[str, bytes]:
        if not self.downloads:
            raise LookupError("No archive has been delivered")
        return self.downloads[-1]


class DirectoryDownloadSink:
    """Writes delivered archives into a directory."""

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)

    def deliver(self, filename: str, payload: bytes) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        target = self._directory / filename
        target.write_bytes(payload)
        logger.info("Wrote %s (%d bytes)", target, len(payload))
