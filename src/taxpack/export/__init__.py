"""Tax pack export engine."""

from taxpack.export.exporter import TaxPackExporter
from taxpack.export.sinks import DownloadSink, MemoryDownloadSink, DirectoryDownloadSink
from taxpack.export.archive import ArchiveTree, build_zip

__all__ = [
    "TaxPackExporter",
    "DownloadSink",
    "MemoryDownloadSink",
    "DirectoryDownloadSink",
    "ArchiveTree",
    "build_zip",
]
