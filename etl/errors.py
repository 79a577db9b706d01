# WORKFLOW: Exception types raised by the dump import pipeline.
# Used by: xml_reader (decode failures), archive (unreadable archives), import script
#
# Referential gaps and missing tables are not errors and have no exception type.
# Destination (database) errors are not wrapped; they propagate unchanged.

"""
Exception types for the dump import pipeline.
"""


class DumpImportError(Exception):
    """Base class for fatal import errors."""


class DumpDecodeError(DumpImportError):
    """A table stream could not be decoded: bad markup, missing or unconvertible attribute."""

    def __init__(self, table: str, message: str):
        super().__init__(f"{table}: {message}")
        self.table = table
        self.message = message


class ArchiveError(DumpImportError):
    """An archive file could not be opened or listed."""
