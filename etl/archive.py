# WORKFLOW: Locate dump tables inside the supplied archives.
# Used by: Pipeline (every stage), id pre-collection for Posts
# Functions:
# 1. open_archive() - Open a .zip, .7z or extracted directory as a DumpArchive
# 2. locate() - Context manager yielding a stream for the first archive holding a table, or None
# 3. collect_ids() - Read only the Id attribute of every row of a located table
#
# Locate flow: archive list (argument order) -> list entries -> first exact name match -> stream
# Later archives are never opened once a match is found. A table found nowhere yields None.

"""
Locate dump tables inside the supplied archives.
"""

import logging
import posixpath
import subprocess
import tempfile
import zipfile
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, List, Optional, Sequence, Set

from core.config import settings
from etl.errors import ArchiveError
from etl.xml_reader import read_ids

logger = logging.getLogger(__name__)


class DumpArchive(ABC):
    """A container of table files. Subclasses implement one archive format."""

    def __init__(self, path: str):
        self.path = path

    @abstractmethod
    def names(self) -> List[str]:
        """Every file entry in the archive."""

    def find(self, table_file: str) -> Optional[str]:
        """Return the first entry whose base name is exactly ``table_file``."""
        for name in self.names():
            if posixpath.basename(name.replace("\\", "/")) == table_file:
                return name
        return None

    @abstractmethod
    def open(self, name: str):
        """Context manager yielding a binary stream for one entry."""

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


class ZipDumpArchive(DumpArchive):
    def __init__(self, path: str):
        super().__init__(path)
        try:
            self._zip = zipfile.ZipFile(path, "r")
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveError(f"Cannot open zip archive {path}: {e}") from e

    def names(self) -> List[str]:
        return [info.filename for info in self._zip.infolist() if not info.is_dir()]

    @contextmanager
    def open(self, name: str) -> Iterator[IO[bytes]]:
        with self._zip.open(name, "r") as stream:
            yield stream

    def close(self) -> None:
        self._zip.close()


class SevenZipDumpArchive(DumpArchive):
    """7z archives, read through the ``7z`` command-line tool."""

    def __init__(self, path: str, executable: Optional[str] = None):
        super().__init__(path)
        self.executable = executable or settings.seven_zip_path
        self._names: Optional[List[str]] = None

    def names(self) -> List[str]:
        if self._names is None:
            self._names = self._list()
        return self._names

    def _list(self) -> List[str]:
        try:
            result = subprocess.run(
                [self.executable, "l", "-slt", self.path],
                check=True, capture_output=True, text=True,
            )
        except FileNotFoundError as e:
            raise ArchiveError(f"7z executable not found: {self.executable}") from e
        except subprocess.CalledProcessError as e:
            raise ArchiveError(f"Cannot list 7z archive {self.path}: {e.stderr.strip()}") from e

        # Entry blocks follow the "----------" separator; the block above it describes the archive.
        names = []
        in_entries = False
        for line in result.stdout.splitlines():
            if line.startswith("----------"):
                in_entries = True
            elif in_entries and line.startswith("Path = "):
                names.append(line[len("Path = "):])
        return names

    @contextmanager
    def open(self, name: str) -> Iterator[IO[bytes]]:
        # stderr goes to a file: an unread pipe would fill up and stall the extraction.
        with tempfile.TemporaryFile() as stderr_file:
            try:
                proc = subprocess.Popen(
                    [self.executable, "e", "-so", "-bsp0", self.path, name],
                    stdout=subprocess.PIPE, stderr=stderr_file,
                )
            except FileNotFoundError as e:
                raise ArchiveError(f"7z executable not found: {self.executable}") from e

            completed = False
            try:
                yield proc.stdout
                completed = True
            finally:
                if completed:
                    while proc.stdout.read(1 << 16):
                        pass
                else:
                    proc.kill()
                proc.stdout.close()
                returncode = proc.wait()

            if returncode != 0:
                stderr_file.seek(0)
                message = stderr_file.read().decode(errors="replace").strip()
                raise ArchiveError(f"7z failed extracting {name} from {self.path}: {message}")


class DirectoryDumpArchive(DumpArchive):
    """A directory of already extracted table files."""

    def names(self) -> List[str]:
        root = Path(self.path)
        return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())

    @contextmanager
    def open(self, name: str) -> Iterator[IO[bytes]]:
        with open(Path(self.path) / name, "rb") as stream:
            yield stream


def open_archive(path: str) -> DumpArchive:
    """
    Open a dump archive by path.

    Args:
        path: A .zip or .7z file, or a directory of extracted XML files

    Returns:
        DumpArchive for the path
    """
    p = Path(path)
    if p.is_dir():
        return DirectoryDumpArchive(path)
    if not p.exists():
        raise ArchiveError(f"Archive not found: {path}")

    suffix = p.suffix.lower()
    if suffix == ".zip":
        return ZipDumpArchive(path)
    if suffix == ".7z":
        return SevenZipDumpArchive(path)
    raise ArchiveError(f"Unsupported archive type: {path}")


@contextmanager
def locate(file_names: Sequence[str], table_file: str) -> Iterator[Optional[IO[bytes]]]:
    """
    Yield a stream for the first archive that contains ``table_file``.

    Archives are tried in the given order and closed again when they do not
    contain the table. Yields None when no archive contains it.

    Args:
        file_names: Archive paths in priority order
        table_file: Table file name, e.g. "Posts.xml"
    """
    for file_name in file_names:
        with open_archive(file_name) as archive:
            entry = archive.find(table_file)
            if entry is None:
                continue
            logger.debug(f"Found {table_file} in {file_name} as {entry}")
            with archive.open(entry) as stream:
                yield stream
            return
    yield None


def collect_ids(file_names: Sequence[str], table_file: str) -> Set[int]:
    """
    Read the Id of every row in a table without decoding the other attributes.

    Args:
        file_names: Archive paths in priority order
        table_file: Table file name, e.g. "Posts.xml"

    Returns:
        Set of ids; empty when no archive contains the table
    """
    with locate(file_names, table_file) as stream:
        if stream is None:
            return set()
        logger.info(f"Reading IDs from {table_file}...")
        return read_ids(stream, table_file)
