#!/usr/bin/env python3
"""
GTI files: headerless tab-separated genomic records.

Columns are sample id, fragment id, genome location, genome DNA and a
comma-separated list of protein sequences.
"""
import logging
from typing import Iterator, List, Optional, TextIO

from rnamatch.exceptions import DataError, FileOperationError
from rnamatch.models.records import GenomicRecord

logger = logging.getLogger("rnamatch.io.gti")

GTI_SUFFIX = ".gti"


class GtiReader:
    """Iterates the records of a GTI file

    Use as a context manager or call ``close`` when done. Blank lines are
    skipped; a malformed line raises DataError with its line number.
    """

    def __init__(self, path: str):
        self.path = path
        try:
            self._handle: Optional[TextIO] = open(path, 'r')
        except OSError as e:
            raise FileOperationError(f"Cannot open GTI file {path}: {str(e)}") from e
        self.line_num = 0

    def __iter__(self) -> Iterator[GenomicRecord]:
        for line in self._handle:
            self.line_num += 1
            if not line.strip():
                continue
            try:
                yield GenomicRecord.from_line(line)
            except DataError as e:
                e.details.update({'file': self.path, 'line_num': self.line_num})
                raise

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> 'GtiReader':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def read_gti(path: str) -> List[GenomicRecord]:
    """Read all records of a GTI file"""
    with GtiReader(path) as reader:
        return list(reader)


class GtiWriter:
    """Writes genomic records as GTI lines"""

    def __init__(self, path: str):
        self.path = path
        self.count = 0
        try:
            self._handle: Optional[TextIO] = open(path, 'w')
        except OSError as e:
            raise FileOperationError(f"Cannot create GTI file {path}: {str(e)}") from e

    def write(self, record: GenomicRecord) -> None:
        self._handle.write(record.to_line() + '\n')
        self.count += 1

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            logger.debug(f"Wrote {self.count} records to {self.path}")

    def __enter__(self) -> 'GtiWriter':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
