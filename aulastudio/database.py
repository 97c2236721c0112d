"""Persistent store of registered students in a binary file."""

from __future__ import annotations

import os
from collections.abc import Iterator
from typing import BinaryIO

from .studente import Studente

FILE_STUDENTI = "studenti.bin"


class DatabaseError(Exception):
    """Raised when the student file cannot be used."""


class Database:
    """Student records appended to a file of fixed-size records."""

    def __init__(self, path: str | os.PathLike[str] = FILE_STUDENTI) -> None:
        self.path = path
        self._fp: BinaryIO | None = None

    def open(self) -> Database:
        """Open the file, creating it when missing."""
        if self._fp is not None:
            return self
        try:
            self._fp = open(self.path, "r+b")
        except FileNotFoundError:
            try:
                self._fp = open(self.path, "w+b")
            except OSError as exc:
                raise DatabaseError(f"cannot create database {self.path}") from exc
        except OSError as exc:
            raise DatabaseError(f"cannot open database {self.path}") from exc
        return self

    def close(self) -> None:
        """Close the file; closing twice is harmless."""
        if self._fp is not None:
            self._fp.close()
            self._fp = None

    def __enter__(self) -> Database:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _studenti(self) -> Iterator[Studente]:
        if self._fp is None:
            return
        self._fp.seek(0, os.SEEK_SET)
        while (studente := Studente.read(self._fp)) is not None:
            yield studente

    def salva_studente(self, studente: Studente) -> None:
        """Append a student record and flush it to disk."""
        if self._fp is None:
            raise DatabaseError("database not initialised")
        self._fp.seek(0, os.SEEK_END)
        studente.write(self._fp)
        self._fp.flush()
        self._fp.seek(0, os.SEEK_SET)

    def cerca_studente(self, matricola: str) -> Studente | None:
        """Return the first student with this number, or None."""
        return next((s for s in self._studenti() if s.matricola == matricola), None)

    def studente_esiste(self, matricola: str) -> bool:
        """Tell whether a student with this number is stored."""
        return any(s.matricola == matricola for s in self._studenti())