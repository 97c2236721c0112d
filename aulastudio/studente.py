"""Student records and their fixed-size binary form."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO

from .shared import MAX_CORSO, MAX_MATRICOLA, MAX_NOME

_FORMAT = struct.Struct(f"{MAX_NOME}s{MAX_MATRICOLA}s{MAX_CORSO}s")
RECORD_SIZE = _FORMAT.size


def _limit(text: str, size: int) -> str:
    """Cut text so that its encoding fits a field of size bytes with a terminator."""
    return text.encode("utf-8")[: size - 1].decode("utf-8", errors="ignore")


def _field(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


@dataclass(frozen=True)
class Studente:
    """A registered student: name, student number and degree course."""

    nome: str
    matricola: str
    corso: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "nome", _limit(self.nome, MAX_NOME))
        object.__setattr__(self, "matricola", _limit(self.matricola, MAX_MATRICOLA))
        object.__setattr__(self, "corso", _limit(self.corso, MAX_CORSO))

    def to_bytes(self) -> bytes:
        """Encode as a fixed-size record of NUL-padded fields."""
        return _FORMAT.pack(
            self.nome.encode("utf-8"),
            self.matricola.encode("utf-8"),
            self.corso.encode("utf-8"),
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> Studente:
        """Decode one fixed-size record."""
        if len(data) != RECORD_SIZE:
            raise ValueError(f"record must be {RECORD_SIZE} bytes, got {len(data)}")
        nome, matricola, corso = _FORMAT.unpack(data)
        return cls(_field(nome), _field(matricola), _field(corso))

    def write(self, stream: BinaryIO) -> None:
        """Write the record to a binary stream."""
        stream.write(self.to_bytes())

    @classmethod
    def read(cls, stream: BinaryIO) -> Studente | None:
        """Read the next record, or return None at the end of the stream."""
        data = stream.read(RECORD_SIZE)
        if len(data) != RECORD_SIZE:
            return None
        return cls.from_bytes(data)