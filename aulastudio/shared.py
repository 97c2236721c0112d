"""Types and limits shared by every part of the study-room system."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

MAX_MATRICOLA = 11
MAX_NOME = 20
MAX_CORSO = 30


class FasciaOraria(IntEnum):
    """Time slots in which the study room can be used."""

    MATTINA = 0
    POMERIGGIO = 1
    SERA = 2


class StatoPrenotazione(IntEnum):
    """Life cycle of a booking."""

    PRENOTATA = 0
    CHECKED_IN = 1
    CHECKED_OUT = 2
    ANNULLATA = 3
    NO_SHOW = 4


class TipoAccesso(IntEnum):
    """How a student entered the room."""

    WALK_IN = 0
    PRENOTAZIONE = 1


@dataclass(frozen=True)
class Data:
    """A calendar date as day, month and year."""

    giorno: int
    mese: int
    anno: int

    def __str__(self) -> str:
        return f"{self.giorno:02d}/{self.mese:02d}/{self.anno:04d}"