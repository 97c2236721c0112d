"""Seat occupancy of the study room, per time slot."""

from __future__ import annotations

from .shared import FasciaOraria

POSTI_PER_FASCIA = 20


class AulaPienaError(Exception):
    """Raised when no seat is free in the requested time slot."""


class Aula:
    """Tracks which seats are taken in each time slot."""

    def __init__(self, posti_per_fascia: int = POSTI_PER_FASCIA) -> None:
        if posti_per_fascia < 1:
            raise ValueError("posti_per_fascia must be positive")
        self._posti = posti_per_fascia
        self._occupati = {f: [False] * posti_per_fascia for f in FasciaOraria}

    @property
    def max_posti(self) -> int:
        """Number of seats in each time slot."""
        return self._posti

    def _fascia(self, fascia: FasciaOraria) -> list[bool]:
        return self._occupati[FasciaOraria(fascia)]

    def posti_liberi(self, fascia: FasciaOraria) -> int:
        """Count the free seats in a time slot."""
        return self._fascia(fascia).count(False)

    def blocca_posto(self, fascia: FasciaOraria) -> int:
        """Take the first free seat in a time slot and return its index."""
        posti = self._fascia(fascia)
        try:
            posto = posti.index(False)
        except ValueError:
            raise AulaPienaError(
                f"no free seat in {FasciaOraria(fascia).name}"
            ) from None
        posti[posto] = True
        return posto

    def libera_posto(self, fascia: FasciaOraria, posto: int) -> None:
        """Free one seat; indices outside the room are ignored."""
        posti = self._fascia(fascia)
        if 0 <= posto < self._posti:
            posti[posto] = False

    def libera_fascia(self, fascia: FasciaOraria) -> None:
        """Free every seat in a time slot."""
        posti = self._fascia(fascia)
        posti[:] = [False] * self._posti