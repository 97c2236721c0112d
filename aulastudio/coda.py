"""First-in first-out waiting list of students."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass

from .prenotazione import limit_matricola
from .shared import FasciaOraria, TipoAccesso


@dataclass(frozen=True)
class RichiestaAttesa:
    """A student waiting for a seat in a given time slot."""

    matricola: str
    fascia: FasciaOraria
    tipo: TipoAccesso


class CodaAttesa:
    """Waiting list served in arrival order."""

    def __init__(self) -> None:
        self._richieste: deque[RichiestaAttesa] = deque()

    def __len__(self) -> int:
        return len(self._richieste)

    def __bool__(self) -> bool:
        return bool(self._richieste)

    def __iter__(self) -> Iterator[RichiestaAttesa]:
        return iter(tuple(self._richieste))

    def enqueue(
        self, matricola: str, fascia: FasciaOraria, tipo: TipoAccesso
    ) -> RichiestaAttesa:
        """Add a request at the back of the list and return it."""
        richiesta = RichiestaAttesa(
            limit_matricola(matricola), FasciaOraria(fascia), TipoAccesso(tipo)
        )
        self._richieste.append(richiesta)
        return richiesta

    def dequeue(self) -> RichiestaAttesa:
        """Remove and return the request at the front of the list."""
        if not self._richieste:
            raise IndexError("dequeue from an empty waiting list")
        return self._richieste.popleft()

    def peek(self) -> RichiestaAttesa | None:
        """Return the front request without removing it, or None if empty."""
        return self._richieste[0] if self._richieste else None