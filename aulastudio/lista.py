"""Collection of bookings, newest first."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from .prenotazione import Prenotazione
from .shared import FasciaOraria, StatoPrenotazione


class ListaPrenotazioni:
    """Bookings of the session; new ones are placed in front."""

    def __init__(self) -> None:
        self._prenotazioni: deque[Prenotazione] = deque()

    def __len__(self) -> int:
        return len(self._prenotazioni)

    def __iter__(self) -> Iterator[Prenotazione]:
        return iter(tuple(self._prenotazioni))

    def aggiungi(self, prenotazione: Prenotazione) -> None:
        """Insert a booking at the front of the list."""
        if not isinstance(prenotazione, Prenotazione):
            raise TypeError("expected a Prenotazione")
        self._prenotazioni.appendleft(prenotazione)

    def cerca(self, matricola: str, fascia: FasciaOraria) -> Prenotazione | None:
        """Return the newest booking for this student and slot, or None."""
        return next(
            (
                p
                for p in self._prenotazioni
                if p.matricola == matricola and p.fascia == fascia
            ),
            None,
        )

    def _richiedi(self, matricola: str, fascia: FasciaOraria) -> Prenotazione:
        prenotazione = self.cerca(matricola, fascia)
        if prenotazione is None:
            raise KeyError((matricola, FasciaOraria(fascia)))
        return prenotazione

    def rimuovi(self, matricola: str, fascia: FasciaOraria) -> Prenotazione:
        """Remove and return the booking for this student and slot."""
        prenotazione = self._richiedi(matricola, fascia)
        self._prenotazioni.remove(prenotazione)
        return prenotazione

    def aggiorna_stato(
        self, matricola: str, fascia: FasciaOraria, stato: StatoPrenotazione
    ) -> Prenotazione:
        """Set the state of the booking for this student and slot."""
        prenotazione = self._richiedi(matricola, fascia)
        prenotazione.stato = StatoPrenotazione(stato)
        return prenotazione

    def per_stato(self, stato: StatoPrenotazione) -> Iterator[Prenotazione]:
        """Yield the bookings in the given state."""
        return (p for p in tuple(self._prenotazioni) if p.stato == stato)

    def conta_per_stato(self, stato: StatoPrenotazione) -> int:
        """Count the bookings in the given state."""
        return sum(1 for _ in self.per_stato(stato))

    def conta_per_stato_e_fascia(
        self, stato: StatoPrenotazione, fascia: FasciaOraria
    ) -> int:
        """Count the bookings in the given state and time slot."""
        return sum(1 for p in self.per_stato(stato) if p.fascia == fascia)

    def aggiorna_no_show(self) -> int:
        """Turn every still-pending booking into a no-show; return how many."""
        pendenti = list(self.per_stato(StatoPrenotazione.PRENOTATA))
        for p in pendenti:
            p.stato = StatoPrenotazione.NO_SHOW
        return len(pendenti)