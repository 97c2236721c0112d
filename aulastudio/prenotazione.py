"""A booking of a seat in the study room."""

from __future__ import annotations

from dataclasses import dataclass

from .shared import MAX_MATRICOLA, Data, FasciaOraria, StatoPrenotazione

POSTO_NON_ASSEGNATO = -1

_FASCIA_LABEL = {
    FasciaOraria.MATTINA: "Mattina",
    FasciaOraria.POMERIGGIO: "Pomeriggio",
    FasciaOraria.SERA: "Sera",
}

_STATO_LABEL = {
    StatoPrenotazione.PRENOTATA: "Prenotata",
    StatoPrenotazione.CHECKED_IN: "Checked-in",
    StatoPrenotazione.CHECKED_OUT: "Checked-out",
    StatoPrenotazione.ANNULLATA: "Annullata",
    StatoPrenotazione.NO_SHOW: "No-show",
}


def limit_matricola(matricola: str) -> str:
    """Cut a student number so that its encoding fits the fixed field."""
    encoded = matricola.encode("utf-8")[: MAX_MATRICOLA - 1]
    return encoded.decode("utf-8", errors="ignore")


@dataclass
class Prenotazione:
    """A seat reservation for one student, day and time slot."""

    matricola: str
    data: Data
    fascia: FasciaOraria
    posto: int = POSTO_NON_ASSEGNATO
    stato: StatoPrenotazione = StatoPrenotazione.PRENOTATA

    def __post_init__(self) -> None:
        self.matricola = limit_matricola(self.matricola)
        self.fascia = FasciaOraria(self.fascia)
        self.stato = StatoPrenotazione(self.stato)

    def annulla(self) -> None:
        """Mark the booking as cancelled."""
        self.stato = StatoPrenotazione.ANNULLATA

    def describe(self) -> str:
        """Return a human-readable, multi-line description of the booking."""
        return "\n".join(
            (
                f"Matricola: {self.matricola}",
                f"Data: {self.data}",
                f"Fascia Oraria: {_FASCIA_LABEL.get(self.fascia, 'Sconosciuta')}",
                f"Posto: {self.posto}",
                f"Stato: {_STATO_LABEL.get(self.stato, 'Sconosciuto')}",
            )
        )