"""Daily access log and summary report written to a dated text file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TextIO

from .aula import POSTI_PER_FASCIA
from .coda import CodaAttesa
from .lista import ListaPrenotazioni
from .shared import Data, FasciaOraria, StatoPrenotazione, TipoAccesso

CARTELLA_STORICO = "storico"

_FASCIA_LABEL = {
    FasciaOraria.MATTINA: "Mattina",
    FasciaOraria.POMERIGGIO: "Pomeriggio",
    FasciaOraria.SERA: "Sera",
}

_STATO_LABEL = {
    StatoPrenotazione.CHECKED_IN: "Check-in",
    StatoPrenotazione.CHECKED_OUT: "Check-out",
    StatoPrenotazione.ANNULLATA: "Annullata",
    StatoPrenotazione.NO_SHOW: "No-show",
}


class ReportError(Exception):
    """Raised when the report file cannot be created or is not open."""


def _fascia_str(fascia: FasciaOraria) -> str:
    return _FASCIA_LABEL.get(fascia, "Sconosciuta")


def _tipo_str(tipo: TipoAccesso) -> str:
    return "Walk-in" if tipo == TipoAccesso.WALK_IN else "Prenotato"


def _stato_str(stato: StatoPrenotazione) -> str:
    return _STATO_LABEL.get(stato, "Prenotata")


def report_path(cartella: str | os.PathLike[str], data: Data) -> Path:
    """Return the path of the report file for a given day."""
    return Path(cartella) / (
        f"report_{data.giorno:02d}_{data.mese:02d}_{data.anno:04d}.txt"
    )


class Report:
    """Report file of one session day; reopening the same day overwrites it."""

    def __init__(
        self, data: Data, cartella: str | os.PathLike[str] = CARTELLA_STORICO
    ) -> None:
        self.data = data
        self.cartella = Path(cartella)
        self._fp: TextIO | None = None

    @property
    def path(self) -> Path:
        """Path of the file this report writes to."""
        return report_path(self.cartella, self.data)

    def open(self) -> Report:
        """Create the folder if needed and open the file for writing."""
        if self._fp is not None:
            return self
        try:
            self.cartella.mkdir(parents=True, exist_ok=True)
            self._fp = open(self.path, "w", encoding="utf-8")
        except OSError as exc:
            raise ReportError(f"cannot create report file {self.path}") from exc
        return self

    def close(self) -> None:
        """Close the file; closing twice is harmless."""
        if self._fp is not None:
            self._fp.close()
            self._fp = None

    def __enter__(self) -> Report:
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _write(self, text: str) -> None:
        if self._fp is None:
            raise ReportError("report not initialised")
        self._fp.write(text)
        self._fp.flush()

    def registra_accesso(
        self,
        matricola: str,
        fascia: FasciaOraria,
        tipo: TipoAccesso,
        stato: StatoPrenotazione,
    ) -> str:
        """Append one access line to the log and return it."""
        line = (
            f"Matricola: {matricola} | Fascia: {_fascia_str(fascia)} | "
            f"Tipo: {_tipo_str(tipo)} | Stato: {_stato_str(stato)}\n"
        )
        self._write(line)
        return line

    def genera(
        self,
        lista: ListaPrenotazioni,
        coda: CodaAttesa,
        max_posti: int = POSTI_PER_FASCIA,
    ) -> str:
        """Append the day's summary to the file and return it."""
        if self._fp is None:
            raise ReportError("report not initialised")

        accessi = lista.conta_per_stato(
            StatoPrenotazione.CHECKED_IN
        ) + lista.conta_per_stato(StatoPrenotazione.CHECKED_OUT)
        no_show = lista.conta_per_stato(StatoPrenotazione.NO_SHOW)
        annullate = lista.conta_per_stato(StatoPrenotazione.ANNULLATA)
        in_attesa = len(coda)
        totale = (
            accessi
            + no_show
            + annullate
            + lista.conta_per_stato(StatoPrenotazione.PRENOTATA)
        )

        def occupazione(fascia: FasciaOraria) -> int:
            return lista.conta_per_stato_e_fascia(
                StatoPrenotazione.CHECKED_IN, fascia
            ) + lista.conta_per_stato_e_fascia(StatoPrenotazione.CHECKED_OUT, fascia)

        text = (
            f"\n=== REPORT GIORNATA {self.data} ===\n\n"
            f"Totale Prenotazioni:  {totale}\n"
            f"Accessi Effettivi:    {accessi}\n"
            f"No-show:              {no_show}\n"
            f"Annullate:            {annullate}\n"
            f"Studenti in attesa:   {in_attesa}\n"
            "\n--- OCCUPAZIONE PER FASCIA ---\n"
            f"Mattina:    {occupazione(FasciaOraria.MATTINA)}/{max_posti} posti occupati\n"
            f"Pomeriggio: {occupazione(FasciaOraria.POMERIGGIO)}/{max_posti} posti occupati\n"
            f"Sera:       {occupazione(FasciaOraria.SERA)}/{max_posti} posti occupati\n"
            "\n==============================\n"
        )
        self._write(text)
        return text