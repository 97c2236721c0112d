"""Coordinator of a study-room session: bookings, waiting list, report and menus."""

from __future__ import annotations

import argparse
import os
import re
import sys
from pathlib import Path
from typing import Callable, TextIO, TypeVar

from .aula import Aula
from .coda import CodaAttesa, RichiestaAttesa
from .database import FILE_STUDENTI, Database, DatabaseError
from .lista import ListaPrenotazioni
from .prenotazione import Prenotazione, limit_matricola
from .report import CARTELLA_STORICO, Report, ReportError
from .shared import (
    MAX_CORSO,
    MAX_MATRICOLA,
    MAX_NOME,
    Data,
    FasciaOraria,
    StatoPrenotazione,
    TipoAccesso,
)
from .studente import Studente

_T = TypeVar("_T")

_FASCIA_LABEL = {
    FasciaOraria.MATTINA: "Mattina    (08:00-13:00)",
    FasciaOraria.POMERIGGIO: "Pomeriggio (13:00-18:00)",
    FasciaOraria.SERA: "Sera       (18:00-23:00)",
}

_INT_RE = re.compile(r"[+-]?\d+")


def _fascia_str(fascia: FasciaOraria) -> str:
    return _FASCIA_LABEL.get(fascia, "Sconosciuta")


class OperazioneError(Exception):
    """Raised when a session operation cannot be carried out."""

    def __init__(self, message: str, *, info: bool = False) -> None:
        super().__init__(message)
        self.info = info

    @property
    def prefix(self) -> str:
        return "[INFO]" if self.info else "[ERRORE]"


class _Input:
    """Whitespace-separated token reader over a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._rest: str | None = None

    def token(self) -> str:
        while self._rest is None or not self._rest.strip():
            line = self._stream.readline()
            if not line:
                raise EOFError
            self._rest = line
        stripped = self._rest.lstrip()
        tok = stripped.split(maxsplit=1)[0]
        self._rest = stripped[len(tok):]
        return tok

    def flush_line(self) -> None:
        self._rest = None

    def int_token(self) -> int | None:
        match = _INT_RE.match(self.token())
        return int(match.group()) if match else None

    def read_int(self) -> int | None:
        value = self.int_token()
        self.flush_line()
        return value

    def read_word(self, size: int) -> str:
        word = self.token()[: size - 1]
        self.flush_line()
        return word


class Sistema:
    """One session of the study room, with its menus for students and staff."""

    def __init__(
        self,
        data: Data,
        base_dir: str | os.PathLike[str] = ".",
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.data = data
        base = Path(base_dir)
        self._in = _Input(stdin if stdin is not None else sys.stdin)
        self._out = stdout if stdout is not None else sys.stdout
        self.database = Database(base / FILE_STUDENTI).open()
        self.aula = Aula()
        self.lista = ListaPrenotazioni()
        self.coda = CodaAttesa()
        try:
            self.report = Report(data, base / CARTELLA_STORICO).open()
        except ReportError:
            self.database.close()
            raise
        self._report_generato = False
        self._chiuso = False

    # ------------------------------------------------------------------
    # operations

    def _richiedi_registrato(self, matricola: str) -> None:
        if not self.database.studente_esiste(matricola):
            raise OperazioneError(f"Matricola {matricola} non trovata nel database.")

    def registra_studente(self, nome: str, matricola: str, corso: str) -> Studente:
        """Store a new student; the student number must not be taken."""
        studente = Studente(nome, matricola, corso)
        if self.database.studente_esiste(studente.matricola):
            raise OperazioneError("Matricola gia' presente.")
        self.database.salva_studente(studente)
        return studente

    def disponibilita(self) -> dict[FasciaOraria, int]:
        """Free seats per time slot."""
        return {f: self.aula.posti_liberi(f) for f in FasciaOraria}

    def prenota(
        self, matricola: str, fascia: FasciaOraria
    ) -> Prenotazione | RichiestaAttesa:
        """Book a seat, or join the waiting list when the slot is full."""
        matricola = limit_matricola(matricola)
        fascia = FasciaOraria(fascia)
        self._richiedi_registrato(matricola)
        esistente = self.lista.cerca(matricola, fascia)
        if esistente is not None and esistente.stato != StatoPrenotazione.ANNULLATA:
            raise OperazioneError(
                "Esiste gia' una prenotazione attiva per questa fascia."
            )
        if self.aula.posti_liberi(fascia) <= 0:
            return self.coda.enqueue(matricola, fascia, TipoAccesso.PRENOTAZIONE)
        posto = self.aula.blocca_posto(fascia)
        prenotazione = Prenotazione(matricola, self.data, fascia, posto=posto)
        self.lista.aggiungi(prenotazione)
        self.report.registra_accesso(
            matricola, fascia, TipoAccesso.PRENOTAZIONE, StatoPrenotazione.PRENOTATA
        )
        return prenotazione

    def annulla(self, matricola: str, fascia: FasciaOraria) -> Prenotazione:
        """Cancel a booking, free its seat and serve the waiting list."""
        matricola = limit_matricola(matricola)
        fascia = FasciaOraria(fascia)
        prenotazione = self.lista.cerca(matricola, fascia)
        if prenotazione is None:
            raise OperazioneError("Nessuna prenotazione trovata per questa fascia.")
        if prenotazione.stato == StatoPrenotazione.ANNULLATA:
            raise OperazioneError("Prenotazione gia' annullata.", info=True)
        self.aula.libera_posto(fascia, prenotazione.posto)
        self.lista.aggiorna_stato(matricola, fascia, StatoPrenotazione.ANNULLATA)
        self.report.registra_accesso(
            matricola, fascia, TipoAccesso.PRENOTAZIONE, StatoPrenotazione.ANNULLATA
        )
        self.promuovi_dalla_coda(fascia)
        return prenotazione

    def checkin(self, matricola: str, fascia: FasciaOraria) -> Prenotazione:
        """Mark a pending booking as present."""
        matricola = limit_matricola(matricola)
        fascia = FasciaOraria(fascia)
        prenotazione = self.lista.cerca(matricola, fascia)
        if prenotazione is None or prenotazione.stato != StatoPrenotazione.PRENOTATA:
            raise OperazioneError("Nessuna prenotazione attiva per questa fascia.")
        self.lista.aggiorna_stato(matricola, fascia, StatoPrenotazione.CHECKED_IN)
        self.report.registra_accesso(
            matricola, fascia, TipoAccesso.PRENOTAZIONE, StatoPrenotazione.CHECKED_IN
        )
        return prenotazione

    def checkout(self, matricola: str, fascia: FasciaOraria) -> Prenotazione:
        """End a present student's session, free the seat and serve the waiting list."""
        matricola = limit_matricola(matricola)
        fascia = FasciaOraria(fascia)
        prenotazione = self.lista.cerca(matricola, fascia)
        if prenotazione is None or prenotazione.stato != StatoPrenotazione.CHECKED_IN:
            raise OperazioneError(
                "Studente non risulta presente in aula per questa fascia."
            )
        self.aula.libera_posto(fascia, prenotazione.posto)
        self.lista.aggiorna_stato(matricola, fascia, StatoPrenotazione.CHECKED_OUT)
        self.report.registra_accesso(
            matricola, fascia, TipoAccesso.PRENOTAZIONE, StatoPrenotazione.CHECKED_OUT
        )
        self.promuovi_dalla_coda(fascia)
        return prenotazione

    def walk_in(
        self, matricola: str, fascia: FasciaOraria
    ) -> Prenotazione | RichiestaAttesa:
        """Seat a student without booking, or queue them behind those waiting."""
        matricola = limit_matricola(matricola)
        fascia = FasciaOraria(fascia)
        self._richiedi_registrato(matricola)
        if self.coda or self.aula.posti_liberi(fascia) <= 0:
            return self.coda.enqueue(matricola, fascia, TipoAccesso.WALK_IN)
        posto = self.aula.blocca_posto(fascia)
        prenotazione = Prenotazione(
            matricola,
            self.data,
            fascia,
            posto=posto,
            stato=StatoPrenotazione.CHECKED_IN,
        )
        self.lista.aggiungi(prenotazione)
        self.report.registra_accesso(
            matricola, fascia, TipoAccesso.WALK_IN, StatoPrenotazione.CHECKED_IN
        )
        return prenotazione

    def promuovi_dalla_coda(self, fascia: FasciaOraria) -> list[Prenotazione]:
        """Seat waiting students of a slot while seats are free; keep the rest in order."""
        fascia = FasciaOraria(fascia)
        promossi: list[Prenotazione] = []
        rimasti: list[RichiestaAttesa] = []
        while self.coda:
            richiesta = self.coda.dequeue()
            if richiesta.fascia == fascia and self.aula.posti_liberi(fascia) > 0:
                posto = self.aula.blocca_posto(fascia)
                prenotazione = Prenotazione(
                    richiesta.matricola,
                    self.data,
                    fascia,
                    posto=posto,
                    stato=StatoPrenotazione.CHECKED_IN,
                )
                self.lista.aggiungi(prenotazione)
                self.report.registra_accesso(
                    richiesta.matricola,
                    fascia,
                    richiesta.tipo,
                    StatoPrenotazione.CHECKED_IN,
                )
                self._print(
                    f"[INFO] Studente {richiesta.matricola} promosso dalla lista "
                    f"d'attesa -> posto {posto} ({_fascia_str(fascia)})"
                )
                promossi.append(prenotazione)
            else:
                rimasti.append(richiesta)
        for richiesta in rimasti:
            self.coda.enqueue(richiesta.matricola, richiesta.fascia, richiesta.tipo)
        return promossi

    def genera_report(self) -> str:
        """Turn pending bookings into no-shows and write the day's summary."""
        self.lista.aggiorna_no_show()
        text = self.report.genera(self.lista, self.coda, self.aula.max_posti)
        self._report_generato = True
        return text

    def chiudi(self) -> None:
        """Write the final report if none was made, then close the files."""
        if self._chiuso:
            return
        self._chiuso = True
        try:
            self.lista.aggiorna_no_show()
            if not self._report_generato:
                self.report.genera(self.lista, self.coda, self.aula.max_posti)
                self._print("[INFO] Report finale generato nella cartella storico/.")
        finally:
            self.report.close()
            self.database.close()

    def __enter__(self) -> Sistema:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.chiudi()

    # ------------------------------------------------------------------
    # interactive front end

    def _print(self, text: str = "") -> None:
        self._out.write(text + "\n")

    def _prompt(self, text: str) -> None:
        self._out.write(text)
        self._out.flush()

    def _tenta(self, azione: Callable[..., _T], *args) -> _T | None:
        try:
            return azione(*args)
        except OperazioneError as exc:
            self._print(f"{exc.prefix} {exc}")
            return None

    def _leggi_scelta(self) -> int | None:
        self._prompt("Scelta: ")
        return self._in.read_int()

    def _leggi_fascia(self) -> FasciaOraria | None:
        self._print("  1. Mattina    (08:00-13:00)")
        self._print("  2. Pomeriggio (13:00-18:00)")
        self._print("  3. Sera       (18:00-23:00)")
        scelta = self._leggi_scelta()
        if scelta is None or not 1 <= scelta <= 3:
            return None
        return FasciaOraria(scelta - 1)

    def _chiedi_fascia(self, titolo: str) -> FasciaOraria | None:
        self._print(titolo)
        fascia = self._leggi_fascia()
        if fascia is None:
            self._print("[ERRORE] Fascia non valida.")
        return fascia

    def _leggi_matricola(self) -> str:
        self._prompt("Inserisci matricola: ")
        return self._in.read_word(MAX_MATRICOLA)

    def _assicura_registrato(self, matricola: str) -> None:
        if self.database.studente_esiste(matricola):
            return
        self._print("[INFO] Matricola non trovata. Registrazione necessaria.")
        self._prompt("Nome: ")
        nome = self._in.read_word(MAX_NOME)
        self._prompt("Corso di laurea: ")
        corso = self._in.read_word(MAX_CORSO)
        self.database.salva_studente(Studente(nome, matricola, corso))
        self._print("[OK] Registrazione completata.")

    def _mostra_disponibilita(self) -> None:
        liberi = self.disponibilita()
        self._print("\n--- Disponibilita' posti ---")
        self._print(f"  Mattina:    {liberi[FasciaOraria.MATTINA]} posti liberi")
        self._print(f"  Pomeriggio: {liberi[FasciaOraria.POMERIGGIO]} posti liberi")
        self._print(f"  Sera:       {liberi[FasciaOraria.SERA]} posti liberi")
        self._print("----------------------------")

    def _ui_prenota(self, matricola: str) -> None:
        if not self.database.studente_esiste(matricola):
            self._print(f"[ERRORE] Matricola {matricola} non trovata nel database.")
            return
        fascia = self._chiedi_fascia("Seleziona fascia oraria:")
        if fascia is None:
            return
        esito = self._tenta(self.prenota, matricola, fascia)
        if isinstance(esito, RichiestaAttesa):
            self._print(
                "[INFO] Aula piena. Aggiunto alla lista d'attesa per "
                f"{_fascia_str(fascia)}."
            )
        elif isinstance(esito, Prenotazione):
            self._print(
                f"[OK] Prenotazione confermata: posto {esito.posto}, "
                f"{_fascia_str(fascia)}"
            )

    def _ui_annulla(self, matricola: str) -> None:
        fascia = self._chiedi_fascia("Seleziona fascia da annullare:")
        if fascia is None:
            return
        if self._tenta(self.annulla, matricola, fascia) is not None:
            self._print("[OK] Prenotazione annullata.")

    def _ui_checkin(self, matricola: str) -> None:
        fascia = self._chiedi_fascia("Seleziona fascia:")
        if fascia is None:
            return
        esito = self._tenta(self.checkin, matricola, fascia)
        if esito is not None:
            self._print(
                f"[OK] Check-in effettuato: posto {esito.posto}, {_fascia_str(fascia)}"
            )

    def _ui_checkout(self, matricola: str) -> None:
        fascia = self._chiedi_fascia("Seleziona fascia:")
        if fascia is None:
            return
        if self._tenta(self.checkout, matricola, fascia) is not None:
            self._print("[OK] Check-out effettuato.")

    def _ui_walk_in(self) -> None:
        matricola = self._leggi_matricola()
        self._assicura_registrato(matricola)
        fascia = self._chiedi_fascia("Seleziona fascia:")
        if fascia is None:
            return
        coda_piena = bool(self.coda)
        esito = self._tenta(self.walk_in, matricola, fascia)
        if isinstance(esito, RichiestaAttesa):
            if coda_piena:
                self._print(
                    "[INFO] Coda non vuota. Studente aggiunto in lista d'attesa."
                )
            else:
                self._print(
                    "[INFO] Aula piena. Studente aggiunto alla lista d'attesa."
                )
        elif isinstance(esito, Prenotazione):
            self._print(
                f"[OK] Accesso diretto: posto {esito.posto}, {_fascia_str(fascia)}"
            )

    def _ui_registra(self) -> None:
        self._prompt("Nome: ")
        nome = self._in.read_word(MAX_NOME)
        matricola = self._leggi_matricola()
        self._prompt("Corso di laurea: ")
        corso = self._in.read_word(MAX_CORSO)
        if self._tenta(self.registra_studente, nome, matricola, corso) is not None:
            self._print("[OK] Studente registrato.")

    def _ui_mostra_stato(self, stato: StatoPrenotazione) -> None:
        for prenotazione in self.lista.per_stato(stato):
            self._print(prenotazione.describe())

    def _ui_coda(self) -> None:
        richieste = list(self.coda)
        self._print(f"\n--- Lista d'attesa ({len(richieste)} studenti) ---")
        if not richieste:
            self._print("  (vuota)")
            return
        for numero, richiesta in enumerate(richieste, start=1):
            self._print(
                f"  {numero}. Matricola: {richiesta.matricola:<10} | "
                f"Fascia: {_fascia_str(richiesta.fascia)}"
            )

    def _menu_studente(self) -> None:
        self._print("\n=== ACCESSO STUDENTE ===")
        matricola = self._leggi_matricola()
        self._assicura_registrato(matricola)
        while True:
            self._print(f"\n--- Menu Studente ({matricola}) ---")
            self._print("  1. Visualizza disponibilita' posti")
            self._print("  2. Prenota un posto")
            self._print("  3. Check-in")
            self._print("  4. Check-out")
            self._print("  5. Annulla una prenotazione")
            self._print("  6. Visualizza le mie prenotazioni")
            self._print("  0. Torna al menu principale")
            match self._leggi_scelta():
                case 1:
                    self._mostra_disponibilita()
                case 2:
                    self._ui_prenota(matricola)
                case 3:
                    self._ui_checkin(matricola)
                case 4:
                    self._ui_checkout(matricola)
                case 5:
                    self._ui_annulla(matricola)
                case 6:
                    self._print("\n--- Le tue prenotazioni ---")
                    for fascia in FasciaOraria:
                        prenotazione = self.lista.cerca(matricola, fascia)
                        if prenotazione is not None:
                            self._print(prenotazione.describe())
                            self._print("---")
                case 0:
                    self._print("Ritorno al menu principale.")
                    return
                case _:
                    self._print("[ERRORE] Scelta non valida.")

    def _menu_amministratore(self) -> None:
        while True:
            self._print("\n=== MENU AMMINISTRATORE ===")
            self._print("  1.  Registra nuovo studente")
            self._print("  2.  Prenota posto per uno studente")
            self._print("  3.  Annulla prenotazione")
            self._print("  4.  Check-in studente prenotato")
            self._print("  5.  Accesso diretto (walk-in)")
            self._print("  6.  Check-out studente")
            self._print("  7.  Visualizza prenotati per fascia")
            self._print("  8.  Visualizza presenti (checked-in)")
            self._print("  9.  Visualizza lista d'attesa")
            self._print("  10. Disponibilita' posti")
            self._print("  11. Genera report giornaliero")
            self._print("  0.  Torna al menu principale")
            match self._leggi_scelta():
                case 1:
                    self._ui_registra()
                case 2:
                    self._ui_prenota(self._leggi_matricola())
                case 3:
                    self._ui_annulla(self._leggi_matricola())
                case 4:
                    self._ui_checkin(self._leggi_matricola())
                case 5:
                    self._ui_walk_in()
                case 6:
                    self._ui_checkout(self._leggi_matricola())
                case 7:
                    fascia = self._chiedi_fascia("Seleziona fascia:")
                    if fascia is not None:
                        self._print(f"\n--- Prenotati per {_fascia_str(fascia)} ---")
                        self._ui_mostra_stato(StatoPrenotazione.PRENOTATA)
                case 8:
                    self._print("\n--- Studenti attualmente in aula ---")
                    self._ui_mostra_stato(StatoPrenotazione.CHECKED_IN)
                case 9:
                    self._ui_coda()
                case 10:
                    self._mostra_disponibilita()
                case 11:
                    self.genera_report()
                    self._print("[OK] Report generato nella cartella storico/.")
                case 0:
                    self._print("Ritorno al menu principale.")
                    return
                case _:
                    self._print("[ERRORE] Scelta non valida.")

    def esegui(self) -> None:
        """Run the main menu until the user quits or the input ends."""
        self._print("\n========================================")
        self._print("||   Sistema Gestione Aula Studio      ||")
        self._print("========================================")
        self._print(f"Data sessione: {self.data}")
        try:
            while True:
                self._print("\n--- Menu Principale ---")
                self._print("  1. Accedi come Studente")
                self._print("  2. Accedi come Amministratore")
                self._print("  0. Esci dal programma")
                match self._leggi_scelta():
                    case 1:
                        self._menu_studente()
                    case 2:
                        self._menu_amministratore()
                    case 0:
                        return
                    case _:
                        self._print("[ERRORE] Scelta non valida.")
        except EOFError:
            return


def main(argv: list[str] | None = None) -> int:
    """Ask for the session date, run the menus and write the final report."""
    parser = argparse.ArgumentParser(
        prog="aulastudio", description="Study-room booking session."
    )
    parser.add_argument(
        "--dir", default=".", help="folder holding the student file and reports"
    )
    args = parser.parse_args(argv)

    stdin, stdout = sys.stdin, sys.stdout
    stdout.write("Inserisci la data della sessione (gg mm aaaa): ")
    stdout.flush()
    reader = _Input(stdin)
    try:
        valori = [reader.int_token() for _ in range(3)]
    except EOFError:
        print("Data della sessione mancante.", file=sys.stderr)
        return 1
    if any(v is None for v in valori):
        print("Data della sessione non valida.", file=sys.stderr)
        return 1
    giorno, mese, anno = valori
    data = Data(giorno, mese, anno)

    try:
        with Sistema(data, args.dir, stdin, stdout) as sistema:
            sistema.esegui()
    except (DatabaseError, ReportError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0