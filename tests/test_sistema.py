import io
import sys

import pytest

from aulastudio.coda import RichiestaAttesa
from aulastudio.prenotazione import Prenotazione
from aulastudio.shared import Data, FasciaOraria, StatoPrenotazione, TipoAccesso
from aulastudio.sistema import OperazioneError, Sistema, main

DATA = Data(5, 3, 2024)
REPORT_NAME = "report_05_03_2024.txt"
HEADER = "=== REPORT GIORNATA 05/03/2024 ==="


@pytest.fixture
def sistema(tmp_path):
    s = Sistema(DATA, tmp_path, io.StringIO(""), io.StringIO())
    yield s
    s.chiudi()


def _registra(s, *matricole):
    for m in matricole:
        s.registra_studente("Nome", m, "Corso")


def _riempi(s, fascia):
    matricole = [f"S{i:03d}" for i in range(s.aula.max_posti)]
    _registra(s, *matricole)
    for m in matricole:
        s.prenota(m, fascia)
    return matricole


def _run(tmp_path, script):
    out = io.StringIO()
    s = Sistema(DATA, tmp_path, io.StringIO(script), out)
    s.esegui()
    return s, out


def test_init_creates_files(tmp_path):
    s = Sistema(DATA, tmp_path, io.StringIO(""), io.StringIO())
    try:
        assert (tmp_path / "storico" / REPORT_NAME).is_file()
        assert (tmp_path / "studenti.bin").is_file()
        disp = s.disponibilita()
        assert disp[FasciaOraria.MATTINA] == s.aula.max_posti
        assert len(s.lista) == 0
    finally:
        s.chiudi()


def test_registra_studente_persists_and_rejects_duplicate(sistema):
    sistema.registra_studente("Mario", "S001", "Informatica")
    assert sistema.database.cerca_studente("S001").nome == "Mario"
    with pytest.raises(OperazioneError) as info:
        sistema.registra_studente("Luigi", "S001", "Fisica")
    assert info.value.info is False


def test_prenota_requires_registration(sistema):
    with pytest.raises(OperazioneError):
        sistema.prenota("S404", FasciaOraria.MATTINA)
    assert len(sistema.lista) == 0


def test_prenota_assigns_first_seat(sistema):
    _registra(sistema, "S001")
    p = sistema.prenota("S001", FasciaOraria.MATTINA)
    assert isinstance(p, Prenotazione)
    assert p.posto == 0
    assert p.stato == StatoPrenotazione.PRENOTATA
    disp = sistema.disponibilita()
    assert disp[FasciaOraria.MATTINA] == sistema.aula.max_posti - 1
    assert disp[FasciaOraria.SERA] == sistema.aula.max_posti


def test_prenota_twice_rejected_until_cancelled(sistema):
    _registra(sistema, "S001")
    sistema.prenota("S001", FasciaOraria.SERA)
    with pytest.raises(OperazioneError):
        sistema.prenota("S001", FasciaOraria.SERA)
    annullata = sistema.annulla("S001", FasciaOraria.SERA)
    assert annullata.stato == StatoPrenotazione.ANNULLATA
    nuova = sistema.prenota("S001", FasciaOraria.SERA)
    assert nuova.posto == 0
    assert len(sistema.lista) == 2
    assert sistema.lista.cerca("S001", FasciaOraria.SERA) is nuova


def test_annulla_twice_is_info(sistema):
    _registra(sistema, "S001")
    sistema.prenota("S001", FasciaOraria.MATTINA)
    sistema.annulla("S001", FasciaOraria.MATTINA)
    with pytest.raises(OperazioneError) as info:
        sistema.annulla("S001", FasciaOraria.MATTINA)
    assert info.value.info is True
    assert info.value.prefix == "[INFO]"


def test_annulla_missing_booking(sistema):
    with pytest.raises(OperazioneError) as info:
        sistema.annulla("S001", FasciaOraria.MATTINA)
    assert info.value.prefix == "[ERRORE]"


def test_full_room_queues_request(sistema):
    _riempi(sistema, FasciaOraria.MATTINA)
    _registra(sistema, "X1")
    r = sistema.prenota("X1", FasciaOraria.MATTINA)
    assert isinstance(r, RichiestaAttesa)
    assert r.tipo == TipoAccesso.PRENOTAZIONE
    assert len(sistema.coda) == 1
    assert sistema.lista.cerca("X1", FasciaOraria.MATTINA) is None


def test_annulla_promotes_waiting_student(sistema):
    matricole = _riempi(sistema, FasciaOraria.MATTINA)
    _registra(sistema, "X1")
    sistema.prenota("X1", FasciaOraria.MATTINA)
    liberato = sistema.lista.cerca(matricole[5], FasciaOraria.MATTINA).posto
    sistema.annulla(matricole[5], FasciaOraria.MATTINA)
    promosso = sistema.lista.cerca("X1", FasciaOraria.MATTINA)
    assert promosso.stato == StatoPrenotazione.CHECKED_IN
    assert promosso.posto == liberato
    assert len(sistema.coda) == 0
    assert sistema.aula.posti_liberi(FasciaOraria.MATTINA) == 0


def test_checkin_and_checkout(sistema):
    _registra(sistema, "S001")
    sistema.prenota("S001", FasciaOraria.POMERIGGIO)
    p = sistema.checkin("S001", FasciaOraria.POMERIGGIO)
    assert p.stato == StatoPrenotazione.CHECKED_IN
    with pytest.raises(OperazioneError):
        sistema.checkin("S001", FasciaOraria.POMERIGGIO)
    sistema.checkout("S001", FasciaOraria.POMERIGGIO)
    assert p.stato == StatoPrenotazione.CHECKED_OUT
    assert sistema.aula.posti_liberi(FasciaOraria.POMERIGGIO) == sistema.aula.max_posti
    with pytest.raises(OperazioneError):
        sistema.checkout("S001", FasciaOraria.POMERIGGIO)


def test_checkout_without_checkin_rejected(sistema):
    _registra(sistema, "S001")
    sistema.prenota("S001", FasciaOraria.MATTINA)
    with pytest.raises(OperazioneError):
        sistema.checkout("S001", FasciaOraria.MATTINA)
    assert sistema.lista.cerca("S001", FasciaOraria.MATTINA).stato == (
        StatoPrenotazione.PRENOTATA
    )


def test_checkout_promotes_waiting_student(sistema):
    matricole = _riempi(sistema, FasciaOraria.SERA)
    _registra(sistema, "X1")
    sistema.prenota("X1", FasciaOraria.SERA)
    sistema.checkin(matricole[0], FasciaOraria.SERA)
    sistema.checkout(matricole[0], FasciaOraria.SERA)
    promosso = sistema.lista.cerca("X1", FasciaOraria.SERA)
    assert promosso.stato == StatoPrenotazione.CHECKED_IN
    assert promosso.posto == 0
    assert not sistema.coda


def test_walk_in_seats_when_queue_empty(sistema):
    _registra(sistema, "W1")
    p = sistema.walk_in("W1", FasciaOraria.SERA)
    assert isinstance(p, Prenotazione)
    assert p.stato == StatoPrenotazione.CHECKED_IN
    assert p.posto == 0
    assert sistema.aula.posti_liberi(FasciaOraria.SERA) == sistema.aula.max_posti - 1


def test_walk_in_queued_when_queue_not_empty(sistema):
    _riempi(sistema, FasciaOraria.MATTINA)
    _registra(sistema, "X1", "W1")
    sistema.prenota("X1", FasciaOraria.MATTINA)
    r = sistema.walk_in("W1", FasciaOraria.SERA)
    assert isinstance(r, RichiestaAttesa)
    assert r.tipo == TipoAccesso.WALK_IN
    assert sistema.aula.posti_liberi(FasciaOraria.SERA) == sistema.aula.max_posti
    assert [q.matricola for q in sistema.coda] == ["X1", "W1"]


def test_walk_in_requires_registration(sistema):
    with pytest.raises(OperazioneError):
        sistema.walk_in("W1", FasciaOraria.SERA)
    assert len(sistema.lista) == 0


def test_promotion_keeps_other_requests_in_order(sistema):
    matricole = _riempi(sistema, FasciaOraria.MATTINA)
    _registra(sistema, "A1", "B1", "C1")
    sistema.prenota("A1", FasciaOraria.MATTINA)
    sistema.walk_in("B1", FasciaOraria.SERA)
    sistema.prenota("C1", FasciaOraria.MATTINA)
    sistema.annulla(matricole[0], FasciaOraria.MATTINA)
    assert sistema.lista.cerca("A1", FasciaOraria.MATTINA).stato == (
        StatoPrenotazione.CHECKED_IN
    )
    assert [r.matricola for r in sistema.coda] == ["B1", "C1"]

    promossi = sistema.promuovi_dalla_coda(FasciaOraria.SERA)
    assert [p.matricola for p in promossi] == ["B1"]
    assert [r.matricola for r in sistema.coda] == ["C1"]


def test_genera_report_marks_no_show(sistema, tmp_path):
    _registra(sistema, "S001", "S002")
    sistema.prenota("S001", FasciaOraria.MATTINA)
    sistema.prenota("S002", FasciaOraria.MATTINA)
    sistema.checkin("S002", FasciaOraria.MATTINA)
    text = sistema.genera_report()
    assert sistema.lista.cerca("S001", FasciaOraria.MATTINA).stato == (
        StatoPrenotazione.NO_SHOW
    )
    assert sistema.lista.conta_per_stato(StatoPrenotazione.CHECKED_IN) == 1
    assert HEADER in text
    content = (tmp_path / "storico" / REPORT_NAME).read_text(encoding="utf-8")
    assert text in content


def test_chiudi_writes_final_report_once(tmp_path):
    out = io.StringIO()
    s = Sistema(DATA, tmp_path, io.StringIO(""), out)
    _registra(s, "S001")
    s.prenota("S001", FasciaOraria.MATTINA)
    s.chiudi()
    s.chiudi()
    content = (tmp_path / "storico" / REPORT_NAME).read_text(encoding="utf-8")
    assert content.count(HEADER) == 1
    assert "[INFO] Report finale generato" in out.getvalue()
    assert s.lista.cerca("S001", FasciaOraria.MATTINA).stato == (
        StatoPrenotazione.NO_SHOW
    )


def test_chiudi_skips_report_already_generated(tmp_path):
    out = io.StringIO()
    with Sistema(DATA, tmp_path, io.StringIO(""), out) as s:
        s.genera_report()
    content = (tmp_path / "storico" / REPORT_NAME).read_text(encoding="utf-8")
    assert content.count(HEADER) == 1
    assert "Report finale" not in out.getvalue()


def test_esegui_student_session(tmp_path):
    script = "1\nS001\nMario\nInformatica\n2\n1\n0\n0\n"
    s, out = _run(tmp_path, script)
    try:
        assert s.lista.cerca("S001", FasciaOraria.MATTINA).posto == 0
        assert "[OK] Prenotazione confermata: posto 0" in out.getvalue()
        assert s.database.cerca_studente("S001").corso == "Informatica"
    finally:
        s.chiudi()


def test_esegui_admin_walk_in_and_empty_queue(tmp_path):
    script = "2\n5\nW1\nAnna\nFisica\n3\n9\n0\n0\n"
    s, out = _run(tmp_path, script)
    try:
        assert s.lista.cerca("W1", FasciaOraria.SERA).stato == (
            StatoPrenotazione.CHECKED_IN
        )
        assert "(vuota)" in out.getvalue()
        assert "[OK] Accesso diretto: posto 0" in out.getvalue()
    finally:
        s.chiudi()


def test_esegui_invalid_choices(tmp_path):
    s, out = _run(tmp_path, "7\nabc\n0\n")
    try:
        assert out.getvalue().count("[ERRORE] Scelta non valida.") == 2
    finally:
        s.chiudi()


def test_esegui_stops_at_end_of_input(tmp_path):
    s, out = _run(tmp_path, "1\nS001\n")
    try:
        assert s.database.studente_esiste("S001") is False
        assert "Registrazione necessaria" in out.getvalue()
    finally:
        s.chiudi()


def test_esegui_truncates_long_matricola(tmp_path):
    s, _ = _run(tmp_path, "2\n1\nNome\nABCDEFGHIJKLMN\nCorso\n0\n0\n")
    try:
        assert s.database.studente_esiste("ABCDEFGHIJ") is True
        assert s.database.studente_esiste("ABCDEFGHIJKLMN") is False
    finally:
        s.chiudi()


def test_main_runs_session(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("05 03 2024\n0\n"))
    assert main(["--dir", str(tmp_path)]) == 0
    assert (tmp_path / "storico" / REPORT_NAME).is_file()
    assert "Data sessione: 05/03/2024" in capsys.readouterr().out


def test_main_rejects_bad_date(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO("oggi\n"))
    assert main(["--dir", str(tmp_path)]) == 1
    assert not (tmp_path / "storico").exists()