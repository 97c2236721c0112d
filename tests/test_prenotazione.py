import pytest

from aulastudio.prenotazione import Prenotazione
from aulastudio.shared import Data, FasciaOraria, StatoPrenotazione

OGGI = Data(3, 7, 2024)


def test_new_booking_defaults():
    p = Prenotazione("0123456789", OGGI, FasciaOraria.SERA)
    assert p.stato is StatoPrenotazione.PRENOTATA
    assert p.posto == -1
    assert p.fascia is FasciaOraria.SERA
    assert p.data == OGGI


def test_matricola_is_truncated_to_field_size():
    p = Prenotazione("0123456789ABCDEF", OGGI, FasciaOraria.MATTINA)
    assert p.matricola == "0123456789"


def test_short_matricola_kept():
    p = Prenotazione("M1", OGGI, FasciaOraria.MATTINA)
    assert p.matricola == "M1"


def test_fascia_coerced_from_int():
    p = Prenotazione("M1", OGGI, 1)
    assert p.fascia is FasciaOraria.POMERIGGIO


def test_invalid_fascia_rejected():
    with pytest.raises(ValueError):
        Prenotazione("M1", OGGI, 7)


def test_annulla_sets_cancelled():
    p = Prenotazione("M1", OGGI, FasciaOraria.MATTINA)
    p.annulla()
    assert p.stato is StatoPrenotazione.ANNULLATA


def test_fields_are_updatable():
    p = Prenotazione("M1", OGGI, FasciaOraria.MATTINA)
    p.posto = 4
    p.stato = StatoPrenotazione.CHECKED_IN
    assert (p.posto, p.stato) == (4, StatoPrenotazione.CHECKED_IN)


def test_describe_lines():
    p = Prenotazione("M1", OGGI, FasciaOraria.POMERIGGIO, posto=4)
    lines = p.describe().splitlines()
    assert lines == [
        "Matricola: M1",
        "Data: 03/07/2024",
        "Fascia Oraria: Pomeriggio",
        "Posto: 4",
        "Stato: Prenotata",
    ]


@pytest.mark.parametrize(
    "stato, label",
    [
        (StatoPrenotazione.CHECKED_IN, "Stato: Checked-in"),
        (StatoPrenotazione.CHECKED_OUT, "Stato: Checked-out"),
        (StatoPrenotazione.ANNULLATA, "Stato: Annullata"),
        (StatoPrenotazione.NO_SHOW, "Stato: No-show"),
    ],
)
def test_describe_state_labels(stato, label):
    p = Prenotazione("M1", OGGI, FasciaOraria.SERA, stato=stato)
    assert p.describe().splitlines()[-1] == label