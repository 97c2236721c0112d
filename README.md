# aulastudio

aulastudio is a console program that runs a study room for one day. It does the following:

- It registers students in a binary file named `studenti.bin`. Each student is stored as a fixed-size record with a name, a matricola and a course.
- It books seats in three time slots: Mattina (08:00-13:00), Pomeriggio (13:00-18:00) and Sera (18:00-23:00). Each slot has 20 seats, and a booking takes the first free seat.
- It handles check-in, check-out and cancellation.
- It handles walk-in access. A walk-in student gets a seat only when nobody is waiting and the slot has a free seat. Otherwise the student joins the waiting list.
- It keeps a FIFO waiting list. A cancellation or a check-out frees a seat. Waiting students for that slot are then seated in arrival order and checked in, and everyone else keeps their place in the queue.
- It writes a daily report to `storico/report_DD_MM_YYYY.txt`. The file holds one log line per access. It also holds a summary of total bookings, actual accesses, no-shows, cancellations, students still waiting, and the number of check-ins per slot. Starting a session with the same date overwrites that day's file.

## Installation

```
pip install .
```

## Usage

```
aulastudio [--dir FOLDER]
```

`--dir` sets the folder that holds `studenti.bin` and `storico/`. The default is the current directory.

The program first asks for the session date as `gg mm aaaa`. The main menu then offers two roles.

**Studente**. You enter a matricola. If it is unknown, the program asks for a name and a course and registers it on the spot. You can then:
- see the free seats per slot;
- book a seat;
- check in;
- check out;
- cancel a booking;
- list your bookings.

**Amministratore**. You can:
- register students;
- book, cancel, check in or check out on a student's behalf;
- seat a walk-in student;
- list the bookings still pending;
- list the students present;
- show the waiting list;
- show free seats;
- generate the daily report.

The program leaves the main menu when you choose `0` or when input ends. On leaving, every booking that never checked in is marked as a no-show. If no report was generated during the session, the final summary is written at that point. The exit status is 1 in three cases: the date is missing or not numeric, the student file cannot be opened, or the report file cannot be created.

## Library use

`aulastudio.sistema.Sistema` runs the same operations from code:

```python
from aulastudio.shared import Data, FasciaOraria
from aulastudio.sistema import Sistema

with Sistema(Data(12, 3, 2025), base_dir="aula") as sistema:
    sistema.registra_studente("Anna", "0123456789", "Informatica")
    esito = sistema.prenota("0123456789", FasciaOraria.MATTINA)
    sistema.checkin("0123456789", FasciaOraria.MATTINA)
    sistema.checkout("0123456789", FasciaOraria.MATTINA)
    print(sistema.disponibilita())
```

Return values:

- `prenota` and `walk_in` return a `Prenotazione` when a seat was taken. They return a `RichiestaAttesa` when the student was added to the waiting list.
- `annulla`, `checkin` and `checkout` return the booking they changed.
- `promuovi_dalla_coda` returns the bookings it created from the waiting list.
- `genera_report` marks pending bookings as no-shows, writes the summary, and returns its text.
- Leaving the `with` block calls `chiudi`.

A failed operation raises `aulastudio.sistema.OperazioneError`.

The building blocks can also be used on their own:

- `aula.Aula`: the seat map. `blocca_posto` raises `AulaPienaError` when the slot is full.
- `lista.ListaPrenotazioni`: the bookings, newest first.
- `coda.CodaAttesa`: the waiting list.
- `database.Database`: the student file.
- `report.Report`: the dated report file.
- `studente.Studente`: a student record, with `to_bytes` and `from_bytes`.

## Limits

Only students are kept between runs. Bookings and the waiting list live in memory for one session. They survive only as lines in that day's report file and are not loaded again at the next start.

## Tests

```
pip install .[test]
pytest
```