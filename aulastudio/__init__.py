"""Study room management: seats, bookings, waiting list, student file and daily reports."""

__version__ = "1.0.0"