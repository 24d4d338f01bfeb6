# errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Bad machine configuration, bad settings or bad input.

    Every failure the simulator reports is one of these; the driver turns
    it into ``Error: <message>`` and exit status 1.
    """
