# rotor_and_reflector.py
from __future__ import annotations

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import EnigmaError

debug = Debug()
debug.disable("rotor")


class Rotor:
    """A wheel wired by ``permutation`` in its 0 setting.

    The base class never moves and never reflects; MovingRotor and
    Reflector override the capability flags they change.
    """

    def __init__(self, name: str, permutation: Permutation) -> None:
        self.name = name
        self.permutation = permutation
        self.setting = 0
        self.ring_setting = 0

    @property
    def alphabet(self) -> Alphabet:
        return self.permutation.alphabet

    @property
    def size(self) -> int:
        return self.permutation.size()

    # ── capabilities ---------------------------------------------
    def rotates(self) -> bool:
        return False

    def reflecting(self) -> bool:
        return False

    def at_notch(self) -> bool:
        return False

    def advance(self) -> None:
        """Advance one position, if possible. By default, does nothing."""

    # ── position & ring ------------------------------------------
    def _index(self, posn: int | str) -> int:
        if isinstance(posn, str):
            return self.alphabet.to_int(posn)
        return self.permutation.wrap(posn)

    def set(self, posn: int | str) -> None:
        """Turn the rotor to index or window letter ``posn``."""
        self.setting = self._index(posn)

    def set_ring(self, posn: int | str) -> None:
        self.ring_setting = self._index(posn)

    # ── signal paths ---------------------------------------------
    def convert_forward(self, p: int) -> int:
        offset = self.setting - self.ring_setting
        contact = self.permutation.wrap(p + offset)
        mapped = self.permutation.permute(contact)
        out = self.permutation.wrap(mapped - offset)
        if debug.on("rotor"):
            debug.log("rotor", f"{self.name} fwd {p}->{out}")
        return out

    def convert_backward(self, e: int) -> int:
        offset = self.setting - self.ring_setting
        contact = self.permutation.wrap(e + offset)
        mapped = self.permutation.invert(contact)
        out = self.permutation.wrap(mapped - offset)
        if debug.on("rotor"):
            debug.log("rotor", f"{self.name} bwd {e}->{out}")
        return out

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} pos={self.setting} ring={self.ring_setting}>"


class FixedRotor(Rotor):
    """Static scrambler: never advances, never reflects."""


class MovingRotor(Rotor):
    def __init__(self, name: str, permutation: Permutation, notches: str) -> None:
        super().__init__(name, permutation)
        self.notches: frozenset[str] = frozenset()
        self.set_notches(notches)

    def set_notches(self, notches: str) -> "MovingRotor":
        if not set(notches) <= set(self.alphabet.chars):
            raise EnigmaError(f"Notch characters of rotor {self.name} must be in the alphabet")
        self.notches = frozenset(notches)
        return self

    def rotates(self) -> bool:
        return True

    def at_notch(self) -> bool:
        return self.alphabet.to_char(self.setting) in self.notches

    def advance(self) -> None:
        self.setting = self.permutation.wrap(self.setting + 1)


class Reflector(Rotor):
    """Turns the signal around in slot 0. It has a single position."""

    def reflecting(self) -> bool:
        return True

    def set(self, posn: int | str) -> None:
        if self._index(posn) != 0:
            raise EnigmaError(f"Reflector {self.name} has only one position")
        self.setting = 0
