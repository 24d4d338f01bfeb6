# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Iterable, Sequence

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import EnigmaError
from rotor_and_reflector import Rotor

debug = Debug()
debug.disable("stepping", "machine")


class Machine:
    """A complete machine: reflector in slot 0, rotors to its right, and a
    plugboard. The rightmost ``pawls`` slots hold the moving rotors."""

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        pawls: int,
        all_rotors: Iterable[Rotor],
    ) -> None:
        if num_rotors <= 1:
            raise EnigmaError(f"Need more than one rotor slot, got {num_rotors}")
        if not (0 <= pawls < num_rotors):
            raise EnigmaError(f"Pawl count {pawls} must be in 0–{num_rotors - 1}")

        self.alphabet = alphabet
        self._num_rotors = num_rotors
        self._num_pawls = pawls

        self.catalog: dict[str, Rotor] = {}
        for rotor in all_rotors:
            if rotor.name in self.catalog:
                raise EnigmaError(f"Rotor {rotor.name!r} defined twice")
            if rotor.size != alphabet.size():
                raise EnigmaError(f"Rotor {rotor.name!r} does not match the alphabet")
            self.catalog[rotor.name] = rotor

        self._rotors: list[Rotor] = []
        self.plugboard = Permutation("", alphabet)

    @property
    def num_rotors(self) -> int:
        return self._num_rotors

    @property
    def num_pawls(self) -> int:
        return self._num_pawls

    @property
    def rotors(self) -> tuple[Rotor, ...]:
        return tuple(self._rotors)

    # ── setup ───────────────────────────────────────────────────

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Fill the slots with the named rotors (names[0] is the reflector)
        and turn each to its 0 setting."""
        chosen = self.check_rotors(names)
        for rotor in chosen:
            rotor.set(0)
        self._rotors = chosen
        debug.log("machine", f"inserted {' '.join(names)}")

    def check_rotors(self, names: Sequence[str]) -> list[Rotor]:
        """Return the catalog rotors for NAMES, raising EnigmaError if they
        cannot fill the slots. The machine is left untouched."""
        if len(names) != self._num_rotors:
            raise EnigmaError(
                f"Expected {self._num_rotors} rotors, got {len(names)}"
            )

        chosen: list[Rotor] = []
        first_moving = self._num_rotors - self._num_pawls
        for slot, name in enumerate(names):
            if name not in self.catalog:
                raise EnigmaError(f"Rotor {name!r} not available")
            if name in names[:slot]:
                raise EnigmaError(f"Rotor {name!r} used twice")

            rotor = self.catalog[name]
            if slot == 0:
                if not rotor.reflecting():
                    raise EnigmaError(f"Rotor {name!r} in slot 0 must be a reflector")
            elif rotor.reflecting():
                raise EnigmaError(f"Reflector {name!r} only fits slot 0")
            elif rotor.rotates() != (slot >= first_moving):
                kind = "moving" if slot >= first_moving else "non-moving"
                raise EnigmaError(f"Slot {slot} needs a {kind} rotor, not {name!r}")
            chosen.append(rotor)
        return chosen

    def check_setting(self, setting: str, what: str = "Rotor setting") -> None:
        """Raise EnigmaError unless SETTING has one alphabet symbol per
        non-reflector slot."""
        if len(setting) != self._num_rotors - 1:
            raise EnigmaError(
                f"{what} {setting!r} must have {self._num_rotors - 1} characters"
            )
        for ch in setting:
            if ch not in self.alphabet:
                raise EnigmaError(f"{what} character {ch!r} not in alphabet")

    def set_rings(self, rings: str) -> None:
        """Apply ring settings to slots 1.. from left to right."""
        self._require_rotors()
        self.check_setting(rings, "Ring setting")
        for rotor, letter in zip(self._rotors[1:], rings):
            rotor.set_ring(letter)

    def set_rotors(self, setting: str) -> None:
        """Turn slots 1.. to their window letters, from left to right."""
        self._require_rotors()
        self.check_setting(setting, "Rotor setting")
        for rotor, letter in zip(self._rotors[1:], setting):
            rotor.set(letter)

    def set_plugboard(self, plugboard: Permutation) -> None:
        if plugboard.size() != self.alphabet.size():
            raise EnigmaError("Plugboard does not match the alphabet")
        self.plugboard = plugboard

    def _require_rotors(self) -> None:
        if not self._rotors:
            raise EnigmaError("No rotors inserted")

    def rotor_settings(self) -> str:
        """Window letters of slots 1.., left to right."""
        return "".join(self.alphabet.to_char(r.setting) for r in self._rotors[1:])

    # ── stepping logic  ─────────────────────────────────────────

    def _step_rotors(self) -> None:
        """Advance rotors one key-press.

        Every decision reads the state before anything moves. A pawl
        between slot i-1 and slot i pushes slot i on every key-press and
        drops into slot i's notch when it is there, pushing slot i-1 too.
        """
        rotors = self._rotors
        last = len(rotors) - 1

        step = [False] * len(rotors)
        for i in range(1, last + 1):
            if not rotors[i].rotates():
                continue
            if i == last:
                step[i] = True
            elif rotors[i + 1].at_notch():
                step[i] = True
            elif rotors[i].at_notch() and rotors[i - 1].rotates():
                step[i] = True  # double step

        for rotor, go in zip(rotors, step):
            if go:
                rotor.advance()

    # ── convert one symbol  ─────────────────────────────────────

    def convert(self, c: int) -> int:
        """Convert index C after first advancing the machine."""
        if not (0 <= c < self.alphabet.size()):
            raise EnigmaError(f"Input index {c} out of range")
        self._require_rotors()

        self._step_rotors()
        if debug.on("stepping"):
            debug.log("stepping", f"window {self.rotor_settings()}")

        signal = self.plugboard.permute(c)
        for rotor in reversed(self._rotors):
            signal = rotor.convert_forward(signal)
        for rotor in self._rotors[1:]:
            signal = rotor.convert_backward(signal)
        signal = self.plugboard.invert(signal)

        if debug.on("machine"):
            debug.log("machine", f"{self.alphabet.to_char(c)} -> {self.alphabet.to_char(signal)}")
        return signal

    def convert_message(self, msg: str) -> str:
        """Convert every symbol of MSG in turn; spaces pass through."""
        for ch in msg:
            if ch != " " and ch not in self.alphabet:
                raise EnigmaError(f"Invalid character {ch!r} in message")

        return "".join(
            ch if ch == " " else self.alphabet.to_char(self.convert(self.alphabet.to_int(ch)))
            for ch in msg
        )

    def __repr__(self) -> str:
        names = " ".join(r.name for r in self._rotors)
        return f"<Machine [{names}] window={self.rotor_settings()}>"
