# alphabet_and_permutation.py
from __future__ import annotations

import re
from collections.abc import Iterator

from debug import Debug
from errors import EnigmaError

debug = Debug()
debug.disable("alphabet", "permutation")

UPPER = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

_CYCLES_RE = re.compile(r"(?:\([^()]+\))*")
_GROUP_RE = re.compile(r"\(([^()]+)\)")


# ── Alphabet ──────────────────────────────────────────────────────
class Alphabet:
    """Ordered set of symbols; the K-th symbol has index K."""

    def __init__(self, chars: str = UPPER) -> None:
        seen: set[str] = set()
        for ch in chars:
            if ch in seen:
                raise EnigmaError(f"Character {ch!r} duplicated in alphabet")
            seen.add(ch)

        self.chars: str = chars
        self.char_to_index: dict[str, int] = {ch: i for i, ch in enumerate(chars)}
        debug.log("alphabet", f"{len(chars)} symbols: {chars}")

    def size(self) -> int:
        return len(self.chars)

    def contains(self, ch: str) -> bool:
        return ch in self.char_to_index

    # integer → symbol
    def to_char(self, index: int) -> str:
        if not (0 <= index < len(self.chars)):
            hi = len(self.chars) - 1
            raise EnigmaError(f"Index {index} out of range 0–{hi}")
        return self.chars[index]

    # symbol → integer
    def to_int(self, ch: str) -> int:
        try:
            return self.char_to_index[ch]
        except KeyError:
            raise EnigmaError(f"Character {ch!r} not in alphabet") from None

    # ── niceties --------------------------------------------------
    def __len__(self) -> int:
        return len(self.chars)

    def __contains__(self, ch: object) -> bool:
        return ch in self.char_to_index

    def __iter__(self) -> Iterator[str]:
        return iter(self.chars)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Alphabet) and other.chars == self.chars

    def __hash__(self) -> int:
        return hash(self.chars)

    def __repr__(self) -> str:
        return f"<Alphabet {self.chars}>"


# ── Permutation ───────────────────────────────────────────────────
class Permutation:
    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        """
        Build the permutation from cycle notation, e.g. "(ABC) (DE) (F)".
        Whitespace is ignored; symbols in no cycle map to themselves.
        """
        self.alphabet = alphabet
        n = alphabet.size()

        # integer lookup tables, identity until a cycle says otherwise
        self._fwd: list[int] = list(range(n))
        self._rev: list[int] = list(range(n))

        compact = "".join(cycles.split())
        if not _CYCLES_RE.fullmatch(compact):
            raise EnigmaError(f"Malformed cycles {cycles.strip()!r}")

        named: set[str] = set()
        for group in _GROUP_RE.findall(compact):
            for ch in group:
                if ch not in alphabet:
                    raise EnigmaError(f"Symbol {ch!r} in cycle ({group}) not in alphabet")
                if ch in named:
                    raise EnigmaError(f"Symbol {ch!r} appears in more than one cycle")
                named.add(ch)
            self._add_cycle(group)

        if debug.on("permutation"):
            debug.log("permutation", f"built {self.cycles()}")

    @classmethod
    def from_wiring(cls, wiring: str, alphabet: Alphabet) -> "Permutation":
        """Permutation whose image of alphabet[i] is wiring[i]."""
        if sorted(wiring) != sorted(alphabet.chars):
            raise EnigmaError("wiring must be a permutation of alphabet")

        perm = cls("", alphabet)
        for i, ch in enumerate(wiring):
            j = alphabet.to_int(ch)
            perm._fwd[i] = j
            perm._rev[j] = i
        return perm

    def _add_cycle(self, cycle: str) -> None:
        idx = [self.alphabet.to_int(ch) for ch in cycle]
        for src, dst in zip(idx, idx[1:] + idx[:1]):
            self._fwd[src] = dst
            self._rev[dst] = src

    # ── arithmetic ------------------------------------------------
    def wrap(self, p: int) -> int:
        """Return P modulo the size of this permutation, in [0, size)."""
        n = self.size()
        return ((p % n) + n) % n

    def size(self) -> int:
        return self.alphabet.size()

    # ── lookups ---------------------------------------------------
    def permute(self, p: int) -> int:
        return self._fwd[self.wrap(p)]

    def invert(self, c: int) -> int:
        return self._rev[self.wrap(c)]

    def permute_char(self, ch: str) -> str:
        return self.alphabet.to_char(self._fwd[self.alphabet.to_int(ch)])

    def invert_char(self, ch: str) -> str:
        return self.alphabet.to_char(self._rev[self.alphabet.to_int(ch)])

    # ── properties ------------------------------------------------
    def derangement(self) -> bool:
        """True iff no index maps to itself."""
        return all(j != i for i, j in enumerate(self._fwd))

    def involution(self) -> bool:
        """True iff applying the permutation twice gives the identity."""
        return self._fwd == self._rev

    def cycles(self) -> str:
        """Cycle notation, one group per cycle, fixed points included."""
        seen: set[int] = set()
        groups: list[str] = []
        for start in range(self.size()):
            if start in seen:
                continue
            group, i = [], start
            while i not in seen:
                seen.add(i)
                group.append(self.alphabet.chars[i])
                i = self._fwd[i]
            groups.append("(" + "".join(group) + ")")
        return " ".join(groups)

    def __repr__(self) -> str:
        return f"<Permutation {self.cycles()}>"
