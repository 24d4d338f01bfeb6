# utilities.py
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import List, Tuple

from alphabet_and_permutation import Alphabet, Permutation
from debug import Debug
from errors import EnigmaError
from machine import Machine
from rotor_and_reflector import FixedRotor, MovingRotor, Reflector, Rotor

debug = Debug()
debug.disable("config")

# ────────────────────────────────────────────────────────────────────────
#  0. Regex & trivial helpers
# ────────────────────────────────────────────────────────────────────────

_token_re = re.compile(r"\([^()]*\)|[^\s()]+|\S")
RESERVED = set("*()")


def _tokens(text: str) -> List[str]:
    """Split a description into words and whole "(...)" groups."""
    out = []
    for tok in _token_re.findall(text):
        if tok in ("(", ")"):
            raise EnigmaError(f"Unbalanced parenthesis in {text.strip()[:40]!r}")
        out.append(tok)
    return out


def _int(token: str, what: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise EnigmaError(f"Expected {what}, got {token!r}") from None


# ────────────────────────────────────────────────────────────────────────
#  1. Wheel database
# ────────────────────────────────────────────────────────────────────────

# Classic wheels in cycle notation; B and C are the thin reflectors.
DEFAULT_CONFIG = """\
ABCDEFGHIJKLMNOPQRSTUVWXYZ
5 3
I MQ      (AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)
II ME     (FIXVYOMW) (CDKLHUP) (ESZ) (BJ) (GR) (NT) (A) (Q)
III MV    (ABDHPEJT) (CFLVMZOYQIRWUKXSG) (N)
IV MJ     (AEPLIYWCOXMRFZBSTGJQNH) (DV) (KU)
V MZ      (AVOLDRWFIUQ)(BZKSMNHYC) (EGTJPX)
VI MZM    (AJQDVLEOZWIYTS) (CGMNHFUX) (BPRK)
VII MZM   (ANOUPFRIMBZTLWKSVEGCJYDHXQ)
Beta N    (ALBEVFCYODJWUGNMQTZSKPR) (HIX)
Gamma N   (AFNIRLBSQWVXGUZDKMTPCOYJHE)
B R       (AE) (BN) (CK) (DQ) (FU) (GY) (HW) (IJ) (LO) (MP)
          (RX) (SZ) (TV)
C R       (AR) (BD) (CO) (EJ) (FN) (GT) (HK) (IV) (LM) (PW)
          (QZ) (SX) (UY)
"""


# ────────────────────────────────────────────────────────────────────────
#  2. Machine descriptions
# ────────────────────────────────────────────────────────────────────────


def make_alphabet(chars: str) -> Alphabet:
    bad = {ch for ch in chars if ch in RESERVED or ch.isspace()}
    if not chars or bad:
        raise EnigmaError(f"Bad alphabet {chars!r}")
    return Alphabet(chars)


def make_rotor(name: str, kind: str, perm: Permutation) -> Rotor:
    """Build a rotor from its type code: M<notches>, N or R."""
    if kind.startswith("M"):
        return MovingRotor(name, perm, kind[1:])
    if kind == "N":
        return FixedRotor(name, perm)
    if kind == "R":
        if not (perm.derangement() and perm.involution()):
            debug.log("config", f"reflector {name} is not a fixed-point-free involution")
        return Reflector(name, perm)
    raise EnigmaError(f"Bad type {kind!r} for rotor {name!r}")


def read_config(text: str) -> Machine:
    """Return a machine described in the classic plain-text format."""
    lines = text.lstrip().splitlines()
    if not lines:
        raise EnigmaError("Configuration is empty")
    alphabet = make_alphabet(lines[0].strip())

    toks = _tokens("\n".join(lines[1:]))
    if len(toks) < 2:
        raise EnigmaError("Configuration truncated: missing rotor and pawl counts")
    num_rotors = _int(toks[0], "number of rotor slots")
    pawls = _int(toks[1], "number of pawls")

    rotors: List[Rotor] = []
    i = 2
    while i < len(toks):
        if i + 1 >= len(toks) or toks[i].startswith("("):
            raise EnigmaError(f"Bad rotor description near {toks[i]!r}")
        name, kind = toks[i], toks[i + 1]
        i += 2
        cycles: List[str] = []
        while i < len(toks) and toks[i].startswith("("):
            cycles.append(toks[i])
            i += 1
        rotors.append(make_rotor(name, kind, Permutation(" ".join(cycles), alphabet)))
        debug.log("config", f"rotor {name} {kind}")

    return Machine(alphabet, num_rotors, pawls, rotors)


def _text_fields(entry: dict, *keys: str) -> None:
    for key in keys:
        if key in entry and not isinstance(entry[key], str):
            raise EnigmaError(f"{key!r} must be a string in {entry!r}")


def read_json_config(data: object) -> Machine:
    """Return a machine from a JSON description (see load_config)."""
    if not isinstance(data, dict):
        raise EnigmaError("JSON config must be an object")
    required = {"alphabet", "rotor_slots", "pawls", "rotors"}
    missing = required - data.keys()
    if missing:
        raise EnigmaError(f"Missing keys in config: {', '.join(sorted(missing))}")
    _text_fields(data, "alphabet")
    if not isinstance(data["rotors"], list):
        raise EnigmaError("'rotors' must be a list")

    alphabet = make_alphabet(data["alphabet"])
    rotors: List[Rotor] = []
    for entry in data["rotors"]:
        if not isinstance(entry, dict):
            raise EnigmaError(f"Rotor entry {entry!r} must be an object")
        if "name" not in entry or "type" not in entry:
            raise EnigmaError(f"Rotor entry {entry!r} needs 'name' and 'type'")
        _text_fields(entry, "name", "type", "wiring", "cycles", "notches")
        if "wiring" in entry:
            perm = Permutation.from_wiring(entry["wiring"], alphabet)
        else:
            perm = Permutation(entry.get("cycles", ""), alphabet)
        kind = entry["type"] + (entry.get("notches", "") if entry["type"] == "M" else "")
        rotors.append(make_rotor(entry["name"], kind, perm))

    return Machine(
        alphabet,
        _int(str(data["rotor_slots"]), "number of rotor slots"),
        _int(str(data["pawls"]), "number of pawls"),
        rotors,
    )


def load_config(path: str | Path | None = None) -> Machine:
    """Read a machine description from *path*; None means the built-in one."""
    if path is None:
        return read_config(DEFAULT_CONFIG)

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise EnigmaError(f"could not open {path}: {exc.strerror}") from exc
    except UnicodeDecodeError as exc:
        raise EnigmaError(f"{path} is not UTF-8 text") from exc

    if path.suffix.lower() == ".json":
        try:
            return read_json_config(json.loads(text))
        except json.JSONDecodeError as exc:
            raise EnigmaError(f"{path} is not valid JSON: {exc.msg}") from exc
    return read_config(text)


# ────────────────────────────────────────────────────────────────────────
#  3. Settings lines
# ────────────────────────────────────────────────────────────────────────


def parse_settings(line: str, num_rotors: int) -> Tuple[List[str], str, str | None, str]:
    """Split "* B Beta III IV I AXLE [RING] (AB) ..." into
    `(rotor_names, setting, ring_setting, plugboard_cycles)`."""
    body = line.strip()
    if not body.startswith("*"):
        raise EnigmaError(f"Settings line must start with '*': {line!r}")
    body = body[1:]

    cut = body.find("(")
    head, plugs = (body, "") if cut == -1 else (body[:cut], body[cut:])
    words = head.split()

    if len(words) < num_rotors + 1:
        raise EnigmaError("Too few rotors or missing initial setting")
    if len(words) > num_rotors + 2:
        raise EnigmaError("Too many rotors in settings")

    names = words[:num_rotors]
    setting = words[num_rotors]
    rings = words[num_rotors + 1] if len(words) == num_rotors + 2 else None
    return names, setting, rings, plugs


def setup(machine: Machine, line: str) -> None:
    """Configure MACHINE from a settings line. Without a ring setting every
    ring goes back to the first letter; without cycles the plugboard is
    the identity."""
    names, setting, rings, plugs = parse_settings(line, machine.num_rotors)
    if rings is None:
        rings = machine.alphabet.to_char(0) * (machine.num_rotors - 1)

    # a rejected line leaves the machine as it was
    machine.check_rotors(names)
    machine.check_setting(setting, "Rotor setting")
    machine.check_setting(rings, "Ring setting")
    plugboard = Permutation(plugs, machine.alphabet)

    machine.insert_rotors(names)
    machine.set_rings(rings)
    machine.set_rotors(setting)
    machine.set_plugboard(plugboard)
    if debug.on("config"):
        debug.log("config", f"setup {machine!r} plugboard {plugboard.cycles()}")


# ────────────────────────────────────────────────────────────────────────
#  4. Text pre- and post-processing
# ────────────────────────────────────────────────────────────────────────


def preprocess_message(msg: str, alphabet: Alphabet) -> str:
    """Upper‑case where that helps, keep spaces, drop symbols outside the alphabet."""
    out = []
    for ch in msg:
        if ch not in alphabet and ch.upper() in alphabet:
            ch = ch.upper()
        if ch == " " or ch in alphabet:
            out.append(ch)
    return "".join(out)


def format_blocks(msg: str, block: int = 5) -> str:
    """Drop spaces and regroup MSG into blocks of BLOCK symbols."""
    if block < 1:
        raise EnigmaError(f"Block size must be positive, got {block}")
    clean = msg.replace(" ", "")
    return " ".join(clean[i : i + block] for i in range(0, len(clean), block))


__all__ = [
    "DEFAULT_CONFIG",
    "format_blocks",
    "load_config",
    "parse_settings",
    "preprocess_message",
    "read_config",
    "read_json_config",
    "setup",
]
