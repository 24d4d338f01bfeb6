"""
Rotor tests
===========
Run with:  python -m pytest tests/ -v
"""

import pytest

from alphabet_and_permutation import Alphabet, Permutation
from errors import EnigmaError
from rotor_and_reflector import FixedRotor, MovingRotor, Reflector, Rotor

ABCD = Alphabet("ABCD")
ROTOR_I = "(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)"


def swap_ab() -> Permutation:
    return Permutation("(AB)", ABCD)


# ── Capabilities ──────────────────────────────────────────────────────────────
def test_capability_flags():
    fixed = FixedRotor("F", swap_ab())
    moving = MovingRotor("M", swap_ab(), "C")
    refl = Reflector("R", Permutation("(AB) (CD)", ABCD))

    assert (fixed.rotates(), fixed.reflecting()) == (False, False)
    assert (moving.rotates(), moving.reflecting()) == (True, False)
    assert (refl.rotates(), refl.reflecting()) == (False, True)
    assert isinstance(fixed, Rotor) and isinstance(refl, Rotor)


def test_fixed_rotor_never_moves():
    r = FixedRotor("F", swap_ab())
    r.set("C")
    r.advance()
    assert r.setting == 2
    assert not r.at_notch()


def test_reflector_has_one_position():
    r = Reflector("R", Permutation("(AB) (CD)", ABCD))
    r.set(0)
    r.advance()
    assert r.setting == 0
    with pytest.raises(EnigmaError):
        r.set("B")


# ── Settings ──────────────────────────────────────────────────────────────────
def test_set_by_index_and_symbol():
    r = MovingRotor("M", swap_ab(), "C")
    r.set("C")
    assert r.setting == 2
    r.set(5)
    assert r.setting == 1
    r.set(-1)
    assert r.setting == 3


def test_set_unknown_symbol_fails():
    r = MovingRotor("M", swap_ab(), "C")
    with pytest.raises(EnigmaError):
        r.set("Z")
    with pytest.raises(EnigmaError):
        r.set_ring("Z")


def test_set_ring():
    r = MovingRotor("M", swap_ab(), "C")
    r.set_ring("D")
    assert r.ring_setting == 3
    assert r.setting == 0


def test_advance_wraps():
    r = MovingRotor("M", swap_ab(), "C")
    r.set("D")
    r.advance()
    assert r.setting == 0


def test_at_notch():
    r = MovingRotor("M", swap_ab(), "BD")
    assert not r.at_notch()
    r.set("B")
    assert r.at_notch()
    r.advance()
    assert not r.at_notch()
    r.advance()
    assert r.at_notch()


def test_notches_must_be_in_alphabet():
    with pytest.raises(EnigmaError):
        MovingRotor("M", swap_ab(), "Z")


# ── Signal paths ──────────────────────────────────────────────────────────────
def test_convert_at_zero_setting_is_the_wiring():
    r = MovingRotor("M", swap_ab(), "C")
    assert [r.convert_forward(i) for i in range(4)] == [1, 0, 2, 3]
    assert [r.convert_backward(i) for i in range(4)] == [1, 0, 2, 3]


def test_convert_with_rotor_setting():
    r = MovingRotor("M", swap_ab(), "C")
    r.set(1)
    # contact 0+1 = B -> A, then back by one: D
    assert r.convert_forward(0) == 3
    assert r.convert_backward(3) == 0
    assert r.convert_forward(1) == 1


def test_ring_setting_cancels_rotor_setting():
    r = MovingRotor("M", swap_ab(), "C")
    r.set(1)
    r.set_ring(1)
    assert [r.convert_forward(i) for i in range(4)] == [1, 0, 2, 3]


def test_inverse_wiring_with_same_offsets_recovers_input():
    r = MovingRotor("I", Permutation(ROTOR_I, Alphabet()), "Q")
    r.set("H")
    r.set_ring("D")
    for x in range(26):
        assert r.convert_backward(r.convert_forward(x)) == x
        assert r.convert_forward(r.convert_backward(x)) == x


def test_offsets_change_the_substitution():
    r = MovingRotor("I", Permutation(ROTOR_I, Alphabet()), "Q")
    plain = [r.convert_forward(x) for x in range(26)]
    r.set("H")
    r.set_ring("D")
    assert [r.convert_forward(x) for x in range(26)] != plain


def test_repr_names_the_variant():
    assert repr(MovingRotor("III", swap_ab(), "C")).startswith("<MovingRotor III")
