"""
Element classes and valence data.

This module provides the element-level facts the charge algorithms rely
on: which elements count as "early" (electropositive main-group and
early transition elements whose hydrides carry hydrogen as H-), and the
allowed valence states of each element.

Valence states come from the RDKit periodic table so that they agree
with the valence model used when a molecule is sanitized.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Final, FrozenSet

from rdkit import Chem


# Atomic numbers
HYDROGEN: Final[int] = 1
CARBON: Final[int] = 6
NITROGEN: Final[int] = 7
OXYGEN: Final[int] = 8
PHOSPHORUS: Final[int] = 15
SULFUR: Final[int] = 16
CHLORINE: Final[int] = 17

# Elements whose bonds to hydrogen are polarized towards hydrogen
# (hydridic H). Neutralizing an anion on one of these removes a
# hydrogen instead of adding one, and a cation gains one.
EARLY_ATOMS: Final[FrozenSet[int]] = frozenset({
    3, 4, 5,                  # Li, Be, B
    11, 12, 13,               # Na, Mg, Al
    19, 20, 21, 22,           # K, Ca, Sc, Ti
    30, 31, 32,               # Zn, Ga, Ge
    37, 38, 39, 40, 41,       # Rb, Sr, Y, Zr, Nb
    48, 49, 50, 51,           # Cd, In, Sn, Sb
    55, 56, 57,               # Cs, Ba, La
    *range(58, 72),           # lanthanides
    72, 73,                   # Hf, Ta
    80, 81, 82, 83,           # Hg, Tl, Pb, Bi
    87, 88, 89,               # Fr, Ra, Ac
    *range(90, 104),          # actinides
    104, 105,                 # Rf, Db
})

# Aromatic atoms that pick up an explicit hydrogen when protonated
AROMATIC_PROTON_ACCEPTORS: Final[FrozenSet[int]] = frozenset({NITROGEN, PHOSPHORUS})


def is_early_atom(atomic_num: int) -> bool:
    """Check if an element is an early (hydride-forming) atom.

    Args:
        atomic_num: Atomic number.

    Returns:
        True for alkali, alkaline-earth and similar electropositive elements.
    """
    return atomic_num in EARLY_ATOMS


@lru_cache(maxsize=None)
def get_valence_list(atomic_num: int) -> tuple[int, ...]:
    """Get the allowed valence states of an element.

    A value of -1 in the result means the element accepts any valence.

    Args:
        atomic_num: Atomic number.

    Returns:
        Tuple of allowed valences, in periodic-table order.
    """
    return tuple(Chem.GetPeriodicTable().GetValenceList(atomic_num))


def is_allowed_valence(atomic_num: int, valence: int) -> bool:
    """Check if a valence is one of the listed states of an element."""
    return valence in get_valence_list(atomic_num)
