"""
Canonical atom ranking.

Provides a reproducible total order over the atoms of a molecule,
independent of the order in which the atoms were read.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rdkit import Chem

if TYPE_CHECKING:
    from rdkit.Chem import Mol


def canonical_ranks(mol: Mol) -> list[int]:
    """Compute canonical atom ranks.

    Ties between symmetry-equivalent atoms are broken, so the result is
    a permutation of ``range(mol.GetNumAtoms())``.

    Args:
        mol: Molecule to rank.

    Returns:
        List where ``ranks[i]`` is the canonical rank of atom ``i``.

    Example:
        >>> mol = Chem.MolFromSmiles("OCC")
        >>> sorted(canonical_ranks(mol))
        [0, 1, 2]
    """
    return list(Chem.CanonicalRankAtoms(mol, breakTies=True))


def identity_ranks(mol: Mol) -> list[int]:
    """Rank atoms by their index."""
    return list(range(mol.GetNumAtoms()))


def rank_key(ranks: list[int], atom_idx: int) -> tuple[int, int]:
    """Sort key ordering atoms by ``(rank, index)``."""
    return ranks[atom_idx], atom_idx
