"""
SMARTS substructure matching.

This module compiles SMARTS patterns and finds their matches within
molecules. Matching itself is delegated to RDKit; this layer fixes the
conventions used by the rest of the package: matches are tuples of atom
indices in pattern-atom order, and compilation failures raise
:class:`~ionipy.exceptions.PatternError` instead of returning ``None``.

Example:
    >>> from rdkit import Chem
    >>> from ionipy.match import compile_smarts, substructure_search
    >>>
    >>> mol = Chem.MolFromSmiles("OC(=O)CC(=O)O")
    >>> pattern = compile_smarts("C(=O)[OH]")
    >>> substructure_search(mol, pattern)
    [(1, 2, 0), (4, 5, 6)]
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rdkit import Chem

from ionipy.exceptions import PatternError

if TYPE_CHECKING:
    from rdkit.Chem import Mol


Match = tuple[int, ...]


def compile_smarts(smarts: str) -> Mol:
    """Compile a SMARTS string into a query molecule.

    Args:
        smarts: SMARTS pattern text.

    Returns:
        Query molecule usable with :func:`substructure_search`.

    Raises:
        PatternError: If the text is empty or not valid SMARTS.
    """
    if not smarts or not smarts.strip():
        raise PatternError("Empty SMARTS pattern", smarts)
    pattern = Chem.MolFromSmarts(smarts)
    if pattern is None:
        raise PatternError("Invalid SMARTS pattern", smarts)
    return pattern


def substructure_search(mol: Mol, pattern: Mol, unique: bool = True) -> list[Match]:
    """Find all matches of a pattern in a molecule.

    Args:
        mol: Molecule to search.
        pattern: Compiled query (see :func:`compile_smarts`).
        unique: If True, matches covering the same atom set are reported once.

    Returns:
        List of matches; each match lists molecule atom indices in the
        order of the pattern atoms.
    """
    if pattern is None:
        raise ValueError("pattern must not be None")
    return [tuple(m) for m in mol.GetSubstructMatches(pattern, uniquify=unique)]


def first_match(mol: Mol, pattern: Mol) -> Match | None:
    """Find the first match of a pattern, or None if it does not match."""
    if pattern is None:
        raise ValueError("pattern must not be None")
    match = mol.GetSubstructMatch(pattern)
    return tuple(match) if match else None


def has_substructure(mol: Mol, pattern: Mol) -> bool:
    """Check if a molecule contains a pattern."""
    return first_match(mol, pattern) is not None


def matched_atoms(mol: Mol, pattern: Mol) -> list[int]:
    """Atom indices of every match, flattened in match order."""
    return [idx for match in substructure_search(mol, pattern) for idx in match]
