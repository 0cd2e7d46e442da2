"""SMARTS substructure matching."""

from ionipy.match.substructure import (
    Match,
    compile_smarts,
    substructure_search,
    first_match,
    has_substructure,
    matched_atoms,
)

__all__ = [
    "Match",
    "compile_smarts",
    "substructure_search",
    "first_match",
    "has_substructure",
    "matched_atoms",
]
