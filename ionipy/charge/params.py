"""
Cleanup parameters and one-call helpers.

    >>> from rdkit import Chem
    >>> from ionipy.charge import CleanupParameters, uncharge
    >>> mol = Chem.MolFromSmiles("C[N+](C)(C)CC(=O)[O-]")
    >>> Chem.MolToSmiles(uncharge(mol, CleanupParameters(force_uncharge=True)))
    'C[N+](C)(C)CC(=O)O'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ionipy.charge.catalog import AcidBaseCatalog, CatalogCache
from ionipy.charge.events import EventSink
from ionipy.charge.reionize import Reionizer
from ionipy.charge.uncharge import Uncharger

if TYPE_CHECKING:
    from rdkit.Chem import Mol


@dataclass(frozen=True, slots=True)
class CleanupParameters:
    """Options shared by the one-call helpers.

    Attributes:
        acid_base_file: Tab-separated acid/base catalog to use instead of
            the built-in one.
        do_canonical: Pick anions to neutralize in canonical atom order.
        force_uncharge: Neutralize every anion that can be neutralized.
    """

    acid_base_file: str | None = None
    do_canonical: bool = True
    force_uncharge: bool = False


DEFAULT_PARAMETERS = CleanupParameters()


def make_reionizer(
    params: CleanupParameters | None = None,
    sink: EventSink | None = None,
    cache: CatalogCache | None = None,
) -> Reionizer:
    """Build a reionizer configured from cleanup parameters."""
    params = params or DEFAULT_PARAMETERS
    if params.acid_base_file is not None:
        return Reionizer.from_file(params.acid_base_file, sink=sink, cache=cache)
    catalog = cache.default() if cache is not None else AcidBaseCatalog.default()
    return Reionizer(catalog, sink=sink)


def make_uncharger(params: CleanupParameters | None = None, sink: EventSink | None = None) -> Uncharger:
    """Build an uncharger configured from cleanup parameters."""
    params = params or DEFAULT_PARAMETERS
    return Uncharger(canonical_ordering=params.do_canonical, force=params.force_uncharge, sink=sink)


def reionize(mol: Mol, params: CleanupParameters | None = None) -> Mol:
    """Return a reionized copy of a molecule."""
    return make_reionizer(params).reionize(mol)


def reionize_in_place(mol: Mol, params: CleanupParameters | None = None) -> None:
    make_reionizer(params).reionize_in_place(mol)


def uncharge(mol: Mol, params: CleanupParameters | None = None) -> Mol:
    """Return a neutralized copy of a molecule."""
    return make_uncharger(params).uncharge(mol)


def uncharge_in_place(mol: Mol, params: CleanupParameters | None = None) -> None:
    make_uncharger(params).uncharge_in_place(mol)
