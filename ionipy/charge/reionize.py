"""
Reionization.

Redistributes protons between acid/base groups so that the strongest
acids are the ones left ionized. Works in three phases:

1. Charge corrections force bare metals and halides to their usual ions.
2. If the corrections made the molecule more positive, that many of the
   strongest protonated acids are ionized to compensate.
3. While the strongest protonated acid is stronger than the weakest
   ionized base, a proton is moved from the acid to the base.

Phase 3 is abandoned, keeping what was done so far, when the acid and
base sites are the same atom or when a proton would be moved a second
time between the same two atoms.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, TextIO

from rdkit import Chem

from ionipy.charge.catalog import AcidBaseCatalog, CatalogCache, PairData, PathLike
from ionipy.charge.corrections import (
    ChargeCorrection,
    apply_charge_corrections,
    default_charge_corrections,
)
from ionipy.charge.events import ChargeEvent, EventSink, default_sink
from ionipy.elements import AROMATIC_PROTON_ACCEPTORS, is_allowed_valence
from ionipy.match import first_match

if TYPE_CHECKING:
    from rdkit.Chem import Atom, Mol


@dataclass(frozen=True, slots=True)
class SiteMatch:
    """Result of a catalog scan.

    Attributes:
        rank: Catalog index of the matching pair.
        atoms: Matched molecule atoms, in pattern order.
    """

    rank: int
    atoms: tuple[int, ...]

    @property
    def site(self) -> int:
        """Atom that gains or loses the proton."""
        return self.atoms[-1]


def strongest_protonated(mol: Mol, catalog: AcidBaseCatalog) -> SiteMatch | None:
    """Find the strongest acid still carrying its proton.

    Args:
        mol: Molecule to scan.
        catalog: Acid/base pairs, strongest acid first.

    Returns:
        Match of the first pair whose protonated form is present, or None.
    """
    for rank, pair in enumerate(catalog):
        match = first_match(mol, pair.protonated)
        if match is not None:
            return SiteMatch(rank, match)
    return None


def weakest_ionized(mol: Mol, catalog: AcidBaseCatalog) -> SiteMatch | None:
    """Find the weakest acid present in its ionized form.

    Args:
        mol: Molecule to scan.
        catalog: Acid/base pairs, strongest acid first.

    Returns:
        Match of the last pair whose ionized form is present, or None.
    """
    for rank in range(len(catalog) - 1, -1, -1):
        match = first_match(mol, catalog[rank].ionized)
        if match is not None:
            return SiteMatch(rank, match)
    return None


def total_formal_charge(mol: Mol) -> int:
    return sum(atom.GetFormalCharge() for atom in mol.GetAtoms())


class Reionizer:
    """Adjust the ionization state of a molecule.

    Args:
        catalog: Acid/base pairs to use. Defaults to a fresh
            :meth:`AcidBaseCatalog.default` catalog.
        charge_corrections: Rules applied before rebalancing. Defaults to
            :func:`default_charge_corrections`.
        sink: Receiver of diagnostic events. Defaults to logging.

    Raises:
        TypeError: If ``catalog`` is not an :class:`AcidBaseCatalog`.

    Example:
        >>> reionizer = Reionizer()
        >>> mol = Chem.MolFromSmiles("C1=C(C=CC(=C1)[S]([O-])=O)[S](O)(=O)=O")
        >>> Chem.MolToSmiles(reionizer.reionize(mol))
        'O=S(O)c1ccc(S(=O)(=O)[O-])cc1'
    """

    def __init__(
        self,
        catalog: AcidBaseCatalog | None = None,
        charge_corrections: Iterable[ChargeCorrection] | None = None,
        sink: EventSink | None = None,
    ) -> None:
        if catalog is None:
            catalog = AcidBaseCatalog.default()
        if not isinstance(catalog, AcidBaseCatalog):
            raise TypeError(f"catalog must be an AcidBaseCatalog, got {type(catalog).__name__}")
        if charge_corrections is None:
            charge_corrections = default_charge_corrections()
        self.catalog = catalog
        self.charge_corrections: tuple[ChargeCorrection, ...] = tuple(charge_corrections)
        self.sink = sink if sink is not None else default_sink()

    @classmethod
    def from_file(
        cls,
        path: PathLike,
        charge_corrections: Iterable[ChargeCorrection] | None = None,
        sink: EventSink | None = None,
        cache: CatalogCache | None = None,
    ) -> Reionizer:
        catalog = cache.from_file(path) if cache is not None else AcidBaseCatalog.from_file(path)
        return cls(catalog, charge_corrections, sink)

    @classmethod
    def from_data(
        cls,
        data: Iterable[PairData],
        charge_corrections: Iterable[ChargeCorrection] | None = None,
        sink: EventSink | None = None,
        cache: CatalogCache | None = None,
    ) -> Reionizer:
        catalog = cache.from_data(data) if cache is not None else AcidBaseCatalog.from_data(data)
        return cls(catalog, charge_corrections, sink)

    @classmethod
    def from_stream(
        cls,
        stream: TextIO,
        charge_corrections: Iterable[ChargeCorrection] | None = None,
        sink: EventSink | None = None,
    ) -> Reionizer:
        return cls(AcidBaseCatalog.from_stream(stream), charge_corrections, sink)

    def reionize(self, mol: Mol) -> Mol:
        """Return a reionized copy of a molecule."""
        new_mol = Chem.RWMol(mol)
        self.reionize_in_place(new_mol)
        return new_mol.GetMol()

    def reionize_in_place(self, mol: Mol) -> None:
        """Reionize a molecule, modifying its atoms directly."""
        if mol.NeedsUpdatePropertyCache():
            mol.UpdatePropertyCache(strict=False)

        start_charge = total_formal_charge(mol)
        apply_charge_corrections(mol, self.charge_corrections, self.sink)
        current_charge = total_formal_charge(mol)
        charge_diff = current_charge - start_charge

        # A neutral molecule is taken as fixed. Otherwise, if corrections
        # made it more positive, ionize acids to balance them.
        if current_charge != 0:
            while charge_diff > 0:
                acid = strongest_protonated(mol, self.catalog)
                if acid is None:
                    break
                self.sink.emit(
                    ChargeEvent.ACID_IONIZED,
                    name=self.catalog[acid.rank].name,
                    atom=acid.site,
                )
                atom = mol.GetAtomWithIdx(acid.site)
                atom.SetFormalCharge(atom.GetFormalCharge() - 1)
                if atom.GetNumExplicitHs() > 0:
                    atom.SetNumExplicitHs(atom.GetNumExplicitHs() - 1)
                atom.UpdatePropertyCache()
                charge_diff -= 1

        self._balance(mol)

    def _balance(self, mol: Mol) -> None:
        """Move protons from strong acids to weak bases."""
        already_moved: set[tuple[int, int]] = set()
        while True:
            acid = strongest_protonated(mol, self.catalog)
            base = weakest_ionized(mol, self.catalog)
            if acid is None or base is None or acid.rank >= base.rank:
                break

            if acid.site == base.site:
                # The proton would stay where it is: nothing would change.
                self.sink.emit(
                    ChargeEvent.REIONIZATION_ABORTED,
                    reason="same_atom",
                    atoms=(acid.site,),
                )
                break

            key = (min(acid.site, base.site), max(acid.site, base.site))
            if key in already_moved:
                self.sink.emit(
                    ChargeEvent.REIONIZATION_ABORTED,
                    reason="oscillation",
                    atoms=key,
                )
                break
            already_moved.add(key)

            self.sink.emit(
                ChargeEvent.PROTON_MOVED,
                acid=self.catalog[acid.rank].name,
                base=self.catalog[base.rank].name,
                from_atom=acid.site,
                to_atom=base.site,
            )
            acid_atom = mol.GetAtomWithIdx(acid.site)
            base_atom = mol.GetAtomWithIdx(base.site)
            _remove_proton(acid_atom)
            _add_proton(base_atom, acid_atom)


def _remove_proton(atom: Atom) -> None:
    atom.SetFormalCharge(atom.GetFormalCharge() - 1)
    # Implicit Hs go away on their own; otherwise drop an explicit one.
    if atom.GetNumImplicitHs() == 0 and atom.GetNumExplicitHs() > 0:
        atom.SetNumExplicitHs(atom.GetNumExplicitHs() - 1)
    atom.UpdatePropertyCache()


def _add_proton(atom: Atom, donor: Atom) -> None:
    atom.SetFormalCharge(atom.GetFormalCharge() + 1)
    # The aromatic N/P test looks at the donor, not at the receiving atom.
    if (
        atom.GetNoImplicit()
        or (donor.GetAtomicNum() in AROMATIC_PROTON_ACCEPTORS and donor.GetIsAromatic())
        or not is_allowed_valence(atom.GetAtomicNum(), atom.GetTotalValence())
    ):
        atom.SetNumExplicitHs(atom.GetNumExplicitHs() + 1)
    atom.UpdatePropertyCache()
