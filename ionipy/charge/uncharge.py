"""
Charge neutralization.

Removes as much net charge as possible by adding hydrogens to anions
and removing them from cations. Charges that cannot be removed this way
(quaternary ammonium and similar cations) are balanced by leaving the
same number of anions charged, so zwitterions stay zwitterions unless
full neutralization is requested.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rdkit import Chem

from ionipy.canon import canonical_ranks, identity_ranks, rank_key
from ionipy.charge.events import ChargeEvent, EventSink, default_sink
from ionipy.elements import CARBON, is_early_atom
from ionipy.match import compile_smarts, substructure_search

if TYPE_CHECKING:
    from rdkit.Chem import Atom, Mol


# Cations with a removable hydrogen, not next to an anion
# (unless that anion has another anion next to it)
POS_H_SMARTS = "[+,+2,+3,+4;!h0;!$(*~[-]),$(*(~[-])~[-])]"
# Cations without hydrogens, not next to an anion
POS_NOH_SMARTS = "[+,+2,+3,+4;h0;!$(*~[-])]"
# Anions not next to a cation
NEG_SMARTS = "[-!$(*~[+,+2,+3,+4])]"
# Conjugate bases of the common acids
NEG_ACID_SMARTS = (
    # carboxylate, carbonate, sulfi(a)te and their thio analogues
    "[$([O,S;-][C,S;+0]=[O,S]),"
    # phosphi(a)te, nitrate and their thio analogues
    "$([O,S;-][N,P;+](=[O,S])[O,S;-]),"
    # hali(a)te, perhalate
    "$([O-][Cl,Br,I;+,+2,+3][O-]),"
    # tetrazolate
    "$([n-]1nnnc1),$([n-]1ncnn1)]"
)


class Uncharger:
    """Neutralize a molecule by adjusting hydrogen counts.

    Args:
        canonical_ordering: Choose which anions to neutralize by canonical
            atom rank, so the result does not depend on atom order.
        force: Neutralize every anion that can be neutralized, even when
            this leaves an unbalanced positive charge.
        sink: Receiver of diagnostic events. Defaults to logging.

    Example:
        >>> uncharger = Uncharger()
        >>> mol = Chem.MolFromSmiles("[NH3+]CC(=O)[O-]")
        >>> Chem.MolToSmiles(uncharger.uncharge(mol))
        'NCC(=O)O'
    """

    def __init__(
        self,
        canonical_ordering: bool = True,
        force: bool = False,
        sink: EventSink | None = None,
    ) -> None:
        self.canonical_ordering = canonical_ordering
        self.force = force
        self.sink = sink if sink is not None else default_sink()
        self.pos_h = compile_smarts(POS_H_SMARTS)
        self.pos_noh = compile_smarts(POS_NOH_SMARTS)
        self.neg = compile_smarts(NEG_SMARTS)
        self.neg_acid = compile_smarts(NEG_ACID_SMARTS)

    def uncharge(self, mol: Mol) -> Mol:
        """Return a neutralized copy of a molecule."""
        new_mol = Chem.RWMol(mol)
        self.uncharge_in_place(new_mol)
        return new_mol.GetMol()

    def uncharge_in_place(self, mol: Mol) -> None:
        """Neutralize a molecule, modifying its atoms directly."""
        self.sink.emit(ChargeEvent.UNCHARGE_STARTED)
        if mol.NeedsUpdatePropertyCache():
            mol.UpdatePropertyCache(strict=False)

        p_matches = substructure_search(mol, self.pos_h)
        q_matches = substructure_search(mol, self.pos_noh)
        n_matches = substructure_search(mol, self.neg)
        a_matches = substructure_search(mol, self.neg_acid)

        # Charge that hydrogen changes cannot remove
        q_matched = sum(mol.GetAtomWithIdx(m[0]).GetFormalCharge() for m in q_matches)

        needs_neutralization = q_matched > 0 and (n_matches or a_matches)
        if self.canonical_ordering and needs_neutralization:
            ranks = canonical_ranks(mol)
        else:
            ranks = identity_ranks(mol)

        n_atoms = [m[0] for m in n_matches]
        a_atoms = [m[0] for m in a_matches]
        if self.canonical_ordering:
            n_atoms.sort(key=lambda idx: rank_key(ranks, idx))
            a_atoms.sort(key=lambda idx: rank_key(ranks, idx))

        neg_atoms = self._negative_sites(mol, n_atoms, a_atoms)

        neg_surplus = len(neg_atoms)
        if not self.force:
            # Leave enough anions to balance the cations we cannot neutralize
            neg_surplus -= q_matched

        if neg_surplus:
            for idx in neg_atoms:
                if self._neutralize_negative(mol.GetAtomWithIdx(idx)):
                    neg_surplus -= 1
                    if neg_surplus == 0:
                        break

        net_charge = sum(atom.GetFormalCharge() for atom in mol.GetAtoms())
        if net_charge > 0:
            p_atoms = [idx for match in p_matches for idx in match]
            for idx in p_atoms:
                net_charge = self._neutralize_positive(mol.GetAtomWithIdx(idx), net_charge)
                if net_charge == 0:
                    break

    def _negative_sites(self, mol: Mol, n_atoms: list[int], a_atoms: list[int]) -> list[int]:
        """Merge plain anions and acid anions into one processing order.

        Anions also matched as acid anions are taken from the acid list
        only. Acid anions next to a cation are neutralized once per
        cation, so for example nitrate gets a single proton.
        """
        acids = set(a_atoms)
        neg_atoms = [idx for idx in n_atoms if idx not in acids]

        seen_cations: set[int] = set()
        skipped: set[int] = set()
        for idx in a_atoms:
            for nbr in mol.GetAtomWithIdx(idx).GetNeighbors():
                if nbr.GetFormalCharge() > 0:
                    nbr_idx = nbr.GetIdx()
                    if nbr_idx in seen_cations:
                        skipped.add(idx)
                    else:
                        seen_cations.add(nbr_idx)
                    break
        neg_atoms.extend(idx for idx in a_atoms if idx not in skipped)
        return neg_atoms

    def _neutralize_negative(self, atom: Atom) -> bool:
        """Add a proton to an anion, or take a hydride off an early atom.

        Returns:
            False if the atom is an early atom without hydrogens.
        """
        early = is_early_atom(atom.GetAtomicNum())
        if early and not atom.GetTotalNumHs():
            return False
        h_delta = -1 if early else 1
        atom.SetNumExplicitHs(atom.GetTotalNumHs() + h_delta)
        atom.SetNoImplicit(True)
        atom.SetFormalCharge(atom.GetFormalCharge() + 1)
        self.sink.emit(ChargeEvent.NEGATIVE_NEUTRALIZED, atom=atom.GetIdx(), symbol=atom.GetSymbol())
        atom.UpdatePropertyCache(strict=False)
        return True

    def _neutralize_positive(self, atom: Atom, net_charge: int) -> int:
        """Remove positive charge from a cation until it or the molecule is neutral.

        Returns:
            Remaining net charge of the molecule.
        """
        # Molecules read from mol blocks usually lack explicit Hs
        atom.SetNumExplicitHs(atom.GetTotalNumHs())
        atom.SetNoImplicit(True)
        while atom.GetFormalCharge() > 0 and net_charge > 0:
            atom.SetFormalCharge(atom.GetFormalCharge() - 1)
            net_charge -= 1
            last_h = False
            if atom.GetAtomicNum() != CARBON and not is_early_atom(atom.GetAtomicNum()):
                n_explicit = atom.GetNumExplicitHs()
                if n_explicit >= 1:
                    atom.SetNumExplicitHs(n_explicit - 1)
                last_h = n_explicit == 1
            else:
                atom.SetNumExplicitHs(atom.GetNumExplicitHs() + 1)
            self.sink.emit(ChargeEvent.POSITIVE_NEUTRALIZED, atom=atom.GetIdx(), symbol=atom.GetSymbol())
            atom.UpdatePropertyCache(strict=False)
            if last_h:
                # No hydrogen left to take away
                break
        return net_charge
