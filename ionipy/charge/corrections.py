"""
Charge corrections.

A charge correction forces atoms matched by a SMARTS pattern to a fixed
formal charge. The default set turns bare, unbonded alkali and
alkaline-earth metals and chlorine into their usual ions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from ionipy.charge.events import ChargeEvent, EventSink
from ionipy.match import compile_smarts, substructure_search

if TYPE_CHECKING:
    from rdkit.Chem import Mol


@dataclass(frozen=True, slots=True)
class ChargeCorrection:
    """Rule setting a fixed formal charge on matching atoms.

    Attributes:
        name: Label used in diagnostics.
        smarts: Trigger pattern; every atom of every match is corrected.
        charge: Formal charge to assign.
        pattern: Compiled trigger pattern.

    Raises:
        PatternError: If ``smarts`` does not compile.
    """

    name: str
    smarts: str
    charge: int
    pattern: Mol = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", compile_smarts(self.smarts))


# (name, SMARTS, charge)
_DEFAULT_CORRECTIONS: tuple[tuple[str, str, int], ...] = (
    ("[Li,Na,K]", "[Li,Na,K;X0+0]", 1),
    ("[Mg,Ca]", "[Mg,Ca;X0+0]", 2),
    ("[Cl]", "[Cl;X0+0]", -1),
)


def default_charge_corrections() -> tuple[ChargeCorrection, ...]:
    """Build the default charge correction rules.

    Returns:
        Fresh tuple of rules: Li/Na/K to +1, Mg/Ca to +2 and Cl to -1,
        each only when the atom has no connections and no charge.
    """
    return tuple(ChargeCorrection(name, smarts, charge) for name, smarts, charge in _DEFAULT_CORRECTIONS)


def apply_charge_corrections(
    mol: Mol,
    corrections: Iterable[ChargeCorrection],
    sink: EventSink,
) -> int:
    """Apply charge corrections to a molecule in place.

    Rules are applied in order, so a later rule wins on atoms matched
    by several rules.

    Args:
        mol: Molecule to modify.
        corrections: Rules to apply.
        sink: Receiver of ``charge_corrected`` events.

    Returns:
        Number of atom charge assignments made.
    """
    n_applied = 0
    for cc in corrections:
        for match in substructure_search(mol, cc.pattern):
            for idx in match:
                atom = mol.GetAtomWithIdx(idx)
                sink.emit(
                    ChargeEvent.CHARGE_CORRECTED,
                    rule=cc.name,
                    atom=idx,
                    symbol=atom.GetSymbol(),
                    charge=cc.charge,
                    previous=atom.GetFormalCharge(),
                )
                atom.SetFormalCharge(cc.charge)
                n_applied += 1
    return n_applied
