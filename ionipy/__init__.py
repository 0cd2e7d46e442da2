"""
Ionipy - formal charge standardization for RDKit molecules.

Moves protons between acid/base groups so that the strongest acids are
the ionized ones, and neutralizes molecules as far as their valences
allow.

    >>> from rdkit import Chem
    >>> from ionipy import Reionizer, Uncharger
    >>> mol = Chem.MolFromSmiles("[NH3+]CC(=O)[O-]")
    >>> Chem.MolToSmiles(Uncharger().uncharge(mol))
    'NCC(=O)O'

Submodules:
    ionipy.charge   - Reionizer, Uncharger, acid/base catalogs
    ionipy.match    - SMARTS compilation and substructure search
    ionipy.canon    - Canonical atom ranks
    ionipy.elements - Early atoms and valence states
"""

__version__ = "0.1.0"

# Charge standardization
from ionipy.charge import (
    AcidBaseCatalog,
    AcidBasePair,
    CatalogCache,
    ChargeCorrection,
    CleanupParameters,
    Reionizer,
    Uncharger,
    default_charge_corrections,
    reionize,
    reionize_in_place,
    uncharge,
    uncharge_in_place,
)

# Exceptions
from ionipy.exceptions import ChemError, PatternError, CatalogError

# Submodules
from ionipy import charge, match, canon, elements

__all__ = [
    # Charge standardization
    "AcidBaseCatalog", "AcidBasePair", "CatalogCache", "ChargeCorrection",
    "CleanupParameters", "Reionizer", "Uncharger", "default_charge_corrections",
    "reionize", "reionize_in_place", "uncharge", "uncharge_in_place",
    # Exceptions
    "ChemError", "PatternError", "CatalogError",
    # Submodules
    "charge", "match", "canon", "elements",
]
