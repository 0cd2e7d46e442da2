"""Test configuration and fixtures for ionipy tests."""

import pytest

from rdkit import Chem

from ionipy.charge import AcidBaseCatalog, RecordingEventSink


def rdkit_canonical(smiles: str) -> str:
    """Get RDKit canonical SMILES for comparison.

    Args:
        smiles: Input SMILES string.

    Returns:
        RDKit's canonical SMILES.
    """
    mol = Chem.MolFromSmiles(smiles)
    if mol is None:
        raise ValueError(f"RDKit could not parse: {smiles}")
    return Chem.MolToSmiles(mol, canonical=True)


def mol_from_smiles(smiles: str) -> Chem.RWMol:
    """Parse SMILES into an editable molecule."""
    mol = Chem.MolFromSmiles(smiles)
    if mol is None:
        raise ValueError(f"RDKit could not parse: {smiles}")
    return Chem.RWMol(mol)


def charges(mol: Chem.Mol) -> list[int]:
    """Formal charge of every atom, in atom order."""
    return [a.GetFormalCharge() for a in mol.GetAtoms()]


def hydrogens(mol: Chem.Mol) -> list[int]:
    """Total hydrogen count of every atom, in atom order."""
    return [a.GetTotalNumHs() for a in mol.GetAtoms()]


@pytest.fixture(scope="session")
def default_catalog() -> AcidBaseCatalog:
    """Built-in acid/base catalog, shared by all tests."""
    return AcidBaseCatalog.default()


@pytest.fixture
def sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def zwitterion_smiles() -> list[str]:
    """Molecules carrying both cations and anions."""
    return [
        "[NH3+]CC(=O)[O-]",
        "C[N+](C)(C)CC(=O)[O-]",
        "[O-][N+](=O)[O-]",
        "C[NH3+].[Cl-]",
    ]


@pytest.fixture
def uncharge_smiles() -> list[str]:
    """Molecules with charges of all kinds, for idempotence checks."""
    return [
        "[NH3+]CC(=O)[O-]",
        "CC(=O)[O-]",
        "C[NH+](C)C",
        "C[NH3+].[Cl-]",
        "[Na+].O=C([O-])c1ccccc1",
        "C[N+](C)(C)CC(=O)[O-]",
        "C[N+](=O)[O-]",
        "[O-][N+](=O)[O-]",
        "F[B-](F)(F)F",
        "C[CH2+]",
    ]
