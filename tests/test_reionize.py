"""Tests for reionization."""

from __future__ import annotations

import pytest
from rdkit import Chem

from conftest import charges, mol_from_smiles, rdkit_canonical
from ionipy.charge import (
    AcidBaseCatalog,
    ChargeEvent,
    Reionizer,
    SiteMatch,
    strongest_protonated,
    weakest_ionized,
)


class TestSiteScans:
    """Tests for strongest_protonated and weakest_ionized."""

    def test_strongest_protonated(self, default_catalog) -> None:
        """Carboxylic acid is found with its OH oxygen as site."""
        mol = mol_from_smiles("[O-]c1ccc(cc1)C(=O)O")
        result = strongest_protonated(mol, default_catalog)
        assert result == SiteMatch(6, (7, 8, 9))
        assert result.site == 9
        assert default_catalog[result.rank].name == "-CO2H"

    def test_weakest_ionized(self, default_catalog) -> None:
        """Phenolate is the weakest ionized acid."""
        mol = mol_from_smiles("[O-]c1ccc(cc1)C(=O)O")
        result = weakest_ionized(mol, default_catalog)
        assert result is not None
        assert result.rank == 16
        assert result.site == 0
        assert default_catalog[result.rank].name == "phenol"

    def test_no_protonated_site(self, default_catalog) -> None:
        mol = mol_from_smiles("C[N+](C)(C)C")
        assert strongest_protonated(mol, default_catalog) is None

    def test_no_ionized_site(self, default_catalog) -> None:
        mol = mol_from_smiles("OC(=O)c1ccc(O)cc1")
        assert weakest_ionized(mol, default_catalog) is None

    def test_scans_do_not_modify(self, default_catalog) -> None:
        mol = mol_from_smiles("[O-]c1ccc(cc1)C(=O)O")
        before = Chem.MolToSmiles(mol)
        strongest_protonated(mol, default_catalog)
        weakest_ionized(mol, default_catalog)
        assert Chem.MolToSmiles(mol) == before

    def test_rank_is_catalog_index(self) -> None:
        """Backward scan reports the real index, not the reversed one."""
        catalog = AcidBaseCatalog.from_data([
            ("-CO2H", "C(=O)[OH]", "C(=O)[O-]"),
            ("phenol", "c[OH]", "c[O-]"),
            ("alcohol", "[CX4][OH]", "[CX4][O-]"),
        ])
        mol = mol_from_smiles("[O-]c1ccccc1")
        assert weakest_ionized(mol, catalog) == SiteMatch(1, (1, 0))


class TestReionize:
    """Reionization with the default catalog."""

    @pytest.mark.parametrize("smiles,expected", [
        # sulfinic acid takes the proton of the sulfonic acid
        ("C1=C(C=CC(=C1)[S]([O-])=O)[S](O)(=O)=O", "O=S(O)c1ccc(S(=O)(=O)[O-])cc1"),
        # phenolate takes the proton of the carboxylic acid
        ("[O-]c1ccc(cc1)C(=O)O", "O=C([O-])c1ccc(O)cc1"),
        # already in the right state
        ("O=C([O-])c1ccc(O)cc1", "O=C([O-])c1ccc(O)cc1"),
    ])
    def test_reionize(self, smiles: str, expected: str) -> None:
        result = Reionizer().reionize(Chem.MolFromSmiles(smiles))
        assert Chem.MolToSmiles(result) == rdkit_canonical(expected)

    def test_proton_moved_event(self, sink) -> None:
        mol = mol_from_smiles("C1=C(C=CC(=C1)[S]([O-])=O)[S](O)(=O)=O")
        Reionizer(sink=sink).reionize_in_place(mol)
        assert sink.names() == [ChargeEvent.PROTON_MOVED]
        moved = sink.of(ChargeEvent.PROTON_MOVED)[0]
        assert moved.details["acid"] == "-SO3H"
        assert moved.details["base"] == "-SO2H"

    def test_reionize_returns_copy(self) -> None:
        mol = Chem.MolFromSmiles("[O-]c1ccc(cc1)C(=O)O")
        before = Chem.MolToSmiles(mol)
        result = Reionizer().reionize(mol)
        assert Chem.MolToSmiles(mol) == before
        assert result is not mol

    def test_quaternary_ammonium_unchanged(self, sink) -> None:
        """A cation without any acid/base group is left alone."""
        mol = mol_from_smiles("C[N+](C)(C)C")
        Reionizer(sink=sink).reionize_in_place(mol)
        assert charges(mol) == [0, 1, 0, 0, 0]
        assert sink.events == []

    def test_neutral_molecule_unchanged(self) -> None:
        mol = mol_from_smiles("CC(=O)O")
        Reionizer().reionize_in_place(mol)
        assert Chem.MolToSmiles(mol) == rdkit_canonical("CC(=O)O")


class TestChargeCompensation:
    """Acids ionized to balance charge corrections."""

    def test_sodium_benzoic_acid(self, sink) -> None:
        """Na becomes Na+ and the acid is ionized to compensate."""
        mol = mol_from_smiles("[Na].O=C(O)c1ccccc1")
        Reionizer(sink=sink).reionize_in_place(mol)
        assert mol.GetAtomWithIdx(0).GetFormalCharge() == 1
        assert mol.GetAtomWithIdx(3).GetFormalCharge() == -1
        assert mol.GetAtomWithIdx(3).GetTotalNumHs() == 0
        assert sum(charges(mol)) == 0
        assert sink.names() == [ChargeEvent.CHARGE_CORRECTED, ChargeEvent.ACID_IONIZED]
        assert sink.of(ChargeEvent.ACID_IONIZED)[0].details["name"] == "-CO2H"

    def test_magnesium_malonic_acid(self) -> None:
        """Mg2+ is balanced by ionizing both acids."""
        mol = mol_from_smiles("[Mg].OC(=O)CC(=O)O")
        Reionizer().reionize_in_place(mol)
        assert mol.GetAtomWithIdx(0).GetFormalCharge() == 2
        assert mol.GetAtomWithIdx(1).GetFormalCharge() == -1
        assert mol.GetAtomWithIdx(7).GetFormalCharge() == -1
        assert sum(charges(mol)) == 0

    def test_salt_already_balanced(self, sink) -> None:
        """Corrections that leave the molecule neutral need no compensation."""
        mol = mol_from_smiles("[Na].[Cl]")
        Reionizer(sink=sink).reionize_in_place(mol)
        assert charges(mol) == [1, -1]
        assert ChargeEvent.ACID_IONIZED not in sink.names()

    def test_counter_ion_already_charged(self) -> None:
        mol = mol_from_smiles("[Na+].O=C([O-])c1ccccc1")
        Reionizer().reionize_in_place(mol)
        assert charges(mol)[0] == 1
        assert sum(charges(mol)) == 0

    def test_custom_corrections(self) -> None:
        """Only the given corrections are applied."""
        mol = mol_from_smiles("[Na].[Cl]")
        Reionizer(charge_corrections=()).reionize_in_place(mol)
        assert charges(mol) == [0, 0]


class TestAmbiguity:
    """Loops that would not terminate are abandoned."""

    def test_same_atom_aborts(self, sink) -> None:
        """Acid and base site on the same atom: nothing is moved."""
        catalog = AcidBaseCatalog.from_data([
            ("x", "[#8]", "[#6]"),
            ("y", "[#6]", "[#8]"),
        ])
        mol = mol_from_smiles("CO")
        before = Chem.MolToSmiles(mol)
        Reionizer(catalog, sink=sink).reionize_in_place(mol)
        assert Chem.MolToSmiles(mol) == before
        assert sink.names() == [ChargeEvent.REIONIZATION_ABORTED]
        assert sink.events[0].details["reason"] == "same_atom"

    def test_oscillation_aborts(self, sink) -> None:
        """A second transfer between the same atoms is refused."""
        catalog = AcidBaseCatalog.from_data([
            ("ox", "[#8]", "[#54]"),
            ("nit", "[#54]", "[#7]"),
        ])
        mol = mol_from_smiles("OCCN")
        Reionizer(catalog, sink=sink).reionize_in_place(mol)
        assert sink.names() == [ChargeEvent.PROTON_MOVED, ChargeEvent.REIONIZATION_ABORTED]
        assert sink.events[1].details["reason"] == "oscillation"
        assert sink.events[1].details["atoms"] == (0, 3)
        # the first transfer is kept
        assert charges(mol) == [-1, 0, 0, 1]
        assert mol.GetAtomWithIdx(0).GetTotalNumHs() == 0
        assert mol.GetAtomWithIdx(3).GetTotalNumHs() == 3
        assert mol.GetAtomWithIdx(3).GetNumExplicitHs() == 0

    def test_aromatic_nitrogen_donor_adds_explicit_h(self) -> None:
        """The explicit H on the base depends on the donor being aromatic N."""
        catalog = AcidBaseCatalog.from_data([
            ("pyrrole", "[nH]", "[n-]"),
            ("amine", "[CX4][NH3+]", "[CX4][NH2]"),
        ])
        mol = mol_from_smiles("[nH]1cccc1.CN")
        Reionizer(catalog).reionize_in_place(mol)
        assert mol.GetAtomWithIdx(0).GetFormalCharge() == -1
        amine = mol.GetAtomWithIdx(6)
        assert amine.GetFormalCharge() == 1
        assert amine.GetNumExplicitHs() == 1
        assert amine.GetTotalNumHs() == 3

    @pytest.mark.parametrize("smiles", [
        "C1=C(C=CC(=C1)[S]([O-])=O)[S](O)(=O)=O",
        "[O-]c1ccc(cc1)C(=O)O",
        "[O-]C(=O)CC(O)c1ccc([O-])cc1",
        "OCCN",
    ])
    def test_transfers_bounded(self, smiles: str, sink) -> None:
        mol = mol_from_smiles(smiles)
        Reionizer(sink=sink).reionize_in_place(mol)
        n = mol.GetNumAtoms()
        assert len(sink.of(ChargeEvent.PROTON_MOVED)) <= n * (n - 1) // 2


class TestConstruction:
    """Reionizer constructors."""

    def test_invalid_catalog(self) -> None:
        with pytest.raises(TypeError):
            Reionizer(catalog=[("-CO2H", "C(=O)[OH]", "C(=O)[O-]")])

    def test_from_data(self) -> None:
        reionizer = Reionizer.from_data([
            ("-CO2H", "C(=O)[OH]", "C(=O)[O-]"),
            ("phenol", "c[OH]", "c[O-]"),
        ])
        result = reionizer.reionize(Chem.MolFromSmiles("[O-]c1ccc(cc1)C(=O)O"))
        assert Chem.MolToSmiles(result) == rdkit_canonical("O=C([O-])c1ccc(O)cc1")

    def test_from_file(self, tmp_path) -> None:
        path = tmp_path / "pairs.txt"
        path.write_text("-CO2H\tC(=O)[OH]\tC(=O)[O-]\nphenol\tc[OH]\tc[O-]\n")
        reionizer = Reionizer.from_file(path)
        assert reionizer.catalog.names == ["-CO2H", "phenol"]

    def test_from_stream(self) -> None:
        import io
        stream = io.StringIO("-CO2H\tC(=O)[OH]\tC(=O)[O-]\n")
        reionizer = Reionizer.from_stream(stream)
        assert len(reionizer.catalog) == 1

    def test_shared_cache(self) -> None:
        from ionipy.charge import CatalogCache
        cache = CatalogCache()
        data = [("-CO2H", "C(=O)[OH]", "C(=O)[O-]")]
        first = Reionizer.from_data(data, cache=cache)
        second = Reionizer.from_data(data, cache=cache)
        assert first.catalog is second.catalog
