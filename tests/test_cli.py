"""Tests for the command line interface."""

from __future__ import annotations

import pytest

from conftest import rdkit_canonical
from ionipy.cli import build_parser, main, read_smiles


class TestReadSmiles:
    """Input parsing."""

    def test_names_and_blank_lines(self) -> None:
        lines = ["CCO ethanol\n", "\n", "[Na+].[Cl-]   table salt\n", "C\n"]
        assert list(read_smiles(lines)) == [
            (1, "CCO", "ethanol"),
            (3, "[Na+].[Cl-]", "table salt"),
            (4, "C", ""),
        ]


class TestMain:
    """End-to-end runs."""

    def test_uncharge(self, tmp_path) -> None:
        infile = tmp_path / "in.smi"
        outfile = tmp_path / "out.smi"
        infile.write_text("[NH3+]CC(=O)[O-] glycine\nCC(=O)[O-]\n")
        assert main(["uncharge", str(infile), "-o", str(outfile)]) == 0
        assert outfile.read_text().splitlines() == [
            f"{rdkit_canonical('NCC(=O)O')} glycine",
            rdkit_canonical("CC(=O)O"),
        ]

    def test_reionize(self, tmp_path) -> None:
        infile = tmp_path / "in.smi"
        outfile = tmp_path / "out.smi"
        infile.write_text("[O-]c1ccc(cc1)C(=O)O\n")
        assert main(["reionize", str(infile), "-o", str(outfile)]) == 0
        assert outfile.read_text().strip() == rdkit_canonical("O=C([O-])c1ccc(O)cc1")

    def test_force(self, tmp_path) -> None:
        infile = tmp_path / "in.smi"
        outfile = tmp_path / "out.smi"
        infile.write_text("C[N+](C)(C)CC(=O)[O-]\n")
        assert main(["uncharge", "--force", str(infile), "-o", str(outfile)]) == 0
        assert outfile.read_text().strip() == rdkit_canonical("C[N+](C)(C)CC(=O)O")

    def test_unparsable_line(self, tmp_path, caplog) -> None:
        infile = tmp_path / "in.smi"
        outfile = tmp_path / "out.smi"
        infile.write_text("not_a_smiles\nCCO\n")
        assert main(["uncharge", str(infile), "-o", str(outfile)]) == 1
        assert outfile.read_text().strip() == "CCO"
        assert "line 1" in caplog.text

    def test_bad_acid_base_file(self, tmp_path) -> None:
        infile = tmp_path / "in.smi"
        infile.write_text("CCO\n")
        pairs = tmp_path / "pairs.txt"
        pairs.write_text("broken\tC((\tC\n")
        outfile = tmp_path / "out.smi"
        assert main(["reionize", "--acid-base", str(pairs), str(infile), "-o", str(outfile)]) == 2

    def test_unknown_command(self) -> None:
        with pytest.raises(SystemExit):
            main(["neutralize"])

    def test_no_canonical(self, tmp_path) -> None:
        infile = tmp_path / "in.smi"
        outfile = tmp_path / "out.smi"
        infile.write_text("C[N+](C)(C)C.CC(=O)[O-].CC(=O)[O-] salt\n")
        assert main(["uncharge", "--no-canonical", str(infile), "-o", str(outfile)]) == 0
        expected = rdkit_canonical("C[N+](C)(C)C.CC(=O)O.CC(=O)[O-]")
        assert outfile.read_text().strip() == f"{expected} salt"

    def test_acid_base_file(self, tmp_path) -> None:
        infile = tmp_path / "in.smi"
        infile.write_text("[O-]c1ccc(cc1)C(=O)O\n")
        pairs = tmp_path / "pairs.txt"
        pairs.write_text("# strongest first\n-CO2H\tC(=O)[OH]\tC(=O)[O-]\nphenol\tc[OH]\tc[O-]\n")
        outfile = tmp_path / "out.smi"
        assert main(["reionize", "--acid-base", str(pairs), str(infile), "-o", str(outfile)]) == 0
        assert outfile.read_text().strip() == rdkit_canonical("O=C([O-])c1ccc(O)cc1")

    def test_option_of_other_command(self, tmp_path) -> None:
        infile = tmp_path / "in.smi"
        infile.write_text("CCO\n")
        with pytest.raises(SystemExit):
            main(["reionize", "--force", str(infile)])


class TestBuildParser:
    """Argument layout."""

    def test_options_after_command(self) -> None:
        args = build_parser().parse_args(["uncharge", "--force", "--no-canonical", "-"])
        assert args.command == "uncharge"
        assert args.force is True
        assert args.no_canonical is True
        assert args.acid_base is None

    def test_reionize_defaults(self) -> None:
        args = build_parser().parse_args(["reionize", "--acid-base", "pairs.txt", "-"])
        assert args.acid_base == "pairs.txt"
        assert args.force is False
        assert args.no_canonical is False
