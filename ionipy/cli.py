"""
Command line interface.

    ionipy reionize molecules.smi -o reionized.smi
    ionipy uncharge --force molecules.smi

Input has one SMILES per line, optionally followed by whitespace and a
name. Output lines are canonical SMILES followed by the name.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Iterator, TextIO

from rdkit import Chem, RDLogger

from ionipy import __version__
from ionipy.charge.params import CleanupParameters, make_reionizer, make_uncharger
from ionipy.exceptions import ChemError


logger = logging.getLogger(__name__)


def _add_io_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "input", nargs="?", type=argparse.FileType("r"), default=sys.stdin,
        help="SMILES file (default: standard input)",
    )
    parser.add_argument(
        "-o", "--output", type=argparse.FileType("w"), default=sys.stdout,
        help="Output file (default: standard output)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every charge change")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ionipy",
        description="Reionize or neutralize molecules given as SMILES.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    p_reionize = sub.add_parser(
        "reionize",
        help="Move protons so the strongest acids are the ionized ones.",
    )
    _add_io_arguments(p_reionize)
    p_reionize.add_argument("--acid-base", metavar="FILE", help="Tab-separated acid/base pair file")
    p_reionize.set_defaults(force=False, no_canonical=False)

    p_uncharge = sub.add_parser(
        "uncharge",
        help="Remove charges by adding or removing hydrogens.",
    )
    _add_io_arguments(p_uncharge)
    p_uncharge.add_argument("--force", action="store_true", help="Neutralize every anion possible")
    p_uncharge.add_argument(
        "--no-canonical", action="store_true",
        help="Process anions in atom order instead of canonical order",
    )
    p_uncharge.set_defaults(acid_base=None)
    return parser


def read_smiles(lines: Iterable[str]) -> Iterator[tuple[int, str, str]]:
    """Yield ``(line number, smiles, name)`` for each non-empty line."""
    for lineno, line in enumerate(lines, start=1):
        parts = line.strip().split(None, 1)
        if not parts:
            continue
        name = parts[1] if len(parts) > 1 else ""
        yield lineno, parts[0], name


def run(command: str, params: CleanupParameters, infile: TextIO, outfile: TextIO) -> int:
    """Process every molecule of a SMILES file.

    Returns:
        Number of lines that could not be processed.
    """
    if command == "reionize":
        process = make_reionizer(params).reionize_in_place
    else:
        process = make_uncharger(params).uncharge_in_place

    n_failed = 0
    for lineno, smiles, name in read_smiles(infile):
        mol = Chem.MolFromSmiles(smiles)
        if mol is None:
            logger.error("line %d: cannot parse SMILES %r", lineno, smiles)
            n_failed += 1
            continue
        rwmol = Chem.RWMol(mol)
        process(rwmol)
        result = Chem.MolToSmiles(rwmol)
        outfile.write(f"{result} {name}\n" if name else f"{result}\n")
    return n_failed


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s - %(name)s - %(message)s",
    )
    # Parse failures are reported by us, one line each
    RDLogger.DisableLog("rdApp.*")

    params = CleanupParameters(
        acid_base_file=args.acid_base,
        do_canonical=not args.no_canonical,
        force_uncharge=args.force,
    )
    try:
        n_failed = run(args.command, params, args.input, args.output)
    except ChemError as e:
        logger.error("%s", e)
        return 2
    finally:
        if args.input is not sys.stdin:
            args.input.close()
        if args.output is not sys.stdout:
            args.output.close()
    return 1 if n_failed else 0


if __name__ == "__main__":
    sys.exit(main())
