"""
Acid/base pair catalog.

The catalog is an ordered list of acid/base pairs, strongest acid first.
Each pair holds a SMARTS pattern for the protonated (acid) form of a
functional group and one for its ionized (conjugate base) form; the last
atom of each pattern is the atom that gains or loses the proton.

Catalogs can be read from tab-separated text:

    // name        protonated            ionized
    -CO2H          C(=O)[OH]             C(=O)[O-]
    phenol         c[OH]                 c[O-]

Lines starting with ``//`` or ``#`` and blank lines are ignored.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Iterable, Iterator, TextIO, Union

from ionipy.exceptions import CatalogError, PatternError
from ionipy.match import compile_smarts

if TYPE_CHECKING:
    from rdkit.Chem import Mol


PairData = tuple[str, str, str]
PathLike = Union[str, "os.PathLike[str]"]


# Ordered by descending acid strength
DEFAULT_ACID_BASE_PAIRS: Final[tuple[PairData, ...]] = (
    ("-OSO3H", "OS(=O)(=O)[OH]", "OS(=O)(=O)[O-]"),
    ("-SO3H", "[!O]S(=O)(=O)[OH]", "[!O]S(=O)(=O)[O-]"),
    ("-OSO2H", "O[SD3](=O)[OH]", "O[SD3](=O)[O-]"),
    ("-SO2H", "[!O][SD3](=O)[OH]", "[!O][SD3](=O)[O-]"),
    ("-OPO3H2", "OP(=O)([OH])[OH]", "OP(=O)([OH])[O-]"),
    ("-PO3H2", "[!O]P(=O)([OH])[OH]", "[!O]P(=O)([OH])[O-]"),
    ("-CO2H", "C(=O)[OH]", "C(=O)[O-]"),
    ("thiophenol", "c[SH]", "c[S-]"),
    ("(-OPO3H)-", "OP(=O)([O-])[OH]", "OP(=O)([O-])[O-]"),
    ("(-PO3H)-", "[!O]P(=O)([O-])[OH]", "[!O]P(=O)([O-])[O-]"),
    ("phthalimide", "O=C2c1ccccc1C(=O)[NH]2", "O=C2c1ccccc1C(=O)[N-]2"),
    ("CO3H (peracetyl)", "C(=O)O[OH]", "C(=O)O[O-]"),
    ("alpha-carbon-hydrogen-nitro group", "O=N(O)[CH]", "O=N(O)[C-]"),
    ("-SO2NH2", "S(=O)(=O)[NH2]", "S(=O)(=O)[NH-]"),
    ("-OBO2H2", "OB([OH])[OH]", "OB([OH])[O-]"),
    ("-BO2H2", "[!O]B([OH])[OH]", "[!O]B([OH])[O-]"),
    ("phenol", "c[OH]", "c[O-]"),
    ("SH (aliphatic)", "C[SH]", "C[S-]"),
    ("(-OBO2H)-", "OB([O-])[OH]", "OB([O-])[O-]"),
    ("(-BO2H)-", "[!O]B([O-])[OH]", "[!O]B([O-])[O-]"),
    ("cyclopentadiene", "C1=CC=C[CH2]1", "c1ccc[cH-]1"),
    ("-CONH2", "C(=O)[NH2]", "C(=O)[NH-]"),
    ("imidazole", "c1cnc[nH]1", "c1cnc[n-]1"),
    ("-OH (aliphatic alcohol)", "[CX4][OH]", "[CX4][O-]"),
    ("alpha-carbon-hydrogen-keto group", "O=C([!O])[C!H0+0]", "O=C([!O])[C-]"),
    ("alpha-carbon-hydrogen-acetyl ester group", "OC(=O)[C!H0+0]", "OC(=O)[C-]"),
    ("sulfoxide", "S(=O)[C!H0+0]", "S(=O)[C-]"),
    ("alpha-carbon-hydrogen-sulfone group", "S(=O)(=O)[C!H0+0]", "S(=O)(=O)[C-]"),
    ("alpha-carbon-hydrogen-sulfoxide group", "S(=O)[C!H0+0]", "S(=O)[C-]"),
    ("-NH2", "[CX4][NH2]", "[CX4][NH-]"),
    ("hydrogen", "[H]", "[H-]"),
    ("alpha-carbon-hydrogen-nitrile group", "N#C[C!H0+0]", "N#C[C-]"),
)

COMMENT_PREFIXES: Final[tuple[str, ...]] = ("//", "#")


@dataclass(frozen=True, slots=True)
class AcidBasePair:
    """Protonated and ionized forms of one acidic functional group.

    Attributes:
        name: Group name.
        protonated_smarts: Pattern of the acid form.
        ionized_smarts: Pattern of the conjugate base.
        protonated: Compiled acid pattern.
        ionized: Compiled base pattern.

    Raises:
        PatternError: If either pattern does not compile.
    """

    name: str
    protonated_smarts: str
    ionized_smarts: str
    protonated: Mol = field(init=False, repr=False, compare=False)
    ionized: Mol = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "protonated", compile_smarts(self.protonated_smarts))
        object.__setattr__(self, "ionized", compile_smarts(self.ionized_smarts))

    def as_tuple(self) -> PairData:
        return self.name, self.protonated_smarts, self.ionized_smarts


@dataclass(frozen=True, slots=True)
class AcidBaseCatalog:
    """Immutable acid/base pairs ordered by acid strength.

    The position of a pair is its rank: lower rank means stronger acid.

    Example:
        >>> catalog = AcidBaseCatalog.from_data([
        ...     ("-CO2H", "C(=O)[OH]", "C(=O)[O-]"),
        ...     ("phenol", "c[OH]", "c[O-]"),
        ... ])
        >>> catalog[0].name
        '-CO2H'
    """

    pairs: tuple[AcidBasePair, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "pairs", tuple(self.pairs))
        if not self.pairs:
            raise CatalogError("Acid/base catalog is empty")
        for pair in self.pairs:
            if not isinstance(pair, AcidBasePair):
                raise TypeError(f"Expected AcidBasePair, got {type(pair).__name__}")

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[AcidBasePair]:
        return iter(self.pairs)

    def __getitem__(self, rank: int) -> AcidBasePair:
        return self.pairs[rank]

    @property
    def names(self) -> list[str]:
        return [p.name for p in self.pairs]

    def as_data(self) -> tuple[PairData, ...]:
        """Catalog contents as ``(name, protonated, ionized)`` triples."""
        return tuple(p.as_tuple() for p in self.pairs)

    @classmethod
    def from_data(cls, data: Iterable[PairData]) -> AcidBaseCatalog:
        """Build a catalog from ``(name, protonated, ionized)`` triples.

        Raises:
            CatalogError: If an entry is malformed or a pattern is invalid.
        """
        pairs = []
        for i, entry in enumerate(data):
            if len(entry) != 3:
                raise CatalogError(f"Expected 3 fields, got {len(entry)}", "<data>", i + 1)
            pairs.append(_make_pair(*entry, source="<data>", line=i + 1))
        return cls(tuple(pairs))

    @classmethod
    def from_stream(cls, stream: TextIO) -> AcidBaseCatalog:
        """Build a catalog from tab-separated text.

        Raises:
            CatalogError: If a line is malformed or a pattern is invalid.
        """
        source = str(getattr(stream, "name", "<stream>"))
        return cls(tuple(_read_pairs(stream, source)))

    @classmethod
    def from_file(cls, path: PathLike) -> AcidBaseCatalog:
        """Build a catalog from a tab-separated text file.

        Raises:
            CatalogError: If the file cannot be read, a line is malformed
                or a pattern is invalid.
        """
        try:
            with open(path, encoding="utf-8") as f:
                return cls(tuple(_read_pairs(f, os.fspath(path))))
        except OSError as e:
            raise CatalogError(f"Cannot read acid/base file: {e.strerror}", os.fspath(path)) from e

    @classmethod
    def default(cls) -> AcidBaseCatalog:
        """Build the default catalog."""
        return cls.from_data(DEFAULT_ACID_BASE_PAIRS)


def _make_pair(name: str, protonated: str, ionized: str, source: str, line: int) -> AcidBasePair:
    try:
        return AcidBasePair(name, protonated, ionized)
    except PatternError as e:
        raise CatalogError(f"Invalid pattern for {name!r}: {e}", source, line) from e


def _read_pairs(lines: Iterable[str], source: str) -> Iterator[AcidBasePair]:
    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip() or line.lstrip().startswith(COMMENT_PREFIXES):
            continue
        fields = [f.strip() for f in line.split("\t") if f.strip()]
        if len(fields) < 3:
            raise CatalogError(f"Expected 3 tab-separated fields, got {len(fields)}", source, lineno)
        yield _make_pair(fields[0], fields[1], fields[2], source, lineno)


class CatalogCache:
    """Shared catalogs keyed by their source.

    Building a catalog compiles every pattern; callers that create many
    reionizers from the same data can share one cache so that each
    source is compiled only once. Streams are not cached.

    Example:
        >>> cache = CatalogCache()
        >>> cache.from_data(DEFAULT_ACID_BASE_PAIRS) is cache.from_data(DEFAULT_ACID_BASE_PAIRS)
        True
    """

    def __init__(self) -> None:
        self._catalogs: dict[tuple[str, object], AcidBaseCatalog] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._catalogs)

    def from_file(self, path: PathLike) -> AcidBaseCatalog:
        key = ("file", os.fspath(path))
        return self._get(key, lambda: AcidBaseCatalog.from_file(path))

    def from_data(self, data: Iterable[PairData]) -> AcidBaseCatalog:
        frozen = tuple(tuple(entry) for entry in data)
        key = ("data", frozen)
        return self._get(key, lambda: AcidBaseCatalog.from_data(frozen))

    def default(self) -> AcidBaseCatalog:
        return self.from_data(DEFAULT_ACID_BASE_PAIRS)

    def clear(self) -> None:
        with self._lock:
            self._catalogs.clear()

    def _get(self, key, build) -> AcidBaseCatalog:
        with self._lock:
            catalog = self._catalogs.get(key)
            if catalog is None:
                catalog = build()
                self._catalogs[key] = catalog
            return catalog
