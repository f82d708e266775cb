# io/map_loader.py
"""Map file reader.

Layout of a map file::

    <numIntersections> <numStreets>
    <street name>
    <numBlocks>
    <blockNumber> <numPoints> <roadWidth>
    <x> <y>  ... numPoints pairs
    ...

Street names take a whole line and may contain spaces; everything else is a
whitespace separated token and may wrap across lines.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from roadnet.app.protocols import BlockSource
from roadnet.domain.entities.geography import Coordinate, RawBlock

log = logging.getLogger(__name__)


class MapFormatError(ValueError):
    def __init__(self, msg: str, *, line: int | None = None):
        super().__init__(msg if line is None else f"line {line}: {msg}")
        self.line = line


class _Reader:
    """Token reader with a whole-line escape hatch for street names."""

    def __init__(self, text: str):
        self._lines = text.splitlines()
        self._row = 0
        self._tokens: list[str] = []

    @property
    def line(self) -> int:
        return self._row

    def _fill(self) -> bool:
        while not self._tokens:
            if self._row >= len(self._lines):
                return False
            self._tokens = self._lines[self._row].split()
            self._row += 1
        return True

    def token(self, what: str) -> str:
        if not self._fill():
            raise MapFormatError(f"unexpected end of input, expected {what}", line=self._row)
        return self._tokens.pop(0)

    def read_int(self, what: str) -> int:
        tok = self.token(what)
        try:
            return int(tok)
        except ValueError:
            raise MapFormatError(f"expected integer {what}, got {tok!r}", line=self._row)

    def read_float(self, what: str) -> float:
        tok = self.token(what)
        try:
            return float(tok)
        except ValueError:
            raise MapFormatError(f"expected number {what}, got {tok!r}", line=self._row)

    def read_line(self, what: str) -> str:
        # leftovers of a partly consumed line are not a name
        self._tokens = []
        while self._row < len(self._lines):
            text = self._lines[self._row].strip()
            self._row += 1
            if text:
                return text
        raise MapFormatError(f"unexpected end of input, expected {what}", line=self._row)

    def at_end(self) -> bool:
        return not self._fill()


@dataclass(frozen=True)
class MapData:
    declared_intersections: int
    declared_streets: int
    blocks: list[RawBlock]


def parse_map(text: str) -> MapData:
    r = _Reader(text)
    n_intersections = r.read_int("intersection count")
    n_streets = r.read_int("street count")
    if n_intersections < 0 or n_streets < 0:
        raise MapFormatError("counts must be non-negative", line=r.line)

    blocks: list[RawBlock] = []
    for _ in range(n_streets):
        name = r.read_line("street name")
        n_blocks = r.read_int(f"block count for {name!r}")
        if n_blocks < 0:
            raise MapFormatError(
                f"{name!r}: block count must be non-negative, got {n_blocks}", line=r.line
            )
        for _ in range(n_blocks):
            number = r.read_int("block number")
            n_points = r.read_int("point count")
            if n_points <= 0:
                raise MapFormatError(
                    f"{name!r}#{number}: point count must be positive, got {n_points}",
                    line=r.line,
                )
            width = r.read_float("road width")
            pts = tuple(
                Coordinate(r.read_int("x coordinate"), r.read_int("y coordinate"))
                for _ in range(n_points)
            )
            blocks.append(RawBlock(name, number, width, pts))

    if not r.at_end():
        log.warning("ignoring trailing data after %d streets (line %d)", n_streets, r.line)
    return MapData(n_intersections, n_streets, blocks)


def raw_block_from_mapping(rec: Mapping) -> RawBlock:
    try:
        pts = tuple(Coordinate(int(x), int(y)) for x, y in rec["points"])
        return RawBlock(
            str(rec["street_name"]),
            int(rec["block_number"]),
            float(rec.get("road_width", 0.0)),
            pts,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise MapFormatError(f"bad block record {rec!r}: {exc}")


# ------------------------- Sources ----------------------------------


class TextFileBlockSource(BlockSource):
    def __init__(self, path: str | Path, encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding
        self.declared_intersections: int | None = None

    def load_raw_blocks(self) -> list[RawBlock]:
        try:
            text = self.path.read_text(encoding=self.encoding)
        except UnicodeDecodeError as exc:
            raise MapFormatError(f"{self.path}: not valid {self.encoding} text") from exc
        data = parse_map(text)
        self.declared_intersections = data.declared_intersections
        log.debug("read %d blocks from %s", len(data.blocks), self.path)
        return data.blocks

    def __repr__(self) -> str:
        return f"TextFileBlockSource({str(self.path)!r})"


class InlineBlockSource(BlockSource):
    def __init__(self, records: Iterable[RawBlock | Mapping]):
        self.records = list(records)
        self.declared_intersections: int | None = None

    def load_raw_blocks(self) -> list[RawBlock]:
        return [
            r if isinstance(r, RawBlock) else raw_block_from_mapping(r) for r in self.records
        ]

    def __repr__(self) -> str:
        return f"InlineBlockSource({len(self.records)} records)"
