"""
Parse tab-separated mate coordinates

Pair lines have the columns

    name  ref1  offset1  length1  strand1  ref2  offset2  length2  strand2

and anchor lines (one aligned mate whose partner is to be searched for)

    name  ref  mate  strand  offset  length1  length2

Offsets are 0-based. Strands are given as "+"/"-" or "W"/"C". Empty lines and
lines starting with "#" are ignored.
"""
from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

from .coord import Strand


class FormatError(Exception):
    pass


@dataclass(frozen=True)
class PairRecord:
    name: str
    ref1: str
    offset1: int
    length1: int
    strand1: Strand
    ref2: str
    offset2: int
    length2: int
    strand2: Strand

    @property
    def same_reference(self) -> bool:
        return self.ref1 == self.ref2

    def fragment_length(self) -> int:
        assert self.same_reference
        begin = min(self.offset1, self.offset2)
        end = max(self.offset1 + self.length1, self.offset2 + self.length2)
        return end - begin


@dataclass(frozen=True)
class AnchorRecord:
    name: str
    ref: str
    is1: bool
    strand: Strand
    offset: int
    length1: int
    length2: int


STRANDS = {
    "+": Strand.WATSON,
    "W": Strand.WATSON,
    "-": Strand.CRICK,
    "C": Strand.CRICK,
}


def parse_strand(value: str) -> Strand:
    """
    >>> parse_strand("+")
    <Strand.WATSON: 1>
    >>> parse_strand("c")
    <Strand.CRICK: 0>
    """
    try:
        return STRANDS[value.upper()]
    except KeyError:
        raise FormatError(f"Strand must be one of +, -, W, C, but found '{value}'") from None


def _parse_int(value: str, what: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise FormatError(f"{what} must be an integer, but found '{value}'") from None


def _parse_length(value: str, what: str) -> int:
    length = _parse_int(value, what)
    if length <= 0:
        raise FormatError(f"{what} must be positive, but found {length}")
    return length


def _split(line: str, n_fields: int):
    fields = line.rstrip("\r\n").split("\t")
    if len(fields) != n_fields:
        raise FormatError(f"Expected {n_fields} tab-separated fields, but found {len(fields)}")
    return fields


def parse_pair(line: str) -> PairRecord:
    """
    >>> parse_pair("p1\\tchr1\\t100\\t50\\t+\\tchr1\\t300\\t50\\t-")
    PairRecord(name='p1', ref1='chr1', offset1=100, length1=50, strand1=<Strand.WATSON: 1>, ref2='chr1', offset2=300, length2=50, strand2=<Strand.CRICK: 0>)
    """
    name, ref1, offset1, length1, strand1, ref2, offset2, length2, strand2 = _split(line, 9)
    return PairRecord(
        name=name,
        ref1=ref1,
        offset1=_parse_int(offset1, "Offset of mate 1"),
        length1=_parse_length(length1, "Length of mate 1"),
        strand1=parse_strand(strand1),
        ref2=ref2,
        offset2=_parse_int(offset2, "Offset of mate 2"),
        length2=_parse_length(length2, "Length of mate 2"),
        strand2=parse_strand(strand2),
    )


def parse_anchor(line: str) -> AnchorRecord:
    name, ref, mate, strand, offset, length1, length2 = _split(line, 7)
    if mate not in ("1", "2"):
        raise FormatError(f"Mate must be 1 or 2, but found '{mate}'")
    return AnchorRecord(
        name=name,
        ref=ref,
        is1=mate == "1",
        strand=parse_strand(strand),
        offset=_parse_int(offset, "Offset"),
        length1=_parse_length(length1, "Length of mate 1"),
        length2=_parse_length(length2, "Length of mate 2"),
    )


def numbered_lines(lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
    """
    Yield (line number, line) for all lines that are neither empty nor comments

    >>> list(numbered_lines(["# header", "a", "", "b"]))
    [(2, 'a'), (4, 'b')]
    """
    for line_number, line in enumerate(lines, 1):
        if not line.strip() or line.startswith("#"):
            continue
        yield line_number, line


def parse_numbered(parse, line_number: int, line: str):
    """Run the parse function on one line and add the line number to any FormatError"""
    try:
        return parse(line)
    except FormatError as e:
        raise FormatError(f"Line {line_number}: {e}") from None
