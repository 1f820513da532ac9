"""
Reference coordinates and intervals

A Coord identifies a position on one strand of one reference sequence, an
Interval a half-open stretch of a reference starting at an upstream Coord.
Both are immutable. "Upstream" and "to the left" always mean upstream with
respect to the Watson strand.
"""
from enum import IntEnum
from functools import total_ordering
from typing import Optional


class InvalidArgument(ValueError):
    pass


class Strand(IntEnum):
    """Strand a read aligned to. Crick sorts before Watson."""

    CRICK = 0
    WATSON = 1

    @classmethod
    def from_watson(cls, watson: bool) -> "Strand":
        return cls.WATSON if watson else cls.CRICK

    @property
    def is_watson(self) -> bool:
        return self is Strand.WATSON

    def opposite(self) -> "Strand":
        return Strand.CRICK if self is Strand.WATSON else Strand.WATSON

    @property
    def symbol(self) -> str:
        return "+" if self is Strand.WATSON else "-"


@total_ordering
class Coord:
    """
    A 0-based offset into a reference sequence plus the strand.

    Invalid Coords can be neither compared nor hashed.

    >>> Coord(0, 10, Strand.WATSON) < Coord(0, 11, Strand.CRICK)
    True
    >>> Coord(0, 10, Strand.CRICK) < Coord(0, 10, Strand.WATSON)
    True
    >>> Coord.invalid().valid
    False
    """

    __slots__ = ("_ref_id", "_offset", "_strand")

    def __init__(self, ref_id: Optional[int], offset: Optional[int], strand=Strand.WATSON):
        if ref_id is not None and ref_id < 0:
            raise InvalidArgument(f"Reference id must not be negative, got {ref_id}")
        self._ref_id = ref_id
        self._offset = offset
        if ref_id is None or offset is None:
            self._strand: Optional[Strand] = None
        elif isinstance(strand, Strand):
            self._strand = strand
        else:
            self._strand = Strand.from_watson(bool(strand))

    @classmethod
    def invalid(cls) -> "Coord":
        return cls(None, None)

    def invalidate(self) -> "Coord":
        """Return an invalid Coord (Coords are immutable)"""
        return Coord.invalid()

    @property
    def valid(self) -> bool:
        return self._ref_id is not None and self._offset is not None

    @property
    def ref_id(self) -> int:
        assert self._ref_id is not None
        return self._ref_id

    @property
    def offset(self) -> int:
        assert self._offset is not None
        return self._offset

    @property
    def strand(self) -> Strand:
        assert self._strand is not None
        return self._strand

    @property
    def watson(self) -> bool:
        return self.strand.is_watson

    def within(self, length: int, begin: int, end: int) -> bool:
        """
        Return whether the stretch of 'length' positions starting at this Coord
        lies within [begin, end)

        >>> Coord(0, 5, Strand.WATSON).within(5, 0, 10)
        True
        >>> Coord(0, 5, Strand.WATSON).within(6, 0, 10)
        False
        """
        return self.offset >= begin and self.offset + length <= end

    def _key(self):
        assert self.valid
        return (self._ref_id, self._offset, self._strand)

    def __eq__(self, other):
        if not isinstance(other, Coord):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other):
        if not isinstance(other, Coord):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        if not self.valid:
            return "Coord.invalid()"
        return f"Coord({self._ref_id}, {self._offset}, Strand.{self.strand.name})"

    def __str__(self):
        if not self.valid:
            return "*"
        return f"{self._ref_id}:{self._offset}{self.strand.symbol}"


@total_ordering
class Interval:
    """
    The half-open region [upstream.offset, upstream.offset + length) on the
    reference given by upstream.ref_id

    Like Coords, invalid Intervals can be neither compared nor hashed.

    >>> Interval.from_offsets(0, 0, 30, 10)
    Interval(Coord(0, 10, Strand.WATSON), 20)
    >>> Interval(Coord(1, 10, Strand.CRICK), 5).end
    15
    """

    __slots__ = ("_upstream", "_length")

    def __init__(self, upstream: Coord, length: int):
        if upstream.valid and length <= 0:
            raise InvalidArgument(f"Interval length must be positive, got {length}")
        self._upstream = upstream
        self._length = length if upstream.valid else 0

    @classmethod
    def from_offsets(cls, ref_id1: int, ref_id2: int, offset1: int, offset2: int) -> "Interval":
        """
        Return the interval between two offsets on the same reference, taking
        the smaller offset as the upstream end
        """
        if ref_id1 != ref_id2:
            raise InvalidArgument(
                f"Cannot span an interval between references {ref_id1} and {ref_id2}"
            )
        upstream = min(offset1, offset2)
        downstream = max(offset1, offset2)
        return cls(Coord(ref_id1, upstream, Strand.WATSON), downstream - upstream)

    @classmethod
    def invalid(cls) -> "Interval":
        return cls(Coord.invalid(), 0)

    def invalidate(self) -> "Interval":
        return Interval.invalid()

    @property
    def valid(self) -> bool:
        return self._upstream.valid

    @property
    def upstream(self) -> Coord:
        assert self.valid
        return self._upstream

    @property
    def length(self) -> int:
        assert self.valid
        return self._length

    @property
    def ref_id(self) -> int:
        return self.upstream.ref_id

    @property
    def begin(self) -> int:
        return self.upstream.offset

    @property
    def end(self) -> int:
        """Offset one past the last position"""
        return self.upstream.offset + self.length

    def __len__(self):
        return self.length

    def overlaps(self, other: "Interval") -> bool:
        """
        Return whether both intervals share at least one position

        >>> a = Interval(Coord(0, 100, Strand.WATSON), 50)
        >>> a.overlaps(Interval(Coord(0, 149, Strand.CRICK), 10))
        True
        >>> a.overlaps(Interval(Coord(0, 150, Strand.CRICK), 10))
        False
        """
        return (
            self.ref_id == other.ref_id
            and self.begin < other.end
            and other.begin < self.end
        )

    def contains(self, other: "Interval") -> bool:
        """Return whether every position of other is also in this interval"""
        return (
            self.ref_id == other.ref_id
            and self.begin <= other.begin
            and other.end <= self.end
        )

    def strictly_contains(self, other: "Interval") -> bool:
        """
        Return whether other is a proper subset of this interval

        >>> a = Interval(Coord(0, 100, Strand.WATSON), 100)
        >>> a.strictly_contains(Interval(Coord(0, 100, Strand.CRICK), 60))
        True
        >>> a.strictly_contains(Interval(Coord(0, 100, Strand.CRICK), 100))
        False
        """
        return self.contains(other) and (
            self.begin != other.begin or self.end != other.end
        )

    def _key(self):
        return (self.upstream, self.length)

    def __eq__(self, other):
        if not isinstance(other, Interval):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other):
        if not isinstance(other, Interval):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        if not self.valid:
            return "Interval.invalid()"
        return f"Interval({self._upstream!r}, {self._length})"

    def __str__(self):
        if not self.valid:
            return "*"
        return f"{self._upstream}+{self._length}"
