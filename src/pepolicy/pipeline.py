"""
Processing pipelines that turn chunks of input lines into result lines

A pipeline holds nothing but read-only configuration, so a single instance can
be sent to any number of worker processes.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .pairedend import PairedEndPolicy, SearchWindow
from .parser import (
    AnchorRecord,
    FormatError,
    PairRecord,
    parse_anchor,
    parse_numbered,
    parse_pair,
)
from .policy import PairShape
from .statistics import ShapeStatistics, WindowStatistics

NumberedLine = Tuple[int, str]


class Pipeline(ABC):
    @abstractmethod
    def process_chunk(self, chunk: Sequence[NumberedLine]) -> Tuple[List[str], Any]:
        """
        Process the (line number, line) pairs of one chunk. Return the output
        lines (without line terminators) and a statistics object that can be
        merged with +=.
        """

    @abstractmethod
    def new_statistics(self) -> Any:
        pass


class ClassifyPipeline(Pipeline):
    """
    Classify pairs of aligned mates
    """

    def __init__(self, policy: PairedEndPolicy):
        self._policy = policy

    def __repr__(self):
        return f"ClassifyPipeline(policy={self._policy!r})"

    def new_statistics(self) -> ShapeStatistics:
        return ShapeStatistics()

    def classify(self, record: PairRecord) -> Tuple[PairShape, bool]:
        if not record.same_reference:
            return PairShape.DISCORDANT, False
        shape = self._policy.classify_pair(
            record.offset1,
            record.length1,
            record.strand1.is_watson,
            record.offset2,
            record.length2,
            record.strand2.is_watson,
        )
        return shape, self._policy.is_concordant(shape)

    def process_chunk(
        self, chunk: Sequence[NumberedLine]
    ) -> Tuple[List[str], ShapeStatistics]:
        stats = ShapeStatistics()
        lines = []
        for line_number, line in chunk:
            record = parse_numbered(parse_pair, line_number, line)
            shape, concordant = self.classify(record)
            fragment_length = record.fragment_length() if record.same_reference else None
            stats.update(shape, concordant, fragment_length)
            lines.append(
                "\t".join(
                    [
                        record.name,
                        str(shape),
                        "*" if fragment_length is None else str(fragment_length),
                        "yes" if concordant else "no",
                    ]
                )
            )
        return lines, stats


class WindowPipeline(Pipeline):
    """
    Compute the window in which the opposite mate must be searched
    """

    def __init__(
        self,
        policy: PairedEndPolicy,
        reference_lengths: Dict[str, int],
        max_gaps: int = 0,
        max_overhang: int = 0,
    ):
        if max_gaps < 0 or max_overhang < 0:
            raise ValueError("Maximum number of gaps and maximum overhang must not be negative")
        self._policy = policy
        self._reference_lengths = reference_lengths
        self._max_gaps = max_gaps
        self._max_overhang = max_overhang

    def __repr__(self):
        return (
            f"WindowPipeline(policy={self._policy!r}, "
            f"references={len(self._reference_lengths)}, "
            f"max_gaps={self._max_gaps}, max_overhang={self._max_overhang})"
        )

    def new_statistics(self) -> WindowStatistics:
        return WindowStatistics()

    def window(self, record: AnchorRecord):
        try:
            reference_length = self._reference_lengths[record.ref]
        except KeyError:
            raise FormatError(f"Reference '{record.ref}' not found in the reference file") from None
        return self._policy.other_mate(
            record.is1,
            record.strand.is_watson,
            record.offset,
            reference_length,
            record.length1,
            record.length2,
            max_gaps=self._max_gaps,
            max_overhang=self._max_overhang,
        )

    def process_chunk(
        self, chunk: Sequence[NumberedLine]
    ) -> Tuple[List[str], WindowStatistics]:
        stats = WindowStatistics()
        lines = []
        for line_number, line in chunk:
            record = parse_numbered(parse_anchor, line_number, line)
            try:
                window = self.window(record)
            except FormatError as e:
                raise FormatError(f"Line {line_number}: {e}") from None
            stats.update(window)
            lines.append("\t".join([record.name, record.ref] + format_window(window)))
        return lines, stats


def format_window(window: Optional[SearchWindow]) -> List[str]:
    if window is None:
        return ["*"] * 4
    return [
        "left" if window.other_left else "right",
        str(window.left),
        str(window.right),
        window.other_strand.symbol,
    ]
