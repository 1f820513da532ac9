from collections import defaultdict, Counter
from typing import DefaultDict, Dict, Optional

from .policy import PairShape


class ShapeStatistics:
    """
    Keep track of the shapes of classified pairs and of the fragment lengths
    of concordant pairs
    """

    def __init__(self) -> None:
        self.shapes: DefaultDict[PairShape, int] = defaultdict(int)
        self.concordant = 0
        # Pairs whose mates aligned to different references
        self.different_reference = 0
        self._fragment_lengths: DefaultDict[int, int] = defaultdict(int)

    def update(
        self, shape: PairShape, concordant: bool, fragment_length: Optional[int]
    ) -> None:
        self.shapes[shape] += 1
        if fragment_length is None:
            self.different_reference += 1
        if concordant:
            assert fragment_length is not None
            self.concordant += 1
            self._fragment_lengths[fragment_length] += 1

    @property
    def n(self) -> int:
        return sum(self.shapes.values())

    def fragment_lengths(self) -> Counter:
        return Counter(self._fragment_lengths)

    def mean_fragment_length(self) -> Optional[float]:
        if not self.concordant:
            return None
        total = sum(length * count for length, count in self._fragment_lengths.items())
        return total / self.concordant

    def __iadd__(self, other):
        if not isinstance(other, ShapeStatistics):
            raise ValueError(f"Cannot add {other.__class__.__name__}")
        for shape, count in other.shapes.items():
            self.shapes[shape] += count
        self.concordant += other.concordant
        self.different_reference += other.different_reference
        for length, count in other._fragment_lengths.items():
            self._fragment_lengths[length] += count
        return self

    def as_json(self) -> Dict:
        return {
            "pairs": self.n,
            "shapes": {str(shape): self.shapes.get(shape, 0) for shape in PairShape},
            "different_reference": self.different_reference,
            "concordant": self.concordant,
            "mean_concordant_fragment_length": self.mean_fragment_length(),
        }


class WindowStatistics:
    """
    Keep track of how many search windows could be computed and how wide they were
    """

    def __init__(self) -> None:
        self.left = 0
        self.right = 0
        self.infeasible = 0
        self.total_width = 0

    def update(self, window) -> None:
        """Add a SearchWindow or None for an anchor without window"""
        if window is None:
            self.infeasible += 1
            return
        if window.other_left:
            self.left += 1
        else:
            self.right += 1
        self.total_width += len(window)

    @property
    def feasible(self) -> int:
        return self.left + self.right

    @property
    def n(self) -> int:
        return self.feasible + self.infeasible

    def mean_width(self) -> Optional[float]:
        if not self.feasible:
            return None
        return self.total_width / self.feasible

    def __iadd__(self, other):
        if not isinstance(other, WindowStatistics):
            raise ValueError(f"Cannot add {other.__class__.__name__}")
        self.left += other.left
        self.right += other.right
        self.infeasible += other.infeasible
        self.total_width += other.total_width
        return self

    def as_json(self) -> Dict:
        return {
            "anchors": self.n,
            "windows": self.feasible,
            "windows_left": self.left,
            "windows_right": self.right,
            "no_window": self.infeasible,
            "mean_window_width": self.mean_width(),
        }
