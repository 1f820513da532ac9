"""
Paired-end alignment parameters: where to look for the opposite mate and how
to classify a pair once both mates have aligned
"""
import logging
from dataclasses import dataclass
from typing import Optional

from .coord import Coord, Interval, Strand
from .policy import (
    ConfigurationError,
    PairShape,
    Policy,
    expected_mate_direction,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchWindow:
    """
    Where the opposite mate has to align for the pair to be concordant.

    left and right are the offsets of the leftmost and rightmost reference
    positions to include in the search (both inclusive).
    """

    other_left: bool
    left: int
    right: int
    other_strand: Strand
    local: bool = False

    def __len__(self):
        return self.right - self.left + 1

    @property
    def other_watson(self) -> bool:
        return self.other_strand.is_watson

    def as_interval(self, ref_id: int) -> Interval:
        return Interval(Coord(ref_id, self.left, self.other_strand), len(self))


@dataclass(frozen=True)
class PairedEndPolicy:
    """
    Paired-end alignment parameters.

    policy -- how the mates must be oriented (Policy or a name such as "fr")
    max_fragment_length, min_fragment_length -- bounds on the fragment length,
        i.e. on the extent covered by both mates together. Both are inclusive.
    local -- the opposite mate is searched with local instead of end-to-end
        alignment
    dovetail_ok -- mates extending past each other count as concordant
    contain_ok -- one mate strictly containing the other counts as concordant
    overlap_ok -- overlapping mates count as concordant
    expand_to_fit -- when a mate is longer than max_fragment_length, raise the
        maximum to the length of that mate. Otherwise any pair involving such
        a mate is discordant.

    Instances are immutable and may be shared between threads and processes.
    """

    policy: Optional[Policy] = None
    max_fragment_length: int = 500
    min_fragment_length: int = 0
    local: bool = False
    dovetail_ok: bool = False
    contain_ok: bool = True
    overlap_ok: bool = True
    expand_to_fit: bool = True

    def __post_init__(self):
        if self.policy is None:
            return
        object.__setattr__(self, "policy", Policy.parse(self.policy))
        if self.min_fragment_length < 0 or self.max_fragment_length < 0:
            raise ConfigurationError(
                "Fragment length bounds must not be negative "
                f"(minimum {self.min_fragment_length}, maximum {self.max_fragment_length})"
            )
        if self.min_fragment_length > self.max_fragment_length:
            raise ConfigurationError(
                f"Minimum fragment length ({self.min_fragment_length}) exceeds "
                f"maximum fragment length ({self.max_fragment_length})"
            )
        logger.debug("Paired-end policy: %s", self)

    @classmethod
    def unset(cls) -> "PairedEndPolicy":
        """Return an instance without a policy that refuses to be used"""
        return cls(policy=None)

    @property
    def configured(self) -> bool:
        return self.policy is not None

    def _require_policy(self) -> Policy:
        if self.policy is None:
            raise ConfigurationError("Paired-end policy has not been configured")
        return self.policy

    def effective_max_fragment_length(self, length1: int, length2: int) -> int:
        """
        Return the maximum fragment length for a pair with the given mate
        lengths, taking expand_to_fit into account
        """
        if self.expand_to_fit:
            return max(self.max_fragment_length, length1, length2)
        return self.max_fragment_length

    def other_mate(
        self,
        is1: bool,
        watson: bool,
        offset: int,
        reference_length: int,
        length1: int,
        length2: int,
        max_gaps: int = 0,
        max_overhang: int = 0,
    ) -> Optional[SearchWindow]:
        """
        Given how one mate aligned, compute the window and strand in which the
        opposite mate must align for the pair to be concordant.

        is1 -- mate 1 is the one that aligned and mate 2 is searched for
        watson -- the aligned mate is on the Watson strand
        offset -- offset of the aligned mate's leftmost position
        reference_length -- length of the reference the mate aligned to
        length1, length2 -- lengths of mates 1 and 2
        max_gaps -- maximum number of gaps in the opposite mate's alignment
        max_overhang -- maximum number of positions by which the dynamic
            programming region may extend past the fragment boundary

        Return None if no window exists, for example because the fragment
        length bounds cannot be met or the window lies off the reference.
        """
        policy = self._require_policy()
        assert length1 > 0 and length2 > 0
        assert max_gaps >= 0 and max_overhang >= 0
        if reference_length <= 0:
            logger.debug("No window: reference is empty")
            return None
        other_left, other_watson = expected_mate_direction(policy, is1, watson)
        anchor_length, other_length = (length1, length2) if is1 else (length2, length1)

        max_fragment = self.max_fragment_length
        if self.expand_to_fit and other_length > max_fragment:
            max_fragment = other_length
        min_fragment = self.min_fragment_length
        if max_fragment < min_fragment:
            logger.debug(
                "No window: maximum fragment length %d is below minimum %d",
                max_fragment,
                min_fragment,
            )
            return None

        slack = max_gaps + max_overhang
        if other_left:
            anchor_end = offset + anchor_length
            left = anchor_end - max_fragment - slack
            right = anchor_end - min_fragment + other_length - 1 + slack
            if not self.dovetail_ok:
                right = min(right, anchor_end - 1)
            if not self.overlap_ok:
                right = min(right, offset - 1)
        else:
            left = offset + min_fragment - other_length - slack
            right = offset + max_fragment - 1 + slack
            if not self.dovetail_ok:
                left = max(left, offset)
            if not self.overlap_ok:
                left = max(left, offset + anchor_length)

        if right < 0 or left > reference_length - 1:
            logger.debug(
                "No window: [%d, %d] lies off reference of length %d",
                left,
                right,
                reference_length,
            )
            return None
        left = max(left, 0)
        right = min(right, reference_length - 1)
        if left > right:
            logger.debug("No window: empty after clamping to the reference")
            return None
        return SearchWindow(
            other_left=other_left,
            left=left,
            right=right,
            other_strand=Strand.from_watson(other_watson),
            local=self.local,
        )

    def classify_pair(
        self,
        offset1: int,
        length1: int,
        watson1: bool,
        offset2: int,
        length2: int,
        watson2: bool,
    ) -> PairShape:
        """
        Return how the two mates of a pair aligned to the same reference lie
        relative to each other under this policy.

        The dovetail_ok, contain_ok and overlap_ok flags are not consulted; use
        is_concordant() to decide whether the returned shape is acceptable.

        >>> pe = PairedEndPolicy("fr", max_fragment_length=500)
        >>> pe.classify_pair(100, 50, True, 300, 50, False)
        <PairShape.NORMAL: 1>
        >>> pe.classify_pair(100, 50, True, 300, 50, True)
        <PairShape.DISCORDANT: 5>
        """
        policy = self._require_policy()
        assert length1 > 0 and length2 > 0
        if policy.same_strand != (watson1 == watson2):
            return PairShape.DISCORDANT

        begin = min(offset1, offset2)
        end = max(offset1 + length1, offset2 + length2)
        fragment_length = end - begin
        if not (
            self.min_fragment_length
            <= fragment_length
            <= self.effective_max_fragment_length(length1, length2)
        ):
            return PairShape.DISCORDANT

        mate1 = Interval(Coord(0, offset1, Strand.from_watson(watson1)), length1)
        mate2 = Interval(Coord(0, offset2, Strand.from_watson(watson2)), length2)
        other_left = expected_mate_direction(policy, True, watson1).other_left
        one_left = offset1 <= offset2
        if one_left == other_left:
            # mates are in the wrong order
            if mate1.overlaps(mate2):
                return PairShape.DOVETAIL
            return PairShape.DISCORDANT
        if mate1.strictly_contains(mate2) or mate2.strictly_contains(mate1):
            return PairShape.CONTAIN
        if mate1.overlaps(mate2):
            return PairShape.OVERLAP
        return PairShape.NORMAL

    def is_concordant(self, shape: PairShape) -> bool:
        """
        Return whether a pair of the given shape is concordant under the
        dovetail_ok, contain_ok and overlap_ok settings
        """
        self._require_policy()
        if shape is PairShape.NORMAL:
            return True
        elif shape is PairShape.OVERLAP:
            return self.overlap_ok
        elif shape is PairShape.CONTAIN:
            return self.overlap_ok and self.contain_ok
        elif shape is PairShape.DOVETAIL:
            return self.overlap_ok and self.dovetail_ok
        elif shape is PairShape.DISCORDANT:
            return False
        raise ValueError(f"Not a pair shape: {shape!r}")

    def __str__(self):
        if self.policy is None:
            return "PairedEndPolicy(unset)"
        flags = [
            name
            for name in ("local", "dovetail_ok", "contain_ok", "overlap_ok", "expand_to_fit")
            if getattr(self, name)
        ]
        return (
            f"{self.policy} fragment length {self.min_fragment_length}-"
            f"{self.max_fragment_length} ({', '.join(flags) or 'no flags'})"
        )
