"""
Paired-end policies and the rules derived from them

A policy says how mates 1 and 2 are oriented with respect to the reference
and to each other. Each policy admits two arrangements, one per strand of the
fragment ("to the left" means upstream on the Watson strand):

FF: both mates on Watson with mate 1 to the left, or both on Crick with mate 2
    to the left
RR: both mates on Crick with mate 1 to the left, or both on Watson with mate 2
    to the left
FR: mate 1 on Watson, mate 2 on Crick, mate 1 to the left, or mate 2 on Watson,
    mate 1 on Crick, mate 2 to the left
RF: mate 1 on Crick, mate 2 on Watson, mate 1 to the left, or mate 2 on Crick,
    mate 1 on Watson, mate 2 to the left
"""
from enum import Enum
from typing import NamedTuple


class ConfigurationError(Exception):
    pass


class Policy(Enum):
    FF = 1
    RR = 2
    FR = 3
    RF = 4

    @classmethod
    def parse(cls, value) -> "Policy":
        """
        Convert a policy name such as "fr" or "--fr" into a Policy

        >>> Policy.parse("--ff")
        <Policy.FF: 1>
        >>> Policy.parse("RF")
        <Policy.RF: 4>
        """
        if isinstance(value, Policy):
            return value
        if isinstance(value, str):
            name = value.strip().lstrip("-").upper()
            if name in cls.__members__:
                return cls.__members__[name]
        raise ConfigurationError(f"Unknown paired-end policy: {value!r}")

    @property
    def same_strand(self) -> bool:
        """Whether both mates must align to the same strand"""
        return self in (Policy.FF, Policy.RR)

    def with_mates_swapped(self) -> "Policy":
        """
        Return the policy that accepts the same fragments when the labels
        "mate 1" and "mate 2" are exchanged
        """
        return _SWAPPED[self]

    def __str__(self):
        return self.name.lower()


_SWAPPED = {
    Policy.FF: Policy.RR,
    Policy.RR: Policy.FF,
    Policy.FR: Policy.FR,
    Policy.RF: Policy.RF,
}


class PairShape(Enum):
    """
    How the alignments of two mates lie relative to each other
    """

    # Mates conform to the policy and do not overlap
    NORMAL = 1
    # Mates conform to the policy and overlap, but neither contains the other
    OVERLAP = 2
    # Mates conform to the policy and one strictly contains the other
    CONTAIN = 3
    # Mates overlap but extend past each other, e.g. for FR:
    #   1:     >>>>>   >>>>>
    #   2:  <<<<<<    <<<<<<
    DOVETAIL = 4
    # Orientation or fragment length rule out a concordant pair
    DISCORDANT = 5

    def __str__(self):
        return self.name.lower()


class MateDirection(NamedTuple):
    other_left: bool
    other_watson: bool


def is_compatible(policy: Policy, one_left: bool, one_watson: bool, two_watson: bool) -> bool:
    """
    Return whether the orientations and the relative order of mates 1 and 2
    are compatible with the policy.

    one_left -- mate 1 is to the left of mate 2
    one_watson -- mate 1 aligned to the Watson strand
    two_watson -- mate 2 aligned to the Watson strand

    >>> is_compatible(Policy.FR, True, True, False)
    True
    >>> is_compatible(Policy.FR, False, True, False)
    False
    """
    if policy is Policy.FF:
        return one_watson == two_watson and one_watson == one_left
    elif policy is Policy.RR:
        return one_watson == two_watson and one_watson != one_left
    elif policy is Policy.FR:
        return one_watson != two_watson and one_watson == one_left
    elif policy is Policy.RF:
        return one_watson != two_watson and one_watson != one_left
    raise ConfigurationError(f"Unknown paired-end policy: {policy!r}")


def expected_mate_direction(policy: Policy, anchor_is_mate1: bool, anchor_is_watson: bool) -> MateDirection:
    """
    Given which mate has aligned and on which strand, return on which side of
    it and on which strand the other mate has to align for the pair to
    conform to the policy.

    >>> expected_mate_direction(Policy.FR, True, True)
    MateDirection(other_left=False, other_watson=False)
    >>> expected_mate_direction(Policy.FF, False, True)
    MateDirection(other_left=True, other_watson=True)
    """
    if policy is Policy.FF:
        return MateDirection(anchor_is_mate1 != anchor_is_watson, anchor_is_watson)
    elif policy is Policy.RR:
        return MateDirection(anchor_is_mate1 == anchor_is_watson, anchor_is_watson)
    elif policy is Policy.FR:
        return MateDirection(not anchor_is_watson, not anchor_is_watson)
    elif policy is Policy.RF:
        return MateDirection(anchor_is_watson, not anchor_is_watson)
    raise ConfigurationError(f"Unknown paired-end policy: {policy!r}")
