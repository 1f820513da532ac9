from .coord import Coord, Interval, InvalidArgument, Strand
from .pairedend import PairedEndPolicy, SearchWindow
from .policy import (
    ConfigurationError,
    MateDirection,
    PairShape,
    Policy,
    expected_mate_direction,
    is_compatible,
)

__version__ = "0.3.0"

__all__ = [
    "Coord",
    "Interval",
    "InvalidArgument",
    "Strand",
    "PairedEndPolicy",
    "SearchWindow",
    "ConfigurationError",
    "MateDirection",
    "PairShape",
    "Policy",
    "expected_mate_direction",
    "is_compatible",
]
