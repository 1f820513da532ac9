"""
Routines for printing a report.
"""
import textwrap
from io import StringIO
from typing import Optional

from .policy import PairShape
from .statistics import ShapeStatistics, WindowStatistics

SHAPES = {
    PairShape.NORMAL: "Normal",
    PairShape.OVERLAP: "Overlapping",
    PairShape.CONTAIN: "One mate containing the other",
    PairShape.DOVETAIL: "Dovetailing",
    PairShape.DISCORDANT: "Discordant",
}


def safe_divide(numerator: Optional[int], denominator: int) -> float:
    if numerator is None or not denominator:
        return 0.0
    else:
        return numerator / denominator


def _timing(n: int, time: float, unit: str) -> str:
    per_item = 1e6 * time / n if n else 0.0
    per_minute = n / time * 60 / 1e6 if time else 0.0
    return (
        f"Finished in {time:.3F} s ({per_item:.3F} us/{unit}; "
        f"{per_minute:.2F} M {unit}s/minute)."
    )


def full_report(stats, time: float) -> str:
    if isinstance(stats, ShapeStatistics):
        return shape_report(stats, time)
    return window_report(stats, time)


def minimal_report(stats, time: float) -> str:
    """Create a tab-separated report with a header line and one line of values"""
    if isinstance(stats, ShapeStatistics):
        fields = {"status": "OK", "pairs": stats.n}
        for shape in PairShape:
            fields[str(shape)] = stats.shapes.get(shape, 0)
        fields["concordant"] = stats.concordant
    else:
        fields = {
            "status": "OK",
            "anchors": stats.n,
            "windows": stats.feasible,
            "no_window": stats.infeasible,
        }
    return (
        "\t".join(fields.keys()) + "\n" + "\t".join(str(v) for v in fields.values())
    )


def shape_report(stats: ShapeStatistics, time: float) -> str:
    sio = StringIO()
    print(_timing(stats.n, time, "pair"), file=sio)
    n = stats.n
    report = "\n=== Summary ===\n\n"
    report += f"Total pairs processed:           {n:13,d}\n"
    for shape in PairShape:
        count = stats.shapes.get(shape, 0)
        report += f"  {SHAPES[shape] + ':':31}{count:13,d} ({safe_divide(count, n):.1%})\n"
    if stats.different_reference:
        report += (
            "Mates on different references:   "
            f"{stats.different_reference:13,d} ({safe_divide(stats.different_reference, n):.1%})\n"
        )
    report += (
        "Concordant pairs:                "
        f"{stats.concordant:13,d} ({safe_divide(stats.concordant, n):.1%})\n"
    )
    mean = stats.mean_fragment_length()
    if mean is not None:
        report += f"Mean concordant fragment length: {mean:13.1F}\n"
    print(report, file=sio)
    return sio.getvalue()


def window_report(stats: WindowStatistics, time: float) -> str:
    sio = StringIO()
    print(_timing(stats.n, time, "anchor"), file=sio)
    n = stats.n
    report = textwrap.dedent(
        """
    === Summary ===

    Total anchors processed:   {n:13,d}
    Search windows:            {o.feasible:13,d} ({feasible_fraction:.1%})
      to the left:             {o.left:13,d}
      to the right:            {o.right:13,d}
    Without window:            {o.infeasible:13,d} ({infeasible_fraction:.1%})
    """
    ).format(
        n=n,
        o=stats,
        feasible_fraction=safe_divide(stats.feasible, n),
        infeasible_fraction=safe_divide(stats.infeasible, n),
    )
    mean = stats.mean_width()
    if mean is not None:
        report += f"Mean window width:         {mean:13.1F} bp\n"
    print(report, file=sio)
    return sio.getvalue()
