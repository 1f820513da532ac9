from pepolicy.coord import Strand
from pepolicy.pairedend import SearchWindow
from pepolicy.policy import PairShape
from pepolicy.report import full_report, minimal_report, safe_divide
from pepolicy.statistics import ShapeStatistics, WindowStatistics


def test_safe_divide():
    assert safe_divide(1, 0) == 0
    assert safe_divide(None, 5) == 0
    assert safe_divide(5, 2) == 2.5


def test_shape_report():
    stats = ShapeStatistics()
    stats.update(PairShape.NORMAL, True, 200)
    stats.update(PairShape.DISCORDANT, False, None)
    report = full_report(stats, 1.5)
    assert "Total pairs processed:" in report
    assert "Normal:" in report
    assert "Mates on different references:" in report
    assert "Mean concordant fragment length:" in report
    assert "200.0" in report


def test_shape_report_empty():
    report = full_report(ShapeStatistics(), 0.0)
    assert "Mean concordant fragment length" not in report


def test_window_report():
    stats = WindowStatistics()
    stats.update(SearchWindow(True, 0, 9, Strand.WATSON))
    stats.update(None)
    report = full_report(stats, 0.1)
    assert "Total anchors processed:" in report
    assert "Without window:" in report
    assert " 10.0 bp" in report


def test_minimal_report():
    stats = ShapeStatistics()
    stats.update(PairShape.DOVETAIL, False, 80)
    header, values = minimal_report(stats, 0.1).split("\n")
    fields = dict(zip(header.split("\t"), values.split("\t")))
    assert fields["status"] == "OK"
    assert fields["pairs"] == "1"
    assert fields["dovetail"] == "1"
    assert fields["concordant"] == "0"

    stats = WindowStatistics()
    stats.update(None)
    header, values = minimal_report(stats, 0.1).split("\n")
    assert header == "status\tanchors\twindows\tno_window"
    assert values == "OK\t1\t0\t1"
