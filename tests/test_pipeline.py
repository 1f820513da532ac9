import pytest

from pepolicy.pairedend import PairedEndPolicy
from pepolicy.parser import FormatError, parse_pair
from pepolicy.pipeline import ClassifyPipeline, WindowPipeline, format_window
from pepolicy.policy import PairShape


def test_classify_pipeline(fr_policy):
    pipeline = ClassifyPipeline(fr_policy)
    chunk = [
        (1, "p1\tchr1\t100\t50\t+\tchr1\t200\t50\t-\n"),
        (2, "p2\tchr1\t100\t50\t+\tchr2\t200\t50\t-\n"),
    ]
    lines, stats = pipeline.process_chunk(chunk)
    assert lines == ["p1\tnormal\t150\tyes", "p2\tdiscordant\t*\tno"]
    assert stats.n == 2
    assert stats.concordant == 1
    assert stats.different_reference == 1


def test_classify_pipeline_format_error(fr_policy):
    pipeline = ClassifyPipeline(fr_policy)
    with pytest.raises(FormatError) as e:
        pipeline.process_chunk([(3, "p1\tchr1\t100\n")])
    assert e.value.args[0].startswith("Line 3:")


def test_window_pipeline(fr_policy):
    pipeline = WindowPipeline(fr_policy, {"chr1": 1000})
    lines, stats = pipeline.process_chunk(
        [(1, "a1\tchr1\t1\t+\t100\t50\t50"), (2, "a2\tchr1\t1\t+\t990\t50\t50")]
    )
    assert lines[0] == "a1\tchr1\tright\t100\t599\t-"
    assert lines[1] == "a2\tchr1\tright\t990\t999\t-"
    assert stats.right == 2


def test_window_pipeline_no_window():
    pe = PairedEndPolicy("fr", overlap_ok=False)
    pipeline = WindowPipeline(pe, {"chr1": 1000})
    lines, stats = pipeline.process_chunk([(1, "a1\tchr1\t1\t+\t990\t50\t50")])
    assert lines == ["a1\tchr1\t*\t*\t*\t*"]
    assert stats.infeasible == 1


def test_window_pipeline_unknown_reference(fr_policy):
    pipeline = WindowPipeline(fr_policy, {"chr1": 1000})
    with pytest.raises(FormatError) as e:
        pipeline.process_chunk([(5, "a1\tchrX\t1\t+\t100\t50\t50")])
    assert e.value.args[0] == "Line 5: Reference 'chrX' not found in the reference file"


def test_window_pipeline_negative_slack(fr_policy):
    with pytest.raises(ValueError):
        WindowPipeline(fr_policy, {"chr1": 1000}, max_gaps=-1)


def test_format_window():
    assert format_window(None) == ["*", "*", "*", "*"]


def test_classify_rr_pipeline():
    pipeline = ClassifyPipeline(PairedEndPolicy("rr"))
    shape, concordant = pipeline.classify(
        parse_pair("p\tchr1\t100\t50\t-\tchr1\t300\t50\t-")
    )
    assert shape is PairShape.NORMAL
    assert concordant
