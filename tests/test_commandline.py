import json
import os
import sys
from io import StringIO

import pytest
from xopen import xopen

from utils import assert_files_equal, cutpath, datapath
from pepolicy.cli import main, get_argument_parser, policy_from_args, CommandLineError
from pepolicy.policy import Policy


def test_classify(run, cores):
    stats = run(["classify", "--cores", str(cores)], "pairs.tsv", "pairs.tsv")
    assert stats.n == 7
    assert stats.concordant == 3
    assert stats.different_reference == 1


def test_classify_compressed_input(run):
    run("classify", "pairs.tsv", "pairs.tsv.gz")


def test_classify_dovetail_no_contain(run):
    run("classify --dovetail --no-contain", "pairs-dovetail-no-contain.tsv", "pairs.tsv")


def test_window(run, cores):
    stats = run(
        ["window", "-j", str(cores), "-r", datapath("ref.fasta")], "anchors.tsv", "anchors.tsv"
    )
    assert stats.n == 4
    assert stats.infeasible == 0


def test_window_compressed_reference(run):
    run(["window", "-r", datapath("ref.fasta.gz")], "anchors.tsv", "anchors.tsv")


def test_window_no_overlap(run):
    stats = run(
        ["window", "--no-overlap", "-r", datapath("ref.fasta")],
        "anchors-no-overlap.tsv",
        "anchors.tsv",
    )
    assert stats.infeasible == 1


def test_does_not_close_stdout():
    main(["classify", datapath("pairs.tsv")])
    assert not sys.stdout.closed


def test_default_outfile(tmp_path):
    outfile = StringIO()
    main(["classify", datapath("pairs.tsv")], default_outfile=outfile)
    with open(cutpath("pairs.tsv")) as f:
        assert outfile.getvalue() == f.read()


def test_compressed_output(tmp_path):
    path = tmp_path / "out.tsv.gz"
    main(["classify", "-o", str(path), datapath("pairs.tsv")])
    with xopen(path) as f:
        lines = f.readlines()
    assert lines[0] == "p_normal\tnormal\t150\tyes\n"
    assert len(lines) == 7


def test_json_report(tmp_path):
    json_path = tmp_path / "stats.json"
    main(
        [
            "classify",
            "-X", "300",
            "--json", str(json_path),
            "-o", os.devnull,
            datapath("pairs.tsv"),
        ]
    )
    with open(json_path) as f:
        report = json.load(f)
    assert report["tag"] == "pepolicy report"
    assert report["policy"]["policy"] == "fr"
    assert report["policy"]["fragment_length"] == [0, 300]
    assert report["pairs"] == 7
    assert report["shapes"]["discordant"] == 3
    assert report["shapes"]["dovetail"] == 1
    assert report["concordant"] == 3


def test_json_report_window(tmp_path):
    json_path = tmp_path / "stats.json"
    main(
        [
            "window",
            "-r", datapath("ref.fasta"),
            "--json", str(json_path),
            "-o", os.devnull,
            datapath("anchors.tsv"),
        ]
    )
    with open(json_path) as f:
        report = json.load(f)
    assert report["anchors"] == 4
    assert report["windows_left"] == 1
    assert report["windows_right"] == 3


def test_minimal_report(tmp_path):
    main(["classify", "--report=minimal", "-o", os.devnull, datapath("pairs.tsv")])


def test_rf_policy(tmp_path):
    path = tmp_path / "rf.tsv"
    path.write_text("r1\tchr1\t100\t50\t-\tchr1\t200\t50\t+\n")
    out = tmp_path / "out.tsv"
    main(["classify", "--rf", "-o", str(out), str(path)])
    assert out.read_text() == "r1\tnormal\t150\tyes\n"


def test_policy_from_args():
    args = get_argument_parser().parse_args(
        ["classify", "--ff", "-I", "10", "-X", "400", "--local", "--no-expand-to-fit", "in.tsv"]
    )
    policy = policy_from_args(args)
    assert policy.policy is Policy.FF
    assert policy.min_fragment_length == 10
    assert policy.max_fragment_length == 400
    assert policy.local
    assert not policy.expand_to_fit
    assert policy.contain_ok and policy.overlap_ok and not policy.dovetail_ok


def test_policy_from_args_invalid():
    args = get_argument_parser().parse_args(["classify", "-I", "600", "in.tsv"])
    with pytest.raises(CommandLineError):
        policy_from_args(args)


def test_help():
    with pytest.raises(SystemExit) as e:
        main(["--help"])
    assert e.value.args[0] == 0


def test_version():
    with pytest.raises(SystemExit) as e:
        main(["--version"])
    assert e.value.args[0] == 0


@pytest.mark.parametrize(
    "args",
    [
        [],
        ["classify"],
        ["unknown", datapath("pairs.tsv")],
        ["classify", "--cores=-1", datapath("pairs.tsv")],
        ["classify", "--quiet", "--report=minimal", datapath("pairs.tsv")],
        ["classify", "-I", "600", "-X", "500", datapath("pairs.tsv")],
        ["classify", "-I", "-1", datapath("pairs.tsv")],
        ["window", datapath("anchors.tsv")],
        ["window", "--max-gaps", "-1", "-r", datapath("ref.fasta"), datapath("anchors.tsv")],
    ],
)
def test_command_line_errors(args):
    with pytest.raises(SystemExit) as e:
        main(args)
    assert e.value.args[0] == 2


def test_missing_input_file(tmp_path):
    with pytest.raises(SystemExit) as e:
        main(["classify", "-o", os.devnull, str(tmp_path / "missing.tsv")])
    assert e.value.args[0] == 1


def test_format_error(tmp_path, caplog):
    path = tmp_path / "bad.tsv"
    path.write_text("p1\tchr1\t100\t50\t+\tchr1\t300\t50\t-\np2\tchr1\t100\n")
    with pytest.raises(SystemExit) as e:
        main(["classify", "-o", os.devnull, str(path)])
    assert e.value.args[0] == 1
    assert "Line 2: Expected 9 tab-separated fields" in caplog.text


def test_unknown_reference(tmp_path, caplog):
    path = tmp_path / "anchors.tsv"
    path.write_text("a1\tchrX\t1\t+\t100\t50\t50\n")
    with pytest.raises(SystemExit) as e:
        main(["window", "-r", datapath("ref.fasta"), "-o", os.devnull, str(path)])
    assert e.value.args[0] == 1
    assert "chrX" in caplog.text


def test_reference_not_fasta(tmp_path):
    path = tmp_path / "ref.fastq"
    path.write_text("@r\nACGT\n+\nIIII\n")
    with pytest.raises(SystemExit) as e:
        main(["window", "-r", str(path), "-o", os.devnull, datapath("anchors.tsv")])
    assert e.value.args[0] == 1


def test_output_identical_with_multiple_cores(tmp_path):
    path = tmp_path / "many.tsv"
    with open(datapath("pairs.tsv")) as f:
        lines = [line for line in f if line.strip() and not line.startswith("#")]
    path.write_text("".join(lines * 50))
    out1 = tmp_path / "out1.tsv"
    out2 = tmp_path / "out2.tsv"
    main(["classify", "--chunk-size", "3", "-o", str(out1), str(path)])
    main(["classify", "--chunk-size", "3", "-j", "2", "-o", str(out2), str(path)])
    assert_files_equal(out1, out2)


def test_window_empty_reference(tmp_path):
    reference = tmp_path / "ref.fasta"
    reference.write_text(">chrE\n>chr1\nACGTACGTAC\n")
    anchors = tmp_path / "anchors.tsv"
    anchors.write_text("a1\tchrE\t1\t+\t0\t5\t5\n")
    out = tmp_path / "out.tsv"
    stats = main(["window", "-r", str(reference), "-o", str(out), str(anchors)])
    assert out.read_text() == "a1\tchrE\t*\t*\t*\t*\n"
    assert stats.infeasible == 1
