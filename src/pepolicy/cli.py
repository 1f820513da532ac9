#!/usr/bin/env python
#
# Copyright (c) 2024 The pepolicy authors
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
# THE SOFTWARE.

"""
pepolicy version {version}

pepolicy applies a paired-end policy to aligned mates: it classifies pairs as
normal, overlapping, containing, dovetailing or discordant, and computes the
window in which the opposite mate of an aligned read has to be searched.

Usage:
    pepolicy classify [options] [-o output.tsv] pairs.tsv
    pepolicy window [options] -r reference.fasta [-o output.tsv] anchors.tsv

Input and output are tab-separated. Pair lines contain the columns
name, ref1, offset1, length1, strand1, ref2, offset2, length2, strand2;
anchor lines contain name, ref, mate (1 or 2), strand, offset, length1,
length2. Offsets are 0-based, strands are "+" or "-".

Compressed input and output is supported and auto-detected from the file name
(.gz, .xz, .bz2). Use the file name '-' for standard input/output. Without the
-o option, output is sent to standard output.

Run "pepolicy --help" to see all command-line options.
"""
import sys
import time
import shutil
import logging
import platform
from argparse import ArgumentParser, SUPPRESS, HelpFormatter
from typing import Dict, List

import dnaio
import xopen

from pepolicy import __version__
from pepolicy.files import FileOpener
from pepolicy.json import OneLine, dumps as json_dumps
from pepolicy.log import setup_logging, REPORT
from pepolicy.pairedend import PairedEndPolicy
from pepolicy.parser import FormatError
from pepolicy.pipeline import ClassifyPipeline, Pipeline, WindowPipeline
from pepolicy.policy import ConfigurationError
from pepolicy.report import full_report, minimal_report
from pepolicy.runners import run_pipeline
from pepolicy.utils import available_cpu_count, Progress, DummyProgress

logger = logging.getLogger()


class UsageFormatter(HelpFormatter):
    """Print the usage text verbatim, without an 'usage:' prefix"""

    def __init__(self, *args, **kwargs):
        columns = shutil.get_terminal_size().columns
        super().__init__(*args, width=min(columns, 104), **kwargs)

    def add_usage(self, usage, actions, groups, prefix=None):
        if usage is SUPPRESS:  # pragma: no cover
            return
        self._add_item(self._format_usage, (usage, actions, groups, ""))


class PepolicyArgumentParser(ArgumentParser):
    """
    ArgumentParser that shows the module docstring as usage and prints a
    short hint instead of the full usage on errors
    """

    def __init__(self, *args, **kwargs):
        kwargs["formatter_class"] = UsageFormatter
        if kwargs.get("usage"):
            kwargs["usage"] = kwargs["usage"].replace("{version}", __version__)
        super().__init__(*args, **kwargs)

    def error(self, message):
        print('Run "pepolicy --help" to see command-line options.', file=sys.stderr)
        self.exit(2, f"\n{self.prog}: error: {message}\n")


class CommandLineError(Exception):
    pass


# fmt: off
def get_common_argument_parser() -> ArgumentParser:
    parser = ArgumentParser(add_help=False)
    group = parser.add_argument_group("Options")
    group.add_argument("--debug", action="count", default=0,
        help="Print debug log")
    group.add_argument("-j", "--cores", type=int, default=1,
        help="Number of CPU cores to use. Use 0 to auto-detect. Default: %(default)s")
    group.add_argument("--chunk-size", type=int, default=10000,
        help=SUPPRESS)
    group.add_argument("-o", "--output", metavar="FILE",
        help="Write results to FILE. Default: standard output")
    group.add_argument("--report", choices=("full", "minimal"), default=None,
        help="Which type of report to print: 'full' or 'minimal'. Default: full")
    group.add_argument("--json", metavar="FILE",
        help="Dump report in JSON format to FILE")
    group.add_argument("--quiet", default=False, action="store_true",
        help="Print only error messages")

    group = parser.add_argument_group("Paired-end policy")
    group.add_argument("--fr", dest="policy", action="store_const", const="fr", default="fr",
        help="Mate 1 upstream on the forward strand, mate 2 downstream on the "
            "reverse strand (default)")
    group.add_argument("--rf", dest="policy", action="store_const", const="rf",
        help="Mate 1 upstream on the reverse strand, mate 2 downstream on the "
            "forward strand")
    group.add_argument("--ff", dest="policy", action="store_const", const="ff",
        help="Both mates on the forward strand, mate 1 upstream")
    group.add_argument("--rr", dest="policy", action="store_const", const="rr",
        help="Both mates on the reverse strand, mate 1 upstream")
    group.add_argument("-I", "--minins", type=int, default=0, metavar="LENGTH",
        help="Minimum fragment length. Default: %(default)s")
    group.add_argument("-X", "--maxins", type=int, default=500, metavar="LENGTH",
        help="Maximum fragment length. Default: %(default)s")
    group.add_argument("--local", action="store_true", default=False,
        help="Search for the opposite mate with local alignment")
    group.add_argument("--dovetail", action="store_true", default=False,
        help="Consider dovetailing mates concordant")
    group.add_argument("--no-contain", dest="contain", action="store_false", default=True,
        help="Do not consider pairs concordant in which one mate contains the other")
    group.add_argument("--no-overlap", dest="overlap", action="store_false", default=True,
        help="Do not consider overlapping mates concordant")
    group.add_argument("--no-expand-to-fit", dest="expand_to_fit", action="store_false",
        default=True,
        help="Do not raise the maximum fragment length to the length of a mate "
            "that is longer; such pairs are then discordant")
    return parser


def get_argument_parser() -> ArgumentParser:
    common = get_common_argument_parser()
    parser = PepolicyArgumentParser(usage=__doc__, add_help=False)
    parser.add_argument("-h", "--help", action="help", help="Show this help message and exit")
    parser.add_argument("--version", action="version", help="Show version number and exit",
        version=__version__)
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    classify = subparsers.add_parser("classify", parents=[common],
        help="Classify pairs of aligned mates")
    classify.add_argument("input", metavar="PAIRS",
        help="Tab-separated file with one pair per line")

    window = subparsers.add_parser("window", parents=[common],
        help="Compute where to search for the opposite mate")
    group = window.add_argument_group("Search window")
    group.add_argument("-r", "--reference", required=True, metavar="FASTA",
        help="FASTA file with the reference sequences (used for their lengths only)")
    group.add_argument("--max-gaps", type=int, default=0, metavar="N",
        help="Maximum number of gaps in the alignment of the opposite mate. "
            "Default: %(default)s")
    group.add_argument("--max-overhang", type=int, default=0, metavar="N",
        help="Maximum extension of the search region past the fragment boundary. "
            "Default: %(default)s")
    window.add_argument("input", metavar="ANCHORS",
        help="Tab-separated file with one aligned mate per line")
    return parser
# fmt: on


def policy_from_args(args) -> PairedEndPolicy:
    try:
        return PairedEndPolicy(
            policy=args.policy,
            max_fragment_length=args.maxins,
            min_fragment_length=args.minins,
            local=args.local,
            dovetail_ok=args.dovetail,
            contain_ok=args.contain,
            overlap_ok=args.overlap,
            expand_to_fit=args.expand_to_fit,
        )
    except ConfigurationError as e:
        raise CommandLineError(e)


def make_pipeline(args, policy: PairedEndPolicy, file_opener: FileOpener) -> Pipeline:
    if args.command == "classify":
        return ClassifyPipeline(policy)
    assert args.command == "window"
    if args.max_gaps < 0:
        raise CommandLineError("--max-gaps cannot be negative")
    if args.max_overhang < 0:
        raise CommandLineError("--max-overhang cannot be negative")
    reference_lengths = file_opener.read_reference_lengths(args.reference)
    if not reference_lengths:
        raise CommandLineError(f"No reference sequences found in '{args.reference}'")
    return WindowPipeline(
        policy,
        reference_lengths,
        max_gaps=args.max_gaps,
        max_overhang=args.max_overhang,
    )


def log_header(cmdlineargs):
    """Print the "This is pepolicy ..." header"""

    implementation = platform.python_implementation()
    opt = " (" + implementation + ")" if implementation != "CPython" else ""
    logger.info(
        "This is pepolicy %s with Python %s%s",
        __version__,
        platform.python_version(),
        opt,
    )
    logger.info("Command line parameters: %s", " ".join(cmdlineargs))


def log_system_info():
    logger.debug("Python executable: %s", sys.executable)
    logger.debug("dnaio version: %s", dnaio.__version__)
    logger.debug("xopen version: %s", xopen.__version__)


def is_output_stdout(args) -> bool:
    return args.output is None or args.output == "-"


def main_cli():  # pragma: no cover
    """Entry point for command-line script"""
    main(sys.argv[1:])
    return 0


def main(cmdlineargs, default_outfile=None):
    """
    Run the 'classify' or 'window' command and return its statistics object.

    default_outfile is the text file to which results are written if the
    ``-o`` parameter is not used. Standard output is used if it is None.
    """
    start_time = time.time()
    parser = get_argument_parser()
    args = parser.parse_args(args=cmdlineargs)
    # Setup logging only if there are not already any handlers (can happen when
    # this function is being called externally such as from unit tests)
    if not logging.root.handlers:
        setup_logging(
            logger,
            log_to_stderr=is_output_stdout(args),
            quiet=args.quiet,
            minimal=args.report == "minimal",
            debug=args.debug,
        )
    log_header(cmdlineargs)
    log_system_info()
    if args.quiet and args.report:
        parser.error("Options --quiet and --report cannot be used at the same time")
    if args.cores < 0:
        parser.error("Value for --cores cannot be negative")
    if args.chunk_size < 1:
        parser.error("Value for --chunk-size must be at least 1")

    cores = available_cpu_count() if args.cores == 0 else args.cores
    file_opener = FileOpener(threads=0)
    if sys.stderr.isatty() and not args.quiet and not args.debug:
        progress: Progress = Progress(unit="pair" if args.command == "classify" else "anchor")
    else:
        progress = DummyProgress()

    try:
        policy = policy_from_args(args)
        logger.info("Paired-end policy: %s", policy)
        pipeline = make_pipeline(args, policy, file_opener)
        logger.info(
            "Processing %s on %d core%s ...",
            "pairs" if args.command == "classify" else "anchors",
            cores,
            "s" if cores > 1 else "",
        )
        with file_opener.xopen(args.input, "rt") as infile:
            if is_output_stdout(args) and default_outfile is not None:
                stats = run_pipeline(
                    pipeline, infile, default_outfile, cores, progress, args.chunk_size
                )
            else:
                with file_opener.xopen(args.output or "-", "wt") as outfile:
                    stats = run_pipeline(
                        pipeline, infile, outfile, cores, progress, args.chunk_size
                    )
    except KeyboardInterrupt:
        if args.debug:
            raise
        else:
            print("Interrupted", file=sys.stderr)
            sys.exit(130)
    except BrokenPipeError:
        sys.exit(1)
    except (
        OSError,
        EOFError,
        FormatError,
        dnaio.UnknownFileFormat,
        dnaio.FileFormatError,
        CommandLineError,
    ) as e:
        logger.debug("Command line error. Traceback:", exc_info=True)
        logger.error("%s", e)
        exit_code = 2 if isinstance(e, CommandLineError) else 1
        sys.exit(exit_code)

    elapsed = time.time() - start_time
    if args.report == "minimal":
        report = minimal_report
    else:
        report = full_report
    logger.log(REPORT, "%s", report(stats, elapsed))
    if args.json is not None:
        with open(args.json, "w") as f:
            json_dict = json_report(
                stats=stats,
                cmdlineargs=cmdlineargs,
                path=args.input,
                cores=cores,
                policy=policy,
            )
            f.write(json_dumps(json_dict))
            f.write("\n")
    return stats


def json_report(
    stats,
    cmdlineargs: List[str],
    path: str,
    cores: int,
    policy: PairedEndPolicy,
) -> Dict:
    d = {
        "tag": "pepolicy report",
        "schema_version": OneLine([0, 1]),
        "pepolicy_version": __version__,
        "python_version": platform.python_version(),
        "command_line_arguments": cmdlineargs,
        "cores": cores,
        "input": {"path": path},
        "policy": policy_as_json(policy),
    }
    d.update(stats.as_json())
    return d


def policy_as_json(policy: PairedEndPolicy) -> Dict:
    return {
        "policy": str(policy.policy),
        "fragment_length": OneLine(
            [policy.min_fragment_length, policy.max_fragment_length]
        ),
        "local": policy.local,
        "dovetail_ok": policy.dovetail_ok,
        "contain_ok": policy.contain_ok,
        "overlap_ok": policy.overlap_ok,
        "expand_to_fit": policy.expand_to_fit,
    }


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main_cli())
