import itertools
import logging
import multiprocessing
from typing import Any, Iterable, Iterator, List, Optional, TextIO

from .parser import numbered_lines
from .pipeline import NumberedLine, Pipeline
from .utils import Progress

logger = logging.getLogger(__name__)

mpctx = multiprocessing.get_context("spawn")


def chunks(lines: Iterable[str], chunk_size: int) -> Iterator[List[NumberedLine]]:
    """
    Split the non-comment input lines into lists of (line number, line) pairs

    >>> [len(c) for c in chunks(["a", "b", "# c", "d"], 2)]
    [2, 1]
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")
    it = numbered_lines(lines)
    while True:
        chunk = list(itertools.islice(it, chunk_size))
        if not chunk:
            return
        yield chunk


def _write(outfile: TextIO, lines: List[str]) -> None:
    for line in lines:
        outfile.write(line)
        outfile.write("\n")


def run_pipeline(
    pipeline: Pipeline,
    infile: Iterable[str],
    outfile: TextIO,
    cores: int = 1,
    progress: Optional[Progress] = None,
    chunk_size: int = 10000,
) -> Any:
    """
    Run the pipeline on all lines of infile and write the results to outfile
    in input order. With more than one core, chunks are processed by a pool of
    worker processes, each of which receives its own copy of the pipeline.

    Return the merged statistics.
    """
    stats = pipeline.new_statistics()
    if cores > 1:
        logger.debug("Running %r with %d worker processes", pipeline, cores)
        with mpctx.Pool(cores) as pool:
            results = pool.imap(pipeline.process_chunk, chunks(infile, chunk_size))
            for lines, chunk_stats in results:
                _write(outfile, lines)
                stats += chunk_stats
                if progress is not None:
                    progress.update(len(lines))
    else:
        logger.debug("Running %r in a single process", pipeline)
        for chunk in chunks(infile, chunk_size):
            lines, chunk_stats = pipeline.process_chunk(chunk)
            _write(outfile, lines)
            stats += chunk_stats
            if progress is not None:
                progress.update(len(lines))
    if progress is not None:
        progress.close()
    return stats
