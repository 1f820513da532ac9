import logging
from typing import Dict, Optional

import dnaio
from xopen import xopen

logger = logging.getLogger(__name__)


class FileOpener:
    """
    Open the tool's input and output files, compressed or not.

    When reading, the compression format is detected from the file content.
    When writing, it follows the file name extension (.gz, .bz2, .xz, .zst).
    The path "-" stands for standard input or output.
    """

    def __init__(self, compression_level: int = 1, threads: Optional[int] = None):
        """
        compression_level -- level used when writing compressed output
        threads -- number of threads of an external compression program used
            for writing; 0 compresses in-process, None lets xopen decide
        """
        self.compression_level = compression_level
        self.threads = threads

    def __repr__(self):
        return (
            f"FileOpener(compression_level={self.compression_level}, "
            f"threads={self.threads})"
        )

    def xopen(self, path, mode):
        writing = "w" in mode or "a" in mode
        f = xopen(
            path,
            mode,
            compresslevel=self.compression_level if writing else None,
            threads=self.threads if writing else 0,
        )
        logger.debug("Opened '%s' in mode '%s' as %s", path, mode, f)
        return f

    def read_reference_lengths(self, path) -> Dict[str, int]:
        """
        Return a dict that maps the name of each sequence in a FASTA file to its
        length. The name is the first word of the header line.
        """
        lengths: Dict[str, int] = {}
        with dnaio.open(path, mode="r", fileformat="fasta", opener=self.xopen) as reader:
            for record in reader:
                header = record.name.split(None, 1)
                name = header[0] if header else ""
                if name in lengths:
                    raise dnaio.FileFormatError(
                        f"Reference name '{name}' occurs more than once in {path}", line=None
                    )
                lengths[name] = len(record.sequence)
        logger.debug("Read lengths of %d reference sequences from %s", len(lengths), path)
        return lengths
