import os
import sys
import time
from itertools import cycle


def available_cpu_count() -> int:
    """
    Return the number of CPUs this process is allowed to run on, which can be
    fewer than the machine has (cpusets, taskset, batch schedulers)
    """
    if hasattr(os, "sched_getaffinity"):
        n = len(os.sched_getaffinity(0))
        if n > 0:
            return n
    return os.cpu_count() or 1


class Progress:
    """
    Show on stderr how many records have been processed and how fast
    """

    SPINNER = "|/-\\"

    def __init__(self, every=1, unit="pair"):
        """
        every -- seconds that must pass between two redraws
        unit -- singular name of what is being counted
        """
        self._every = every
        self._unit = unit
        self._spinner = self.spinner()
        self._count = 0
        self._started = time.time()
        self._shown = self._started

    def __repr__(self):
        return f"Progress(count={self._count}, unit={self._unit!r})"

    @classmethod
    def spinner(cls):
        return cycle(cls.SPINNER)

    def _line(self, symbol: str, now: float) -> str:
        elapsed = now - self._started
        minutes, seconds = divmod(int(elapsed), 60)
        hours, minutes = divmod(minutes, 60)
        rate = self._count / elapsed if elapsed > 0 else 0.0
        return (
            f"\r{symbol:4} {hours:02d}:{minutes:02d}:{seconds:02d} "
            f"{self._count:13,d} {self._unit}s ({rate:,.0f} {self._unit}s/s)"
        )

    def update(self, increment, _final=False):
        self._count += increment
        now = time.time()
        if self._count == 0 or (not _final and now - self._shown < self._every):
            return
        symbol = "Done" if _final else next(self._spinner)
        sys.stderr.write(self._line(symbol, now))
        self._shown = now

    def close(self):
        self.update(0, _final=True)
        sys.stderr.write("\n")


class DummyProgress(Progress):
    """
    Progress that stays silent, used when stderr is not a terminal
    """

    def update(self, increment, _final=False):
        self._count += increment

    def close(self):
        pass
