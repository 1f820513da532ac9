import time
from itertools import islice

from pepolicy.utils import available_cpu_count, Progress, DummyProgress


def test_available_cpu_count():
    assert available_cpu_count() >= 1


def test_progress():
    p = Progress(every=1e-6)
    p.update(100)
    time.sleep(0.001)
    p.update(0)
    p.update(900)
    p.update(10000)
    p.close()


def test_progress_spinner():
    sp = Progress.spinner()
    for _ in islice(sp, 0, 30):
        next(sp)


def test_dummy_progress():
    p = DummyProgress()
    p.update(100)
    p.update(900)
    p.close()
