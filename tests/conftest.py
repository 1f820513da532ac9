import os

import pytest
from utils import assert_files_equal, datapath, cutpath
from pepolicy.cli import main
from pepolicy.pairedend import PairedEndPolicy


@pytest.fixture(params=[1, 2])
def cores(request):
    return request.param


@pytest.fixture
def fr_policy():
    return PairedEndPolicy("fr", max_fragment_length=500)


@pytest.fixture
def run(tmp_path):
    def _run(params, expected, inpath):
        if type(params) is str:
            params = params.split()
        command, *params = params
        params += ["--json", os.fspath(tmp_path / "stats.pepolicy.json")]
        out_path = tmp_path / expected
        params += ["-o", out_path]
        params += [datapath(inpath)]
        stats = main([command] + [str(p) for p in params])
        assert_files_equal(cutpath(expected), out_path)
        return stats

    return _run
