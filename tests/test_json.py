import json

import pytest

from pepolicy.json import OneLine, dumps


def test_dumps_is_valid_json():
    obj = {
        "policy": {"policy": "fr", "fragment_length": OneLine([0, 500])},
        "shapes": {"normal": 3, "discordant": 1},
        "mean_concordant_fragment_length": None,
        "command_line_arguments": ["classify", "pairs.tsv"],
    }
    assert json.loads(dumps(obj)) == {
        "policy": {"policy": "fr", "fragment_length": [0, 500]},
        "shapes": {"normal": 3, "discordant": 1},
        "mean_concordant_fragment_length": None,
        "command_line_arguments": ["classify", "pairs.tsv"],
    }
    assert '"fragment_length": [0, 500]' in dumps(obj)


def test_dumps_unsupported_type():
    with pytest.raises(ValueError):
        dumps({"x": object()})
