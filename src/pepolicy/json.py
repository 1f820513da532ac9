import json


class OneLine:
    """Wrap a list or dict in this class to print it on one line in the JSON file"""

    def __init__(self, value):
        self.value = value


def dumps(obj, indent: int = 2, _level: int = 0) -> str:
    """
    Encode an object hierarchy as JSON string. Unlike json.dumps, parts of the
    hierarchy that are wrapped in OneLine are written without line breaks.

    >>> print(dumps({"shapes": {"normal": 3, "dovetail": 1}, "fragment_length": OneLine([0, 500])}))
    {
      "shapes": {
        "normal": 3,
        "dovetail": 1
      },
      "fragment_length": [0, 500]
    }
    >>> print(dumps({"windows": []}))
    {
      "windows": []
    }
    """
    if isinstance(obj, OneLine):
        return json.dumps(obj.value)
    if isinstance(obj, (float, int, str, bool)) or obj is None:
        return json.dumps(obj)

    start = "\n" + (_level + 1) * indent * " "
    sep = "," + start
    end = "\n" + _level * indent * " "
    if isinstance(obj, (tuple, list)):
        if not obj:
            return "[]"
        items = (dumps(elem, indent, _level + 1) for elem in obj)
        return "[" + start + sep.join(items) + end + "]"
    elif isinstance(obj, dict):
        if not obj:
            return "{}"
        items = (
            json.dumps(k) + ": " + dumps(v, indent, _level + 1) for k, v in obj.items()
        )
        return "{" + start + sep.join(items) + end + "}"
    raise ValueError(f"cannot serialize type {obj.__class__.__name__}")
