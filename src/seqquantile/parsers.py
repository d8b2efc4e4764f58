import json
import math
from typing import Optional


def parse_value(line: str) -> Optional[float]:
    """
    Returns the numeric value carried by one input line, or None for lines
    that carry no observation (blank, ``#`` comments).
    Accepts a bare number or a JSON object with a ``value`` key.
    Raises ValueError for lines that look like data but do not parse.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    if line.startswith("{") and line.endswith("}"):
        obj = json.loads(line)
        if "value" not in obj:
            raise ValueError("JSON line has no 'value' key")
        raw = obj["value"]
        if raw is None:
            return None
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise ValueError(f"JSON 'value' is not a number: {raw!r}") from None
    else:
        # tolerate CSV-ish input: first field carries the value
        value = float(line.split(",", 1)[0])
    if not math.isfinite(value):
        raise ValueError(f"non-finite value {value!r}")
    return value
