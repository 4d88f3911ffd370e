import math
from typing import Optional, Union


def parse_weight(value: Union[float, int, str, None]) -> Optional[float]:
    """Turn a form reading into a float; blank or non-numeric input counts as missing."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def compute_net(total, head, empty) -> float:
    """
    Net weight = total - head - empty, floored at zero and rounded to 2 decimals.
    Any missing reading gives 0.
    """
    readings = [parse_weight(v) for v in (total, head, empty)]
    if any(r is None for r in readings):
        return 0.0
    t, h, e = readings
    return max(0.0, round(t - h - e, 2))
