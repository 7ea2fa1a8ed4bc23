import math


def clamp(value, low: float = 0.0, high: float = 4.0) -> float:
    return max(low, min(high, value))


def round1(value: float) -> float:
    # Half-up to one decimal place
    return math.floor(value * 10 + 0.5) / 10


def safe_number(value, fallback: float) -> float:
    if isinstance(value, bool) or value is None:
        return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback
