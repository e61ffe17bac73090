from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, digits: int) -> float:
    # Half-up on the exact binary value, same as JS toFixed
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))
