"""Integer arithmetic utilities for wei-denominated prices.

All prices, amounts, and fees use int (smallest currency unit). No float, no Decimal.
"""

BPS_DENOMINATOR = 10_000
WEI_DECIMALS = 18


def bps_of(value: int, bps: int) -> int:
    """value * bps / 10000, truncated toward zero.

    Fee amounts round down so the payer is never charged a fraction
    they did not agree to.
    """
    if value == 0 or bps == 0:
        return 0
    return value * bps // BPS_DENOMINATOR


def rescale(value: int, from_decimals: int, to_decimals: int = WEI_DECIMALS) -> int:
    """Convert a fixed-point integer between decimal precisions (truncating)."""
    if from_decimals == to_decimals:
        return value
    if from_decimals < to_decimals:
        return value * 10 ** (to_decimals - from_decimals)
    return value // 10 ** (from_decimals - to_decimals)
