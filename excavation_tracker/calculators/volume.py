"""
Trench volume, material weight and material cost formulas.

All functions are total over real numbers. Positivity of the inputs is the
API layer's job: a zero or negative dimension simply produces a zero or
negative volume here.
"""

from decimal import Decimal, ROUND_HALF_UP, localcontext

CUBIC_FEET_PER_YARD = 27
POUNDS_PER_TON = 2000

# Fixed business constants
HAUL_OFF_RATE = 37.50              # $ per cubic yard, haul off + disposal
DEFAULT_MATERIAL_WEIGHT = 145.0    # lbs per cubic foot (compacted fill)
DEFAULT_IMPORT_UNIT_COST = 24.50   # $ per ton of imported material


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round to `places` decimals, ties away from zero.

    Goes through the float's shortest repr so 22.225 rounds to 22.23 rather
    than to whatever its binary approximation happens to fall on. Infinity
    and NaN come back unchanged.
    """
    exact = Decimal(repr(value))
    if not exact.is_finite():
        return value
    with localcontext() as ctx:
        # room for every integer digit plus the requested decimals
        ctx.prec = max(ctx.prec, exact.adjusted() + places + 2)
        return float(exact.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def cubic_feet(pipe_length: float, trench_width: float, trench_depth: float) -> float:
    return pipe_length * trench_width * trench_depth


def cubic_yards(pipe_length: float, trench_width: float, trench_depth: float) -> float:
    """Trench volume in cubic yards, rounded half-up to 2 decimals."""
    return round_half_up(cubic_feet(pipe_length, trench_width, trench_depth) / CUBIC_FEET_PER_YARD, 2)


def tons_per_cubic_yard(material_weight: float) -> float:
    """(lbs/ft³ × 27 ft³/yd³) ÷ 2000 lbs/ton."""
    return (material_weight * CUBIC_FEET_PER_YARD) / POUNDS_PER_TON


def total_tons(material_weight: float, yards: float) -> float:
    return tons_per_cubic_yard(material_weight) * yards


def import_cost(import_unit_cost: float, tons: float) -> float:
    return import_unit_cost * tons


def haul_off_cost(yards: float) -> float:
    return yards * HAUL_OFF_RATE
