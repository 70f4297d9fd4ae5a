"""
Full cost breakdown for one estimate.

Combines the volume and labor formulas into the figures shown next to an
estimate. Volume feeds every material figure through the rounded
cubic_yards value, the same number that is persisted on the estimate.

Money and tonnage are rounded to cents here, once, at the end. The formulas
in volume.py and labor_calculator.py stay unrounded.
"""

from .volume import (
    DEFAULT_IMPORT_UNIT_COST,
    DEFAULT_MATERIAL_WEIGHT,
    cubic_feet,
    cubic_yards,
    haul_off_cost,
    import_cost,
    round_half_up,
    tons_per_cubic_yard,
    total_tons,
)
from .labor_calculator import combined_labor_total, crew_labor_cost, equipment_labor_cost


def _round_values(figures):
    return {key: round_half_up(value, 2) for key, value in figures.items()}


def estimate_breakdown(
    pipe_length: float,
    trench_width: float,
    trench_depth: float,
    material_weight: float = DEFAULT_MATERIAL_WEIGHT,
    import_unit_cost: float = DEFAULT_IMPORT_UNIT_COST,
    estimated_hours: float = 0.0,
) -> dict:
    """
    Args:
        pipe_length, trench_width, trench_depth: trench dimensions in feet
        material_weight: lbs per cubic foot of import material
        import_unit_cost: $ per ton of import material
        estimated_hours: machine/crew hours

    Returns:
        Dict with volume, weight, import, haul-off, equipment, crew,
        combined labor and grand total figures.
    """
    yards = cubic_yards(pipe_length, trench_width, trench_depth)
    tons = total_tons(material_weight, yards)
    material_import = import_cost(import_unit_cost, tons)
    haul_off = haul_off_cost(yards)

    equipment = equipment_labor_cost(estimated_hours)
    crew = crew_labor_cost(estimated_hours)
    labor_total = combined_labor_total(estimated_hours)

    return {
        "cubic_feet": round_half_up(cubic_feet(pipe_length, trench_width, trench_depth), 2),
        "cubic_yards": yards,
        "tons_per_cubic_yard": round_half_up(tons_per_cubic_yard(material_weight), 4),
        "total_tons": round_half_up(tons, 2),
        "import_cost": round_half_up(material_import, 2),
        "haul_off_cost": round_half_up(haul_off, 2),
        "equipment": _round_values(equipment),
        "crew": _round_values(crew),
        "combined_labor_total": round_half_up(labor_total, 2),
        "grand_total": round_half_up(material_import + haul_off + labor_total, 2),
    }
