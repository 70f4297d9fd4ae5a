"""
Equipment and crew labor cost for an estimate.

Every machine and crew member is billed for the full estimated hours at a
fixed hourly rate. Rates are business constants, not per-estimate inputs.
"""

from typing import Dict

# Equipment ($/hour)
EXCAVATOR_250_RATE = 250.00   # 250 series excavator
EXCAVATOR_200_RATE = 200.00   # 200 series excavator
LOADER_RATE = 200.00          # 320 series loader

# Crew ($/hour)
PIPE_GUY_RATE = 45.00
TOP_GUY_RATE = 40.00


def equipment_labor_cost(estimated_hours: float) -> Dict[str, float]:
    """
    Returns:
        Dict with keys excavator_250, excavator_200, loader, total.
    """
    excavator_250 = estimated_hours * EXCAVATOR_250_RATE
    excavator_200 = estimated_hours * EXCAVATOR_200_RATE
    loader = estimated_hours * LOADER_RATE
    return {
        "excavator_250": excavator_250,
        "excavator_200": excavator_200,
        "loader": loader,
        "total": excavator_250 + excavator_200 + loader,
    }


def crew_labor_cost(estimated_hours: float) -> Dict[str, float]:
    """
    Returns:
        Dict with keys pipe_guy, top_guy, total.
    """
    pipe_guy = estimated_hours * PIPE_GUY_RATE
    top_guy = estimated_hours * TOP_GUY_RATE
    return {
        "pipe_guy": pipe_guy,
        "top_guy": top_guy,
        "total": pipe_guy + top_guy,
    }


def combined_labor_total(estimated_hours: float) -> float:
    return equipment_labor_cost(estimated_hours)["total"] + crew_labor_cost(estimated_hours)["total"]
