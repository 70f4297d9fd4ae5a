"""
Deterministic trench cost engine.

Pure Python math. No database, no I/O.
Given trench dimensions (feet) and rate inputs, produce volume, weight,
import, haul-off and labor figures for an estimate.
"""
