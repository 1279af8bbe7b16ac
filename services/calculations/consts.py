"""
Centralized constants for kinematic calculations.
"""
# TODO: take the proton beam energy from the run's beam configuration instead of a fixed value
PROTON_BEAM_ENERGY_GEV = 100.0

VIEWS = ("rec", "gen")
