"""
Kinematic calculations.
"""
