"""
Combat math module for the DPR calculator.

This module handles damage expressions, attack profiles, hit and critical
probabilities, the analytic expected damage and the Monte Carlo simulator.
"""

from .attack_profile import AttackProfile
from .damage import DamageComponent, average_damage
from .expected import CalcResult, calculate_profile, expected_damage
from .probability import critical_probability, hit_probability
from .simulation import SimResult, SimulationParams, simulate

__all__ = [
    # Import from attack_profile.py
    "AttackProfile",
    # Import from damage.py
    "DamageComponent",
    "average_damage",
    # Import from expected.py
    "CalcResult",
    "calculate_profile",
    "expected_damage",
    # Import from probability.py
    "critical_probability",
    "hit_probability",
    # Import from simulation.py
    "SimResult",
    "SimulationParams",
    "simulate",
]
