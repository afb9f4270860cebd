"""
Class kits module for the DPR calculator.

Kits are loaded by the content repository; the resolver lives in
dprcalc.kits.resolver.
"""

from .kit import AttackOption, ClassKit

__all__ = ["AttackOption", "ClassKit"]
