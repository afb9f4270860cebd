"""
Effects module for the DPR calculator.

This module defines the effect model, the pipeline that folds effects into an
attack profile and the catalog of known class features and spells.
"""

from .catalog import EFFECT_CATALOG, get_effect, list_effects, resolve_effects
from .effect import Effect, EffectContext, EffectResolution, apply_effects

__all__ = [
    # Import from catalog.py
    "EFFECT_CATALOG",
    "get_effect",
    "list_effects",
    "resolve_effects",
    # Import from effect.py
    "Effect",
    "EffectContext",
    "EffectResolution",
    "apply_effects",
]
