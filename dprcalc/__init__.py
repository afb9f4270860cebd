"""
DPR calculator package.

This package computes the expected damage per round of a tabletop attack,
checks it with a Monte Carlo simulation and resolves class kits with their
optional effects into fully specified attack profiles.
"""
