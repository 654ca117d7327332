"""
Forces module - Ride comfort force smoothing.

This module contains:
- RideForceSmoother: Per-node smoothed normal/lateral forces
- ForceCarry: Roll/speed state threaded between nodes
"""

from coastercurve.forces.smoother import (
    ForceCarry,
    RideForceSmoother,
    SmootherConfig,
    smooth_track,
)

__all__ = [
    "ForceCarry",
    "RideForceSmoother",
    "SmootherConfig",
    "smooth_track",
]
