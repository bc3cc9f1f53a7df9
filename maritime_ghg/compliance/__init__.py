"""Compliance engines for maritime GHG regulations (Blended Cf, CII, CAP, EU ETS, FuelEU, GFI)."""

from .factors import UnsupportedCategoryError, VesselType
from .blend import compute_blend, estimate_biofuel_savings, split_blend
from .cii import CIICalculator, CIIRating, compute_cii
from .cap import compute_cap
from .ets import ETSCalculator, VoyageScope, compute_ets
from .fueleu import FuelEUCalculator, compute_fueleu
from .gfi import GFICalculator, GFIStatus, compute_gfi

__all__ = [
    "UnsupportedCategoryError",
    "VesselType",
    "compute_blend",
    "estimate_biofuel_savings",
    "split_blend",
    "CIICalculator",
    "CIIRating",
    "compute_cii",
    "compute_cap",
    "ETSCalculator",
    "VoyageScope",
    "compute_ets",
    "FuelEUCalculator",
    "compute_fueleu",
    "GFICalculator",
    "GFIStatus",
    "compute_gfi",
]
