"""
Canonical emission factor and regulatory table registry.

Every engine reads its coefficients from here so that fuel standards,
CII reference lines and the year-indexed reduction schedules are defined
exactly once:

- Fuel Standards Table (LCV, carbon factor) - IMO MEPC.308(73) defaults
- CII reference lines and rating vectors - IMO MEPC.339(76) / MEPC.353(78)
- EU ETS CO2/CH4/N2O factors and phase-in - Directive 2003/87/EC as amended
- FuelEU Maritime WtT/TtW factors and reduction targets - EU 2023/1805
- IMO GFI baselines, reduction schedules and WtW factors - MEPC 83 draft
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

import numpy as np


class UnsupportedCategoryError(ValueError):
    """Raised when a fuel type, ship type or year is not in a registry."""

    def __init__(self, category: str, key):
        self.category = category
        self.key = key
        super().__init__(f"Unsupported {category}: {key!r}")


def normalize_key(key) -> str:
    """Normalize a fuel key: enum value or free text -> 'lower_snake'."""
    raw = key.value if isinstance(key, Enum) else str(key)
    return raw.strip().lower().replace(" ", "_").replace("-", "_")


def lookup(table: Dict[str, object], key, category: str):
    """Look up a normalized key, raising UnsupportedCategoryError if absent."""
    norm = normalize_key(key)
    if norm not in table:
        raise UnsupportedCategoryError(category, key)
    return table[norm]


# =============================================================================
# Fuel Standards Table
# =============================================================================

class FossilFuelType(str, Enum):
    """Fossil fuel categories shared by the calculators."""
    HFO = "hfo"
    LFO = "lfo"
    VLSFO = "vlsfo"
    MGO = "mgo"
    LNG = "lng"


@dataclass(frozen=True)
class FuelStandard:
    """Static fuel properties: LCV in MJ/g, carbon factor in gCO2/g fuel."""
    name: str
    lcv: float
    cf: float

    def __post_init__(self):
        if self.lcv <= 0 or self.cf < 0:
            raise ValueError(f"Invalid fuel standard {self.name}: lcv={self.lcv}, cf={self.cf}")


FUEL_STANDARDS: Dict[str, FuelStandard] = {
    "hfo": FuelStandard("Heavy Fuel Oil", 0.0405, 3.114),
    "lfo": FuelStandard("Light Fuel Oil", 0.0410, 3.151),
    "vlsfo": FuelStandard("Very Low Sulphur Fuel Oil", 0.0410, 3.151),
    "mdo": FuelStandard("Marine Diesel Oil", 0.0427, 3.206),
    "mgo": FuelStandard("Marine Gas Oil", 0.0427, 3.206),
    "lng": FuelStandard("Liquefied Natural Gas", 0.0480, 2.750),
    "lpg_propane": FuelStandard("LPG (Propane)", 0.0460, 3.000),
    "lpg_butane": FuelStandard("LPG (Butane)", 0.0457, 3.030),
    "methanol": FuelStandard("Methanol", 0.0199, 1.375),
    "ethanol": FuelStandard("Ethanol", 0.0268, 1.913),
}

SUSTAINABILITY_THRESHOLD = 33.0  # gCO2e/MJ, RED II biofuel criterion

# Carbon factor used when a CAP fuel ledger is empty (VLSFO/LFO)
DEFAULT_LEDGER_CF = 3.151

# Assumed lifecycle CO2 reduction of biofuel versus the fossil it replaces.
# Policy constant, not a certified value.
BIOFUEL_LIFECYCLE_REDUCTION = 0.8


def get_fuel_standard(fuel_type) -> FuelStandard:
    """Return the FuelStandard for a fuel key."""
    return lookup(FUEL_STANDARDS, fuel_type, "fuel type")


# =============================================================================
# Year-indexed tables
# =============================================================================

class OutOfRange(Enum):
    """Policy for years outside a YearTable's defined range."""
    CLAMP = "clamp"      # use the nearest defined year
    DEFAULT = "default"  # use a fixed fallback value
    RAISE = "raise"      # reject the year


class YearTable:
    """
    Sparse year -> value schedule with stepwise lookup.

    A year between two defined keys takes the value of the largest key not
    after it. Years before the first or after the last key follow the
    ``below``/``above`` policy.
    """

    def __init__(
        self,
        name: str,
        values: Dict[int, float],
        below: OutOfRange = OutOfRange.CLAMP,
        above: OutOfRange = OutOfRange.CLAMP,
        default: Optional[float] = None,
    ):
        if not values:
            raise ValueError(f"YearTable {name} needs at least one year")
        if OutOfRange.DEFAULT in (below, above) and default is None:
            raise ValueError(f"YearTable {name} uses DEFAULT policy without a default")

        self.name = name
        self.below = below
        self.above = above
        self.default = default
        self._years = np.array(sorted(values), dtype=int)
        self._values = np.array([values[y] for y in self._years], dtype=float)

    @property
    def first_year(self) -> int:
        return int(self._years[0])

    @property
    def last_year(self) -> int:
        return int(self._years[-1])

    def items(self):
        """Defined (year, value) pairs in ascending year order."""
        return [(int(y), float(v)) for y, v in zip(self._years, self._values)]

    def __contains__(self, year: int) -> bool:
        return self.first_year <= year <= self.last_year

    def __getitem__(self, year: int) -> float:
        if year < self.first_year:
            return self._out_of_range(year, self.below, 0)
        if year > self.last_year:
            return self._out_of_range(year, self.above, -1)

        idx = int(np.searchsorted(self._years, year, side="right")) - 1
        return float(self._values[idx])

    def _out_of_range(self, year: int, policy: OutOfRange, edge: int) -> float:
        if policy is OutOfRange.RAISE:
            raise UnsupportedCategoryError(f"{self.name} year", year)
        if policy is OutOfRange.DEFAULT:
            return float(self.default)
        return float(self._values[edge])


# =============================================================================
# CII (IMO MEPC.339(76) / MEPC.353(78))
# =============================================================================

class VesselType(Enum):
    """IMO ship type categories for CII reference lines."""
    BULK_CARRIER = "bulk_carrier"
    GAS_CARRIER = "gas_carrier"
    TANKER = "tanker"
    CONTAINER = "container"
    GENERAL_CARGO = "general_cargo"
    REFRIGERATED_CARGO = "refrigerated_cargo"
    COMBINATION_CARRIER = "combination_carrier"
    LNG_CARRIER = "lng_carrier"
    RO_RO_VEHICLE_CARRIER = "roro_vehicle_carrier"
    RO_RO_CARGO = "roro_cargo"
    RO_RO_PASSENGER = "roro_passenger"
    CRUISE_PASSENGER = "cruise_passenger"


@dataclass(frozen=True)
class CIICoefficients:
    """Reference line CII_ref = a × DWT^(-c) and rating boundary vector d1..d4."""
    a: float
    c: float
    d1: float
    d2: float
    d3: float
    d4: float


CII_COEFFICIENTS: Dict[VesselType, CIICoefficients] = {
    VesselType.BULK_CARRIER: CIICoefficients(4745, 0.622, 0.86, 0.94, 1.06, 1.18),
    VesselType.GAS_CARRIER: CIICoefficients(14405, 0.71, 0.81, 0.91, 1.12, 1.44),
    VesselType.TANKER: CIICoefficients(5247, 0.61, 0.82, 0.93, 1.08, 1.28),
    VesselType.CONTAINER: CIICoefficients(1984, 0.489, 0.83, 0.94, 1.07, 1.19),
    VesselType.GENERAL_CARGO: CIICoefficients(3166, 0.439, 0.83, 0.94, 1.06, 1.19),
    VesselType.REFRIGERATED_CARGO: CIICoefficients(227, 0.233, 0.78, 0.91, 1.07, 1.20),
    VesselType.COMBINATION_CARRIER: CIICoefficients(4085, 0.553, 0.87, 0.96, 1.06, 1.14),
    VesselType.LNG_CARRIER: CIICoefficients(9842, 0.597, 0.89, 0.98, 1.06, 1.13),
    VesselType.RO_RO_VEHICLE_CARRIER: CIICoefficients(3627, 0.59, 0.86, 0.94, 1.06, 1.16),
    VesselType.RO_RO_CARGO: CIICoefficients(1594, 0.445, 0.66, 0.90, 1.11, 1.37),
    VesselType.RO_RO_PASSENGER: CIICoefficients(902, 0.381, 0.72, 0.90, 1.12, 1.41),
    VesselType.CRUISE_PASSENGER: CIICoefficients(930, 0.383, 0.87, 0.95, 1.06, 1.16),
}

# Annual reduction factor Z% relative to the 2019 reference line (MEPC.338(76))
CII_REDUCTION_FACTORS = YearTable(
    "CII reduction factor",
    {2023: 5.0, 2024: 7.0, 2025: 9.0, 2026: 11.0,
     2027: 13.0, 2028: 15.0, 2029: 17.0, 2030: 19.0},
    below=OutOfRange.DEFAULT,
    above=OutOfRange.CLAMP,
    default=0.0,
)

CII_TRAJECTORY_YEARS = list(range(2023, 2031))

# Display labels of the IMO ship types, keyed after normalize_key()
VESSEL_TYPE_ALIASES: Dict[str, VesselType] = {
    "container_ship": VesselType.CONTAINER,
    "general_cargo_ship": VesselType.GENERAL_CARGO,
    "refrigerated_cargo_carrier": VesselType.REFRIGERATED_CARGO,
    "ro_ro_cargo_ship_(vehicle_carrier)": VesselType.RO_RO_VEHICLE_CARRIER,
    "ro_ro_cargo_ship": VesselType.RO_RO_CARGO,
    "ro_ro_passenger_ship": VesselType.RO_RO_PASSENGER,
    "cruise_passenger_ship": VesselType.CRUISE_PASSENGER,
}


def resolve_vessel_type(vessel_type) -> VesselType:
    """Accept a VesselType, its value or a ship type label such as "Container ship"."""
    if isinstance(vessel_type, VesselType):
        return vessel_type
    key = normalize_key(vessel_type)
    if key in VESSEL_TYPE_ALIASES:
        return VESSEL_TYPE_ALIASES[key]
    try:
        return VesselType(key)
    except ValueError:
        raise UnsupportedCategoryError("ship type", vessel_type) from None


def get_cii_coefficients(vessel_type) -> CIICoefficients:
    return CII_COEFFICIENTS[resolve_vessel_type(vessel_type)]


# =============================================================================
# EU ETS
# =============================================================================

GWP_CH4 = 28
GWP_N2O = 265


@dataclass(frozen=True)
class ETSEmissionFactor:
    """Per-gram fuel emission factors; co2eq is the tabulated CO2-equivalent."""
    co2: float
    ch4: float
    n2o: float
    co2eq: float

    @property
    def derived_co2eq(self) -> float:
        """CO2 + CH4×GWP + N2O×GWP recomputed from the components."""
        return self.co2 + self.ch4 * GWP_CH4 + self.n2o * GWP_N2O


ETS_EMISSION_FACTORS: Dict[str, ETSEmissionFactor] = {
    "hfo": ETSEmissionFactor(3.114, 0.00005, 0.00018, 3.163),
    "lfo": ETSEmissionFactor(3.151, 0.00005, 0.00018, 3.200),
    "vlsfo": ETSEmissionFactor(3.151, 0.00005, 0.00018, 3.200),
    "mgo": ETSEmissionFactor(3.206, 0.00005, 0.00018, 3.255),
    "lng": ETSEmissionFactor(2.750, 0.002, 0.00011, 2.830),
}

# Share of verified emissions that must be surrendered
ETS_PHASE_IN = YearTable(
    "EU ETS phase-in",
    {2024: 0.4, 2025: 0.7, 2026: 1.0},
    below=OutOfRange.DEFAULT,
    above=OutOfRange.CLAMP,
    default=0.0,
)


class BiofuelGrade(str, Enum):
    """Commercial biofuel blend grades and their bio share by mass."""
    B24 = "B24"
    B30 = "B30"
    B50 = "B50"
    B100 = "B100"
    CUSTOM = "CUSTOM"


BIOFUEL_GRADE_FRACTIONS: Dict[BiofuelGrade, float] = {
    BiofuelGrade.B24: 0.24,
    BiofuelGrade.B30: 0.30,
    BiofuelGrade.B50: 0.50,
    BiofuelGrade.B100: 1.00,
    BiofuelGrade.CUSTOM: 0.30,
}


def get_ets_factor(fuel_type) -> ETSEmissionFactor:
    return lookup(ETS_EMISSION_FACTORS, fuel_type, "EU ETS fuel type")


def resolve_grade(grade) -> BiofuelGrade:
    """Accept a BiofuelGrade or its name ("b30", "B30")."""
    if isinstance(grade, BiofuelGrade):
        return grade
    try:
        return BiofuelGrade(str(grade).strip().upper())
    except ValueError:
        raise UnsupportedCategoryError("biofuel grade", grade) from None


def grade_fraction(grade, custom_fraction: Optional[float] = None) -> float:
    """Bio share of a grade; CUSTOM takes ``custom_fraction`` when given."""
    grade = resolve_grade(grade)
    if grade is BiofuelGrade.CUSTOM and custom_fraction is not None:
        return custom_fraction
    return BIOFUEL_GRADE_FRACTIONS[grade]


# =============================================================================
# FuelEU Maritime (EU 2023/1805)
# =============================================================================

FUELEU_REFERENCE_GHG = 91.16  # gCO2eq/MJ (2020 baseline)


@dataclass(frozen=True)
class FuelEUFuelSpec:
    """LCV in MJ/g and Well-to-Tank / Tank-to-Wake factors in gCO2eq/MJ."""
    lcv: float
    wtt: float
    ttw: float

    @property
    def wtw(self) -> float:
        return self.wtt + self.ttw


FUELEU_FUEL_SPECS: Dict[str, FuelEUFuelSpec] = {
    "hfo": FuelEUFuelSpec(0.0402, 13.5, 77.5),
    "lfo": FuelEUFuelSpec(0.0410, 14.1, 78.3),
    "vlsfo": FuelEUFuelSpec(0.0410, 14.1, 78.3),
    "mgo": FuelEUFuelSpec(0.0427, 14.5, 79.0),
    "lng": FuelEUFuelSpec(0.0480, 18.5, 68.0),
    "bio": FuelEUFuelSpec(0.0370, 5.0, 0.0),
    "rfnbo": FuelEUFuelSpec(0.0199, 0.0, 0.0),
}

RFNBO_KEY = "rfnbo"
RFNBO_INCENTIVE_LAST_YEAR = 2033

# Reduction of the GHG intensity limit versus the 2020 reference (fraction)
FUELEU_REDUCTION_TARGETS = YearTable(
    "FuelEU reduction target",
    {2024: 0.0, 2025: 0.02, 2030: 0.06, 2035: 0.145,
     2040: 0.31, 2045: 0.62, 2050: 0.80},
    below=OutOfRange.DEFAULT,
    above=OutOfRange.CLAMP,
    default=0.0,
)

PENALTY_EUR_PER_T_VLSFO = 2400.0
VLSFO_ENERGY_MJ_PER_T = 41_000.0
BORROWING_CAP_FRACTION = 0.02
ICE_CLASS_ENERGY_FACTOR = 0.95
MAX_CONSECUTIVE_DEFICIT_YEARS = 10


def get_fueleu_spec(fuel_type) -> FuelEUFuelSpec:
    return lookup(FUELEU_FUEL_SPECS, fuel_type, "FuelEU fuel type")


# =============================================================================
# IMO Global Fuel Intensity (Net-Zero Framework)
# =============================================================================

GFI_2008_BASELINE = 93.3  # gCO2eq/MJ

GFI_BASE_TARGET_REDUCTIONS = YearTable(
    "GFI base target reduction",
    {2028: 0.04, 2029: 0.06, 2030: 0.08, 2031: 0.124,
     2032: 0.168, 2033: 0.212, 2034: 0.256, 2035: 0.30},
)

GFI_DIRECT_COMPLIANCE_REDUCTIONS = YearTable(
    "GFI direct compliance reduction",
    {2028: 0.17, 2029: 0.19, 2030: 0.21, 2031: 0.254,
     2032: 0.298, 2033: 0.342, 2034: 0.386, 2035: 0.43},
)

GFI_YEARS = list(range(2028, 2036))

# Well-to-Wake emission factors (gCO2eq/g fuel) and LCV (MJ/g)
GFI_WTW_FACTORS: Dict[str, float] = {
    "hfo": 3.56,
    "vlsfo": 3.58,
    "mgo": 3.62,
    "lng": 3.05,
}

GFI_LCV: Dict[str, float] = {
    "hfo": 0.0405,
    "vlsfo": 0.0410,
    "mgo": 0.0427,
    "lng": 0.0480,
}

GFI_BIO_WTW = 0.55
GFI_BIO_LCV = 0.0370

ZNZ_THRESHOLD = 19.0
ZNZ_THRESHOLD_2035 = 14.0
ZNZ_TIGHTENING_YEAR = 2035


def get_gfi_factors(fuel_type):
    """Return (WtW gCO2eq/g, LCV MJ/g) for a GFI fuel key."""
    wtw = lookup(GFI_WTW_FACTORS, fuel_type, "GFI fuel type")
    return wtw, GFI_LCV[normalize_key(fuel_type)]
