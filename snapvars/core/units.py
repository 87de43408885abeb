from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterator, Mapping, Optional

from snapvars.core.exceptions import UnknownUnit

STANDARD_UNIT = "standard"


@dataclass(frozen=True)
class PhysicalConstants:
    """
    Physical constants in cgs units (IAU / CODATA 2018 values).
    """

    Au: float = 1.495978707e13  # cm
    pc: float = 3.08567758128e18  # cm
    ly: float = 9.4607304725808e17  # cm
    Msol: float = 1.9891e33  # g
    Mearth: float = 5.9722e27  # g
    Mjupiter: float = 1.89813e30  # g
    mH: float = 1.66e-24  # g, hydrogen atom mass as used by the simulation code
    m_u: float = 1.66053906660e-24  # g, atomic mass unit
    c: float = 2.99792458e10  # cm/s
    G: float = 6.67430e-8  # cm^3 g^-1 s^-2
    k_B: float = 1.380649e-16  # erg/K
    yr: float = 3.15576e7  # s

    @property
    def kpc(self) -> float:
        return self.pc * 1e3

    @property
    def Mpc(self) -> float:
        return self.pc * 1e6


class UnitScaleTable(Mapping[str, float]):
    """
    Immutable mapping from unit symbol to the multiplier that converts a value
    in the snapshot's code units into that unit.

    The symbol "standard" always maps to 1.0, whatever the table was built with.
    """

    def __init__(self, scales: Optional[Mapping[str, float]] = None):
        self._scales: Dict[str, float] = {
            str(k): float(v) for k, v in (scales or {}).items()
        }
        self._scales[STANDARD_UNIT] = 1.0

    def __getitem__(self, unit: str) -> float:
        return self.factor(unit)

    def __iter__(self) -> Iterator[str]:
        return iter(self._scales)

    def __len__(self) -> int:
        return len(self._scales)

    def __repr__(self) -> str:
        return f"UnitScaleTable({len(self._scales)} units)"

    def factor(self, unit: Optional[str]) -> float:
        """
        Multiplier for `unit`. None and "standard" both mean code units.

        :raises UnknownUnit: if the symbol is not in the table
        """
        if unit is None or unit == STANDARD_UNIT:
            return 1.0
        try:
            return self._scales[unit]
        except KeyError:
            raise UnknownUnit(unit) from None

    @classmethod
    def from_code_units(
        cls,
        unit_l: float,
        unit_d: float,
        unit_t: float,
        constants: Optional[PhysicalConstants] = None,
    ) -> UnitScaleTable:
        """
        Build the standard table of scale factors from the snapshot's code units
        (cgs length, density and time of one code unit).
        """
        c = constants or PhysicalConstants()
        unit_m = unit_d * unit_l ** 3
        unit_v = unit_l / unit_t
        x_frac = 0.76  # hydrogen mass fraction
        mu = 1.0 / x_frac

        s: Dict[str, float] = {}

        # length
        s["Mpc"] = unit_l / c.Mpc
        s["kpc"] = unit_l / c.kpc
        s["pc"] = unit_l / c.pc
        s["mpc"] = unit_l / c.pc * 1e3
        s["ly"] = unit_l / c.ly
        s["Au"] = unit_l / c.Au
        s["km"] = unit_l / 1.0e5
        s["m"] = unit_l / 1.0e2
        s["cm"] = unit_l
        s["mm"] = unit_l * 10.0
        s["um"] = unit_l * 1e4

        # volume
        for name in ("Mpc", "kpc", "pc", "mpc", "ly", "Au", "km", "m", "cm", "mm", "um"):
            s[f"{name}3"] = s[name] ** 3

        # density / column density
        s["Msol_pc3"] = unit_d * c.pc ** 3 / c.Msol
        s["g_cm3"] = unit_d
        s["Msol_pc2"] = unit_d * unit_l * c.pc ** 2 / c.Msol
        s["g_cm2"] = unit_d * unit_l
        s["nH"] = x_frac / c.mH * unit_d

        # time
        s["Gyr"] = unit_t / c.yr / 1e9
        s["Myr"] = unit_t / c.yr / 1e6
        s["yr"] = unit_t / c.yr
        s["s"] = unit_t
        s["ms"] = unit_t * 1e3

        # mass
        s["Msol"] = unit_m / c.Msol
        s["Mearth"] = unit_m / c.Mearth
        s["Mjupiter"] = unit_m / c.Mjupiter
        s["g"] = unit_m

        # velocity / acceleration
        s["km_s"] = unit_v / 1e5
        s["m_s"] = unit_v / 1e2
        s["cm_s"] = unit_v
        s["cm_s2"] = unit_l / unit_t ** 2

        # energy, pressure, temperature
        s["erg"] = unit_m * unit_v ** 2
        s["erg_g"] = unit_v ** 2
        s["erg_cm3"] = unit_d * unit_v ** 2
        s["g_cms2"] = unit_m / (unit_l * unit_t ** 2)
        s["Ba"] = unit_m / unit_l / unit_t ** 2
        s["p_kB"] = s["Ba"] / c.k_B
        s["K_cm3"] = s["p_kB"]
        s["T_mu"] = c.mH / c.k_B * unit_v ** 2
        s["K_mu"] = s["T_mu"]
        s["T"] = s["T_mu"] * mu
        s["K"] = s["T"]

        # magnetic field (Gauss) for code units where B absorbs sqrt(4 pi)
        s["Gauss"] = math.sqrt(4.0 * math.pi * unit_d) * unit_v
        s["muG"] = s["Gauss"] * 1e6

        # specific angular momentum / angular momentum
        s["cm2_s"] = unit_l * unit_v
        s["km_kpc_s"] = s["km_s"] * s["kpc"]
        s["g_cm2_s"] = unit_m * unit_l * unit_v
        s["Msol_km_kpc_s"] = s["Msol"] * s["km_s"] * s["kpc"]

        return cls(s)
