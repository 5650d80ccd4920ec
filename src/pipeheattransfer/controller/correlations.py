"""
Convection Coefficient Correlations
===================================
Heat transfer coefficients on both sides of the pipe wall and at the soil
surface.

Property data for water are taken from Incropera & DeWitt, Introduction to
Heat Transfer, Table A.6. The cross-flow cylinder correlation follows
Incropera & DeWitt, Fundamentals of Heat and Mass Transfer, 4th ed.,
Eq. 7.55b.
"""
from __future__ import annotations

import logging
import math

from pipeheattransfer.config import (
    MAX_LAMINAR_REYNOLDS, LAMINAR_NUSSELT, AIR_PRANDTL, AIR_CONDUCTIVITY, NATURAL_CONVECTION_NUSSELT,
)
from pipeheattransfer.model.environment import SurfaceRoughness
from pipeheattransfer.utils import lininterp_scalar, in_table_range

logger = logging.getLogger(__name__)

# Water Prandtl number vs temperature [°C]
PRANDTL_TEMPERATURES = (1.85, 6.85, 11.85, 16.85, 21.85, 26.85, 31.85, 36.85, 41.85, 46.85, 51.85, 56.85, 61.85)
WATER_PRANDTL = (12.22, 10.26, 8.81, 7.56, 6.62, 5.83, 5.20, 4.62, 4.16, 3.77, 3.42, 3.15, 2.88)

# Cylinder in cross flow: Nu = C * Re^m * Pr^(1/3)
CROSSFLOW_COEFFICIENTS = (0.989, 0.911, 0.683, 0.193, 0.027)
CROSSFLOW_EXPONENTS = (0.33, 0.385, 0.466, 0.618, 0.805)
CROSSFLOW_LOWER_BOUNDS = (0.4, 4.0, 40.0, 4000.0, 40000.0)
CROSSFLOW_UPPER_BOUNDS = (4.0, 40.0, 4000.0, 40000.0, 400000.0)

# Air kinematic viscosity [m²/s] vs temperature [°C]
AIR_TEMPERATURES = (-73.0, -23.0, -10.0, 0.0, 10.0, 20.0, 27.0, 30.0, 40.0, 50.0, 76.85, 126.85)
AIR_VISCOSITIES = (
    75.52e-7, 11.37e-6, 12.44e-6, 13.3e-6, 14.18e-6, 15.08e-6, 15.75e-6, 16e-6, 16.95e-6, 17.91e-6, 20.92e-6, 26.41e-6
)

# ASHRAE simple exterior convection: h = D + E*V + F*V^2
ASHRAE_SIMPLE_COEFFICIENTS: dict[SurfaceRoughness, tuple[float, float, float]] = {
    SurfaceRoughness.VERY_ROUGH: (11.58, 5.894, 0.0),
    SurfaceRoughness.ROUGH: (12.49, 4.065, 0.028),
    SurfaceRoughness.MEDIUM_ROUGH: (10.79, 4.192, 0.0),
    SurfaceRoughness.MEDIUM_SMOOTH: (8.23, 4.0, -0.057),
    SurfaceRoughness.SMOOTH: (10.22, 3.1, 0.0),
    SurfaceRoughness.VERY_SMOOTH: (8.23, 3.33, -0.036),
}


def water_prandtl(temperature: float) -> float:
    """Prandtl number of water, clamped to the tabulated range."""
    return lininterp_scalar(temperature, PRANDTL_TEMPERATURES, WATER_PRANDTL)


def internal_nusselt(reynolds: float, prandtl: float) -> float:
    """
    Nusselt number for fully developed flow inside a pipe.

    Turbulent flow uses the Dittus-Boelter (Colburn) form; laminar flow and
    no flow use the constant surface temperature value.
    """
    if reynolds >= MAX_LAMINAR_REYNOLDS:
        return 0.023 * reynolds ** 0.8 * prandtl ** (1.0 / 3.0)
    return LAMINAR_NUSSELT


def internal_convection_coefficient(
    temperature: float,
    mass_flow_rate: float,
    diameter: float,
    conductivity: float,
    viscosity: float,
    pipe_name: str = "",
) -> float:
    """
    Fluid-to-pipe convection coefficient.

    A non-positive viscosity is treated as no flow.

    Args:
        temperature: Fluid temperature used for the Prandtl number in °C.
        mass_flow_rate: Mass flow rate in kg/s.
        diameter: Pipe inside diameter in m.
        conductivity: Fluid thermal conductivity in W/(m·K).
        viscosity: Fluid dynamic viscosity in Pa·s.
        pipe_name: Pipe name, used in diagnostics.

    Returns:
        Heat transfer coefficient in W/(m²·K).
    """
    prandtl = water_prandtl(temperature)
    if viscosity <= 0.0:
        logger.warning(
            f"Heat Transfer Pipe = {pipe_name}: invalid fluid viscosity {viscosity:.4g} Pa s, "
            f"using the no-flow Nusselt number."
        )
        return conductivity * LAMINAR_NUSSELT / diameter
    reynolds = 4.0 * mass_flow_rate / (math.pi * viscosity * diameter)
    nusselt = internal_nusselt(reynolds, prandtl)
    return conductivity * nusselt / diameter


def air_viscosity(air_temperature: float, pipe_name: str = "") -> float:
    """Kinematic viscosity of air, clamped to the tabulated range."""
    if not in_table_range(air_temperature, AIR_TEMPERATURES):
        logger.warning(
            f"Heat Transfer Pipe = {pipe_name}: viscosity out of range, air temperature {air_temperature:.2f} C "
            f"outside [{AIR_TEMPERATURES[0]}, {AIR_TEMPERATURES[-1]}], setting to the nearest limit."
        )
    return lininterp_scalar(air_temperature, AIR_TEMPERATURES, AIR_VISCOSITIES)


def crossflow_nusselt(reynolds: float, pipe_name: str = "") -> float:
    """
    Nusselt number of a cylinder in cross flow of air.

    Falls back to natural convection when the forced-convection value is
    smaller (low wind).
    """
    for coef, exponent, upper in zip(CROSSFLOW_COEFFICIENTS, CROSSFLOW_EXPONENTS, CROSSFLOW_UPPER_BOUNDS):
        if reynolds <= upper:
            break
    else:
        logger.warning(
            f"Heat Transfer Pipe = {pipe_name}: Reynolds number {reynolds:.4g} out of range, "
            "setting coefficients to upper limit."
        )

    nusselt = coef * reynolds ** exponent * AIR_PRANDTL ** (1.0 / 3.0)
    return max(nusselt, NATURAL_CONVECTION_NUSSELT)


def external_convection_coefficient(
    air_temperature: float,
    air_velocity: float,
    outer_diameter: float,
    pipe_name: str = "",
) -> float:
    """
    Air-to-pipe convection coefficient.

    Args:
        air_temperature: Surrounding air temperature in °C.
        air_velocity: Air velocity across the pipe in m/s.
        outer_diameter: Outer diameter of the (insulated) pipe in m.
        pipe_name: Pipe name, used in diagnostics.

    Returns:
        Heat transfer coefficient in W/(m²·K).
    """
    viscosity = air_viscosity(air_temperature, pipe_name)
    reynolds = abs(air_velocity) * outer_diameter / viscosity
    nusselt = crossflow_nusselt(reynolds, pipe_name)
    return AIR_CONDUCTIVITY * nusselt / outer_diameter


def ashrae_simple_coefficient(roughness: SurfaceRoughness, wind_speed: float) -> float:
    """ASHRAE simple exterior surface convection coefficient in W/(m²·K)."""
    d, e, f = ASHRAE_SIMPLE_COEFFICIENTS[roughness]
    return d + e * wind_speed + f * wind_speed ** 2
