# kernels.py
from __future__ import annotations

import numpy as np
import numpy.typing as npt
import numba as nb

from pipeheattransfer.config import STEFAN_BOLTZMANN, TINY_TEMPERATURE_DIFFERENCE
from pipeheattransfer.utils import ABSOLUTE_ZERO_CELSIUS

# ---- JIT’d Hanby two-node (fluid / pipe wall) kernels ----

@nb.njit(cache=True, fastmath=True)
def section_temperatures(
    fluid_upstream: float,
    fluid_past: float,
    pipe_past: float,
    env_temp: float,
    a1: float, a2: float, a3: float, a4: float,
    b1: float, b2: float, b3: float, b4: float,
) -> tuple[float, float]:
    """
    Solve the fluid and pipe-wall node balances of one axial section.

    Returns:
        fluid: New fluid node temperature (°C).
        pipe:  New pipe-wall node temperature (°C).
    """
    fluid = (
        a2 * fluid_upstream + a3 / b1 * (b3 * env_temp + b4 * pipe_past) + a4 * fluid_past
    ) / (a1 - a3 * b2 / b1)
    pipe = (b2 * fluid + b3 * env_temp + b4 * pipe_past) / b1
    return fluid, pipe

@nb.njit(cache=True, fastmath=True)
def surface_heat_loss(
    fluid_temp: float,
    env_temp: float,
    h_env: float,
    sum_tk: float,
    outside_area: float,
) -> float:
    """
    Heat loss (W) of one section to its environment, from the outer surface temperature.

    A zero environment coefficient means an adiabatic pipe.
    """
    if h_env <= 0.0:
        return 0.0
    surface_temp = env_temp - (env_temp - fluid_temp) / (h_env * (1.0 / h_env + sum_tk))
    return h_env * outside_area * (surface_temp - env_temp)

@nb.njit(cache=True, fastmath=True)
def march_sections(
    fluid_tent: npt.NDArray[np.float64],
    pipe_tent: npt.NDArray[np.float64],
    fluid_prev: npt.NDArray[np.float64],
    pipe_prev: npt.NDArray[np.float64],
    start: int,
    stop: int,
    env_temp: float,
    a1: float, a2: float, a3: float, a4: float,
    b1: float, b2: float, b3: float, b4: float,
    h_env: float,
    sum_tk: float,
    outside_area: float,
) -> float:
    """
    March the sections start..stop-1 in flow order, writing the tentative arrays in place.

    Returns:
        Sum of the environmental heat loss of the marched sections (W).
    """
    env_loss = 0.0
    for i in range(start, stop):
        fluid, pipe = section_temperatures(
            fluid_tent[i - 1], fluid_prev[i], pipe_prev[i], env_temp, a1, a2, a3, a4, b1, b2, b3, b4
        )
        fluid_tent[i] = fluid
        pipe_tent[i] = pipe
        env_loss += surface_heat_loss(fluid, env_temp, h_env, sum_tk, outside_area)
    return env_loss

# ---- JIT’d soil grid node kernels ----

@nb.njit(cache=True, fastmath=True)
def radiation_coefficient(past_temp: float, sky_temp: float, thermal_absorptance: float) -> float:
    """Linearised sky radiation coefficient in W/(m²·K) from temperatures in °C."""
    past_abs = past_temp - ABSOLUTE_ZERO_CELSIUS
    sky_abs = sky_temp - ABSOLUTE_ZERO_CELSIUS
    if abs(past_abs - sky_abs) <= TINY_TEMPERATURE_DIFFERENCE:
        return 0.0
    return STEFAN_BOLTZMANN * thermal_absorptance * (past_abs ** 4 - sky_abs ** 4) / (past_abs - sky_abs)

@nb.njit(cache=True, fastmath=True)
def surface_node(
    below: float,
    left: float,
    right: float,
    past: float,
    q_solar: float,
    rad_coef: float,
    conv_coef: float,
    sky_temp: float,
    outdoor_temp: float,
    k_over_ds: float,
    storage: float,
) -> float:
    """
    Soil surface node energy balance.

    Args:
        storage: Volumetric heat capacity over the time step, ρ·cp/Δt.

    On the symmetry centerline pass `right = left`.
    """
    return (
        q_solar + rad_coef * sky_temp + conv_coef * outdoor_temp
        + k_over_ds * (below + left + right) + storage * past
    ) / (rad_coef + conv_coef + 3.0 * k_over_ds + storage)

@nb.njit(cache=True, fastmath=True)
def interior_node(
    below: float,
    above: float,
    left: float,
    right: float,
    past: float,
    coef_a1: float,
    coef_a2: float,
) -> float:
    """Implicit-in-self conduction update of an interior soil node."""
    return coef_a1 * (below + above + left + right) + coef_a2 * past

@nb.njit(cache=True, fastmath=True)
def centerline_node(
    below: float,
    above: float,
    left: float,
    past: float,
    coef_a1: float,
    coef_a2: float,
) -> float:
    """Conduction update of a node on the symmetry centerline (reflected left neighbour)."""
    return coef_a1 * (below + above + 2.0 * left) + coef_a2 * past
