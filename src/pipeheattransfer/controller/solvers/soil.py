"""
Buried Soil Grid Solver
=======================
Transient conduction in the soil around a buried pipe.

An implicit pseudo-3D finite difference grid (width x depth x length) is
relaxed by successive substitution each inner step. The node containing the
pipe is coupled to the Hanby axial model, the soil surface exchanges heat
with the sky, the sun and the outdoor air, and the far-field column and the
bottom row follow the undisturbed ground temperature.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import TYPE_CHECKING

import numpy as np

from pipeheattransfer.config import SOIL_CONVERGENCE_TOLERANCE, SOIL_MAX_ITERATIONS
from pipeheattransfer.controller.correlations import external_convection_coefficient, ashrae_simple_coefficient
from pipeheattransfer.controller.kernels import radiation_coefficient, surface_node, interior_node, centerline_node
from pipeheattransfer.model.environment import SurfaceConvectionModel
from pipeheattransfer.model.state import TimeSlot

if TYPE_CHECKING:
    from pipeheattransfer.controller.ground import KusudaAchenbachGroundTemperature
    from pipeheattransfer.controller.solvers.axial import HanbyPipeSolver
    from pipeheattransfer.model.conditions import EnvironmentConditions
    from pipeheattransfer.model.state import PipeThermalState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RelaxationResult:
    """Outcome of one soil relaxation."""
    converged: bool
    iterations: int
    max_residual: float


class BuriedSoilSolver:
    """
    Relaxation solver of the soil grid of one buried pipe.
    """

    def __init__(
        self,
        state: PipeThermalState,
        axial: HanbyPipeSolver,
        surface_convection: SurfaceConvectionModel = SurfaceConvectionModel.CROSSFLOW,
        tolerance: float = SOIL_CONVERGENCE_TOLERANCE,
        max_iterations: int = SOIL_MAX_ITERATIONS,
    ) -> None:
        """
        Args:
            state: Thermal state of a buried pipe.
            axial: Axial solver of the same pipe, used for the node containing the pipe.
            surface_convection: Convection model of the soil surface.
            tolerance: Largest node change (°C) accepted as converged.
            max_iterations: Hard cap of relaxation sweeps per inner step.
        """
        if state.grid is None or state.soil is None:
            raise ValueError(f"Pipe '{state.name}' has no soil grid.")
        self.state = state
        self.axial = axial
        self.surface_convection = surface_convection
        self.tolerance = tolerance
        self.max_iterations = max_iterations

    @property
    def soil_conductance(self) -> float:
        """Conductance between the pipe wall and the nearest soil nodes in W/(m²·K)."""
        state = self.state
        return state.soil.conductivity / (state.dS - state.inside_diameter / 2.0)

    def initialize(self, ground: KusudaAchenbachGroundTemperature, day: float) -> None:
        """Set every node of every slot to the undisturbed ground temperature at its depth."""
        state = self.state
        grid = state.grid
        depths = state.node_depth(np.arange(grid.depth_nodes))
        profile = ground.get_temperature(depths, day)
        grid.t[:] = profile[np.newaxis, :, np.newaxis, np.newaxis]

    def apply_far_field(self, ground: KusudaAchenbachGroundTemperature, day: float) -> None:
        """Overwrite the far-field column and the bottom row of all slots."""
        state = self.state
        grid = state.grid
        depths = state.node_depth(np.arange(grid.depth_nodes))
        grid.t[0, :, :, :] = ground.get_temperature(depths, day)[:, np.newaxis, np.newaxis]
        grid.t[:, -1, :, :] = ground.get_temperature(state.domain_depth, day)

    def update_fourier_coefficients(self) -> None:
        state = self.state
        state.fourier_ds = state.soil.diffusivity * state.delta_time / state.dS ** 2
        state.coef_a1 = state.fourier_ds / (1.0 + 4.0 * state.fourier_ds)
        state.coef_a2 = 1.0 / (1.0 + 4.0 * state.fourier_ds)

    def surface_coefficient(self, conditions: EnvironmentConditions) -> float:
        """Outdoor air convection coefficient of the soil surface in W/(m²·K)."""
        match self.surface_convection:
            case SurfaceConvectionModel.CROSSFLOW:
                return external_convection_coefficient(
                    conditions.outdoor_dry_bulb,
                    conditions.wind_speed,
                    self.state.properties.insulation_outer_diameter,
                    self.state.name,
                )
            case SurfaceConvectionModel.ASHRAE_SIMPLE:
                return ashrae_simple_coefficient(self.state.soil.roughness, conditions.wind_speed)
            case _:
                raise ValueError(f"Unknown surface convection model: {self.surface_convection}")

    def solve(self, conditions: EnvironmentConditions) -> RelaxationResult:
        """
        Advance the soil grid and the pipe by one inner step.

        Args:
            conditions: Outdoor weather at the soil surface.

        Returns:
            Convergence flag, number of sweeps and the last largest node change.
        """
        state = self.state
        grid = state.grid
        soil = state.soil

        self.update_fourier_coefficients()
        a1, a2 = state.coef_a1, state.coef_a2
        pipe_active = self.axial.begin_inner_step(self.soil_conductance)

        conv_coef = self.surface_coefficient(conditions)
        q_solar = 0.0
        if state.sun_exposed:
            q_solar = soil.solar_absorptance * (
                max(conditions.solar_incidence_cosine, 0.0) * conditions.beam_solar + conditions.diffuse_solar
            )
        sky = conditions.sky_temperature
        outdoor = conditions.outdoor_dry_bulb
        k_over_ds = soil.conductivity / state.dS
        storage = soil.density * soil.specific_heat / state.delta_time

        previous = grid.slot(TimeSlot.PREVIOUS)
        current = grid.slot(TimeSlot.CURRENT)
        tentative = grid.slot(TimeSlot.TENTATIVE)
        width_nodes, depth_nodes, num_lengths = grid.shape
        pipe_w, pipe_d = grid.pipe_node_width, grid.pipe_node_depth
        # relaxed region: everything but the far-field column and the bottom row
        relaxed = (slice(1, width_nodes), slice(0, depth_nodes - 1), slice(None))

        converged = False
        residual = math.inf
        env_loss = 0.0
        iteration = 0
        for iteration in range(1, self.max_iterations + 1):
            snapshot = tentative[relaxed].copy()
            env_loss = 0.0

            for l in range(num_lengths):
                for d in range(depth_nodes - 1):
                    for w in range(1, width_nodes):
                        past = previous[w, d, l]

                        if d == 0:
                            rad_coef = radiation_coefficient(past, sky, soil.thermal_absorptance) if state.sun_exposed else 0.0
                            left = current[w - 1, d, l]
                            right = left if w == pipe_w else current[w + 1, d, l]
                            tentative[w, d, l] = surface_node(
                                current[w, d + 1, l], left, right, past,
                                q_solar, rad_coef, conv_coef, sky, outdoor, k_over_ds, storage,
                            )

                        elif w == pipe_w and d == pipe_d:
                            if pipe_active:
                                env_temp = (current[w, d + 1, l] + current[w - 1, d, l] + current[w, d - 1, l]) / 3.0
                                env_loss += self.axial.solve_section(l + 1, env_temp)
                            tentative[w, d, l] = state.pipe.tentative[l + 1]

                        elif w == pipe_w:
                            tentative[w, d, l] = centerline_node(
                                current[w, d + 1, l], current[w, d - 1, l], current[w - 1, d, l], past, a1, a2
                            )

                        else:
                            tentative[w, d, l] = interior_node(
                                current[w, d + 1, l], current[w, d - 1, l],
                                current[w - 1, d, l], current[w + 1, d, l],
                                past, a1, a2,
                            )

            residual = float(np.max(np.abs(tentative[relaxed] - snapshot)))
            if residual <= self.tolerance:
                converged = True
                break

        if not converged:
            logger.warning(f"Large number of iterations detected in object: {state.name}")

        state.soil_iterations = iteration
        if pipe_active:
            state.environment_heat_loss_rate += env_loss
            self.axial.finish()
        else:
            self.axial.freeze()

        return RelaxationResult(converged=converged, iterations=iteration, max_residual=residual)
