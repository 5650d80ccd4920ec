from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pipeheattransfer.controller.correlations import internal_convection_coefficient
from pipeheattransfer.controller.kernels import march_sections
from pipeheattransfer.model.state import HanbyCoefficients

if TYPE_CHECKING:
    from pipeheattransfer.controller.fluids import Fluid
    from pipeheattransfer.model.state import PipeThermalState

logger = logging.getLogger(__name__)


class HanbyPipeSolver:
    """
    Two-node (fluid, pipe wall) axial model of a pipe.

    Hanby, V.I., Wright, J.A., Fletcher, D.W. & Jones, D.N.T. (2002),
    "Modeling the dynamic response of conduits", HVAC&R Research 8(1), 1-12.
    """

    def __init__(self, state: PipeThermalState, fluid: Fluid) -> None:
        self.state = state
        self.fluid = fluid
        self.environment_coefficient = 0.0

    def internal_coefficient(self) -> float:
        """Fluid-to-wall convection coefficient for the current inlet conditions."""
        state = self.state
        node_temperature = float(state.fluid.current[0])
        return internal_convection_coefficient(
            temperature=state.inlet_temperature,
            mass_flow_rate=state.mass_flow_rate,
            diameter=state.inside_diameter,
            conductivity=self.fluid.conductivity(node_temperature),
            viscosity=self.fluid.viscosity(node_temperature),
            pipe_name=state.name,
        )

    def compute_coefficients(self, environment_coefficient: float) -> HanbyCoefficients:
        """
        Coefficients of the fluid and pipe-wall node balances over one macro timestep.

        Args:
            environment_coefficient: Outer heat transfer coefficient in W/(m²·K).
        """
        state = self.state
        dt = state.delta_time
        h_in = self.internal_coefficient()
        fluid_capacity = state.fluid_node_heat_capacity
        advection = state.mass_flow_rate * state.fluid_specific_heat * dt
        inner = h_in * state.inside_area * dt
        outer = environment_coefficient * state.outside_area * dt

        coefficients = HanbyCoefficients(
            a1=fluid_capacity + advection + inner,
            a2=advection,
            a3=inner,
            a4=fluid_capacity,
            b1=state.pipe_heat_capacity + inner + outer,
            b2=inner,
            b3=outer,
            b4=state.pipe_heat_capacity,
        )
        state.coefficients = coefficients
        return coefficients

    def begin_inner_step(self, environment_coefficient: float) -> bool:
        """
        Set up the coefficients and the inlet boundary for one inner step.

        Returns:
            False if the fluid properties are degenerate and the pipe must stay frozen.
        """
        state = self.state
        if not state.has_valid_fluid_properties:
            return False

        self.environment_coefficient = environment_coefficient
        self.compute_coefficients(environment_coefficient)
        state.fluid.tentative[0] = state.inlet_temperature
        state.pipe.tentative[0] = state.pipe.current[1]
        return True

    def solve(self, environment_temperature: float, environment_coefficient: float) -> None:
        """
        March every section of the pipe for one inner step.

        Args:
            environment_temperature: Temperature of the surroundings in °C.
            environment_coefficient: Outer heat transfer coefficient in W/(m²·K).
        """
        state = self.state
        if not self.begin_inner_step(environment_coefficient):
            self.freeze()
            return

        state.environment_temperature = environment_temperature
        state.environment_heat_loss_rate += self._march(1, state.num_sections + 1, environment_temperature)
        self.finish()

    def solve_section(self, section: int, environment_temperature: float) -> float:
        """
        March a single section, as the soil grid does for the node containing the pipe.

        `begin_inner_step` must have been called for the current inner step.

        Args:
            section: Axial section index, 1..N.
            environment_temperature: Temperature of the surrounding soil in °C.

        Returns:
            Environmental heat loss of the section in W.
        """
        self.state.environment_temperature = environment_temperature
        return self._march(section, section + 1, environment_temperature)

    def _march(self, start: int, stop: int, environment_temperature: float) -> float:
        state = self.state
        c = state.coefficients
        return march_sections(
            state.fluid.tentative, state.pipe.tentative,
            state.fluid.previous, state.pipe.previous,
            start, stop, environment_temperature,
            c.a1, c.a2, c.a3, c.a4, c.b1, c.b2, c.b3, c.b4,
            self.environment_coefficient, state.properties.sum_tk, state.outside_area,
        )

    def finish(self) -> None:
        """Derive the outlet temperature and the fluid heat loss from the tentative profile."""
        state = self.state
        tentative = state.fluid.tentative
        state.outlet_temperature = float(tentative[-1])
        state.fluid_heat_loss_rate = (
            state.mass_flow_rate * state.fluid_specific_heat * float(tentative[0] - tentative[-1])
        )

    def freeze(self) -> None:
        """Leave the pipe as it was when the fluid properties cannot be used."""
        state = self.state
        logger.debug(f"Pipe '{state.name}': heat transfer skipped, outlet held at {state.fluid.tentative[-1]:.2f} C")
        state.outlet_temperature = float(state.fluid.tentative[-1])
        state.environment_heat_loss_rate = 0.0
        state.fluid_heat_loss_rate = 0.0
