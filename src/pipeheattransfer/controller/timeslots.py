"""
Time-Slot Manager
=================
Decides once per macro timestep whether the host has advanced simulation
time, and moves the temperature generations of a pipe accordingly.

Why is this file needed?
------------------------
Iterative host solvers call a component several times for the same instant.
Tentative results are only accepted (promoted) once time has advanced;
otherwise they are discarded (rolled back) so a repeated solve restarts from
the last accepted state instead of compounding unconverged values.
"""
from __future__ import annotations

import logging

from pipeheattransfer.config import INNER_TIME_STEP, SIM_TIME_EPSILON
from pipeheattransfer.controller.fluids import Fluid
from pipeheattransfer.model.conditions import SimulationClock
from pipeheattransfer.model.state import PipeThermalState

logger = logging.getLogger(__name__)


class TimeSlotManager:
    """
    Owns the Previous / Current / Tentative bookkeeping of one pipe.
    """

    def __init__(self, state: PipeThermalState, inner_time_step: float = INNER_TIME_STEP) -> None:
        self.state = state
        self.inner_time_step = inner_time_step

    def begin_timestep(
        self,
        clock: SimulationClock,
        fluid: Fluid,
        inlet_temperature: float,
        mass_flow_rate: float,
    ) -> bool:
        """
        Prepare the pipe state for a macro timestep.

        Args:
            clock: Position of the host scheduler.
            fluid: Fluid property service of the circulating fluid.
            inlet_temperature: Inlet fluid temperature in °C.
            mass_flow_rate: Fluid mass flow rate in kg/s.

        Returns:
            True if simulation time advanced and the tentative state was promoted,
            False if it was rolled back.
        """
        state = self.state
        state.inlet_temperature = inlet_temperature
        state.mass_flow_rate = mass_flow_rate

        state.delta_time = clock.time_step_seconds
        state.num_inner_steps = int(state.delta_time // self.inner_time_step)
        remainder = state.delta_time - state.num_inner_steps * self.inner_time_step
        if remainder > 0.0:
            logger.debug(
                f"Pipe '{state.name}': {remainder:.1f} s of the {state.delta_time:.1f} s timestep "
                f"are not covered by whole inner steps"
            )

        state.current_sim_time = clock.simulation_time
        advanced = abs(state.current_sim_time - state.previous_sim_time) > SIM_TIME_EPSILON
        if advanced:
            self.promote()
            state.previous_sim_time = state.current_sim_time
        else:
            self.rollback()

        state.fluid_specific_heat = fluid.specific_heat(inlet_temperature)
        state.fluid_density = fluid.density(inlet_temperature)

        if not state.has_valid_fluid_properties:
            logger.warning(
                f"Pipe '{state.name}': invalid fluid properties at {inlet_temperature:.2f} C "
                f"(cp={state.fluid_specific_heat:.4g}, rho={state.fluid_density:.4g}), pipe state is frozen"
            )

        state.zero_accumulators()

        if state.fluid_density > 0.0:
            state.volume_flow_rate = state.mass_flow_rate / state.fluid_density

        return advanced

    def promote(self) -> None:
        """Accept the tentative values as the new current baseline."""
        state = self.state
        if state.grid is not None:
            state.grid.promote()
        state.fluid.promote()
        state.pipe.promote()

    def rollback(self) -> None:
        """Discard unaccepted tentative work."""
        state = self.state
        if state.grid is not None:
            state.grid.rollback()
        state.fluid.rollback()
        state.pipe.rollback()

    def shift_inner_step(self) -> None:
        """Store the current values as the history of the next inner step."""
        state = self.state
        if state.grid is not None:
            state.grid.shift()
        state.fluid.shift()
        state.pipe.shift()
