"""
Pipe Heat Transfer Component
============================
The per-pipe orchestration called by a host simulation once per macro
timestep.

Why is this file needed?
------------------------
1. Ownership: It owns the thermal state of one pipe together with the
   solvers that mutate it. No registry is involved; the host keeps the
   component and passes in boundary data explicitly.
2. Dispatch: It selects the environment temperature, the outer heat
   transfer coefficient and the solver from the environment variant.
3. Reporting: It turns the accumulated rates into a PipeReport and updates
   the outlet flow node.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
import logging
from typing import Dict, Iterable, Optional, Any

from pipeheattransfer.config import ROOM_AIR_VELOCITY, INITIAL_TEMPERATURE
from pipeheattransfer.controller.correlations import external_convection_coefficient
from pipeheattransfer.controller.fluids import Fluid, FluidLibrary
from pipeheattransfer.controller.ground import KusudaAchenbachGroundTemperature
from pipeheattransfer.controller.solvers import HanbyPipeSolver, BuriedSoilSolver
from pipeheattransfer.controller.timeslots import TimeSlotManager
from pipeheattransfer.model.conditions import SimulationClock, EnvironmentConditions, FlowNode
from pipeheattransfer.model.environment import (
    EnvironmentKind, NoEnvironment, ZoneAirEnvironment, ScheduledAirEnvironment,
    OutdoorAirEnvironment, BuriedSoilEnvironment,
)
from pipeheattransfer.model.pipe import PipeConfig, PipeInputError
from pipeheattransfer.model.state import PipeThermalState

logger = logging.getLogger(__name__)


@dataclass
class PipeReport:
    """
    Results of one macro timestep of a pipe.

    Rates in W, energies in J, temperatures in °C.
    """
    name: str
    kind: EnvironmentKind
    fluid_heat_transfer_rate: float = 0.0
    fluid_heat_transfer_energy: float = 0.0
    environment_heat_transfer_rate: float = 0.0
    environment_heat_transfer_energy: float = 0.0
    zone_heat_gain_rate: float = 0.0
    mass_flow_rate: float = 0.0
    volume_flow_rate: float = 0.0
    inlet_temperature: float = 0.0
    outlet_temperature: float = 0.0
    pipe_inlet_temperature: float = 0.0
    pipe_outlet_temperature: float = 0.0
    num_inner_steps: int = 0
    soil_iterations: int = 0

    def as_outputs(self) -> Dict[str, float]:
        """Named measurable outputs of the pipe."""
        outputs = {
            "Pipe Fluid Heat Transfer Rate [W]": self.fluid_heat_transfer_rate,
            "Pipe Fluid Heat Transfer Energy [J]": self.fluid_heat_transfer_energy,
            "Pipe Mass Flow Rate [kg/s]": self.mass_flow_rate,
            "Pipe Volume Flow Rate [m3/s]": self.volume_flow_rate,
            "Pipe Inlet Temperature [C]": self.inlet_temperature,
            "Pipe Outlet Temperature [C]": self.outlet_temperature,
        }
        if self.kind == EnvironmentKind.ZONE_AIR:
            outputs["Pipe Ambient Heat Transfer Rate [W]"] = self.environment_heat_transfer_rate
            outputs["Pipe Ambient Heat Transfer Energy [J]"] = self.environment_heat_transfer_energy
            outputs["Pipe Zone Heat Gain Rate [W]"] = self.zone_heat_gain_rate
        return outputs

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


class PipeHeatTransfer:
    """
    A fluid-carrying pipe exchanging heat with its surroundings.
    """

    def __init__(
        self,
        config: PipeConfig,
        fluid: Fluid,
        pressure_resolved: bool = False,
        known_zones: Optional[Iterable[str]] = None,
        known_schedules: Optional[Iterable[str]] = None,
        known_air_nodes: Optional[Iterable[str]] = None,
    ) -> None:
        """
        Validate the configuration and build the state and the solvers.

        Args:
            config: Pipe configuration.
            fluid: Property service of the circulating fluid.
            pressure_resolved: True if the host flow network resolves pressures itself.
            known_zones: Zone names owned by the host, for cross-checking.
            known_schedules: Schedule names owned by the host, for cross-checking.
            known_air_nodes: Outdoor air node names owned by the host, for cross-checking.

        Raises:
            PipeInputError: If the configuration is invalid.
        """
        config.validate(known_zones=known_zones, known_schedules=known_schedules, known_air_nodes=known_air_nodes)

        self.config = config
        self.fluid = fluid
        self.pressure_resolved = pressure_resolved

        self.state = PipeThermalState.from_config(config)
        self.timeslots = TimeSlotManager(self.state)
        self.axial = HanbyPipeSolver(self.state, fluid)

        self.ground: Optional[KusudaAchenbachGroundTemperature] = None
        self.soil_solver: Optional[BuriedSoilSolver] = None
        env = config.environment
        if isinstance(env, BuriedSoilEnvironment):
            self.ground = KusudaAchenbachGroundTemperature.from_environment(env, self.state.soil_diffusivity_per_day)
            self.soil_solver = BuriedSoilSolver(self.state, self.axial, surface_convection=env.surface_convection)

        logger.info(f"Created pipe '{config.name}' ({config.kind.value}, {config.length:.2f} m)")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, kind={self.config.kind.value})"

    @classmethod
    def from_library(
        cls,
        config: PipeConfig,
        library: FluidLibrary,
        **kwargs: Any,
    ) -> PipeHeatTransfer:
        """Build a component, resolving the fluid by name."""
        fluid = library.get_fluid(config.fluid_name)
        if fluid is None:
            message = f"Unknown fluid '{config.fluid_name}'"
            logger.error(f"Pipe '{config.name}': {message}")
            raise PipeInputError(config.name, [message])
        return cls(config, fluid, **kwargs)

    @property
    def name(self) -> str:
        return self.config.name

    def begin_environment(self, day: float) -> None:
        """
        Reset the pipe at the start of a simulation environment (design day, run period).

        Args:
            day: Current simulation day.
        """
        state = self.state
        if self.soil_solver is not None:
            self.soil_solver.initialize(self.ground, day)

        state.fluid.reset(INITIAL_TEMPERATURE)
        state.pipe.reset(INITIAL_TEMPERATURE)
        state.previous_sim_time = 0.0
        state.delta_time = 0.0
        state.environment_temperature = 0.0
        state.zero_accumulators()
        logger.debug(f"Pipe '{self.name}': begin environment on day {day}")

    def begin_first_inner_step(self, day: float, conditions: EnvironmentConditions) -> None:
        """
        Refresh the boundary conditions on the first host iteration of a timestep.

        Args:
            day: Current simulation day.
            conditions: Current environmental conditions.
        """
        if self.state.is_buried:
            self.soil_solver.apply_far_field(self.ground, day)
            return
        self.state.environment_temperature = self.environment_temperature(conditions)

    def environment_temperature(self, conditions: EnvironmentConditions) -> float:
        """Temperature of the surroundings of a pipe that is not buried."""
        match self.config.environment:
            case NoEnvironment() | OutdoorAirEnvironment():
                return conditions.outdoor_dry_bulb
            case ZoneAirEnvironment(zone_name=zone):
                return conditions.zone_temperature(zone)
            case ScheduledAirEnvironment(temperature_schedule=schedule):
                return conditions.schedule_value(schedule)
            case BuriedSoilEnvironment():
                # set per section by the soil grid
                return self.state.environment_temperature
            case env:
                raise TypeError(f"Unsupported environment: {env!r}")

    def _air_conditions(self, conditions: EnvironmentConditions) -> tuple[float, float]:
        """Air temperature and velocity across the pipe."""
        match self.config.environment:
            case ZoneAirEnvironment(zone_name=zone):
                return conditions.zone_temperature(zone), ROOM_AIR_VELOCITY
            case ScheduledAirEnvironment(temperature_schedule=temperature, velocity_schedule=velocity):
                return conditions.schedule_value(temperature), conditions.schedule_value(velocity)
            case OutdoorAirEnvironment(air_node=node):
                return conditions.air_node_temperature(node), conditions.wind_speed
            case env:
                raise TypeError(f"No air side for environment: {env!r}")

    def environment_coefficient(self, conditions: EnvironmentConditions) -> float:
        """
        Outer heat transfer coefficient of the pipe in W/(m²·K).

        Air side coefficients include the insulation resistance; buried pipes
        use the soil conductance to the nearest grid nodes.
        """
        state = self.state
        match self.config.environment:
            case NoEnvironment():
                return 0.0
            case BuriedSoilEnvironment():
                return self.soil_solver.soil_conductance
            case ZoneAirEnvironment() | ScheduledAirEnvironment() | OutdoorAirEnvironment():
                air_temperature, air_velocity = self._air_conditions(conditions)
                h_air = external_convection_coefficient(
                    air_temperature, air_velocity, state.properties.insulation_outer_diameter, state.name
                )
                return 1.0 / (1.0 / h_air + state.properties.insulation_resistance)
            case env:
                raise TypeError(f"Unsupported environment: {env!r}")

    def simulate(
        self,
        inlet: FlowNode,
        outlet: FlowNode,
        clock: SimulationClock,
        conditions: EnvironmentConditions,
        first_iteration: bool = True,
    ) -> PipeReport:
        """
        Simulate one macro timestep.

        Args:
            inlet: Flow node at the pipe inlet.
            outlet: Flow node at the pipe outlet, updated in place.
            clock: Position of the host scheduler.
            conditions: Current environmental conditions.
            first_iteration: True on the first host iteration of the timestep.

        Returns:
            The report of the timestep.
        """
        state = self.state
        if first_iteration:
            self.begin_first_inner_step(clock.day_of_simulation, conditions)

        self.timeslots.begin_timestep(clock, self.fluid, inlet.temperature, inlet.mass_flow_rate)

        if state.num_inner_steps == 0:
            state.outlet_temperature = float(state.fluid.tentative[-1])

        if state.is_buried:
            for _ in range(state.num_inner_steps):
                self.soil_solver.solve(conditions)
                self.timeslots.shift_inner_step()
        else:
            env_coef = self.environment_coefficient(conditions) if state.num_inner_steps else 0.0
            env_temp = state.environment_temperature
            for _ in range(state.num_inner_steps):
                self.axial.solve(env_temp, env_coef)
                self.timeslots.shift_inner_step()

        outlet.pass_through_from(inlet, state.outlet_temperature, pressure_resolved=self.pressure_resolved)
        return self.report()

    def report(self) -> PipeReport:
        """Average and integrate the rates of the last macro timestep."""
        state = self.state
        if state.num_inner_steps > 0:
            environment_rate = state.environment_heat_loss_rate / state.num_inner_steps
        else:
            environment_rate = 0.0

        if state.kind == EnvironmentKind.ZONE_AIR:
            state.zone_heat_gain_rate = environment_rate

        return PipeReport(
            name=state.name,
            kind=state.kind,
            fluid_heat_transfer_rate=state.fluid_heat_loss_rate,
            fluid_heat_transfer_energy=state.fluid_heat_loss_rate * state.delta_time,
            environment_heat_transfer_rate=environment_rate,
            environment_heat_transfer_energy=environment_rate * state.delta_time,
            zone_heat_gain_rate=state.zone_heat_gain_rate,
            mass_flow_rate=state.mass_flow_rate,
            volume_flow_rate=state.volume_flow_rate,
            inlet_temperature=state.inlet_temperature,
            outlet_temperature=state.outlet_temperature,
            pipe_inlet_temperature=float(state.pipe.current[1]),
            pipe_outlet_temperature=float(state.pipe.current[-1]),
            num_inner_steps=state.num_inner_steps,
            soil_iterations=state.soil_iterations,
        )

    def plot_axial_profile(self) -> None:
        """
        Plot the fluid and pipe-wall temperatures along the pipe.
        """
        import matplotlib.pyplot as plt
        import numpy as np

        state = self.state
        positions = np.linspace(0.0, state.length, state.num_sections + 1)

        plt.rcParams["figure.constrained_layout.use"] = True
        plt.figure(figsize=(7, 5))

        plt.plot(positions, state.fluid.tentative, lw=2, marker="o", label="Fluid")
        plt.plot(positions[1:], state.pipe.tentative[1:], lw=2, marker="s", label="Pipe wall")

        plt.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
        plt.minorticks_on()
        plt.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

        plt.title(f"Axial Temperature Profile: {self.name}")
        plt.xlabel("Distance from inlet (m)")
        plt.ylabel("Temperature (°C)")
        plt.legend()

        plt.xlim(0, state.length)
        plt.show()
