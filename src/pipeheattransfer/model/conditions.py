"""
Host Boundary Data
==================
Plain data handed to a pipe by the host simulation once per macro timestep:
the simulation clock, the environmental conditions and the flow network
nodes at the pipe inlet and outlet.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from pipeheattransfer.config import HOURS_IN_DAY, SECONDS_IN_HOUR


@dataclass(frozen=True)
class SimulationClock:
    """
    Position of the host scheduler within the run period.

    Attributes:
        day_of_simulation: Day index, starting at 1.
        hour_of_day: Hour index within the day, 1..24.
        time_step: Zone time step index within the hour, starting at 1.
        zone_time_step: Length of a zone time step in hours.
        system_time_step: Length of the current (system) macro timestep in hours.
        system_time_elapsed: Hours of system time elapsed within the zone time step.
    """
    day_of_simulation: int = 1
    hour_of_day: int = 1
    time_step: int = 1
    zone_time_step: float = 0.25
    system_time_step: float = 0.25
    system_time_elapsed: float = 0.0

    @property
    def simulation_time(self) -> float:
        """Continuous simulation time in hours."""
        return (
            (self.day_of_simulation - 1) * HOURS_IN_DAY
            + self.hour_of_day - 1
            + (self.time_step - 1) * self.zone_time_step
            + self.system_time_elapsed
        )

    @property
    def time_step_seconds(self) -> float:
        """Elapsed seconds of the macro timestep."""
        return self.system_time_step * SECONDS_IN_HOUR


@dataclass
class EnvironmentConditions:
    """
    Snapshot of every environmental scalar a pipe may need.

    Zone, schedule and air-node values are keyed by the names used in the
    pipe configuration.
    """
    outdoor_dry_bulb: float = 20.0
    sky_temperature: float = 10.0
    wind_speed: float = 0.0
    beam_solar: float = 0.0
    diffuse_solar: float = 0.0
    solar_incidence_cosine: float = 0.0
    zone_air_temperatures: Dict[str, float] = field(default_factory=dict)
    schedule_values: Dict[str, float] = field(default_factory=dict)
    air_node_temperatures: Dict[str, float] = field(default_factory=dict)

    def zone_temperature(self, zone_name: str) -> float:
        try:
            return self.zone_air_temperatures[zone_name]
        except KeyError:
            raise KeyError(f"No air temperature supplied for zone '{zone_name}'.") from None

    def schedule_value(self, schedule_name: str) -> float:
        try:
            return self.schedule_values[schedule_name]
        except KeyError:
            raise KeyError(f"No current value supplied for schedule '{schedule_name}'.") from None

    def air_node_temperature(self, node_name: str) -> float:
        """Outdoor air node temperature; falls back to the outdoor dry-bulb."""
        return self.air_node_temperatures.get(node_name, self.outdoor_dry_bulb)


@dataclass
class FlowNode:
    """State of a fluid flow network node."""
    temperature: float = 20.0
    mass_flow_rate: float = 0.0
    mass_flow_rate_min: float = 0.0
    mass_flow_rate_max: float = 0.0
    mass_flow_rate_min_avail: float = 0.0
    mass_flow_rate_max_avail: float = 0.0
    temperature_min: float = -50.0
    temperature_max: float = 200.0
    quality: float = 0.0
    pressure: float = 101325.0
    enthalpy: float = 0.0
    humidity_ratio: float = 0.0

    def pass_through_from(self, inlet: FlowNode, temperature: float, pressure_resolved: bool = False) -> None:
        """
        Set this (outlet) node from the inlet, overriding the temperature.

        The pressure is left untouched when the flow network resolves
        pressures itself.
        """
        self.temperature = temperature
        self.temperature_min = inlet.temperature_min
        self.temperature_max = inlet.temperature_max
        self.mass_flow_rate = inlet.mass_flow_rate
        self.mass_flow_rate_min = inlet.mass_flow_rate_min
        self.mass_flow_rate_max = inlet.mass_flow_rate_max
        self.mass_flow_rate_min_avail = inlet.mass_flow_rate_min_avail
        self.mass_flow_rate_max_avail = inlet.mass_flow_rate_max_avail
        self.quality = inlet.quality
        if not pressure_resolved:
            self.pressure = inlet.pressure
        self.enthalpy = inlet.enthalpy
        self.humidity_ratio = inlet.humidity_ratio
