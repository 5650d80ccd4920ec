"""Pytest configuration and shared fixtures."""
from typing import Callable

import pytest

from pipeheattransfer.model.conditions import SimulationClock, EnvironmentConditions
from pipeheattransfer.model.construction import MaterialLayer, PipeConstruction
from pipeheattransfer.model.environment import (
    BuriedSoilEnvironment, NoEnvironment, OutdoorAirEnvironment, SoilParameters, ZoneAirEnvironment,
)
from pipeheattransfer.model.pipe import PipeConfig


@pytest.fixture
def steel() -> MaterialLayer:
    return MaterialLayer("Steel Pipe", thickness=0.004, conductivity=45.0, density=7850.0, specific_heat=460.0)


@pytest.fixture
def mineral_wool() -> MaterialLayer:
    return MaterialLayer("Mineral Wool", thickness=0.03, conductivity=0.04, density=100.0, specific_heat=840.0)


@pytest.fixture
def bare_steel(steel) -> PipeConstruction:
    return PipeConstruction("Bare Steel", [steel])


@pytest.fixture
def insulated_steel(mineral_wool, steel) -> PipeConstruction:
    return PipeConstruction("Insulated Steel", [mineral_wool, steel])


@pytest.fixture
def soil() -> SoilParameters:
    return SoilParameters(conductivity=1.3, density=1800.0, specific_heat=1200.0, cover_depth=1.0)


@pytest.fixture
def outdoor_config(bare_steel) -> PipeConfig:
    return PipeConfig(
        name="Outdoor Pipe",
        inlet_node="In",
        outlet_node="Out",
        inside_diameter=0.05,
        length=20.0,
        construction=bare_steel,
        environment=OutdoorAirEnvironment(air_node="Outdoor Air Node"),
    )


@pytest.fixture
def zone_config(insulated_steel) -> PipeConfig:
    return PipeConfig(
        name="Zone Pipe",
        inlet_node="In",
        outlet_node="Out",
        inside_diameter=0.05,
        length=20.0,
        construction=insulated_steel,
        environment=ZoneAirEnvironment(zone_name="Plant Room"),
    )


@pytest.fixture
def adiabatic_config(bare_steel) -> PipeConfig:
    return PipeConfig(
        name="Adiabatic Pipe",
        inlet_node="In",
        outlet_node="Out",
        inside_diameter=0.05,
        length=20.0,
        construction=bare_steel,
        environment=NoEnvironment(),
    )


@pytest.fixture
def buried_config(bare_steel, soil) -> PipeConfig:
    return PipeConfig(
        name="Buried Pipe",
        inlet_node="In",
        outlet_node="Out",
        inside_diameter=0.05,
        length=30.0,
        construction=bare_steel,
        environment=BuriedSoilEnvironment(
            soil=soil,
            sun_exposed=True,
            average_ground_temperature=12.0,
            ground_temperature_amplitude=8.0,
            phase_shift_days=30.0,
        ),
    )


@pytest.fixture
def conditions() -> EnvironmentConditions:
    return EnvironmentConditions(
        outdoor_dry_bulb=20.0,
        sky_temperature=8.0,
        wind_speed=4.0,
        air_node_temperatures={"Outdoor Air Node": 20.0},
        zone_air_temperatures={"Plant Room": 22.0},
    )


@pytest.fixture
def clock_at() -> Callable[[int], SimulationClock]:
    """Clock of the n-th quarter-hour macro timestep, counted from 0."""
    def _clock(step: int, zone_time_step: float = 0.25) -> SimulationClock:
        steps_per_hour = int(round(1.0 / zone_time_step))
        hours, time_step = divmod(step, steps_per_hour)
        day, hour = divmod(hours, 24)
        return SimulationClock(
            day_of_simulation=day + 1,
            hour_of_day=hour + 1,
            time_step=time_step + 1,
            zone_time_step=zone_time_step,
            system_time_step=zone_time_step,
        )
    return _clock
