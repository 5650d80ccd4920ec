"""
Demonstration Driver
====================
Runs a small host loop around two pipes: an insulated outdoor pipe and a
buried pipe, over one design day of 15-minute timesteps with synthetic
weather.

Why is this file needed?
------------------------
It acts as the stand-in for a host simulation. It:
1. Builds the pipe configurations and validates them.
2. Drives begin-of-environment, first-iteration and timestep calls in the
   order a host scheduler does.
3. Logs the reports and optionally saves them to HDF5.
"""
from __future__ import annotations

import argparse
import logging
import math
from typing import List, Optional

from pipeheattransfer.logging_config import setup_logging
from pipeheattransfer.controller.component import PipeHeatTransfer
from pipeheattransfer.controller.fluids import FluidLibrary
from pipeheattransfer.model.conditions import SimulationClock, EnvironmentConditions, FlowNode
from pipeheattransfer.model.construction import MaterialLayer, PipeConstruction
from pipeheattransfer.model.environment import OutdoorAirEnvironment, BuriedSoilEnvironment, SoilParameters
from pipeheattransfer.model.io import ResultsRecorder
from pipeheattransfer.model.pipe import PipeConfig

logger = logging.getLogger(__name__)

ZONE_TIME_STEP = 0.25  # h
DESIGN_DAY = 200


def demo_configs() -> List[PipeConfig]:
    steel = MaterialLayer("Steel Pipe", thickness=0.004, conductivity=45.0, density=7850.0, specific_heat=460.0)
    mineral_wool = MaterialLayer("Mineral Wool", thickness=0.04, conductivity=0.04, density=100.0, specific_heat=840.0)

    outdoor = PipeConfig(
        name="Outdoor Supply Pipe",
        inlet_node="Supply Inlet",
        outlet_node="Supply Outlet",
        inside_diameter=0.05,
        length=30.0,
        construction=PipeConstruction("Insulated Steel", [mineral_wool, steel]),
        environment=OutdoorAirEnvironment(air_node="Outdoor Air Node"),
    )
    buried = PipeConfig(
        name="Buried Return Pipe",
        inlet_node="Return Inlet",
        outlet_node="Return Outlet",
        inside_diameter=0.05,
        length=50.0,
        construction=PipeConstruction("Bare Steel", [steel]),
        environment=BuriedSoilEnvironment(
            soil=SoilParameters(conductivity=1.3, density=1800.0, specific_heat=1200.0, cover_depth=1.0),
            monthly_surface_temperatures=[
                1.5, 2.0, 5.5, 9.8, 14.6, 18.2, 20.1, 19.8, 16.0, 10.9, 6.0, 2.7
            ],
        ),
    )
    return [outdoor, buried]


def design_day_conditions(hour: float) -> EnvironmentConditions:
    """Synthetic summer design day weather."""
    phase = 2.0 * math.pi * (hour - 15.0) / 24.0
    dry_bulb = 24.0 + 6.0 * math.cos(phase)
    solar = max(math.sin(math.pi * (hour - 6.0) / 14.0), 0.0) if 6.0 <= hour <= 20.0 else 0.0
    return EnvironmentConditions(
        outdoor_dry_bulb=dry_bulb,
        sky_temperature=dry_bulb - 12.0,
        wind_speed=3.0,
        beam_solar=700.0 * solar,
        diffuse_solar=120.0 * solar,
        solar_incidence_cosine=solar,
        air_node_temperatures={"Outdoor Air Node": dry_bulb},
    )


def main(
    save_path: Optional[str] = None,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
) -> ResultsRecorder:
    setup_logging(level=level, log_file=log_file)

    library = FluidLibrary()
    pipes = [PipeHeatTransfer.from_library(config, library) for config in demo_configs()]
    recorder = ResultsRecorder()

    for pipe in pipes:
        pipe.begin_environment(DESIGN_DAY)

    steps_per_hour = int(round(1.0 / ZONE_TIME_STEP))
    for hour in range(1, 25):
        for step in range(1, steps_per_hour + 1):
            clock = SimulationClock(
                day_of_simulation=DESIGN_DAY,
                hour_of_day=hour,
                time_step=step,
                zone_time_step=ZONE_TIME_STEP,
                system_time_step=ZONE_TIME_STEP,
            )
            conditions = design_day_conditions(hour - 1 + step * ZONE_TIME_STEP)

            for pipe in pipes:
                inlet = FlowNode(temperature=60.0, mass_flow_rate=0.5)
                outlet = FlowNode()
                report = pipe.simulate(inlet, outlet, clock, conditions, first_iteration=True)
                recorder.record(clock.simulation_time, report)

        for pipe in pipes:
            report = pipe.report()
            logger.info(
                f"{pipe.name} hour {hour:2d}: outlet {report.outlet_temperature:6.2f} C, "
                f"fluid loss {report.fluid_heat_transfer_rate:8.1f} W"
            )

    if save_path:
        recorder.save(save_path)
    return recorder


def cli() -> None:
    parser = argparse.ArgumentParser(description="Run the pipe heat transfer demonstration.")
    parser.add_argument("--save", metavar="FILE", help="save the results to an HDF5 file")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--log-file", metavar="FILE", help="also write the log to a file")
    args = parser.parse_args()
    main(save_path=args.save, level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)


if __name__ == "__main__":
    cli()
