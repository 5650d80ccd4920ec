import pytest

from pipeheattransfer.config import ROOM_AIR_VELOCITY
from pipeheattransfer.controller.component import PipeHeatTransfer
from pipeheattransfer.controller.correlations import external_convection_coefficient
from pipeheattransfer.controller.fluids import WATER, FluidLibrary
from pipeheattransfer.model.conditions import EnvironmentConditions, FlowNode, SimulationClock
from pipeheattransfer.model.environment import ScheduledAirEnvironment
from pipeheattransfer.model.pipe import PipeConfig, PipeInputError


def test_buried_outlet_between_soil_and_inlet(buried_config, conditions, clock_at):
    pipe = PipeHeatTransfer(buried_config, WATER)
    pipe.begin_environment(day=200)
    inlet = FlowNode(temperature=55.0, mass_flow_rate=0.15)
    outlet = FlowNode()

    for step in range(1, 5):
        report = pipe.simulate(inlet, outlet, clock_at(step), conditions)

    assert 10.0 < report.outlet_temperature < 55.0
    assert outlet.temperature == report.outlet_temperature
    assert report.environment_heat_transfer_rate > 0.0
    assert 1 <= report.soil_iterations <= 200


def test_zone_pipe_reports_zone_gain(zone_config, conditions, clock_at):
    pipe = PipeHeatTransfer(zone_config, WATER, known_zones=["Plant Room"])
    pipe.begin_environment(day=200)
    report = pipe.simulate(FlowNode(temperature=60.0, mass_flow_rate=0.2), FlowNode(), clock_at(1), conditions)

    assert report.zone_heat_gain_rate == report.environment_heat_transfer_rate
    assert report.zone_heat_gain_rate > 0.0
    outputs = report.as_outputs()
    assert "Pipe Zone Heat Gain Rate [W]" in outputs
    assert "Pipe Ambient Heat Transfer Energy [J]" in outputs
    assert outputs["Pipe Outlet Temperature [C]"] == report.outlet_temperature


def test_non_zone_pipe_has_no_zone_outputs(outdoor_config, conditions, clock_at):
    pipe = PipeHeatTransfer(outdoor_config, WATER)
    pipe.begin_environment(day=200)
    report = pipe.simulate(FlowNode(temperature=60.0, mass_flow_rate=0.2), FlowNode(), clock_at(1), conditions)
    assert report.zone_heat_gain_rate == 0.0
    assert "Pipe Zone Heat Gain Rate [W]" not in report.as_outputs()


def test_zone_coefficient_includes_insulation(zone_config, conditions):
    pipe = PipeHeatTransfer(zone_config, WATER)
    props = pipe.state.properties
    h_air = external_convection_coefficient(22.0, ROOM_AIR_VELOCITY, props.insulation_outer_diameter)
    assert pipe.environment_coefficient(conditions) == pytest.approx(1.0 / (1.0 / h_air + props.insulation_resistance))


def test_environment_temperatures(outdoor_config, zone_config, adiabatic_config, bare_steel, conditions):
    scheduled = PipeConfig(
        name="Scheduled Pipe",
        inlet_node="In",
        outlet_node="Out",
        inside_diameter=0.05,
        length=5.0,
        construction=bare_steel,
        environment=ScheduledAirEnvironment(temperature_schedule="Ambient T", velocity_schedule="Ambient V"),
    )
    conditions.schedule_values = {"Ambient T": 31.0, "Ambient V": 0.2}

    assert PipeHeatTransfer(outdoor_config, WATER).environment_temperature(conditions) == 20.0
    assert PipeHeatTransfer(zone_config, WATER).environment_temperature(conditions) == 22.0
    assert PipeHeatTransfer(adiabatic_config, WATER).environment_temperature(conditions) == 20.0
    assert PipeHeatTransfer(scheduled, WATER).environment_temperature(conditions) == 31.0
    assert PipeHeatTransfer(adiabatic_config, WATER).environment_coefficient(conditions) == 0.0


def test_outlet_node_copies_inlet(outdoor_config, conditions, clock_at):
    inlet = FlowNode(temperature=45.0, mass_flow_rate=0.3, mass_flow_rate_max=0.5, quality=0.1, pressure=150000.0)
    outlet = FlowNode(pressure=120000.0)
    pipe = PipeHeatTransfer(outdoor_config, WATER)
    pipe.begin_environment(day=200)
    pipe.simulate(inlet, outlet, clock_at(1), conditions)

    assert outlet.mass_flow_rate == 0.3
    assert outlet.mass_flow_rate_max == 0.5
    assert outlet.quality == 0.1
    assert outlet.pressure == 150000.0


def test_resolved_pressure_is_left_alone(outdoor_config, conditions, clock_at):
    inlet = FlowNode(temperature=45.0, mass_flow_rate=0.3, pressure=150000.0)
    outlet = FlowNode(pressure=120000.0)
    pipe = PipeHeatTransfer(outdoor_config, WATER, pressure_resolved=True)
    pipe.begin_environment(day=200)
    pipe.simulate(inlet, outlet, clock_at(1), conditions)
    assert outlet.pressure == 120000.0


def test_short_timestep_skips_solve(outdoor_config, conditions):
    pipe = PipeHeatTransfer(outdoor_config, WATER)
    pipe.begin_environment(day=200)
    clock = SimulationClock(time_step=2, system_time_step=0.005)  # 18 s
    report = pipe.simulate(FlowNode(temperature=70.0, mass_flow_rate=0.2), FlowNode(), clock, conditions)

    assert report.num_inner_steps == 0
    assert report.outlet_temperature == pipe.state.fluid.tentative[-1]
    assert report.environment_heat_transfer_rate == 0.0


def test_repeated_call_restarts_from_accepted_state(buried_config, conditions, clock_at):
    pipe = PipeHeatTransfer(buried_config, WATER)
    pipe.begin_environment(day=200)
    inlet = FlowNode(temperature=55.0, mass_flow_rate=0.15)
    pipe.simulate(inlet, FlowNode(), clock_at(1), conditions)

    first = pipe.simulate(inlet, FlowNode(), clock_at(2), conditions)
    second = pipe.simulate(inlet, FlowNode(), clock_at(2), conditions, first_iteration=False)
    third = pipe.simulate(inlet, FlowNode(), clock_at(2), conditions, first_iteration=False)
    assert second.outlet_temperature == first.outlet_temperature
    assert third.outlet_temperature == second.outlet_temperature
    assert third.environment_heat_transfer_rate == second.environment_heat_transfer_rate


def test_begin_environment_resets_state(outdoor_config, conditions, clock_at):
    pipe = PipeHeatTransfer(outdoor_config, WATER)
    pipe.begin_environment(day=200)
    pipe.simulate(FlowNode(temperature=70.0, mass_flow_rate=0.2), FlowNode(), clock_at(1), conditions)
    pipe.begin_environment(day=201)

    assert pipe.state.previous_sim_time == 0.0
    assert pipe.state.environment_heat_loss_rate == 0.0
    assert (pipe.state.fluid.tentative == 21.0).all()


def test_from_library_resolves_fluid(outdoor_config):
    outdoor_config.fluid_name = "WATER"
    pipe = PipeHeatTransfer.from_library(outdoor_config, FluidLibrary())
    assert pipe.fluid is WATER


def test_from_library_unknown_fluid(outdoor_config):
    outdoor_config.fluid_name = "Liquid Sodium"
    with pytest.raises(PipeInputError) as excinfo:
        PipeHeatTransfer.from_library(outdoor_config, FluidLibrary())
    assert "Liquid Sodium" in str(excinfo.value)


def test_missing_zone_temperature_raises(zone_config, clock_at):
    pipe = PipeHeatTransfer(zone_config, WATER)
    pipe.begin_environment(day=200)
    with pytest.raises(KeyError):
        pipe.simulate(FlowNode(), FlowNode(), clock_at(1), EnvironmentConditions())
