import logging

import numpy as np
import pytest

from pipeheattransfer.controller.fluids import WATER
from pipeheattransfer.controller.ground import KusudaAchenbachGroundTemperature
from pipeheattransfer.controller.solvers import BuriedSoilSolver, HanbyPipeSolver
from pipeheattransfer.model.conditions import EnvironmentConditions
from pipeheattransfer.model.environment import EnvironmentKind, SurfaceConvectionModel
from pipeheattransfer.model.state import PipeThermalState, TimeSlot

DAY = 200.0


@pytest.fixture
def ground(soil) -> KusudaAchenbachGroundTemperature:
    return KusudaAchenbachGroundTemperature(12.0, 8.0, 30.0, soil.diffusivity * 86400.0)


@pytest.fixture
def weather() -> EnvironmentConditions:
    return EnvironmentConditions(
        outdoor_dry_bulb=25.0,
        sky_temperature=12.0,
        wind_speed=3.0,
        beam_solar=600.0,
        diffuse_solar=150.0,
        solar_incidence_cosine=0.7,
    )


def make_solver(bare_steel, soil, ground, num_sections=2, sun_exposed=True, **kwargs):
    state = PipeThermalState(
        name="Test Buried Pipe",
        kind=EnvironmentKind.BURIED_SOIL,
        inside_diameter=0.05,
        length=10.0,
        properties=bare_steel.resolve(0.05),
        soil=soil,
        sun_exposed=sun_exposed,
        num_sections=num_sections,
    )
    state.inlet_temperature = 60.0
    state.mass_flow_rate = 0.1
    state.fluid_specific_heat = WATER.specific_heat(60.0)
    state.fluid_density = WATER.density(60.0)
    state.delta_time = 900.0
    state.fluid.reset(21.0)
    state.pipe.reset(21.0)

    solver = BuriedSoilSolver(state, HanbyPipeSolver(state, WATER), **kwargs)
    solver.initialize(ground, DAY)
    return solver


def test_grid_geometry(bare_steel, soil, ground):
    state = make_solver(bare_steel, soil, ground).state
    assert state.pipe_depth == pytest.approx(1.0 + 0.025)
    assert state.domain_depth == pytest.approx(2.05)
    assert state.dS == pytest.approx(2.05 / 7.0)
    assert state.grid.shape == (4, 8, 2)
    assert (state.grid.pipe_node_width, state.grid.pipe_node_depth) == (3, 3)
    assert state.is_buried
    assert state.node_depth(7) == pytest.approx(state.domain_depth)
    np.testing.assert_allclose(state.node_depth(np.arange(3)), [0.0, state.dS, 2.0 * state.dS])


def test_initialize_follows_undisturbed_profile(bare_steel, soil, ground):
    state = make_solver(bare_steel, soil, ground).state
    for d in range(state.grid.depth_nodes):
        expected = ground.get_temperature(d * state.dS, DAY)
        np.testing.assert_allclose(state.grid.t[:, d, :, :], expected, rtol=1e-12)


def test_far_field_boundaries(bare_steel, soil, ground):
    solver = make_solver(bare_steel, soil, ground)
    grid = solver.state.grid
    grid.t[:] = -99.0
    solver.apply_far_field(ground, DAY + 30.0)

    assert grid.t[0, 2, 1, TimeSlot.CURRENT] == pytest.approx(ground.get_temperature(2 * solver.state.dS, DAY + 30.0))
    np.testing.assert_allclose(grid.t[:, -1, :, :], ground.get_temperature(solver.state.domain_depth, DAY + 30.0))
    assert np.all(grid.t[1:, :-1, :, :] == -99.0)


def test_fourier_coefficients(bare_steel, soil, ground):
    solver = make_solver(bare_steel, soil, ground)
    solver.update_fourier_coefficients()
    state = solver.state
    assert state.fourier_ds == pytest.approx(soil.diffusivity * 900.0 / state.dS ** 2)
    assert 4.0 * state.coef_a1 + state.coef_a2 == pytest.approx(1.0)


def test_soil_conductance(bare_steel, soil, ground):
    solver = make_solver(bare_steel, soil, ground)
    assert solver.soil_conductance == pytest.approx(1.3 / (solver.state.dS - 0.025))


def test_relaxation_converges(bare_steel, soil, ground, weather):
    solver = make_solver(bare_steel, soil, ground)
    result = solver.solve(weather)

    assert result.converged
    assert 1 <= result.iterations <= 200
    assert result.max_residual <= solver.tolerance
    assert solver.state.soil_iterations == result.iterations


def test_pipe_node_tracks_pipe_wall(bare_steel, soil, ground, weather):
    solver = make_solver(bare_steel, soil, ground)
    solver.solve(weather)
    state = solver.state
    grid = state.grid
    for l in range(grid.num_sections):
        assert grid.t[grid.pipe_node_width, grid.pipe_node_depth, l, TimeSlot.TENTATIVE] == state.pipe.tentative[l + 1]


def test_hot_pipe_loses_heat_to_soil(bare_steel, soil, ground, weather):
    solver = make_solver(bare_steel, soil, ground)
    solver.solve(weather)
    state = solver.state
    assert state.environment_heat_loss_rate > 0.0
    assert state.outlet_temperature == state.fluid.tentative[-1]
    assert state.outlet_temperature < 60.0
    assert state.fluid_heat_loss_rate > 0.0


def test_shaded_surface_ignores_sun_and_sky(bare_steel, soil, ground, weather):
    shaded = EnvironmentConditions(
        outdoor_dry_bulb=weather.outdoor_dry_bulb,
        sky_temperature=-30.0,
        wind_speed=weather.wind_speed,
        beam_solar=0.0,
        diffuse_solar=0.0,
    )
    first = make_solver(bare_steel, soil, ground, sun_exposed=False)
    second = make_solver(bare_steel, soil, ground, sun_exposed=False)
    first.solve(weather)
    second.solve(shaded)
    assert np.array_equal(first.state.grid.t, second.state.grid.t)


def test_sun_warms_exposed_surface(bare_steel, soil, ground, weather):
    exposed = make_solver(bare_steel, soil, ground, sun_exposed=True)
    shaded = make_solver(bare_steel, soil, ground, sun_exposed=False)
    exposed.solve(weather)
    shaded.solve(weather)
    surface = (slice(1, None), 0, slice(None), TimeSlot.TENTATIVE)
    assert np.all(exposed.state.grid.t[surface] > shaded.state.grid.t[surface])


def test_iteration_cap_warns(bare_steel, soil, ground, weather, caplog):
    solver = make_solver(bare_steel, soil, ground, tolerance=-1.0, max_iterations=3)
    with caplog.at_level(logging.WARNING):
        result = solver.solve(weather)

    assert not result.converged
    assert result.iterations == 3
    assert "Large number of iterations detected in object: Test Buried Pipe" in caplog.text
    # the step still completes
    assert solver.state.outlet_temperature == solver.state.fluid.tentative[-1]


def test_ashrae_surface_model(bare_steel, soil, ground, weather):
    solver = make_solver(bare_steel, soil, ground, surface_convection=SurfaceConvectionModel.ASHRAE_SIMPLE)
    assert solver.surface_coefficient(weather) == pytest.approx(10.79 + 4.192 * 3.0)
    assert solver.solve(weather).converged


def test_requires_soil_grid(outdoor_config):
    state = PipeThermalState.from_config(outdoor_config)
    assert not state.is_buried
    with pytest.raises(ValueError):
        BuriedSoilSolver(state, HanbyPipeSolver(state, WATER))
