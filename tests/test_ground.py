import numpy as np
import pytest

from pipeheattransfer.controller.ground import KusudaAchenbachGroundTemperature
from pipeheattransfer.model.environment import BuriedSoilEnvironment, SoilParameters

ALPHA_DAY = 0.05


def test_surface_at_phase_shift_is_minimum():
    ground = KusudaAchenbachGroundTemperature(12.0, 8.0, 35.0, ALPHA_DAY)
    assert ground.get_temperature(0.0, 35.0) == 12.0 - 8.0


def test_surface_half_year_later_is_maximum():
    ground = KusudaAchenbachGroundTemperature(12.0, 8.0, 35.0, ALPHA_DAY)
    assert ground.get_temperature(0.0, 35.0 + 365.0 / 2.0) == pytest.approx(20.0)


def test_amplitude_damps_with_depth():
    ground = KusudaAchenbachGroundTemperature(12.0, 8.0, 35.0, ALPHA_DAY)
    days = np.arange(0.0, 365.0)
    shallow = ground.get_temperature(0.5, days)
    deep = ground.get_temperature(5.0, days)
    assert np.ptp(deep) < np.ptp(shallow) < 16.0 + 1e-9
    assert np.all(np.abs(deep - 12.0) <= 8.0 * np.exp(-5.0 * np.sqrt(np.pi / (365.0 * ALPHA_DAY))) + 1e-12)


def test_array_input_returns_array():
    ground = KusudaAchenbachGroundTemperature(12.0, 8.0, 35.0, ALPHA_DAY)
    temps = ground.get_temperature(np.array([0.0, 1.0, 2.0]), 100.0)
    assert isinstance(temps, np.ndarray)
    assert temps.shape == (3,)


def test_from_monthly_surface_temperatures():
    monthly = [2.0, 3.0, 6.0, 10.0, 14.0, 18.0, 20.0, 19.0, 15.0, 10.0, 6.0, 3.0]
    ground = KusudaAchenbachGroundTemperature.from_monthly_surface_temperatures(monthly, ALPHA_DAY)

    average = sum(monthly) / 12.0
    assert ground.average_temperature == pytest.approx(average)
    assert ground.amplitude == pytest.approx(sum(abs(t - average) for t in monthly) / 12.0)
    assert ground.phase_shift_days == 30.0


def test_month_of_minimum_uses_last_occurrence():
    monthly = [1.0, 4.0, 8.0, 12.0, 16.0, 18.0, 18.0, 16.0, 12.0, 8.0, 4.0, 1.0]
    ground = KusudaAchenbachGroundTemperature.from_monthly_surface_temperatures(monthly, ALPHA_DAY)
    assert ground.phase_shift_days == 360.0


def test_wrong_number_of_months():
    with pytest.raises(ValueError):
        KusudaAchenbachGroundTemperature.from_monthly_surface_temperatures([5.0] * 11, ALPHA_DAY)


def test_from_environment_prefers_manual_parameters():
    env = BuriedSoilEnvironment(
        soil=SoilParameters(conductivity=1.0, density=1500.0, specific_heat=1000.0, cover_depth=1.0),
        average_ground_temperature=10.0,
        ground_temperature_amplitude=5.0,
        phase_shift_days=20.0,
    )
    ground = KusudaAchenbachGroundTemperature.from_environment(env, ALPHA_DAY)
    assert (ground.average_temperature, ground.amplitude, ground.phase_shift_days) == (10.0, 5.0, 20.0)


def test_non_positive_diffusivity_rejected():
    with pytest.raises(ValueError):
        KusudaAchenbachGroundTemperature(10.0, 5.0, 20.0, 0.0)
