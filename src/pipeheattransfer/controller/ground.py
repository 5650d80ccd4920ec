from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

import numpy as np

from pipeheattransfer.config import MONTHS_IN_YEAR, AVERAGE_DAYS_IN_MONTH, DAYS_IN_YEAR
from pipeheattransfer.model.environment import BuriedSoilEnvironment

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class KusudaAchenbachGroundTemperature:
    """
    Undisturbed ground temperature over the annual cycle.

    Kusuda, T. & Achenbach, P. (1965), "Earth temperature and thermal
    diffusivity at selected stations in the united states", ASHRAE
    Transactions 71(1), 61-75.
    """
    NAME = "Kusuda-Achenbach"

    def __init__(
        self,
        average_temperature: float,
        amplitude: float,
        phase_shift_days: float,
        diffusivity_per_day: float,
    ) -> None:
        """
        Args:
            average_temperature: Annual average surface temperature in °C.
            amplitude: Amplitude of the surface temperature cycle in °C.
            phase_shift_days: Day of the minimum surface temperature.
            diffusivity_per_day: Soil thermal diffusivity in m²/day.
        """
        if diffusivity_per_day <= 0.0:
            raise ValueError("Soil diffusivity must be positive.")
        self.average_temperature = average_temperature
        self.amplitude = amplitude
        self.phase_shift_days = phase_shift_days
        self.diffusivity_per_day = diffusivity_per_day

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(average={self.average_temperature:.2f}, "
            f"amplitude={self.amplitude:.2f}, phase_shift_days={self.phase_shift_days:.0f})"
        )

    @classmethod
    def from_monthly_surface_temperatures(
        cls,
        monthly_temperatures: Sequence[float],
        diffusivity_per_day: float,
    ) -> KusudaAchenbachGroundTemperature:
        """
        Derive the annual cycle from twelve monthly average surface temperatures.

        The amplitude is the mean absolute deviation from the average and the
        phase shift is the (last) month of the minimum times thirty days.
        """
        temps = np.asarray(monthly_temperatures, dtype=np.float64)
        if temps.size != MONTHS_IN_YEAR:
            raise ValueError(f"Expected {MONTHS_IN_YEAR} monthly surface temperatures, got {temps.size}.")

        average = float(np.mean(temps))
        amplitude = float(np.mean(np.abs(temps - average)))
        month_of_minimum = int(np.flatnonzero(temps == temps.min())[-1]) + 1

        logger.debug(
            f"Ground temperature from monthly data: average={average:.2f}, amplitude={amplitude:.2f}, "
            f"month of minimum={month_of_minimum}"
        )
        return cls(
            average_temperature=average,
            amplitude=amplitude,
            phase_shift_days=float(month_of_minimum * AVERAGE_DAYS_IN_MONTH),
            diffusivity_per_day=diffusivity_per_day,
        )

    @classmethod
    def from_environment(
        cls,
        environment: BuriedSoilEnvironment,
        diffusivity_per_day: float,
    ) -> KusudaAchenbachGroundTemperature:
        """Build the model from a (validated) buried soil environment."""
        if environment.has_manual_ground_temperature:
            return cls(
                average_temperature=environment.average_ground_temperature,
                amplitude=environment.ground_temperature_amplitude,
                phase_shift_days=environment.phase_shift_days,
                diffusivity_per_day=diffusivity_per_day,
            )
        return cls.from_monthly_surface_temperatures(
            environment.monthly_surface_temperatures, diffusivity_per_day
        )

    def get_temperature(
        self,
        depth: float | npt.NDArray[np.float64],
        day: float | npt.NDArray[np.float64],
    ) -> float | npt.NDArray[np.float64]:
        """
        Get the undisturbed ground temperature.

        Args:
            depth: Depth(s) below the surface in meters.
            day: Simulation day(s).

        Returns:
            Temperature in °C.
        """
        z = np.asarray(depth, dtype=np.float64)
        d = np.asarray(day, dtype=np.float64)
        alpha = self.diffusivity_per_day

        damping = np.exp(-z * np.sqrt(np.pi / (DAYS_IN_YEAR * alpha)))
        lag = (z / 2.0) * np.sqrt(DAYS_IN_YEAR / (np.pi * alpha))
        temperatures = self.average_temperature - self.amplitude * damping * np.cos(
            (2.0 * np.pi / DAYS_IN_YEAR) * (d - self.phase_shift_days - lag)
        )

        if np.isscalar(depth) and np.isscalar(day):
            return float(temperatures)
        return temperatures

    def plot(self, depths: Sequence[float] = (0.0, 0.5, 1.0, 2.0)) -> None:
        """
        Plot the annual temperature cycle at several depths.
        """
        import matplotlib.pyplot as plt

        days = np.linspace(0, DAYS_IN_YEAR, 366)

        plt.rcParams["figure.constrained_layout.use"] = True
        plt.figure(figsize=(7, 5))

        for depth in depths:
            plt.plot(days, self.get_temperature(depth, days), lw=2, label=f"z = {depth:.2f} m")

        plt.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
        plt.minorticks_on()
        plt.grid(visible=True, which='minor', axis='both', linestyle=':', color='gray', lw=0.5)

        plt.title(f"{self.NAME} Ground Temperature")
        plt.xlabel("Day of year")
        plt.ylabel("Temperature (°C)")
        plt.legend()

        plt.xlim(0, DAYS_IN_YEAR)
        plt.show()
