from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import TYPE_CHECKING, Dict, List, Optional

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class Fluid(ABC):
    """Abstract base class for fluids circulating through a pipe."""

    def __init__(self, name: str):
        """
        Args:
            name: The name of the fluid.
        """
        self.name = name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"

    @abstractmethod
    def specific_heat(self, temperature: float) -> float:
        """Calculate the specific heat capacity of the fluid at a given temperature in Celsius.

        Args:
            temperature (float): Temperature in Celsius.

        Returns:
            float: Specific heat capacity in J/(kg·K).
        """
        pass

    @abstractmethod
    def density(self, temperature: float) -> float:
        """Calculate the density of the fluid at a given temperature in Celsius.

        Args:
            temperature (float): Temperature in Celsius.

        Returns:
            float: Density in kg/m³.
        """
        pass

    @abstractmethod
    def viscosity(self, temperature: float) -> float:
        """Calculate the dynamic viscosity of the fluid at a given temperature in Celsius.

        Args:
            temperature (float): Temperature in Celsius.

        Returns:
            float: Dynamic viscosity in Pa·s.
        """
        pass

    @abstractmethod
    def conductivity(self, temperature: float) -> float:
        """Calculate the thermal conductivity of the fluid at a given temperature in Celsius.

        Args:
            temperature (float): Temperature in Celsius.

        Returns:
            float: Thermal conductivity in W/(m·K).
        """
        pass


class TabulatedFluid(Fluid):
    """
    Generic fluid defined by tabulated properties.
    """
    def __init__(
        self,
        name: str,
        temperatures: npt.NDArray[np.float64],
        specific_heats: npt.NDArray[np.float64],
        densities: npt.NDArray[np.float64],
        viscosities: npt.NDArray[np.float64],
        conductivities: npt.NDArray[np.float64],
    ):
        super().__init__(name)

        temperatures = np.asarray(temperatures, dtype=np.float64)
        specific_heats = np.asarray(specific_heats, dtype=np.float64)
        densities = np.asarray(densities, dtype=np.float64)
        viscosities = np.asarray(viscosities, dtype=np.float64)
        conductivities = np.asarray(conductivities, dtype=np.float64)

        if not (
            len(temperatures) == len(specific_heats) == len(densities) == len(viscosities) == len(conductivities)
        ):
            raise ValueError("All input arrays must have the same length.")

        if len(temperatures) < 2:
            raise ValueError("At least two data points are required for interpolation.")

        if not np.all(np.diff(temperatures) > 0):
            raise ValueError("Temperature array must be strictly increasing.")

        if np.any(specific_heats <= 0) or np.any(densities <= 0):
            raise ValueError("Specific heats and densities must be positive.")

        if np.any(viscosities <= 0) or np.any(conductivities <= 0):
            raise ValueError("Viscosities and conductivities must be positive.")

        self.temperatures = temperatures
        self.specific_heats = specific_heats
        self.densities = densities
        self.viscosities = viscosities
        self.conductivities = conductivities

    def _interp(self, temperature: float, values: npt.NDArray[np.float64]) -> float:
        return float(np.interp(temperature, self.temperatures, values, left=values[0], right=values[-1]))

    def specific_heat(self, temperature: float) -> float:
        return self._interp(temperature, self.specific_heats)

    def density(self, temperature: float) -> float:
        return self._interp(temperature, self.densities)

    def viscosity(self, temperature: float) -> float:
        return self._interp(temperature, self.viscosities)

    def conductivity(self, temperature: float) -> float:
        return self._interp(temperature, self.conductivities)


class ConstantPropertyFluid(Fluid):
    """
    Fluid with temperature independent properties.

    No validation is applied: a host may hand over a physically invalid
    property set and the solvers must cope with it.
    """
    def __init__(
        self,
        name: str,
        specific_heat: float,
        density: float,
        viscosity: float,
        conductivity: float,
    ):
        super().__init__(name)
        self._specific_heat = specific_heat
        self._density = density
        self._viscosity = viscosity
        self._conductivity = conductivity

    def specific_heat(self, temperature: float) -> float:
        return self._specific_heat

    def density(self, temperature: float) -> float:
        return self._density

    def viscosity(self, temperature: float) -> float:
        return self._viscosity

    def conductivity(self, temperature: float) -> float:
        return self._conductivity


# Saturated liquid water, Incropera & DeWitt, Table A.6
WATER = TabulatedFluid(
    name="Water",
    temperatures=np.array([
        1.85, 6.85, 11.85, 16.85, 21.85, 26.85, 31.85, 36.85, 41.85, 46.85, 51.85, 56.85, 61.85,
        66.85, 71.85, 76.85, 81.85, 86.85, 91.85, 96.85, 100.0
    ]),
    specific_heats=1000.0 * np.array([
        4.211, 4.198, 4.189, 4.184, 4.181, 4.179, 4.178, 4.178, 4.179, 4.180, 4.182, 4.184, 4.186,
        4.188, 4.191, 4.195, 4.199, 4.203, 4.209, 4.214, 4.217
    ]),
    densities=1000.0 / np.array([
        1.000, 1.000, 1.000, 1.001, 1.002, 1.003, 1.005, 1.007, 1.009, 1.011, 1.013, 1.016, 1.018,
        1.021, 1.024, 1.027, 1.030, 1.034, 1.038, 1.041, 1.044
    ]),
    viscosities=1e-6 * np.array([
        1652.0, 1422.0, 1225.0, 1080.0, 959.0, 855.0, 769.0, 695.0, 631.0, 577.0, 528.0, 489.0, 453.0,
        420.0, 389.0, 365.0, 343.0, 324.0, 306.0, 289.0, 279.0
    ]),
    conductivities=1e-3 * np.array([
        574.0, 582.0, 590.0, 598.0, 606.0, 613.0, 620.0, 628.0, 634.0, 640.0, 645.0, 650.0, 656.0,
        660.0, 664.0, 668.0, 671.0, 674.0, 677.0, 679.0, 680.0
    ]),
)


class FluidLibrary:
    """
    Maps fluid names to fluid property services.
    """
    def __init__(self) -> None:
        self.fluids: Dict[str, Fluid] = {}
        self._init_defaults()

    def _init_defaults(self) -> None:
        self.fluids[WATER.name] = WATER

    def add_fluid(self, fluid: Fluid) -> None:
        """Add or update a fluid in the library."""
        self.fluids[fluid.name] = fluid

    def get_fluid(self, name: str) -> Optional[Fluid]:
        """Retrieve a fluid by name (case insensitive)."""
        for fluid_name, fluid in self.fluids.items():
            if fluid_name.upper() == name.upper():
                return fluid
        return None

    def get_names(self) -> List[str]:
        """List all fluid names in the library."""
        return list(self.fluids.keys())
