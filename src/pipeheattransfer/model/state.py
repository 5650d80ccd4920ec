"""
Pipe Thermal State (Data Model)
===============================
This module defines the data owned by a single simulated pipe.

Why is this file needed?
------------------------
1. State Management: It holds every temperature field of one pipe in three
   generations (Previous / Current / Tentative), plus the scalar parameters
   and the per-timestep quantities the solvers exchange.
2. Ownership: One instance belongs to exactly one pipe. Solvers receive it
   explicitly; nothing is looked up from a global registry.

Classes:
    TimeSlot: The three generations of a temperature field.
    AxialField: A temperature sequence along the pipe in three generations.
    SoilGrid: The buried-pipe soil grid in three generations.
    HanbyCoefficients: Fluid/pipe-wall heat balance coefficients.
    PipeThermalState: The main container class.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
import logging
import math
from typing import Optional, TYPE_CHECKING

import numpy as np

from pipeheattransfer.config import NUM_PIPE_SECTIONS, NUM_DEPTH_NODES, INITIAL_TEMPERATURE, SECONDS_IN_HOUR, HOURS_IN_DAY
from pipeheattransfer.model.construction import PipeThermalProperties
from pipeheattransfer.model.environment import EnvironmentKind, SoilParameters, BuriedSoilEnvironment

if TYPE_CHECKING:
    import numpy.typing as npt

    from pipeheattransfer.model.pipe import PipeConfig

logger = logging.getLogger(__name__)


class TimeSlot(IntEnum):
    PREVIOUS = 0
    CURRENT = 1
    TENTATIVE = 2


class AxialField:
    """
    A temperature sequence along the pipe held in three generations.

    Index 0 is the inlet boundary value, indices 1..N are the sections.
    """

    def __init__(self, num_sections: int, temperature: float = INITIAL_TEMPERATURE) -> None:
        self.previous: npt.NDArray[np.float64] = np.full(num_sections + 1, temperature, dtype=np.float64)
        self.current: npt.NDArray[np.float64] = self.previous.copy()
        self.tentative: npt.NDArray[np.float64] = self.previous.copy()

    def __len__(self) -> int:
        return self.current.size

    def reset(self, temperature: float) -> None:
        self.previous[:] = temperature
        self.current[:] = temperature
        self.tentative[:] = temperature

    def promote(self) -> None:
        """Accept the tentative values as the new current ones."""
        self.current[:] = self.tentative

    def rollback(self) -> None:
        """Discard the tentative values and restart from the current ones."""
        self.tentative[:] = self.current

    def shift(self) -> None:
        """Store the current values as the previous generation."""
        self.previous[:] = self.current


class SoilGrid:
    """
    Cartesian soil grid around a buried pipe, `t[width, depth, length, slot]`.

    Width index 0 is the far-field column and the last width index is the
    symmetry centerline through the pipe. Depth index 0 is the soil surface
    and the last depth index is the bottom boundary.
    """

    def __init__(self, depth_nodes: int, num_sections: int) -> None:
        if depth_nodes < 4 or depth_nodes % 2:
            raise ValueError("The number of depth nodes must be an even number of at least 4.")
        self.depth_nodes = depth_nodes
        self.width_nodes = depth_nodes // 2
        self.num_sections = num_sections
        # 0-based indices of the node containing the pipe
        self.pipe_node_width = self.width_nodes - 1
        self.pipe_node_depth = depth_nodes // 2 - 1
        self.t: npt.NDArray[np.float64] = np.zeros(
            (self.width_nodes, self.depth_nodes, self.num_sections, len(TimeSlot)),
            dtype=np.float64
        )

    @property
    def shape(self) -> tuple[int, int, int]:
        return self.width_nodes, self.depth_nodes, self.num_sections

    def slot(self, slot: TimeSlot) -> npt.NDArray[np.float64]:
        """View of one generation of the grid."""
        return self.t[..., slot]

    # Far-field column and the first section are not part of the exchanged region
    def promote(self) -> None:
        self.t[1:, :, 1:, TimeSlot.CURRENT] = self.t[1:, :, 1:, TimeSlot.TENTATIVE]

    def rollback(self) -> None:
        self.t[1:, :, 1:, TimeSlot.TENTATIVE] = self.t[1:, :, 1:, TimeSlot.CURRENT]

    def shift(self) -> None:
        self.t[1:, :, 1:, TimeSlot.PREVIOUS] = self.t[1:, :, 1:, TimeSlot.CURRENT]


@dataclass(frozen=True)
class HanbyCoefficients:
    """Coefficients of the fluid node (A) and pipe-wall node (B) heat balances."""
    a1: float
    a2: float
    a3: float
    a4: float
    b1: float
    b2: float
    b3: float
    b4: float


class PipeThermalState:
    """
    Every array and scalar owned by one simulated pipe.
    """

    def __init__(
        self,
        name: str,
        kind: EnvironmentKind,
        inside_diameter: float,
        length: float,
        properties: PipeThermalProperties,
        soil: Optional[SoilParameters] = None,
        sun_exposed: bool = False,
        num_sections: int = NUM_PIPE_SECTIONS,
        depth_nodes: int = NUM_DEPTH_NODES,
    ) -> None:
        """
        Initialize the state from geometry and material scalars.

        Args:
            name: Pipe name, used in diagnostics.
            kind: Environment the pipe exchanges heat with.
            inside_diameter: Pipe inside diameter in m.
            length: Pipe length in m.
            properties: Resolved pipe/insulation properties.
            soil: Soil parameters, required for buried pipes.
            sun_exposed: Whether the soil surface sees the sun and the sky.
            num_sections: Number of axial sections.
            depth_nodes: Number of soil grid nodes in the depth direction.
        """
        if kind == EnvironmentKind.BURIED_SOIL and soil is None:
            raise ValueError(f"Buried pipe '{name}' requires soil parameters.")

        self.name = name
        self.kind = kind
        self.inside_diameter = inside_diameter
        self.length = length
        self.properties = properties
        self.num_sections = num_sections

        # Geometry per section
        self.inside_area = math.pi * inside_diameter * length / num_sections
        self.outside_area = math.pi * properties.insulation_outer_diameter * length / num_sections
        self.section_area = math.pi * 0.25 * inside_diameter ** 2
        self.pipe_heat_capacity = (
            properties.pipe_specific_heat * properties.pipe_density
            * (math.pi * 0.25 * properties.pipe_outer_diameter ** 2 - self.section_area)
            * length / num_sections
        )

        # Axial (Hanby) fields
        self.fluid = AxialField(num_sections)
        self.pipe = AxialField(num_sections)

        # Buried pipe only
        self.soil = soil
        self.sun_exposed = sun_exposed
        self.grid: Optional[SoilGrid] = None
        self.pipe_depth = 0.0
        self.domain_depth = 0.0
        self.dS = 0.0
        if soil is not None and kind == EnvironmentKind.BURIED_SOIL:
            self.grid = SoilGrid(depth_nodes=depth_nodes, num_sections=num_sections)
            self.pipe_depth = soil.cover_depth + inside_diameter / 2.0
            self.domain_depth = self.pipe_depth * 2.0
            self.dS = self.domain_depth / (depth_nodes - 1)

        # Derived coefficients, recomputed every macro timestep
        self.coefficients: Optional[HanbyCoefficients] = None
        self.fourier_ds = 0.0
        self.coef_a1 = 0.0
        self.coef_a2 = 0.0

        # Per-timestep inputs
        self.inlet_temperature = 0.0
        self.mass_flow_rate = 0.0
        self.volume_flow_rate = 0.0
        self.fluid_specific_heat = 0.0
        self.fluid_density = 0.0
        self.delta_time = 0.0
        self.num_inner_steps = 0
        self.environment_temperature = 0.0

        # Rate/energy accumulators
        self.outlet_temperature = 0.0
        self.fluid_heat_loss_rate = 0.0
        self.environment_heat_loss_rate = 0.0
        self.zone_heat_gain_rate = 0.0
        self.soil_iterations = 0

        # Time staggering
        self.previous_sim_time = 0.0
        self.current_sim_time = 0.0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, kind={self.kind.value}, sections={self.num_sections})"

    @classmethod
    def from_config(cls, config: PipeConfig) -> PipeThermalState:
        """Build the state of a validated pipe configuration."""
        properties = config.construction.resolve(config.inside_diameter)
        env = config.environment
        soil = env.soil if isinstance(env, BuriedSoilEnvironment) else None
        sun_exposed = env.sun_exposed if isinstance(env, BuriedSoilEnvironment) else False
        return cls(
            name=config.name,
            kind=config.kind,
            inside_diameter=config.inside_diameter,
            length=config.length,
            properties=properties,
            soil=soil,
            sun_exposed=sun_exposed,
        )

    @property
    def is_buried(self) -> bool:
        return self.grid is not None

    @property
    def soil_diffusivity_per_day(self) -> float:
        """Soil thermal diffusivity in m²/day."""
        if self.soil is None:
            return 0.0
        return self.soil.diffusivity * SECONDS_IN_HOUR * HOURS_IN_DAY

    @property
    def fluid_node_heat_capacity(self) -> float:
        """Mass of the fluid in one section times its specific heat in J/K."""
        return self.section_area * self.length / self.num_sections * self.fluid_specific_heat * self.fluid_density

    @property
    def has_valid_fluid_properties(self) -> bool:
        return self.fluid_specific_heat > 0.0 and self.fluid_density > 0.0

    def zero_accumulators(self) -> None:
        self.fluid_heat_loss_rate = 0.0
        self.environment_heat_loss_rate = 0.0
        self.zone_heat_gain_rate = 0.0
        self.outlet_temperature = 0.0
        self.soil_iterations = 0

    def node_depth(self, depth_index: int | npt.NDArray[np.int_]) -> float | npt.NDArray[np.float64]:
        """Depth below the soil surface of grid row(s) in m."""
        return depth_index * self.dS
