"""
Pipe Construction
=================
Defines the layered wall of a pipe and resolves it into the lumped thermal
scalars the solvers consume.

The last layer is always the pipe wall itself; any layers before it are
insulation (outermost first).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Dict, Any
import math
import logging

logger = logging.getLogger(__name__)


@dataclass
class MaterialLayer:
    """
    A single homogeneous layer of a pipe construction.

    Attributes:
        name: Layer name.
        thickness: Layer thickness in m.
        conductivity: Thermal conductivity in W/(m·K).
        density: Density in kg/m³.
        specific_heat: Specific heat capacity in J/(kg·K).
    """
    name: str
    thickness: float
    conductivity: float
    density: float
    specific_heat: float

    @property
    def resistance(self) -> float:
        """Thermal resistance of the layer in m²·K/W."""
        return self.thickness / self.conductivity

    def validate(self) -> List[str]:
        errors: List[str] = []
        if self.thickness <= 0.0:
            errors.append(f"Layer '{self.name}': thickness must be > 0.0, got {self.thickness:.4g}")
        if self.conductivity <= 0.0:
            errors.append(f"Layer '{self.name}': conductivity must be > 0.0, got {self.conductivity:.4g}")
        if self.density <= 0.0:
            errors.append(f"Layer '{self.name}': density must be > 0.0, got {self.density:.4g}")
        if self.specific_heat <= 0.0:
            errors.append(f"Layer '{self.name}': specific heat must be > 0.0, got {self.specific_heat:.4g}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "thickness": self.thickness,
            "conductivity": self.conductivity,
            "density": self.density,
            "specific_heat": self.specific_heat,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> MaterialLayer:
        return MaterialLayer(
            name=data.get("name", "Unnamed Layer"),
            thickness=data["thickness"],
            conductivity=data["conductivity"],
            density=data["density"],
            specific_heat=data["specific_heat"],
        )


@dataclass(frozen=True)
class PipeThermalProperties:
    """Lumped thermal scalars of a resolved pipe construction."""
    pipe_conductivity: float
    pipe_density: float
    pipe_specific_heat: float
    pipe_outer_diameter: float
    insulation_thickness: float = 0.0
    insulation_resistance: float = 0.0
    insulation_conductivity: float = 0.0
    insulation_density: float = 0.0
    insulation_specific_heat: float = 0.0
    insulation_outer_diameter: float = 0.0
    sum_tk: float = 0.0


@dataclass
class PipeConstruction:
    name: str
    layers: List[MaterialLayer] = field(default_factory=list)

    def validate(self) -> List[str]:
        if not self.layers:
            return [f"Construction '{self.name}' has no layers"]
        errors: List[str] = []
        for layer in self.layers:
            errors.extend(layer.validate())
        return errors

    def resolve(self, inside_diameter: float) -> PipeThermalProperties:
        """
        Resolve the layers into lumped pipe and insulation properties.

        Args:
            inside_diameter: Inner diameter of the pipe in m.

        Returns:
            The lumped thermal properties.
        """
        if not self.layers:
            raise ValueError(f"Construction '{self.name}' has no layers.")

        pipe = self.layers[-1]
        pipe_od = inside_diameter + 2.0 * pipe.thickness

        if len(self.layers) == 1:
            return PipeThermalProperties(
                pipe_conductivity=pipe.conductivity,
                pipe_density=pipe.density,
                pipe_specific_heat=pipe.specific_heat,
                pipe_outer_diameter=pipe_od,
                insulation_outer_diameter=pipe_od,
                sum_tk=pipe.resistance,
            )

        insulation = self.layers[:-1]
        thickness = math.fsum(layer.thickness for layer in insulation)
        resistance = math.fsum(layer.resistance for layer in insulation)

        return PipeThermalProperties(
            pipe_conductivity=pipe.conductivity,
            pipe_density=pipe.density,
            pipe_specific_heat=pipe.specific_heat,
            pipe_outer_diameter=pipe_od,
            insulation_thickness=thickness,
            insulation_resistance=resistance,
            insulation_conductivity=thickness / resistance,
            insulation_density=math.fsum(layer.density * layer.thickness for layer in insulation) / thickness,
            insulation_specific_heat=math.fsum(layer.specific_heat * layer.thickness for layer in insulation) / thickness,
            insulation_outer_diameter=pipe_od + 2.0 * thickness,
            sum_tk=resistance,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "layers": [layer.to_dict() for layer in self.layers]}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> PipeConstruction:
        return PipeConstruction(
            name=data.get("name", "Unnamed Construction"),
            layers=[MaterialLayer.from_dict(d) for d in data.get("layers", [])],
        )
