"""
Environment Data Model
======================
Defines the configuration structures for the surroundings a pipe exchanges
heat with (Zone air, Scheduled air, Outdoor air, Buried soil, None).

Each variant carries only the payload it needs; consumers dispatch on
`EnvironmentConfig.kind` exhaustively.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import List, Dict, Optional, Any
from abc import ABC, abstractmethod
import logging

logger = logging.getLogger(__name__)


class EnvironmentKind(StrEnum):
    NONE = "None"
    ZONE_AIR = "ZoneAir"
    SCHEDULED_AIR = "ScheduledAir"
    OUTDOOR_AIR = "OutdoorAir"
    BURIED_SOIL = "BuriedSoil"


class SurfaceRoughness(StrEnum):
    VERY_ROUGH = "VeryRough"
    ROUGH = "Rough"
    MEDIUM_ROUGH = "MediumRough"
    MEDIUM_SMOOTH = "MediumSmooth"
    SMOOTH = "Smooth"
    VERY_SMOOTH = "VerySmooth"


class SurfaceConvectionModel(StrEnum):
    CROSSFLOW = "Crossflow"
    ASHRAE_SIMPLE = "ASHRAESimple"


@dataclass
class SoilParameters:
    """
    Thermal parameters of the soil surrounding a buried pipe.

    Attributes:
        conductivity: Soil thermal conductivity in W/(m·K).
        density: Soil density in kg/m³.
        specific_heat: Soil specific heat capacity in J/(kg·K).
        cover_depth: Thickness of soil above the pipe crown in m.
        thermal_absorptance: Long-wave absorptance of the soil surface.
        solar_absorptance: Solar absorptance of the soil surface.
        roughness: Roughness class of the soil surface.
    """
    conductivity: float
    density: float
    specific_heat: float
    cover_depth: float
    thermal_absorptance: float = 0.9
    solar_absorptance: float = 0.7
    roughness: SurfaceRoughness = SurfaceRoughness.MEDIUM_ROUGH

    @property
    def diffusivity(self) -> float:
        """Thermal diffusivity in m²/s."""
        return self.conductivity / (self.density * self.specific_heat)

    def validate(self) -> List[str]:
        errors: List[str] = []
        if self.conductivity <= 0.0:
            errors.append(f"Soil conductivity must be > 0.0, got {self.conductivity:.4g}")
        if self.density <= 0.0:
            errors.append(f"Soil density must be > 0.0, got {self.density:.4g}")
        if self.specific_heat <= 0.0:
            errors.append(f"Soil specific heat must be > 0.0, got {self.specific_heat:.4g}")
        if self.cover_depth <= 0.0:
            errors.append(f"Soil cover depth must be > 0.0, got {self.cover_depth:.4g}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "conductivity": self.conductivity,
            "density": self.density,
            "specific_heat": self.specific_heat,
            "cover_depth": self.cover_depth,
            "thermal_absorptance": self.thermal_absorptance,
            "solar_absorptance": self.solar_absorptance,
            "roughness": self.roughness.value,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> SoilParameters:
        return SoilParameters(
            conductivity=data["conductivity"],
            density=data["density"],
            specific_heat=data["specific_heat"],
            cover_depth=data["cover_depth"],
            thermal_absorptance=data.get("thermal_absorptance", 0.9),
            solar_absorptance=data.get("solar_absorptance", 0.7),
            roughness=SurfaceRoughness(data.get("roughness", SurfaceRoughness.MEDIUM_ROUGH)),
        )


@dataclass
class EnvironmentConfig(ABC):

    @property
    @abstractmethod
    def kind(self) -> EnvironmentKind:
        pass

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        return []

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> EnvironmentConfig:
        kind = EnvironmentKind(data.get("kind", EnvironmentKind.NONE))
        if kind == EnvironmentKind.ZONE_AIR: return ZoneAirEnvironment.from_dict(data)
        if kind == EnvironmentKind.SCHEDULED_AIR: return ScheduledAirEnvironment.from_dict(data)
        if kind == EnvironmentKind.OUTDOOR_AIR: return OutdoorAirEnvironment.from_dict(data)
        if kind == EnvironmentKind.BURIED_SOIL: return BuriedSoilEnvironment.from_dict(data)
        return NoEnvironment()


@dataclass
class NoEnvironment(EnvironmentConfig):

    @property
    def kind(self) -> EnvironmentKind: return EnvironmentKind.NONE


@dataclass
class ZoneAirEnvironment(EnvironmentConfig):
    zone_name: str = ""

    @property
    def kind(self) -> EnvironmentKind: return EnvironmentKind.ZONE_AIR

    def validate(self) -> List[str]:
        if not self.zone_name:
            return ["A zone name is required for a zone air environment"]
        return []

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["zone_name"] = self.zone_name
        return d

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> ZoneAirEnvironment:
        return ZoneAirEnvironment(zone_name=data.get("zone_name", ""))


@dataclass
class ScheduledAirEnvironment(EnvironmentConfig):
    temperature_schedule: str = ""
    velocity_schedule: str = ""

    @property
    def kind(self) -> EnvironmentKind: return EnvironmentKind.SCHEDULED_AIR

    def validate(self) -> List[str]:
        errors: List[str] = []
        if not self.temperature_schedule:
            errors.append("An ambient temperature schedule is required for a scheduled air environment")
        if not self.velocity_schedule:
            errors.append("An ambient air velocity schedule is required for a scheduled air environment")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["temperature_schedule"] = self.temperature_schedule
        d["velocity_schedule"] = self.velocity_schedule
        return d

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> ScheduledAirEnvironment:
        return ScheduledAirEnvironment(
            temperature_schedule=data.get("temperature_schedule", ""),
            velocity_schedule=data.get("velocity_schedule", ""),
        )


@dataclass
class OutdoorAirEnvironment(EnvironmentConfig):
    air_node: str = ""

    @property
    def kind(self) -> EnvironmentKind: return EnvironmentKind.OUTDOOR_AIR

    def validate(self) -> List[str]:
        if not self.air_node:
            return ["An outdoor air node must be used for an outdoor air environment"]
        return []

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["air_node"] = self.air_node
        return d

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> OutdoorAirEnvironment:
        return OutdoorAirEnvironment(air_node=data.get("air_node", ""))


@dataclass
class BuriedSoilEnvironment(EnvironmentConfig):
    """
    Soil surrounding a buried pipe.

    The far-field ground temperature parameters are either given directly
    (all three of average, amplitude and phase shift) or derived from twelve
    monthly average surface temperatures.
    """
    soil: Optional[SoilParameters] = None
    sun_exposed: bool = True
    surface_convection: SurfaceConvectionModel = SurfaceConvectionModel.CROSSFLOW
    average_ground_temperature: Optional[float] = None
    ground_temperature_amplitude: Optional[float] = None
    phase_shift_days: Optional[float] = None
    monthly_surface_temperatures: List[float] = field(default_factory=list)

    @property
    def kind(self) -> EnvironmentKind: return EnvironmentKind.BURIED_SOIL

    @property
    def has_manual_ground_temperature(self) -> bool:
        return any(
            v is not None for v in (
                self.average_ground_temperature,
                self.ground_temperature_amplitude,
                self.phase_shift_days,
            )
        )

    def validate(self) -> List[str]:
        errors: List[str] = []
        if self.soil is None:
            errors.append("A soil material is required for a buried soil environment")
        else:
            errors.extend(self.soil.validate())

        if self.has_manual_ground_temperature:
            if None in (self.average_ground_temperature, self.ground_temperature_amplitude, self.phase_shift_days):
                errors.append("If any one annual ground temperature item is entered, all 3 items must be entered")
            if self.ground_temperature_amplitude is not None and self.ground_temperature_amplitude < 0.0:
                errors.append(f"Invalid ground temperature amplitude={self.ground_temperature_amplitude:.2f}")
            if self.phase_shift_days is not None and self.phase_shift_days < 0.0:
                errors.append(f"Invalid phase shift of minimum surface temperature={self.phase_shift_days:.0f}")
        elif len(self.monthly_surface_temperatures) != 12:
            errors.append(
                "Twelve monthly surface ground temperatures are required when the annual "
                f"ground temperature items are not entered (got {len(self.monthly_surface_temperatures)})"
            )
        return errors

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d.update({
            "soil": self.soil.to_dict() if self.soil else None,
            "sun_exposed": self.sun_exposed,
            "surface_convection": self.surface_convection.value,
            "average_ground_temperature": self.average_ground_temperature,
            "ground_temperature_amplitude": self.ground_temperature_amplitude,
            "phase_shift_days": self.phase_shift_days,
            "monthly_surface_temperatures": list(self.monthly_surface_temperatures),
        })
        return d

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> BuriedSoilEnvironment:
        soil_data = data.get("soil")
        return BuriedSoilEnvironment(
            soil=SoilParameters.from_dict(soil_data) if soil_data else None,
            sun_exposed=data.get("sun_exposed", True),
            surface_convection=SurfaceConvectionModel(
                data.get("surface_convection", SurfaceConvectionModel.CROSSFLOW)
            ),
            average_ground_temperature=data.get("average_ground_temperature"),
            ground_temperature_amplitude=data.get("ground_temperature_amplitude"),
            phase_shift_days=data.get("phase_shift_days"),
            monthly_surface_temperatures=list(data.get("monthly_surface_temperatures", [])),
        )
