"""
Pipe Configuration
==================
Defines the input description of a single heat transfer pipe and validates
it as a batch before any simulation starts.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any, Iterable
import logging

from pipeheattransfer.model.construction import PipeConstruction
from pipeheattransfer.model.environment import (
    EnvironmentConfig, EnvironmentKind, NoEnvironment, ZoneAirEnvironment,
    ScheduledAirEnvironment, OutdoorAirEnvironment,
)

logger = logging.getLogger(__name__)


class PipeInputError(ValueError):
    """Raised once with every configuration problem found for a pipe."""

    def __init__(self, name: str, errors: List[str]):
        self.name = name
        self.errors = list(errors)
        details = "\n  ".join(self.errors)
        super().__init__(f"Errors found in input for pipe '{name}'. Preceding conditions cause termination:\n  {details}")


@dataclass
class PipeConfig:
    """
    Input description of one pipe.

    Attributes:
        name: Unique pipe name.
        inlet_node: Name of the flow network inlet node.
        outlet_node: Name of the flow network outlet node.
        inside_diameter: Pipe inside diameter in m.
        length: Pipe length in m.
        construction: Layered pipe wall construction.
        environment: The surroundings the pipe exchanges heat with.
        fluid_name: Name of the circulating fluid.
    """
    name: str
    inlet_node: str
    outlet_node: str
    inside_diameter: float
    length: float
    construction: PipeConstruction
    environment: EnvironmentConfig = field(default_factory=NoEnvironment)
    fluid_name: str = "Water"

    @property
    def kind(self) -> EnvironmentKind:
        return self.environment.kind

    def validate(
        self,
        known_zones: Optional[Iterable[str]] = None,
        known_schedules: Optional[Iterable[str]] = None,
        known_air_nodes: Optional[Iterable[str]] = None,
    ) -> None:
        """
        Check the whole configuration and raise a single error listing every problem.

        The optional name collections let a host cross-check references to
        zones, schedules and outdoor air nodes it owns.

        Raises:
            PipeInputError: If any problem was found.
        """
        errors: List[str] = []

        if not self.inlet_node:
            errors.append("An inlet node is required")
        if not self.outlet_node:
            errors.append("An outlet node is required")
        if self.inlet_node and self.inlet_node == self.outlet_node:
            errors.append(f"Inlet and outlet node are the same ('{self.inlet_node}')")

        if self.inside_diameter <= 0.0:
            errors.append(f"Invalid pipe inside diameter of {self.inside_diameter:.4g}, must be > 0.0")
        if self.length <= 0.0:
            errors.append(f"Invalid pipe length of {self.length:.4g}, must be > 0.0")

        errors.extend(self.construction.validate())
        errors.extend(self.environment.validate())

        env = self.environment
        if known_zones is not None and isinstance(env, ZoneAirEnvironment) and env.zone_name:
            if env.zone_name not in set(known_zones):
                errors.append(f"Invalid zone name={env.zone_name}")
        if known_schedules is not None and isinstance(env, ScheduledAirEnvironment):
            schedules = set(known_schedules)
            for schedule in (env.temperature_schedule, env.velocity_schedule):
                if schedule and schedule not in schedules:
                    errors.append(f"Invalid schedule name={schedule}")
        if known_air_nodes is not None and isinstance(env, OutdoorAirEnvironment) and env.air_node:
            if env.air_node not in set(known_air_nodes):
                errors.append(f"Invalid outdoor air node={env.air_node}, not an outdoor air node")

        if errors:
            for message in errors:
                logger.error(f"Pipe '{self.name}': {message}")
            raise PipeInputError(self.name, errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "inlet_node": self.inlet_node,
            "outlet_node": self.outlet_node,
            "inside_diameter": self.inside_diameter,
            "length": self.length,
            "construction": self.construction.to_dict(),
            "environment": self.environment.to_dict(),
            "fluid_name": self.fluid_name,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> PipeConfig:
        return PipeConfig(
            name=data["name"],
            inlet_node=data.get("inlet_node", ""),
            outlet_node=data.get("outlet_node", ""),
            inside_diameter=data.get("inside_diameter", 0.0),
            length=data.get("length", 0.0),
            construction=PipeConstruction.from_dict(data.get("construction", {})),
            environment=EnvironmentConfig.from_dict(data.get("environment", {})),
            fluid_name=data.get("fluid_name", "Water"),
        )
