from pipeheattransfer.controller.solvers.axial import HanbyPipeSolver
from pipeheattransfer.controller.solvers.soil import BuriedSoilSolver, RelaxationResult

__all__ = ["HanbyPipeSolver", "BuriedSoilSolver", "RelaxationResult"]
