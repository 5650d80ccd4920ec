"""
Configuration & Global Constants
================================
This module serves as the central registry for the numerical constants of
the pipe heat transfer model.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (section counts, tolerances,
   correlation constants) scattered throughout the solvers.
2. Consistency: The grid dimensions and the time staggering are shared by
   the state, the time-slot manager and both solvers; they must agree.

Exports:
    NUM_PIPE_SECTIONS (int): Number of axial sections of every pipe.
    NUM_DEPTH_NODES (int): Depth nodes of the buried soil grid.
    INNER_TIME_STEP (float): Duration of one inner time step in seconds.
"""
import numpy as np

# Axial discretisation (Hanby's optimal number of sections)
NUM_PIPE_SECTIONS: int = 20

# Cartesian soil grid, should be an even number
NUM_DEPTH_NODES: int = 8

# Time staggering
INNER_TIME_STEP: float = 60.0  # s
SIM_TIME_EPSILON: float = 1.0e-6  # h
INITIAL_TEMPERATURE: float = 21.0  # °C

# Soil relaxation
SOIL_CONVERGENCE_TOLERANCE: float = 0.05  # °C
SOIL_MAX_ITERATIONS: int = 200

# Physical constants
STEFAN_BOLTZMANN: float = 5.6697e-08  # W/(m²·K⁴)
TINY_TEMPERATURE_DIFFERENCE: float = float(np.finfo(np.float64).eps)
SECONDS_IN_HOUR: float = 3600.0
HOURS_IN_DAY: float = 24.0

# Internal (fluid side) convection
MAX_LAMINAR_REYNOLDS: float = 2300.0
LAMINAR_NUSSELT: float = 3.66

# External (air side) convection
AIR_PRANDTL: float = 0.7
AIR_CONDUCTIVITY: float = 0.025  # W/(m·K)
ROOM_AIR_VELOCITY: float = 0.381  # m/s, 75 ft/min
NATURAL_CONVECTION_NUSSELT: float = 0.36

# Annual ground temperature cycle
MONTHS_IN_YEAR: int = 12
AVERAGE_DAYS_IN_MONTH: int = 30
DAYS_IN_YEAR: float = 365.0
