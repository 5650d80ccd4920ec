"""
Pipe Heat Transfer Engine
=========================
The core implementation of the pipe heat transfer model.

Why is this package needed?
---------------------------
1. Physics: It implements the heat balance equations (Hanby axial model,
   soil conduction grid, convection correlations, ground temperature).
2. Time-Stepping: It manages the time staggering within a host macro
   timestep and the inner time step loop.
3. Data Generation: It computes outlet states and heat transfer rates and
   hands them back to the host for reporting.

Note: This package should be pure Python/NumPy and should NOT know about the
host's registries or file formats.
"""
