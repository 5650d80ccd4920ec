"""
The MODEL layer contains pure data structures.
It has NO knowledge of the physics correlations or the solvers.
It deals with Configuration, Thermal State, and I/O.
"""
