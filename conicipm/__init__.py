"""Problem data, presolve, equilibration, residuals, termination checks,
progress printing, solution recovery and timers for an interior-point
conic optimization solver."""

__version__ = "0.1.0"