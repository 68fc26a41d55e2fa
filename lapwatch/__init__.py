"""LapWatch: a stopwatch with lap accounting, running averages and exports."""

__version__ = "0.1.0"
