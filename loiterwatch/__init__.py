"""LoiterWatch: loitering aircraft detection over a monitored sea area."""

__version__ = "0.1.0"
