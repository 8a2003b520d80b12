"""yis - Year in Sport CLI."""

__version__ = "0.1.0"
