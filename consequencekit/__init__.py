"""Flood consequence modelling: structure damage, warning response, stability and life loss."""

__version__ = "0.1.0"