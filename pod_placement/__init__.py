"""Placement and configuration-mount decisions for statically declared pods."""

__version__ = "0.1.0"
