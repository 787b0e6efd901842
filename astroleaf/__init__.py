"""Astrocyte and leaflet calcium dynamics simulations."""

__version__ = "0.1.0"