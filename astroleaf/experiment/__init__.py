"""Astrocyte model with IP3 noise and multi-leaflet compartments."""