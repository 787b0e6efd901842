"""Astrocyte model driven by a periodic IP3 stimulus read from a file."""