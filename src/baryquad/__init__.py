"""Baryquad: writes a barycentric-coordinate quad as a self-contained GLB."""

__version__ = "0.1.0"
