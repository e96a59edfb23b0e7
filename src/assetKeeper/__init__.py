"""Local asset library: catalogue, group, validate and search assets."""

__version__ = "0.1.0"
