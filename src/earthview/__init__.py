"""earthview: camera state machinery for an interactive 3D globe."""

__version__ = "0.1.0"
