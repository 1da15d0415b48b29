"""Interactive viewer for charged particle trajectories in a magnetic mirror."""
__version__ = "0.1.0"
