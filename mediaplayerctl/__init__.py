"""Send one transport command to the most appropriate MPRIS media player."""

__version__ = "1.0.0"
