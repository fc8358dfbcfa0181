"""Current-weather lookup for the time and weather announcement."""

__version__ = "0.1.0"
