"""Preview a GitHub Pages build artifact locally."""

__version__ = "0.1.0"
