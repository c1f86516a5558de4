"""Exchange announcement monitoring and alert delivery."""

__version__ = "0.1.0"
