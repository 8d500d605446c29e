"""Thread-stack topology engine for the agent threads dashboard."""

__version__ = "0.1.0"
