"""Backend for the Query desktop database client."""

__version__ = "0.3.0"
