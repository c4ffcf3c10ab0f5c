"""aig - build and run containers from composable layers."""

__version__ = "0.1.0"
