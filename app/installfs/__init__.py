"""installfs - filesystem helpers for application installers and updaters."""

__version__ = "0.1.0"
