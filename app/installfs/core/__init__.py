"""Core path handling and policy configuration for installfs."""
