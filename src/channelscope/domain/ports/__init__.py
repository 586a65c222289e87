"""Ports (abstract interfaces) of the domain layer."""
