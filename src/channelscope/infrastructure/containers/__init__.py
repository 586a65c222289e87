"""Dependency injection container."""

from channelscope.infrastructure.containers.container import (
    Container,
    container,
    get_container,
    reset_container,
    set_container,
)

__all__ = ["Container", "container", "get_container", "reset_container", "set_container"]
