"""Dependency injection container configuration.

Wires settings into the channel engine and the tool layer. Tests and library
integrators can swap settings with ``get_container(settings=...)`` or override
individual providers on a container instance.
"""

from dependency_injector import containers, providers

from channelscope.domain.services.channels.selector import GreedyMultiChannelSelector
from channelscope.infrastructure.config import Settings, get_settings
from channelscope.infrastructure.tools.analysis.channels.detection import (
    AlignTrendChannelTool,
    DetectChannelsTool,
    TrendChannelTool,
)
from channelscope.infrastructure.tools.analysis.channels.registry import create_channel_tools


class Container(containers.DeclarativeContainer):
    """Dependency injection container for channelscope.

    Override settings after creation:
        container = Container()
        container.settings.override(Settings(min_ratio=0.1))
    """

    settings = providers.Singleton(get_settings)

    # Engine
    detection_config = providers.Callable(lambda s: s.detection_config(), s=settings)
    selector = providers.Factory(GreedyMultiChannelSelector, config=detection_config)

    # Tools
    detect_channels_tool = providers.Factory(DetectChannelsTool, settings=settings)
    trend_channel_tool = providers.Factory(TrendChannelTool, settings=settings)
    align_trend_channel_tool = providers.Factory(AlignTrendChannelTool, settings=settings)
    channel_tools = providers.Callable(create_channel_tools, settings=settings)


# Global container instance (can be overridden for testing)
_container: Container | None = None


def get_container(settings: Settings | None = None) -> Container:
    """Get the global dependency injection container.

    Args:
        settings: Optional settings. When given, a new container using them is
                  returned and the global container is left untouched.

    Returns:
        Container instance
    """
    global _container
    if settings is not None:
        container_instance = Container()
        container_instance.settings.override(providers.Object(settings))
        return container_instance
    if _container is None:
        _container = Container()
    return _container


def set_container(container: Container) -> None:
    """Set a custom container (useful for testing).

    Args:
        container: Container instance to use
    """
    global _container
    _container = container


def reset_container() -> None:
    """Reset the global container (useful for testing)."""
    global _container
    _container = None


container = get_container()
