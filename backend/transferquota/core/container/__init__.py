"""Dependency injection container.

Usage:
------
    # Initialize at startup (worker or CLI, once)
    from transferquota.core.config import settings
    from transferquota.core.container import initialize_container
    initialize_container(settings)

    # Use the global container afterwards
    from transferquota.core import container as container_mod
    await container_mod.container.aggregator.run()

    # In tests, construct directly with fakes, don't use the global
    from transferquota.core.container import Container

Module structure:
-----------------
    container/
    ├── __init__.py      # This file - exports public API
    ├── container.py     # Container dataclass (serves)
    └── factory.py       # create_container() (builds)
"""

from typing import TYPE_CHECKING

from transferquota.core.container.container import Container
from transferquota.core.container.factory import create_container

if TYPE_CHECKING:
    from transferquota.core.config import Settings

__all__ = ["Container", "create_container", "container", "initialize_container"]


container: Container | None = None
"""Global container instance, set by ``initialize_container()``.

Do NOT import this in domain code. Domains receive dependencies through
their constructors.
"""


def initialize_container(settings: "Settings") -> None:
    """Initialize the global container. Call once at startup.

    Raises:
        RuntimeError: If the container is already initialized
    """
    global container

    if container is not None:
        raise RuntimeError(
            "Container already initialized. "
            "initialize_container() should only be called once at startup."
        )

    container = create_container(settings)


def reset_container() -> None:
    """Reset the global container to None. For testing only."""
    global container
    container = None
