"""CLI package for talking to the sensor relay."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# ``cli.app`` must stay the module, not the Typer instance, so tests can
# patch ``cli.app.ApiClient``.

__all__ = []
