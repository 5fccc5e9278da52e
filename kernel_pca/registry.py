"""Name-to-factory registries for kernels and point selection policies."""

from __future__ import annotations

from typing import Callable, Dict, Generic, Type, TypeVar

from .errors import ConfigurationError

T = TypeVar("T")
Factory = Callable[..., T]


class Registry(Generic[T]):
    """Simple registry that maps lower-cased names to factories.

    ``unknown_error`` is raised by :meth:`create` for unregistered names. It is
    called with the requested name and the list of registered names.
    """

    def __init__(self, kind: str, unknown_error: Callable[[str, list], Exception]) -> None:
        self.kind = kind
        self._unknown_error = unknown_error
        self._registry: Dict[str, Factory] = {}

    def register(self, name: str, factory: Factory, *, overwrite: bool = False) -> None:
        key = name.lower()
        if not overwrite and key in self._registry:
            raise ValueError(f"A {self.kind} is already registered for name '{name}'.")
        self._registry[key] = factory

    def create(self, name: str | None, **kwargs) -> T:
        if name is None or not str(name).strip():
            raise ConfigurationError(f"No {self.kind} specified.")
        key = str(name).strip().lower()
        try:
            factory = self._registry[key]
        except KeyError as exc:
            raise self._unknown_error(str(name), list(self._registry)) from exc
        return factory(**kwargs)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self._registry

    def available(self) -> Dict[str, Factory]:
        return dict(self._registry)


def registering(registry: Registry, name: str) -> Callable[[Type], Type]:
    """Class decorator registering the class in ``registry`` under ``name``."""

    def decorator(cls: Type) -> Type:
        registry.register(name, cls)
        return cls

    return decorator


__all__ = ["Factory", "Registry", "registering"]
