#answerlens/domain/common/di_container.py

"""
Small dependency injection container.

Services are registered against their interface type either as a ready
instance or as a factory that is invoked on every resolve.
"""
from typing import Type, TypeVar, Callable


T = TypeVar('T')
TBase = TypeVar('TBase')


class DIContainer:
    """Maps interface types to instances or factories."""

    def __init__(self):
        self._instance_registrations = {}
        self._factory_registrations = {}
        self._resolving = set()  # types currently being built, for cycle detection

    def register_instance(self, base_type: Type[TBase], instance: TBase) -> None:
        """Return this instance whenever base_type is requested."""
        self._instance_registrations[base_type] = instance

    def register_factory(self, base_type: Type[TBase], factory: Callable[[], TBase]) -> None:
        """Call factory to build a new instance whenever base_type is requested."""
        self._factory_registrations[base_type] = factory

    def register_singleton(self, base_type: Type[TBase], factory: Callable[[], TBase]) -> None:
        """Build the instance lazily on first resolve and reuse it afterwards."""
        def build_once():
            instance = factory()
            self._instance_registrations[base_type] = instance
            del self._factory_registrations[base_type]
            return instance

        self._factory_registrations[base_type] = build_once

    def is_registered(self, base_type: type) -> bool:
        return base_type in self._instance_registrations or base_type in self._factory_registrations

    def resolve(self, base_type: Type[T]) -> T:
        """
        Resolve a type to its registered instance or create a new instance.

        Raises:
            ValueError: If the type is not registered or there's a circular dependency
        """
        if base_type in self._resolving:
            raise ValueError(f"Circular dependency detected while resolving {base_type.__name__}")

        if base_type in self._instance_registrations:
            return self._instance_registrations[base_type]

        if base_type in self._factory_registrations:
            self._resolving.add(base_type)
            try:
                return self._factory_registrations[base_type]()
            finally:
                self._resolving.remove(base_type)

        raise ValueError(f"No registration found for {base_type.__name__}")
