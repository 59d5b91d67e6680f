"""Core contracts of the IoC container: selectors, conditions, arguments,
application components and the fluent bean builder."""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, get_origin


def as_interface(t: Any) -> Any:
    """Return ``t`` if it is an interface (an abstract class), else raise TypeError."""
    if not (isinstance(t, type) and inspect.isabstract(t)):
        raise TypeError("T must be interface")
    return t


def _is_any(t: Any) -> bool:
    return t is None or t is Any or t is object


def _type_string(t: Any) -> str:
    if get_origin(t) is not None:
        return str(t)
    qualname = getattr(t, "__qualname__", None)
    if qualname is None:
        return str(t)
    module = getattr(t, "__module__", "") or ""
    if module in ("", "builtins"):
        return qualname
    return f"{module}.{qualname}"


class BeanSelector(ABC):
    """Selects beans by type and name."""

    @abstractmethod
    def type_and_name(self) -> tuple[Any, str]:
        """Return the type and the name of the selected bean."""


@dataclass(frozen=True)
class BeanSelectorImpl(BeanSelector):
    """A selector holding a bean type and an optional name."""

    type: Any = None
    name: str = ""

    def type_and_name(self) -> tuple[Any, str]:
        return self.type, self.name

    def __str__(self) -> str:
        parts: list[str] = []
        if not _is_any(self.type):
            parts.append("Type:" + _type_string(self.type))
        if self.name:
            parts.append("Name:" + self.name)
        return "{" + ",".join(parts) + "}"


def bean_selector_for(t: Any, name: str = "") -> BeanSelector:
    """Return a selector for beans of type ``t``, optionally with ``name``."""
    return BeanSelectorImpl(type=t, name=name)


class Condition(ABC):
    """A condition deciding whether a bean is registered."""

    @abstractmethod
    def matches(self, ctx: CondContext) -> bool:
        """Tell whether the condition holds in ``ctx``."""


class CondBean(ABC):
    """A bean seen by conditions."""

    @abstractmethod
    def name(self) -> str:
        """Return the bean's name."""

    @abstractmethod
    def type(self) -> Any:
        """Return the bean's type."""


class CondContext(ABC):
    """What the container offers to conditions."""

    @abstractmethod
    def has(self, key: str) -> bool:
        """Tell whether a property exists."""

    @abstractmethod
    def prop(self, key: str, default: str = "") -> str:
        """Return a property's value, or ``default``."""

    @abstractmethod
    def find(self, s: BeanSelector) -> list[CondBean]:
        """Return the beans matching the selector."""


class Arg(ABC):
    """A source of a constructor argument."""

    @abstractmethod
    def get_arg_value(self, ctx: ArgContext, t: Any) -> Any:
        """Return the argument value for type ``t``."""


class ArgContext(ABC):
    """What the container offers to arguments."""

    @abstractmethod
    def check(self, c: Condition) -> bool:
        """Tell whether the condition holds."""

    @abstractmethod
    def bind(self, t: Any, tag: str) -> Any:
        """Bind properties to a value of type ``t``."""

    @abstractmethod
    def wire(self, t: Any, tag: str) -> Any:
        """Return the bean wired for type ``t``."""


class Runner(ABC):
    """Runs once after injection and before servers start."""

    @abstractmethod
    def run(self) -> None:
        """Run; raise to abort start-up."""


class Job(ABC):
    """A background task started after injection."""

    @abstractmethod
    def run(self, ctx: Any) -> None:
        """Run until done or until ``ctx`` signals exit."""


class ReadySignal(ABC):
    """Lets servers report readiness and wait for the go-ahead."""

    @abstractmethod
    def trigger_and_wait(self) -> Any:
        """Report readiness and return an event set once serving may begin."""


class Server(ABC):
    """A long-running server with graceful shutdown."""

    @abstractmethod
    def listen_and_serve(self, sig: ReadySignal) -> None:
        """Listen, signal readiness and serve."""

    @abstractmethod
    def shutdown(self, ctx: Any) -> None:
        """Shut down gracefully."""


@dataclass
class BeanMock:
    """A mock object replacing the bean chosen by ``target``."""

    object: Any
    target: BeanSelector


@dataclass(frozen=True)
class BeanID:
    """Unique identity of a bean."""

    type: Any
    name: str


@dataclass
class Configuration:
    """Which methods of a configuration bean to include or exclude."""

    includes: list[str] = field(default_factory=list)
    excludes: list[str] = field(default_factory=list)


class BeanRegistration(ABC):
    """Metadata of a bean being configured."""

    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def type(self) -> Any: ...

    @abstractmethod
    def value(self) -> Any: ...

    @abstractmethod
    def set_name(self, name: str) -> None: ...

    @abstractmethod
    def set_init(self, fn: Any) -> None: ...

    @abstractmethod
    def set_destroy(self, fn: Any) -> None: ...

    @abstractmethod
    def set_init_method(self, method: str) -> None: ...

    @abstractmethod
    def set_destroy_method(self, method: str) -> None: ...

    @abstractmethod
    def set_condition(self, *conditions: Condition) -> None: ...

    @abstractmethod
    def set_depends_on(self, *selectors: BeanSelector) -> None: ...

    @abstractmethod
    def set_export(self, *exports: Any) -> None: ...

    @abstractmethod
    def set_configuration(self, *c: Configuration) -> None: ...

    @abstractmethod
    def set_caller(self, skip: int) -> None: ...

    @abstractmethod
    def on_profiles(self, profiles: str) -> None: ...


class BeanBuilder(BeanSelector, Arg):
    """Fluent configuration of a bean; every setter returns the builder."""

    def __init__(self, registration: BeanRegistration) -> None:
        self._registration = registration

    def type_and_name(self) -> tuple[Any, str]:
        return self._registration.type(), self._registration.name()

    def get_arg_value(self, ctx: Any, t: Any) -> Any:
        return self._registration.value()

    def bean_registration(self) -> BeanRegistration:
        """Return the underlying registration."""
        return self._registration

    def name(self, name: str):
        """Set the bean's name."""
        self._registration.set_name(name)
        return self

    def init(self, fn: Any):
        """Set the initialization function."""
        self._registration.set_init(fn)
        return self

    def destroy(self, fn: Any):
        """Set the destruction function."""
        self._registration.set_destroy(fn)
        return self

    def init_method(self, method: str):
        """Set the initialization method by name."""
        self._registration.set_init_method(method)
        return self

    def destroy_method(self, method: str):
        """Set the destruction method by name."""
        self._registration.set_destroy_method(method)
        return self

    def condition(self, *args: Condition):
        """Set the registration conditions."""
        self._registration.set_condition(*args)
        return self

    def depends_on(self, *args: BeanSelector):
        """Set the beans this bean depends on."""
        self._registration.set_depends_on(*args)
        return self

    def as_runner(self):
        """Export the bean as a Runner."""
        self._registration.set_export(as_interface(Runner))
        return self

    def as_job(self):
        """Export the bean as a Job."""
        self._registration.set_export(as_interface(Job))
        return self

    def as_server(self):
        """Export the bean as a Server."""
        self._registration.set_export(as_interface(Server))
        return self

    def export(self, *args: Any):
        """Set the interfaces the bean exports."""
        self._registration.set_export(*args)
        return self

    def configuration(self, *args: Configuration):
        """Mark the bean as a configuration bean."""
        self._registration.set_configuration(*args)
        return self

    def caller(self, skip: int):
        """Record the caller location."""
        self._registration.set_caller(skip)
        return self

    def on_profiles(self, profiles: str):
        """Set the profiles in which the bean is active."""
        self._registration.on_profiles(profiles)
        return self


class RegisteredBean(BeanBuilder):
    """A bean already registered in the container."""


class BeanDefinition(BeanBuilder):
    """A bean not yet registered."""


__all__: list[str] = [
    "Arg",
    "ArgContext",
    "BeanBuilder",
    "BeanDefinition",
    "BeanID",
    "BeanMock",
    "BeanRegistration",
    "BeanSelector",
    "BeanSelectorImpl",
    "CondBean",
    "CondContext",
    "Condition",
    "Configuration",
    "Job",
    "ReadySignal",
    "RegisteredBean",
    "Runner",
    "Server",
    "as_interface",
    "bean_selector_for",
]

_ = Mapping  # kept for type-checking users of the module