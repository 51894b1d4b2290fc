"""Component lifecycle and event bus.

Every component in mdtabs *holds* a :class:`Component` rather than
inheriting from one.  The component provides:

- an async ``init`` / ``update`` and a sync ``destroy`` lifecycle that calls
  optional extension points on its owner (``on_init``, ``on_update``,
  ``on_destroy``)
- named-event publish/subscribe with isolated listeners
- hierarchical forwarding: a child added with :meth:`Component.add_child`
  re-publishes each of its events on the parent as ``"<child>:<event>"``
- prioritized lifecycle hooks and simple performance counters

Owners usually mix in :class:`ComponentHost` so that ``on``/``off``/``emit``
and the lifecycle methods are available directly on them.
"""

from __future__ import annotations

import inspect
import time
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from ..log import logger

Listener = Callable[[Any], None]
Sink = Callable[[str, Any], None]


class Lifecycle(Protocol):
    """Extension points a component owner may implement (all optional)."""

    async def on_init(self) -> None: ...

    async def on_update(self, data: Any) -> None: ...

    def on_destroy(self) -> None: ...


@dataclass
class _Hook:
    callback: Callable[..., Any]
    priority: int


class Component:
    """Concrete lifecycle + event-bus object held by a component owner."""

    def __init__(self, name: str, owner: object | None = None) -> None:
        self.name = name
        self.owner = owner
        self.is_initialized = False
        self._listeners: dict[str, list[Listener]] = {}
        self._children: dict[str, Component] = {}
        self._sinks: list[Sink] = []
        self._hooks: dict[str, list[_Hook]] = {}
        # Performance counters (seconds)
        self.init_time = 0.0
        self.last_update_time = 0.0
        self.update_count = 0

    # -- lifecycle ------------------------------------------------------------

    async def init(self) -> None:
        """Initialize the component, running the owner's ``on_init``.

        A failure in ``on_init`` leaves the component uninitialized and is
        re-raised to the caller.
        """
        started = time.perf_counter()
        await self.run_hook("before_init")
        try:
            await self._call_owner("on_init")
        except Exception:
            logger.exception("[%s] initialization failed", self.name)
            raise
        self.is_initialized = True
        self.init_time = time.perf_counter() - started
        await self.run_hook("after_init")
        self.emit("initialized", {"component": self.name})

    async def update(self, data: Any = None) -> None:
        if not self.is_initialized:
            logger.warning("[%s] cannot update - component not initialized", self.name)
            return
        started = time.perf_counter()
        await self._call_owner("on_update", data)
        self.last_update_time = time.perf_counter() - started
        self.update_count += 1
        self.emit("updated", {"component": self.name, "data": data})

    def destroy(self) -> None:
        """Tear down the component.  Never raises."""
        try:
            on_destroy = getattr(self.owner, "on_destroy", None)
            if on_destroy is not None:
                on_destroy()
        except Exception:
            logger.exception("[%s] destroy failed", self.name)
        for child in list(self._children.values()):
            child.destroy()
        self._children.clear()
        self._listeners.clear()
        self._hooks.clear()
        self._sinks.clear()
        self.is_initialized = False

    async def _call_owner(self, method: str, *args: Any) -> None:
        func = getattr(self.owner, method, None)
        if func is None:
            return
        result = func(*args)
        if inspect.isawaitable(result):
            await result

    # -- events ---------------------------------------------------------------

    def on(self, event: str, listener: Listener) -> None:
        self._listeners.setdefault(event, []).append(listener)

    def off(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def emit(self, event: str, payload: Any = None) -> None:
        """Call every listener for *event* in registration order.

        A failing listener is logged and does not stop the others.  The event
        is then forwarded upstream as ``"<name>:<event>"``.
        """
        if payload is None:
            payload = {}
        for listener in list(self._listeners.get(event, ())):
            try:
                listener(payload)
            except Exception:
                logger.exception("[%s] listener for %r failed", self.name, event)
        for sink in list(self._sinks):
            sink(f"{self.name}:{event}", payload)

    def listener_count(self, event: str | None = None) -> int:
        if event is not None:
            return len(self._listeners.get(event, ()))
        return sum(len(v) for v in self._listeners.values())

    # -- composition ----------------------------------------------------------

    def add_child(self, child: Component | ComponentHost) -> None:
        """Own *child* and forward its events here under ``"<child>:<event>"``."""
        if isinstance(child, ComponentHost):
            child = child.component
        self._children[child.name] = child
        child._sinks.append(self.emit)

    def remove_child(self, name: str) -> Component | None:
        child = self._children.pop(name, None)
        if child is not None and self.emit in child._sinks:
            child._sinks.remove(self.emit)
        return child

    def get_child(self, name: str) -> Component | None:
        return self._children.get(name)

    # -- hooks ----------------------------------------------------------------

    def add_hook(
        self, name: str, callback: Callable[..., Any], priority: int = 10
    ) -> None:
        """Register a hook; lower *priority* runs first, ties keep insertion order."""
        hooks = self._hooks.setdefault(name, [])
        entry = _Hook(callback, priority)
        for i, existing in enumerate(hooks):
            if priority < existing.priority:
                hooks.insert(i, entry)
                return
        hooks.append(entry)

    def remove_hook(self, name: str, callback: Callable[..., Any]) -> None:
        hooks = self._hooks.get(name, [])
        self._hooks[name] = [h for h in hooks if h.callback is not callback]

    async def run_hook(self, name: str, data: Any = None) -> None:
        for hook in list(self._hooks.get(name, ())):
            try:
                result = hook.callback(data if data is not None else {}, self)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("[%s] hook %r failed", self.name, name)

    # -- introspection --------------------------------------------------------

    def metrics(self) -> dict[str, float]:
        average = (
            self.last_update_time / self.update_count if self.update_count else 0.0
        )
        return {
            "init_time": self.init_time,
            "last_update_time": self.last_update_time,
            "update_count": self.update_count,
            "average_update_time": average,
        }

    def state(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "is_initialized": self.is_initialized,
            "child_count": len(self._children),
            "listener_count": self.listener_count(),
            "hooks": {name: len(h) for name, h in self._hooks.items()},
            "metrics": self.metrics(),
        }


class ComponentHost:
    """Mixin exposing a held :class:`Component`'s contract on its owner.

    Subclasses must set ``self.component`` in ``__init__``.
    """

    component: Component

    @property
    def name(self) -> str:
        return self.component.name

    @property
    def is_initialized(self) -> bool:
        return self.component.is_initialized

    async def init(self) -> None:
        await self.component.init()

    async def update(self, data: Any = None) -> None:
        await self.component.update(data)

    def destroy(self) -> None:
        self.component.destroy()

    def on(self, event: str, listener: Listener) -> None:
        self.component.on(event, listener)

    def off(self, event: str, listener: Listener) -> None:
        self.component.off(event, listener)

    def emit(self, event: str, payload: Any = None) -> None:
        self.component.emit(event, payload)
