"""Scenario-wide contexts shared between steps and discarded at scenario end."""

from __future__ import annotations

import weakref
from collections.abc import Callable
from typing import Any, ClassVar, Generic, TypeVar

T = TypeVar("T")


class ContextManager:
    """Owns every context created during a scenario; all instances share them."""

    _contexts: ClassVar[list[Any]] = []

    def add_context(self, factory: Callable[[], T]) -> weakref.ReferenceType[T]:
        """Create a context, keep it alive, and hand back a weak reference to it."""
        context = factory()
        ContextManager._contexts.append(context)
        return weakref.ref(context)

    def purge_contexts(self) -> None:
        """Drop every context held."""
        ContextManager._contexts.clear()

    def __len__(self) -> int:
        return len(ContextManager._contexts)


class ScenarioScope(Generic[T]):
    """Access to the single context of a type that lives for the current scenario."""

    _references: ClassVar[dict[type, weakref.ReferenceType[Any]]] = {}

    def __init__(self, context_type: type[T]) -> None:
        manager = ContextManager()
        reference = ScenarioScope._references.get(context_type)
        context = reference() if reference is not None else None
        if context is None:
            reference = manager.add_context(context_type)
            ScenarioScope._references[context_type] = reference
            context = reference()
        self._context: T = context

    def get(self) -> T:
        return self._context

    def __getattr__(self, name: str) -> Any:
        if name == "_context":
            raise AttributeError(name)
        return getattr(self._context, name)