"""Lexical scope chain, shared by the checker (symbol info) and the runtime (values)."""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class Scope(Generic[T]):
    """One lexical scope: its own bindings plus a link to the enclosing scope.

    Names are unique among the entries defined directly in one scope; an inner
    scope may shadow an outer binding freely.
    """

    def __init__(self, parent: Scope[T] | None = None):
        self.values: dict[str, T] = {}
        self.parent: Scope[T] | None = parent

    def __repr__(self) -> str:
        return "Scope(" + ", ".join(self.values) + ")"

    def child(self) -> Scope[T]:
        return Scope(self)

    def is_global(self) -> bool:
        return self.parent is None

    def has_own(self, name: str) -> bool:
        return name in self.values

    def define(self, name: str, value: T) -> None:
        """Bind name in this scope, replacing any entry already here."""
        self.values[name] = value

    def owner(self, name: str) -> Scope[T] | None:
        """Return the innermost scope on the chain that binds name."""
        scope: Scope[T] | None = self
        while scope is not None:
            if name in scope.values:
                return scope
            scope = scope.parent
        return None

    def lookup(self, name: str) -> T | None:
        scope = self.owner(name)
        if scope is None:
            return None
        return scope.values[name]

    def assign(self, name: str, value: T) -> bool:
        """Rebind name where it is declared. Returns False if it is unbound."""
        scope = self.owner(name)
        if scope is None:
            return False
        scope.values[name] = value
        return True
