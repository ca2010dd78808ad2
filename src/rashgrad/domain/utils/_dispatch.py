"""
Key-based function dispatch via decorators.

This module provides a small mechanism for routing a call to one of several
registered implementations based on a hashable key chosen by the caller
(for example an operation kind stored on a graph node).

Core idea
---------
- You create a *table* with `create_dispatch_table(name)`.
- You register implementations on it with the returned decorator builder:

      rules = create_dispatch_table("backward")

      @rules(OpKind.ADD)
      def add_backward(record, grad): ...

- At runtime, `rules.dispatch(key, *args, **kwargs)` looks up the
  implementation registered for `key` and calls it.

Important notes
---------------
- Each table owns its own mapping; different tables never
  share registrations.
- Registering the same key twice is an error, so a rule cannot be silently
  replaced by a later import.
- A missing key raises `NotImplementedError` (or the exception supplied as
  `trap_exception`), naming the table and the key.
"""

from typing import Callable, Dict, Hashable, Iterator, Optional, Type
from typing_extensions import ParamSpec, TypeVar

P = ParamSpec("P")
R = TypeVar("R")


class DispatchTable:
    """
    Registry of implementations keyed by a hashable value.

    Instances are callable: `table(key)` returns a decorator that registers
    the decorated function for `key` and returns it unchanged, so decorators
    can be stacked and the function stays importable under its own name.

    Parameters
    ----------
    name : str
        Human-readable table name used in error messages.
    trap_exception : Optional[Type[Exception]]
        Exception type raised for missing keys. Defaults to
        `NotImplementedError`.
    """

    def __init__(
        self, name: str, trap_exception: Optional[Type[Exception]] = None
    ) -> None:
        self._name = name
        self._trap = trap_exception or NotImplementedError
        self._impls: Dict[Hashable, Callable] = {}

    @property
    def name(self) -> str:
        return self._name

    def __call__(self, key: Hashable) -> Callable[[Callable[P, R]], Callable[P, R]]:
        """
        Build a decorator that registers an implementation for `key`.

        Parameters
        ----------
        key : Hashable
            Dispatch key selecting the decorated implementation.

        Returns
        -------
        Callable[[Callable[P, R]], Callable[P, R]]
            Decorator registering its argument and returning it unchanged.

        Raises
        ------
        TypeError
            If `key` is not hashable.
        """
        try:
            hash(key)
        except TypeError:
            raise TypeError(f"Dispatch key must be hashable. Got {key!r}")

        def decorator(impl: Callable[P, R]) -> Callable[P, R]:
            if key in self._impls:
                raise ValueError(
                    f"Key {key!r} already registered in dispatch table {self._name!r}"
                )
            self._impls[key] = impl
            return impl

        return decorator

    def lookup(self, key: Hashable) -> Callable:
        """
        Return the implementation registered for `key`.

        Raises
        ------
        NotImplementedError
            (or the configured trap exception) if nothing is registered.
        """
        impl = self._impls.get(key)
        if impl is None:
            raise self._trap(
                f"Missing implementation (key={key!r}) in dispatch table {self._name!r}"
            )
        return impl

    def dispatch(self, key: Hashable, *args, **kwargs):
        """Call the implementation registered for `key` with the given arguments."""
        return self.lookup(key)(*args, **kwargs)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._impls

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._impls)

    def __len__(self) -> int:
        return len(self._impls)


def create_dispatch_table(
    name: str, trap_exception: Optional[Type[Exception]] = None
) -> DispatchTable:
    """
    Create an empty dispatch table.

    Parameters
    ----------
    name : str
        Table name used in error messages.
    trap_exception : Optional[Type[Exception]]
        Exception type raised when a key has no implementation.

    Returns
    -------
    DispatchTable
        A new, empty table.
    """
    return DispatchTable(name, trap_exception)
