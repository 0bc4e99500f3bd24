"""Runtime values for the Dom interpreter.

Dom has six kinds of value. Three map directly onto Python objects and
three are small classes defined here:

* `Bool` -> `bool`
* `Int`  -> `int`
* `Str`  -> `str`
* `List` -> `ListValue`
* `Function` -> `FunctionValue`
* `Unit` -> the `UNIT` singleton

Because `bool` is a subclass of `int` in Python, every dispatch on kind
goes through `kind_of`, which checks `bool` first. No operation coerces
one kind into another.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence, Tuple

from .ast import Block


class UnitValue:
    """Marker object for the Dom `Unit` value."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'Unit'


UNIT = UnitValue()


class ListValue:
    """An immutable Dom list.

    The items live in a tuple, so copies of a list share one backing
    store and nothing can change it in place. The list builtins build a
    new tuple for every change, which gives lists value semantics: a
    binding never observes an edit made through another binding.
    """
    __slots__ = ('items',)

    def __init__(self, items: Iterable[Any] = ()):
        self.items: Tuple[Any, ...] = tuple(items)

    def __len__(self) -> int:
        return len(self.items)

    def get(self, index: int) -> Any:
        return self.items[index]

    def replace(self, index: int, value: Any) -> 'ListValue':
        return ListValue(self.items[:index] + (value,) + self.items[index + 1:])

    def append(self, value: Any) -> 'ListValue':
        return ListValue(self.items + (value,))

    def remove(self, index: int) -> 'ListValue':
        return ListValue(self.items[:index] + self.items[index + 1:])

    def __repr__(self) -> str:
        return f"List({list(self.items)!r})"


class FunctionValue:
    """Represents a user-defined Dom function closed over its defining scope."""
    def __init__(self, name: str, params: Sequence[str], body: Block, env):
        self.name = name
        self.params = tuple(params)
        self.body = body
        self.env = env  # captured definition environment

    def __repr__(self) -> str:
        return f"<function {self.name}>"


def kind_of(value: Any) -> str:
    """Return the Dom kind name of a runtime value."""
    if isinstance(value, bool):
        return 'Bool'
    if isinstance(value, int):
        return 'Int'
    if isinstance(value, str):
        return 'Str'
    if isinstance(value, ListValue):
        return 'List'
    if isinstance(value, FunctionValue):
        return 'Function'
    if isinstance(value, UnitValue):
        return 'Unit'
    raise TypeError(f"not a Dom value: {value!r}")


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def values_equal(a: Any, b: Any) -> bool:
    """Equality as seen by `==`: values of different kinds are never equal."""
    kind = kind_of(a)
    if kind != kind_of(b):
        return False
    if kind == 'List':
        if len(a) != len(b):
            return False
        return all(values_equal(x, y) for x, y in zip(a.items, b.items))
    if kind == 'Function':
        return a is b
    if kind == 'Unit':
        return True
    return a == b


def to_display(value: Any) -> str:
    """Convert a Dom value to the canonical text used by print."""
    kind = kind_of(value)
    if kind == 'Bool':
        return 'true' if value else 'false'
    if kind == 'Int':
        return str(value)
    if kind == 'Str':
        return value
    if kind == 'List':
        return '[' + ', '.join(to_display(item) for item in value.items) + ']'
    if kind == 'Function':
        return f"{value.name}({', '.join(value.params)})"
    return ''
