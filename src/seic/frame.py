"""
Scope and Frame Model
=====================

Tracks name-to-slot bindings across nested lexical blocks.

A Frame has two parts:

- ``layers``: a tuple of frozen, read-only mappings, outermost first.
  Sibling blocks share these snapshots; nobody writes to them.
- ``top``: the open innermost mapping where new names are recorded.

Every frame of one parse also holds the same ParseState, the only mutable
object shared between frames. It owns the slot counter, so slot numbers
are never reused anywhere in the parse, even when two sibling blocks
declare the same name.

Lookup Order
------------
``get_slot`` searches ``layers`` from the innermost frozen layer outwards
first, then ``top``, and only then allocates. A name bound by an enclosing
block therefore always wins over a fresh inner binding.

Example:
    >>> root = Frame()
    >>> root.get_slot("i")
    0
    >>> inner = root.push()
    >>> inner.get_slot("i"), inner.get_slot("j")
    (0, 1)
    >>> root.get_slot("j")
    2
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass
class ParseState:
    """
    Mutable state shared by every frame of a single parse.

    Attributes:
        slot_count: Number of slots allocated so far
        functions: Declared function name -> parameter count
    """
    slot_count: int = 0
    functions: dict[str, int] = field(default_factory=dict)

    def allocate(self) -> int:
        """Hand out the next free slot."""
        slot = self.slot_count
        self.slot_count += 1
        return slot


class Frame:
    """
    A lexical frame: frozen enclosing layers plus one open layer.

    Attributes:
        layers: Frozen enclosing layers, outermost first
        top: The innermost layer, still accepting new names
        state: Shared per-parse state (slot counter, declared functions)
    """

    def __init__(
        self,
        layers: tuple[Mapping[str, int], ...] = (),
        top: Optional[dict[str, int]] = None,
        state: Optional[ParseState] = None,
    ):
        self.layers = layers
        self.top = top if top is not None else {}
        self.state = state if state is not None else ParseState()

    def __repr__(self) -> str:
        return f"Frame(depth={len(self.layers)}, top={self.top!r}, slots={self.slot_count})"

    @property
    def slot_count(self) -> int:
        """Slots allocated so far across the whole parse."""
        return self.state.slot_count

    def get_slot(self, name: str) -> int:
        """
        Return the slot bound to ``name``, allocating one if it is new.

        Args:
            name: Variable name

        Returns:
            The slot index
        """
        for layer in reversed(self.layers):
            if name in layer:
                return layer[name]
        if name not in self.top:
            self.top[name] = self.state.allocate()
        return self.top[name]

    def lookup(self, name: str) -> Optional[int]:
        """Return the slot bound to ``name`` without allocating."""
        for layer in reversed(self.layers):
            if name in layer:
                return layer[name]
        return self.top.get(name)

    def push(self) -> "Frame":
        """
        Open a nested frame.

        The current top layer is frozen as a snapshot onto the enclosing
        layers; names bound here later are not seen by the child.
        """
        frozen = MappingProxyType(dict(self.top))
        return Frame(self.layers + (frozen,), {}, self.state)

    def copy(self) -> "Frame":
        """Return a frame with its own copy of the top layer."""
        return Frame(self.layers, dict(self.top), self.state)

    # =========================================================================
    # Declared Functions
    # =========================================================================

    def declare_function(self, name: str, arity: int) -> None:
        self.state.functions[name] = arity

    def lookup_function(self, name: str) -> Optional[int]:
        """Return the declared parameter count of ``name``, if declared."""
        return self.state.functions.get(name)
