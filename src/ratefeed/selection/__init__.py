"""Selection state and its addressable-location sync."""

from ratefeed.selection.location import LocationStore, MemoryLocation, QueryStringLocation
from ratefeed.selection.state import SelectionState

__all__ = ["LocationStore", "MemoryLocation", "QueryStringLocation", "SelectionState"]
