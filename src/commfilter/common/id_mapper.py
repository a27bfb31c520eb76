"""
ID mapping between external node ids and networkit internal ids.

networkit graphs address nodes by consecutive integers starting at 0, while
edge lists use arbitrary identifiers (strings, integers). ``IDMapper`` keeps a
bidirectional mapping so that results computed on a networkit graph can be
reported against the original ids.
"""

from typing import Any, Dict, Iterable, List


class IDMapper:
    """
    Bidirectional mapping between original and internal node IDs.

    Attributes
    ----------
    original_to_internal : Dict[Any, int]
        Maps original IDs to networkit internal IDs (0, 1, 2, ...)
    internal_to_original : Dict[int, Any]
        Maps networkit internal IDs to original IDs

    Examples
    --------
    >>> mapper = IDMapper()
    >>> mapper.add_mapping("user_123", 0)
    >>> mapper.get_internal("user_123")
    0
    >>> mapper.get_original(0)
    'user_123'
    """

    def __init__(self) -> None:
        self.original_to_internal: Dict[Any, int] = {}
        self.internal_to_original: Dict[int, Any] = {}

    @classmethod
    def from_ids(cls, original_ids: Iterable[Any]) -> 'IDMapper':
        """
        Build a mapper assigning consecutive internal ids in iteration order.

        Raises
        ------
        ValueError
            If ``original_ids`` contains duplicates
        """
        mapper = cls()
        for internal_id, original_id in enumerate(original_ids):
            mapper.add_mapping(original_id, internal_id)
        return mapper

    def get_internal(self, original_id: Any) -> int:
        """
        Get internal networkit ID for a given original ID.

        Raises
        ------
        KeyError
            If original_id is not found in the mapping
        """
        try:
            return self.original_to_internal[original_id]
        except KeyError:
            raise KeyError(f"Original ID '{original_id}' not found in mapping")

    def get_original(self, internal_id: int) -> Any:
        """
        Get original ID for a given internal networkit ID.

        Raises
        ------
        KeyError
            If internal_id is not found in the mapping
        TypeError
            If internal_id is not an integer
        """
        if not isinstance(internal_id, int):
            raise TypeError(f"Internal ID must be integer, got {type(internal_id)}")

        try:
            return self.internal_to_original[internal_id]
        except KeyError:
            raise KeyError(f"Internal ID {internal_id} not found in mapping")

    def get_original_batch(self, internal_ids: List[int]) -> List[Any]:
        """Get original IDs for a list of internal IDs, preserving order."""
        return [self.get_original(internal_id) for internal_id in internal_ids]

    def add_mapping(self, original_id: Any, internal_id: int) -> None:
        """
        Add a new ID mapping pair.

        Parameters
        ----------
        original_id : Any
            Original node identifier (must be hashable)
        internal_id : int
            networkit internal ID (must be non-negative integer)

        Raises
        ------
        ValueError
            If original_id or internal_id already exists in mapping, or
            internal_id is negative
        TypeError
            If internal_id is not an integer or original_id is not hashable
        """
        if not isinstance(internal_id, int):
            raise TypeError(f"Internal ID must be integer, got {type(internal_id)}")

        if internal_id < 0:
            raise ValueError(f"Internal ID must be non-negative, got {internal_id}")

        try:
            hash(original_id)
        except TypeError:
            raise TypeError(f"Original ID must be hashable, got {type(original_id)}")

        if original_id in self.original_to_internal:
            existing_internal = self.original_to_internal[original_id]
            raise ValueError(
                f"Original ID '{original_id}' already mapped to internal ID {existing_internal}"
            )

        if internal_id in self.internal_to_original:
            existing_original = self.internal_to_original[internal_id]
            raise ValueError(
                f"Internal ID {internal_id} already mapped to original ID '{existing_original}'"
            )

        self.original_to_internal[original_id] = internal_id
        self.internal_to_original[internal_id] = original_id

    def size(self) -> int:
        """Get the number of mapped node IDs."""
        return len(self.original_to_internal)

    def is_empty(self) -> bool:
        return self.size() == 0

    def __len__(self) -> int:
        return self.size()

    def __repr__(self) -> str:
        return f"IDMapper(size={self.size()})"
