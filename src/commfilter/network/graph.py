"""
Immutable graph value used throughout the commfilter pipeline.

A ``Graph`` holds an ordered set of unique node ids, an ordered sequence of
edges (parallel edges allowed) and an optional per-node attribute table. It is
never modified after construction: filtering and other transformations build
new values. Algorithms that need networkit get a converted copy through
``Graph.to_networkit()`` together with the ``IDMapper`` that translates
internal ids back to the original ones.
"""

from typing import Any, Dict, Iterable, Iterator, List, Mapping, NamedTuple, Optional, Tuple, Union

import networkit as nk

from ..common.id_mapper import IDMapper
from ..common.exceptions import GraphConstructionError

NodeId = Union[str, int]

_MISSING = object()


class Edge(NamedTuple):
    """Directed (or undirected) edge between two node ids."""

    source: NodeId
    target: NodeId
    weight: float = 1.0


EdgeLike = Union[Edge, Tuple[NodeId, NodeId], Tuple[NodeId, NodeId, float]]


class Graph:
    """
    Directed, weighted multigraph value with per-node attributes.

    Parameters
    ----------
    nodes : Iterable[NodeId]
        Node ids in the order they should be reported. Must be unique.
    edges : Iterable[EdgeLike], optional
        ``Edge`` values or ``(source, target)`` / ``(source, target, weight)``
        tuples. Every endpoint must be one of ``nodes``.
    directed : bool, default True
        Whether edge direction is meaningful
    attributes : Mapping[NodeId, Mapping[str, Any]], optional
        Named scalar fields per node. Keys must be graph nodes; nodes without
        an entry have no attributes.
    weighted : bool, default False
        Whether edge weights carry information (unweighted graphs report
        weight 1.0 for every edge)

    Raises
    ------
    GraphConstructionError
        If node ids repeat, an edge references an unknown node, or attributes
        are given for an unknown node

    Examples
    --------
    >>> g = Graph(["A", "B", "C"], [("A", "B"), ("B", "C", 2.0)], weighted=True)
    >>> g.number_of_nodes(), g.number_of_edges()
    (3, 2)
    >>> g.edges()[1]
    Edge(source='B', target='C', weight=2.0)
    """

    __slots__ = ("_nodes", "_node_set", "_edges", "_directed", "_weighted", "_attributes")

    def __init__(
        self,
        nodes: Iterable[NodeId] = (),
        edges: Iterable[EdgeLike] = (),
        directed: bool = True,
        attributes: Optional[Mapping[NodeId, Mapping[str, Any]]] = None,
        weighted: bool = False
    ) -> None:
        node_tuple = tuple(nodes)
        node_set = frozenset(node_tuple)
        if len(node_set) != len(node_tuple):
            seen = set()
            repeated = [n for n in node_tuple if n in seen or seen.add(n)]
            raise GraphConstructionError(
                f"Node ids must be unique, found {len(repeated)} repeats",
                node_count=len(node_tuple),
                operation="create_nodes",
                details={"repeated_nodes": repeated[:10]}
            )

        edge_list = []
        for item in edges:
            edge = item if isinstance(item, Edge) else Edge(*item)
            if edge.source not in node_set or edge.target not in node_set:
                raise GraphConstructionError(
                    f"Edge ({edge.source!r}, {edge.target!r}) references a node not in the graph",
                    node_count=len(node_tuple),
                    edge_count=len(edge_list),
                    operation="add_edges"
                )
            edge_list.append(Edge(edge.source, edge.target, float(edge.weight)))

        attribute_table: Dict[NodeId, Dict[str, Any]] = {}
        for node, fields in (attributes or {}).items():
            if node not in node_set:
                raise GraphConstructionError(
                    f"Attributes given for unknown node {node!r}",
                    node_count=len(node_tuple),
                    operation="attach_attributes"
                )
            if fields:
                attribute_table[node] = dict(fields)

        self._nodes: Tuple[NodeId, ...] = node_tuple
        self._node_set = node_set
        self._edges: Tuple[Edge, ...] = tuple(edge_list)
        self._directed = bool(directed)
        self._weighted = bool(weighted)
        self._attributes = attribute_table

    # Accessors

    def nodes(self) -> Tuple[NodeId, ...]:
        return self._nodes

    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    @property
    def directed(self) -> bool:
        return self._directed

    @property
    def weighted(self) -> bool:
        return self._weighted

    def attribute(self, node: NodeId, field: str, default: Any = _MISSING) -> Any:
        """
        Get a single attribute value for a node.

        Parameters
        ----------
        node : NodeId
            Node to look up
        field : str
            Attribute name
        default : Any, optional
            Returned when the node has no such attribute. Without a default a
            missing attribute raises ``KeyError``.

        Raises
        ------
        KeyError
            If the node is not in the graph, or the attribute is missing and
            no default was given
        """
        if node not in self._node_set:
            raise KeyError(f"Node {node!r} not in graph")
        fields = self._attributes.get(node, {})
        if field in fields:
            return fields[field]
        if default is _MISSING:
            raise KeyError(f"Node {node!r} has no attribute {field!r}")
        return default

    def attributes(self, node: NodeId) -> Dict[str, Any]:
        """Copy of all attributes of ``node``."""
        if node not in self._node_set:
            raise KeyError(f"Node {node!r} not in graph")
        return dict(self._attributes.get(node, {}))

    def attribute_table(self) -> Dict[NodeId, Dict[str, Any]]:
        return {node: dict(fields) for node, fields in self._attributes.items()}

    def attribute_names(self) -> List[str]:
        """Attribute names in first-seen order across nodes."""
        names: Dict[str, None] = {}
        for node in self._nodes:
            for name in self._attributes.get(node, {}):
                names.setdefault(name, None)
        return list(names)

    def has_node(self, node: NodeId) -> bool:
        return node in self._node_set

    def number_of_nodes(self) -> int:
        return len(self._nodes)

    def number_of_edges(self) -> int:
        return len(self._edges)

    def is_empty(self) -> bool:
        return not self._nodes

    def degree(self, node: NodeId, mode: str = "all") -> int:
        """Count incident edges (parallel edges counted separately)."""
        if node not in self._node_set:
            raise KeyError(f"Node {node!r} not in graph")
        count = 0
        for edge in self._edges:
            if mode in ("out", "all") and edge.source == node:
                count += 1
            if mode in ("in", "all") and edge.target == node:
                count += 1
        return count

    # Conversion

    def to_networkit(
        self,
        directed: Optional[bool] = None,
        collapse_multi_edges: bool = False
    ) -> Tuple[nk.Graph, IDMapper]:
        """
        Convert to a networkit graph.

        Internal ids follow ``nodes()`` order, so the returned mapper maps
        internal id ``i`` to ``nodes()[i]``.

        Parameters
        ----------
        directed : bool, optional
            Override the direction of the converted graph. ``False`` gives the
            undirected view used by community detection.
        collapse_multi_edges : bool, default False
            Merge parallel edges into one edge whose weight is the sum of
            their weights. For an undirected view, ``(u, v)`` and ``(v, u)``
            are merged as well.

        Returns
        -------
        graph : nk.Graph
            networkit graph with one node per graph node
        id_mapper : IDMapper
            Mapping from original ids to internal ids
        """
        is_directed = self._directed if directed is None else bool(directed)
        id_mapper = IDMapper.from_ids(self._nodes)
        weighted = self._weighted or collapse_multi_edges

        nk_graph = nk.Graph(len(self._nodes), weighted=weighted, directed=is_directed)

        for u, v, weight in self._iter_internal_edges(id_mapper, is_directed, collapse_multi_edges):
            if weighted:
                nk_graph.addEdge(u, v, weight)
            else:
                nk_graph.addEdge(u, v)

        return nk_graph, id_mapper

    def _iter_internal_edges(
        self,
        id_mapper: IDMapper,
        directed: bool,
        collapse: bool
    ) -> Iterator[Tuple[int, int, float]]:
        if not collapse:
            for edge in self._edges:
                yield id_mapper.get_internal(edge.source), id_mapper.get_internal(edge.target), edge.weight
            return

        merged: Dict[Tuple[int, int], float] = {}
        for edge in self._edges:
            u = id_mapper.get_internal(edge.source)
            v = id_mapper.get_internal(edge.target)
            key = (u, v) if directed else (min(u, v), max(u, v))
            merged[key] = merged.get(key, 0.0) + edge.weight
        for (u, v), weight in merged.items():
            yield u, v, weight

    # Value semantics

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Graph):
            return NotImplemented
        return (
            self._nodes == other._nodes
            and self._edges == other._edges
            and self._directed == other._directed
            and self._weighted == other._weighted
            and self._attributes == other._attributes
        )

    __hash__ = None

    def __contains__(self, node: object) -> bool:
        return node in self._node_set

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return (
            f"Graph(nodes={len(self._nodes)}, edges={len(self._edges)}, "
            f"directed={self._directed}, weighted={self._weighted})"
        )
