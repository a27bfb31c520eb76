"""
Graph export module for the commfilter library.

Writes a ``Graph`` (typically the filtered one) to standard network formats,
optionally annotated with each node's community id and colour so the result
can be styled in Gephi, Cytoscape or a spreadsheet.
"""

from pathlib import Path
from typing import Dict, Hashable, Mapping, Optional, Tuple, Union
import xml.etree.ElementTree as ET
from xml.dom import minidom

import polars as pl
from matplotlib.colors import to_hex

from ..common.exceptions import ComputationError, ValidationError, validate_parameter
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer
from .graph import Graph, NodeId

logger = get_logger(__name__)

SUPPORTED_FORMATS = ["edgelist", "graphml", "gexf", "parquet"]

ColorMap = Mapping[Hashable, Tuple[float, float, float, float]]


def export_graph(
    graph: Graph,
    output_path: Union[str, Path],
    format: str = "edgelist",
    assignment: Optional[Mapping[NodeId, Hashable]] = None,
    color_map: Optional[ColorMap] = None,
    overwrite: bool = False
) -> Path:
    """
    Export a graph with node attributes, communities and colours.

    Parameters
    ----------
    graph : Graph
        Graph to export
    output_path : Union[str, Path]
        Output file. For "edgelist" the node table is written next to it as
        ``<stem>_nodes.csv``; for "parquet" two files ``<stem>_edges.parquet``
        and ``<stem>_nodes.parquet`` are written.
    format : str, default "edgelist"
        One of "edgelist", "graphml", "gexf", "parquet"
    assignment : Mapping[NodeId, Hashable], optional
        Community per node, written as a ``community`` node column
    color_map : Mapping[Hashable, RGBA], optional
        Colour per community (requires ``assignment``), written as a
        ``color`` node column in ``#rrggbbaa`` form. Nodes whose community has
        no colour get an empty value.
    overwrite : bool, default False
        If False, refuse to replace an existing file

    Returns
    -------
    Path
        The main output path

    Raises
    ------
    ConfigurationError
        If the format is unknown
    ValidationError
        If the file exists and overwrite is False, or a colour map is given
        without an assignment, a node attribute shares a name with a
        generated column, or two node ids have the same string form
    ComputationError
        If writing fails

    Examples
    --------
    >>> export_graph(filtered, "media.graphml", format="graphml",
    ...              assignment=membership, color_map=colors)
    """
    log_function_entry("export_graph", output_path=str(output_path), format=format)

    validate_parameter(format, SUPPORTED_FORMATS, "format", "export_graph")
    if color_map is not None and assignment is None:
        raise ValidationError("color_map requires an assignment", field="color_map")

    path = Path(output_path)
    targets = _output_files(path, format)
    if not overwrite:
        existing = [str(p) for p in targets if p.exists()]
        if existing:
            raise ValidationError(
                "Output file already exists. Use overwrite=True to replace",
                field="output_path",
                details={"existing": existing}
            )
    _check_node_columns(graph, assignment, color_map)
    path.parent.mkdir(parents=True, exist_ok=True)

    node_data = _prepare_node_data(graph, assignment, color_map)
    edge_data = _prepare_edge_data(graph)

    with LoggingTimer("export_graph", {"format": format, "nodes": graph.number_of_nodes()}):
        try:
            if format == "edgelist":
                edge_data.write_csv(targets[0])
                node_data.write_csv(targets[1])
            elif format == "parquet":
                edge_data.write_parquet(targets[0])
                node_data.write_parquet(targets[1])
            elif format == "graphml":
                _write_xml(_graphml_tree(graph, node_data, edge_data), path)
            else:
                _write_xml(_gexf_tree(graph, node_data, edge_data), path)
        except OSError as e:
            raise ComputationError(
                f"Graph export failed: {str(e)}",
                operation="export_graph",
                error_type="io",
                cause=e
            ) from e

    logger.info("Exported graph (%d nodes, %d edges) as %s to %s",
                graph.number_of_nodes(), graph.number_of_edges(), format, path)
    return path


def _output_files(path: Path, format: str):
    if format == "edgelist":
        return [path, path.with_name(f"{path.stem}_nodes.csv")]
    if format == "parquet":
        base = path.with_suffix("")
        return [Path(f"{base}_edges.parquet"), Path(f"{base}_nodes.parquet")]
    return [path]


def _check_node_columns(
    graph: Graph,
    assignment: Optional[Mapping[NodeId, Hashable]],
    color_map: Optional[ColorMap]
) -> None:
    generated = {"node_id"}
    if assignment is not None:
        generated.add("community")
    if color_map is not None:
        generated.add("color")

    clashes = sorted(generated.intersection(graph.attribute_names()))
    if clashes:
        raise ValidationError(
            f"Node attributes clash with generated columns: {clashes}",
            field="attributes",
            details={"clashes": clashes}
        )

    # Ids are written as strings, so 1 and "1" would become one node
    if len({str(node) for node in graph.nodes()}) != graph.number_of_nodes():
        raise ValidationError(
            "Node ids are not unique once converted to strings",
            field="node_id"
        )


def _prepare_node_data(
    graph: Graph,
    assignment: Optional[Mapping[NodeId, Hashable]],
    color_map: Optional[ColorMap]
) -> pl.DataFrame:
    """Node table: id, graph attributes, then community and colour columns."""
    columns: Dict[str, list] = {"node_id": [str(node) for node in graph.nodes()]}

    for name in graph.attribute_names():
        columns[name] = [graph.attribute(node, name, None) for node in graph.nodes()]

    if assignment is not None:
        columns["community"] = [
            str(assignment[node]) if node in assignment else None for node in graph.nodes()
        ]

    if color_map is not None:
        columns["color"] = [
            _hex(color_map.get(assignment.get(node))) for node in graph.nodes()
        ]

    return pl.DataFrame(columns)


def _prepare_edge_data(graph: Graph) -> pl.DataFrame:
    edges = graph.edges()
    return pl.DataFrame(
        {
            "source": [str(edge.source) for edge in edges],
            "target": [str(edge.target) for edge in edges],
            "weight": [edge.weight for edge in edges],
        },
        schema={"source": pl.Utf8, "target": pl.Utf8, "weight": pl.Float64}
    )


def _hex(color: Optional[Tuple[float, ...]]) -> Optional[str]:
    if color is None:
        return None
    return to_hex(color, keep_alpha=True)


def _graphml_tree(graph: Graph, node_data: pl.DataFrame, edge_data: pl.DataFrame) -> ET.Element:
    graphml = ET.Element("graphml", xmlns="http://graphml.graphdrawing.org/xmlns")

    key_map = {}
    for key_id, col in enumerate(c for c in node_data.columns if c != "node_id"):
        ET.SubElement(graphml, "key", id=f"n{key_id}",
                      **{"for": "node", "attr.name": col, "attr.type": "string"})
        key_map[col] = f"n{key_id}"

    if graph.weighted:
        ET.SubElement(graphml, "key", id="weight",
                      **{"for": "edge", "attr.name": "weight", "attr.type": "double"})

    graph_elem = ET.SubElement(graphml, "graph", id="G",
                               edgedefault="directed" if graph.directed else "undirected")

    for row in node_data.iter_rows(named=True):
        node_elem = ET.SubElement(graph_elem, "node", id=row["node_id"])
        for col, key in key_map.items():
            value = row.get(col)
            if value is not None:
                ET.SubElement(node_elem, "data", key=key).text = str(value)

    for i, row in enumerate(edge_data.iter_rows(named=True)):
        edge_elem = ET.SubElement(graph_elem, "edge", id=f"e{i}",
                                  source=row["source"], target=row["target"])
        if graph.weighted:
            ET.SubElement(edge_elem, "data", key="weight").text = str(row["weight"])

    return graphml


def _gexf_tree(graph: Graph, node_data: pl.DataFrame, edge_data: pl.DataFrame) -> ET.Element:
    gexf = ET.Element("gexf", xmlns="http://www.gexf.net/1.2draft", version="1.2")
    meta = ET.SubElement(gexf, "meta")
    ET.SubElement(meta, "creator").text = "commfilter"

    graph_elem = ET.SubElement(gexf, "graph", mode="static",
                               defaultedgetype="directed" if graph.directed else "undirected")

    attributes = ET.SubElement(graph_elem, "attributes", **{"class": "node"})
    attr_map = {}
    for attr_id, col in enumerate(c for c in node_data.columns if c != "node_id"):
        ET.SubElement(attributes, "attribute", id=str(attr_id), title=col, type="string")
        attr_map[col] = str(attr_id)

    nodes_elem = ET.SubElement(graph_elem, "nodes")
    for row in node_data.iter_rows(named=True):
        node_elem = ET.SubElement(nodes_elem, "node", id=row["node_id"], label=row["node_id"])
        if attr_map:
            attvalues = ET.SubElement(node_elem, "attvalues")
            for col, attr_id in attr_map.items():
                value = row.get(col)
                if value is not None:
                    ET.SubElement(attvalues, "attvalue", **{"for": attr_id, "value": str(value)})

    edges_elem = ET.SubElement(graph_elem, "edges")
    for i, row in enumerate(edge_data.iter_rows(named=True)):
        ET.SubElement(edges_elem, "edge", id=str(i), source=row["source"],
                      target=row["target"], weight=str(row["weight"]))

    return gexf


def _write_xml(root: ET.Element, path: Path) -> None:
    xml_str = ET.tostring(root, encoding="unicode")
    pretty_xml = minidom.parseString(xml_str).toprettyxml(indent="  ")
    with open(path, "w", encoding="utf-8") as f:
        f.write(pretty_xml)
