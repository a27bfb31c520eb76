#!/usr/bin/env python3
"""
Community Filtering Example

This example walks through the community filtering workflow on a small media
network. It shows how to:

1. Build a directed, weighted graph from an edge list and a node table
2. Detect communities with edge betweenness
3. Drop nodes that belong to small communities
4. Colour the remaining communities and draw the filtered graph
5. Export the filtered graph for Gephi

The data describes hyperlinks and mentions between news sources.
"""

from pathlib import Path

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import polars as pl

from commfilter import (
    CommunityPipeline,
    PipelineConfig,
    build_graph,
    export_graph,
    setup_logging
)
from commfilter.common import configure_external_library_logging
from commfilter.network import extract_centrality, get_community_summary
from commfilter.visualization import draw_graph


NODES = pl.DataFrame({
    "id": [f"s{i:02d}" for i in range(1, 18)],
    "media": [
        "NY Times", "Washington Post", "Wall Street Journal", "USA Today",
        "LA Times", "New York Post", "CNN", "MSNBC", "FOX News", "ABC",
        "BBC", "Yahoo News", "Google News", "Reuters.com", "NYTimes.com",
        "WashingtonPost.com", "AOL.com",
    ],
    "media.type": [1, 1, 1, 1, 1, 1, 2, 2, 2, 2, 2, 3, 3, 3, 3, 3, 3],
    "audience.size": [20, 25, 30, 32, 20, 50, 56, 34, 60, 23, 34, 33, 23, 12, 24, 21, 17],
})

EDGES = pl.DataFrame({
    "from": [
        "s01", "s01", "s01", "s01", "s02", "s02", "s02", "s03", "s03", "s04",
        "s04", "s05", "s06", "s07", "s07", "s08", "s08", "s09", "s10", "s11",
        "s12", "s12", "s13", "s14", "s15", "s16", "s16", "s17",
    ],
    "to": [
        "s02", "s03", "s04", "s15", "s01", "s03", "s09", "s01", "s04", "s03",
        "s11", "s01", "s06", "s08", "s09", "s07", "s09", "s10", "s11", "s07",
        "s13", "s14", "s12", "s13", "s01", "s17", "s06", "s16",
    ],
    "weight": [
        22, 21, 13, 20, 23, 21, 1, 21, 13, 13,
        1, 1, 1, 17, 1, 20, 1, 20, 22, 5,
        22, 22, 21, 22, 20, 21, 1, 21,
    ],
})


def main():
    """Run the community filtering workflow end to end."""

    setup_logging(level="INFO")
    configure_external_library_logging()

    print("=" * 60)
    print("Community Filtering Example")
    print("=" * 60)

    # Step 1: Build the graph
    print("\n1. Building Media Network")
    print("-" * 40)

    graph = build_graph(EDGES, nodes=NODES, weight_col="weight")
    print(f"Graph: {graph.number_of_nodes()} nodes, {graph.number_of_edges()} edges")

    centrality = extract_centrality(graph, metrics=["degree"], mode="in")
    print("\nMost linked-to sources:")
    print(centrality.sort("degree_centrality", descending=True).head(5))

    # Step 2: Detect communities and filter
    print("\n2. Detecting and Filtering Communities")
    print("-" * 40)

    pipeline = CommunityPipeline(config=PipelineConfig(threshold=3, alpha=0.7))
    result = pipeline.run(graph)

    summary = get_community_summary(result.assignment)
    print(f"Found {summary['num_communities']} communities with sizes {summary['community_sizes']}")
    print(f"Kept {len(result.partition.kept)} nodes, dropped {len(result.partition.dropped)}")

    # Step 3: Sweep thresholds without re-running detection
    print("\n3. Threshold Sweep")
    print("-" * 40)

    for threshold in (1, 2, 3, 4, 5):
        swept = pipeline.refilter(threshold)
        print(f"T={threshold}: {swept.filtered.number_of_nodes()} nodes, "
              f"{len(swept.color_map)} communities")

    # Step 4: Draw and export
    print("\n4. Drawing and Exporting")
    print("-" * 40)

    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    ax = draw_graph(result.filtered, colors=result.node_colors, labels=result.labels,
                    title="Media communities")
    ax.figure.savefig(output_dir / "media_communities.png", dpi=150)
    plt.close(ax.figure)

    path = export_graph(result.filtered, output_dir / "media_communities.gexf", format="gexf",
                        assignment=result.assignment, color_map=result.color_map,
                        overwrite=True)
    print(f"Wrote {path}")


if __name__ == "__main__":
    main()
