"""Relationship graph queries.

Builds an undirected NetworkX graph over documents and their
relationships for neighbourhood, clustering and centrality queries.
"""

from typing import Iterable

import networkx as nx

from doctriage.models.document import DocumentRelationship


def build_relationship_graph(
    document_ids: Iterable[str],
    relationships: Iterable[DocumentRelationship],
) -> nx.Graph:
    """Build an undirected graph, one node per document.

    Relationships referencing unknown documents are skipped. When several
    relationships join the same pair, the strongest one is kept.
    """
    graph = nx.Graph()
    graph.add_nodes_from(document_ids)

    for rel in relationships:
        if rel.source_id not in graph or rel.target_id not in graph:
            continue
        if rel.source_id == rel.target_id:
            continue
        if graph.has_edge(rel.source_id, rel.target_id):
            if graph.edges[rel.source_id, rel.target_id]["strength"] >= rel.strength:
                continue
        graph.add_edge(
            rel.source_id,
            rel.target_id,
            relationship_type=rel.relationship_type,
            strength=rel.strength,
        )

    return graph


def related_document_ids(graph: nx.Graph, document_id: str) -> list[str]:
    """Documents directly related to ``document_id``, in graph order."""
    if document_id not in graph:
        return []
    return list(graph.neighbors(document_id))


def document_clusters(graph: nx.Graph) -> list[set[str]]:
    """Connected groups of documents, largest first."""
    return sorted(
        (set(c) for c in nx.connected_components(graph)),
        key=len,
        reverse=True,
    )


def hub_documents(graph: nx.Graph, top_n: int = 5) -> list[tuple[str, float]]:
    """Documents with the highest degree centrality."""
    if len(graph) == 0:
        return []
    scores = nx.degree_centrality(graph)
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    return ranked[:top_n]


def graph_statistics(graph: nx.Graph) -> dict:
    """Summary counts for a relationship graph."""
    type_counts: dict[str, int] = {}
    for _, _, data in graph.edges(data=True):
        rel_type = data.get("relationship_type", "")
        type_counts[rel_type] = type_counts.get(rel_type, 0) + 1

    return {
        "document_count": graph.number_of_nodes(),
        "relationship_count": graph.number_of_edges(),
        "cluster_count": nx.number_connected_components(graph) if len(graph) else 0,
        "isolated_documents": sorted(nx.isolates(graph)),
        "relationships_by_type": type_counts,
        "density": nx.density(graph) if len(graph) > 1 else 0.0,
    }
