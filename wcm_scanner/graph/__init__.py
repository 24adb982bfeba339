"""Graph models and builders."""

from wcm_scanner.graph.graph_models import (
    UNKNOWN_NAME,
    UNKNOWN_VERSION,
    DependencyGraph,
    DependencyIdentity,
    DependencyNode,
    ImportEdge,
    ImportGraph,
    InterDependency,
    NodeKind,
)
from wcm_scanner.graph.declared import DeclaredGraphBuilder, get_dependency_identity
from wcm_scanner.graph.imported import ImportGraphBuilder

__all__ = [
    "UNKNOWN_NAME",
    "UNKNOWN_VERSION",
    "DependencyGraph",
    "DependencyIdentity",
    "DependencyNode",
    "ImportEdge",
    "ImportGraph",
    "InterDependency",
    "NodeKind",
    "DeclaredGraphBuilder",
    "get_dependency_identity",
    "ImportGraphBuilder",
]
