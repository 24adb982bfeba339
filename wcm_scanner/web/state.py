"""In-memory state for the query API: no database required."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from wcm_scanner.graph import DependencyGraph, ImportGraph


@dataclass
class GraphSession:
    graph: DependencyGraph | ImportGraph
    kind: str  # "declared" | "imports"
    source: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class AppState:
    """In-memory graph store shared by all API routes."""

    def __init__(self):
        self.graphs: dict[str, GraphSession] = {}

    def add_graph(self, session: GraphSession) -> None:
        self.graphs[session.id] = session

    def get_graph(self, graph_id: str) -> GraphSession | None:
        return self.graphs.get(graph_id)

    def delete_graph(self, graph_id: str) -> bool:
        return self.graphs.pop(graph_id, None) is not None


# Module-level singleton: all routers import this
state = AppState()
