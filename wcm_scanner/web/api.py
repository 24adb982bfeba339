"""Graph API: build declared and import graphs, then query them."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from wcm_scanner.errors import NotFoundError, ScannerError
from wcm_scanner.graph import DependencyGraph
from wcm_scanner.models import InspectionConfig, ProjectConfig
from wcm_scanner.pipeline import build_declared_graph_async, generate_imported_dependencies_graph
from wcm_scanner.web.state import GraphSession, state

router = APIRouter(prefix="/api/graphs")


class DeclaredGraphRequest(BaseModel):
    project_path: str
    package_manager: str
    skip_unreadable: bool = False
    strict_versions: bool = False


class ImportGraphRequest(BaseModel):
    entry_path: str
    source_root: str
    import_resolutions: dict[str, str] = Field(default_factory=dict)
    import_tags: dict[str, str] = Field(default_factory=lambda: {"link": "href"})


def _http_error(e: ScannerError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(404, str(e))
    return HTTPException(400, str(e))


def _get_session(graph_id: str) -> GraphSession:
    session = state.get_graph(graph_id)
    if not session:
        raise HTTPException(404, "Graph not found")
    return session


@router.post("/declared")
async def build_declared_graph(req: DeclaredGraphRequest):
    try:
        config = ProjectConfig(
            project_path=req.project_path,
            package_manager=req.package_manager,
            skip_unreadable=req.skip_unreadable,
            strict_versions=req.strict_versions,
        )
        graph = await build_declared_graph_async(config)
    except ScannerError as e:
        raise _http_error(e)

    session = GraphSession(graph=graph, kind="declared", source=req.project_path)
    state.add_graph(session)
    return {
        "graph_id": session.id,
        "nodes": len(graph.nodes),
        "implied": len(graph.list_implied_dependencies()),
        "edges": len(graph.edges),
        "skipped": graph.skipped,
    }


@router.post("/imports")
async def build_import_graph(req: ImportGraphRequest):
    try:
        config = InspectionConfig(
            entry_path=req.entry_path,
            source_root=req.source_root,
            import_resolutions=req.import_resolutions,
            import_tags=req.import_tags,
        )
        graph = await asyncio.to_thread(generate_imported_dependencies_graph, config)
    except ScannerError as e:
        raise _http_error(e)

    session = GraphSession(graph=graph, kind="imports", source=config.resolved_entry_path)
    state.add_graph(session)
    return {
        "graph_id": session.id,
        "files": len(graph.files),
        "edges": len(graph.edges),
    }


@router.get("/{graph_id}")
async def get_graph(graph_id: str):
    session = _get_session(graph_id)
    return {"graph_id": session.id, "kind": session.kind, **session.graph.to_dict()}


@router.get("/{graph_id}/dependants/{name}")
async def get_dependants(graph_id: str, name: str, version: str | None = None):
    session = _get_session(graph_id)
    if not isinstance(session.graph, DependencyGraph):
        raise HTTPException(400, "Dependants are only available for declared graphs")
    found = session.graph.list_dependants_of_dependency(name, version)
    return {"name": name, "dependants": [str(i) for i in found]}


@router.delete("/{graph_id}")
async def delete_graph(graph_id: str):
    if not state.delete_graph(graph_id):
        raise HTTPException(404, "Graph not found")
    return {"deleted": graph_id}
