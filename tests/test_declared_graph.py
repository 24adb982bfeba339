"""Tests for the declared-dependency graph builder."""

import pytest

from wcm_scanner.errors import GraphStateError, ParseError, UnresolvedVersionError
from wcm_scanner.graph import (
    UNKNOWN_NAME,
    UNKNOWN_VERSION,
    DeclaredGraphBuilder,
    DependencyIdentity,
    NodeKind,
    get_dependency_identity,
)
from wcm_scanner.graph.declared import BuildStage


# ── Helpers ───────────────────────────────────────────────────

def _manifest(name, version, dependencies=None, version_field="version"):
    manifest = {"name": name, version_field: version}
    if dependencies is not None:
        manifest["dependencies"] = dependencies
    return manifest


def _id(name, version):
    return DependencyIdentity(name=name, version=version)


# ── Registration ──────────────────────────────────────────────

class TestRegistration:
    def test_build_empty(self):
        graph = DeclaredGraphBuilder().build([])
        assert graph.list_dependencies() == []
        assert graph.edges == ()

    def test_real_nodes_keep_their_manifest(self):
        manifest = _manifest("polymer", "1.9.0")
        graph = DeclaredGraphBuilder().build([manifest])
        node = graph.get_dependency(_id("polymer", "1.9.0"))
        assert node.kind is NodeKind.REAL
        assert graph.get_dependency_data(node.identity) == manifest

    def test_version_wins_over_release(self):
        manifest = {"name": "x", "version": "1.0.0", "_release": "1.0.0-release"}
        assert get_dependency_identity(manifest) == _id("x", "1.0.0")

    def test_release_used_when_version_missing(self):
        manifest = _manifest("iron-icon", "1.0.12", version_field="_release")
        assert get_dependency_identity(manifest) == _id("iron-icon", "1.0.12")

    def test_missing_version_uses_sentinel(self):
        graph = DeclaredGraphBuilder().build([{"name": "mystery"}])
        assert graph.list_dependencies() == [_id("mystery", UNKNOWN_VERSION)]

    def test_missing_version_strict(self):
        with pytest.raises(UnresolvedVersionError):
            DeclaredGraphBuilder(strict_versions=True).build([{"name": "mystery"}])

    def test_missing_name_uses_sentinel(self):
        graph = DeclaredGraphBuilder().build([{"version": "1.0.0"}])
        assert graph.list_dependencies() == [_id(UNKNOWN_NAME, "1.0.0")]

    def test_missing_name_strict(self):
        with pytest.raises(ParseError):
            DeclaredGraphBuilder(strict_versions=True).build([{"version": "1.0.0"}])

    def test_non_object_dependencies(self):
        with pytest.raises(ParseError, match="dependencies"):
            DeclaredGraphBuilder().build([_manifest("a", "1", "b")])

    def test_null_dependencies_read_as_empty(self):
        graph = DeclaredGraphBuilder().build([{"name": "a", "version": "1", "dependencies": None}])
        assert graph.edges == ()

    def test_aliases_only_list_real_versions(self):
        graph = DeclaredGraphBuilder().build([
            _manifest("a", "1.0.0", {"b": "^2.0.0"}),
            _manifest("b", "2.3.1"),
        ])
        assert graph.get_dependency_aliases("b") == ["2.3.1"]
        assert graph.get_dependency_aliases("missing") == []


# ── Implied dependencies ──────────────────────────────────────

class TestImpliedDependencies:
    def test_no_declared_dependencies(self):
        graph = DeclaredGraphBuilder().build([
            _manifest("a", "1.0.0", {}),
            _manifest("b", "2.0.0"),
        ])
        assert graph.list_implied_dependencies() == []
        assert graph.edges == ()

    def test_alias_exactness(self):
        graph = DeclaredGraphBuilder().build([
            _manifest("a", "1.0.0", {"b": "^2.0.0"}),
            _manifest("b", "2.3.1"),
        ])
        assert graph.list_implied_dependencies() == [_id("b", "^2.0.0")]
        assert graph.get_dependency(_id("b", "2.3.1")).kind is NodeKind.REAL
        assert graph.get_dependency(_id("b", "^2.0.0")).kind is NodeKind.IMPLIED

    def test_exact_alias_match_creates_no_implied_node(self):
        graph = DeclaredGraphBuilder().build([
            _manifest("a", "1.0.0", {"b": "2.3.1"}),
            _manifest("b", "2.3.1"),
        ])
        assert graph.list_implied_dependencies() == []
        assert graph.list_dependencies_of(_id("a", "1.0.0")) == [_id("b", "2.3.1")]

    def test_repeated_requests_do_not_duplicate(self):
        graph = DeclaredGraphBuilder().build([
            _manifest("a", "1.0.0", {"b": "^2.0.0"}),
            _manifest("c", "1.0.0", {"b": "^2.0.0"}),
        ])
        assert graph.list_implied_dependencies() == [_id("b", "^2.0.0")]
        assert len(graph.edges) == 2

    def test_implied_nodes_have_no_dependencies(self):
        graph = DeclaredGraphBuilder().build([_manifest("a", "1.0.0", {"b": "~1.1"})])
        implied = graph.get_dependency(_id("b", "~1.1"))
        assert implied.dependencies == {}
        assert implied.manifest is None
        assert graph.get_dependency_data(implied.identity) == {}
        assert graph.list_dependencies_of(implied.identity) == []
        assert implied.normalized_version == "1.1"


# ── Linking and queries ───────────────────────────────────────

class TestLinking:
    def _graph(self):
        return DeclaredGraphBuilder().build([
            _manifest("app-shell", "1.0.0", {"polymer": "^1.2.0", "iron-icon": "1.0.12"}),
            _manifest("iron-icon", "1.0.12", {"polymer": "^1.2.0"}, version_field="_release"),
            _manifest("polymer", "1.9.0"),
            _manifest("paper-button", "1.0.0", {"polymer": "1.9.0"}),
        ])

    def test_edges_point_at_real_and_implied_targets(self):
        graph = self._graph()
        deps = graph.list_dependencies_of(_id("app-shell", "1.0.0"))
        assert _id("polymer", "^1.2.0") in deps
        assert _id("iron-icon", "1.0.12") in deps
        assert len(graph.edges) == 4

    def test_every_edge_source_and_target_is_registered(self):
        graph = self._graph()
        for edge in graph.edges:
            assert graph.has_dependency(edge.source)
            assert graph.has_dependency(edge.target)

    def test_dependants_of_any_version(self):
        graph = self._graph()
        dependants = graph.list_dependants_of_dependency("polymer")
        assert set(dependants) == {
            _id("app-shell", "1.0.0"),
            _id("iron-icon", "1.0.12"),
            _id("paper-button", "1.0.0"),
        }

    def test_dependants_of_specific_version(self):
        graph = self._graph()
        assert graph.list_dependants_of_dependency("polymer", "1.9.0") == [_id("paper-button", "1.0.0")]

    def test_idempotent(self):
        first = self._graph()
        second = self._graph()
        assert set(first.nodes) == set(second.nodes)
        assert set(first.edges) == set(second.edges)

    def test_builder_can_be_reused(self):
        builder = DeclaredGraphBuilder()
        manifests = [_manifest("a", "1.0.0", {"b": "^1.0.0"})]
        first = builder.build(manifests)
        second = builder.build(manifests)
        assert first.to_dict() == second.to_dict()

    def test_queries_return_copies(self):
        graph = self._graph()
        graph.list_dependencies().clear()
        graph.get_dependency_data(_id("polymer", "1.9.0"))["name"] = "changed"
        assert len(graph.list_dependencies()) == 5
        assert graph.get_dependency(_id("polymer", "1.9.0")).manifest["name"] == "polymer"

    def test_nested_manifest_data_is_copied(self):
        graph = self._graph()
        app = _id("app-shell", "1.0.0")
        graph.get_dependency_data(app)["dependencies"]["evil"] = "9.9.9"
        assert graph.get_dependency(app).dependencies == {"polymer": "^1.2.0", "iron-icon": "1.0.12"}
        assert graph.list_dependencies_of(app) == [_id("polymer", "^1.2.0"), _id("iron-icon", "1.0.12")]

    def test_input_manifests_are_detached(self):
        manifest = _manifest("a", "1.0.0", {"b": "1.0.0"})
        graph = DeclaredGraphBuilder().build([manifest])
        manifest["dependencies"]["input"] = "9"
        manifest["name"] = "renamed"
        node = graph.get_dependency(_id("a", "1.0.0"))
        assert node.dependencies == {"b": "1.0.0"}
        assert node.manifest["name"] == "a"

    def test_graph_mappings_are_read_only(self):
        graph = self._graph()
        with pytest.raises(TypeError):
            graph.nodes[_id("x", "1")] = None
        with pytest.raises(AttributeError):
            graph.nodes.clear()
        with pytest.raises(TypeError):
            graph.forward[_id("polymer", "1.9.0")] = ()
        with pytest.raises(TypeError):
            graph.skipped["x"] = "y"
        with pytest.raises(TypeError):
            graph.get_dependency(_id("polymer", "1.9.0")).manifest["name"] = "changed"
        assert len(graph.list_dependencies()) == 5

    def test_unknown_node_raises_key_error(self):
        with pytest.raises(KeyError):
            self._graph().get_dependency(_id("nope", "0.0.0"))

    def test_to_dict(self):
        data = self._graph().to_dict()
        kinds = {n["id"]: n["kind"] for n in data["nodes"]}
        assert kinds["polymer#^1.2.0"] == "implied"
        assert kinds["polymer#1.9.0"] == "real"
        assert {"source": "paper-button#1.0.0", "target": "polymer#1.9.0"} in data["edges"]


# ── Phase ordering ────────────────────────────────────────────

class TestPhaseOrdering:
    def test_stages_advance_in_order(self):
        builder = DeclaredGraphBuilder()
        assert builder.stage is BuildStage.UNINITIALIZED
        builder.start()
        assert builder.stage is BuildStage.REGISTERING
        builder.register_declared_dependencies([_manifest("a", "1.0.0")])
        builder.register_implied_dependencies()
        assert builder.stage is BuildStage.LINKING
        builder.link_inter_dependencies()
        graph = builder.finish()
        assert builder.stage is BuildStage.READY
        assert graph.list_dependencies() == [_id("a", "1.0.0")]

    def test_register_before_start(self):
        with pytest.raises(GraphStateError):
            DeclaredGraphBuilder().register_declared_dependencies([])

    def test_link_before_implied(self):
        builder = DeclaredGraphBuilder()
        builder.start()
        with pytest.raises(GraphStateError):
            builder.link_inter_dependencies()

    def test_real_registration_after_implied(self):
        builder = DeclaredGraphBuilder()
        builder.start()
        builder.register_implied_dependencies()
        with pytest.raises(GraphStateError):
            builder.register_declared_dependencies([_manifest("a", "1.0.0")])

    def test_finish_before_link(self):
        builder = DeclaredGraphBuilder()
        builder.start()
        builder.register_implied_dependencies()
        with pytest.raises(GraphStateError):
            builder.finish()

    def test_link_twice(self):
        builder = DeclaredGraphBuilder()
        builder.start()
        builder.register_implied_dependencies()
        builder.link_inter_dependencies()
        with pytest.raises(GraphStateError):
            builder.link_inter_dependencies()
