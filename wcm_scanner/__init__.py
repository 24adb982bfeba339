"""wcm-scanner: declared-dependency and markup import graphs for web component projects."""

__version__ = "0.1.0"

from wcm_scanner.errors import (
    ConfigurationError,
    GraphStateError,
    NotFoundError,
    ParseError,
    ScannerError,
    UnresolvedVersionError,
)
from wcm_scanner.models import InspectionConfig, PackageManager, ProjectConfig
from wcm_scanner.pipeline import (
    build_declared_graph_async,
    generate_declared_dependencies_graph,
    generate_imported_dependencies_graph,
)

__all__ = [
    "__version__",
    "ConfigurationError",
    "GraphStateError",
    "NotFoundError",
    "ParseError",
    "ScannerError",
    "UnresolvedVersionError",
    "InspectionConfig",
    "PackageManager",
    "ProjectConfig",
    "build_declared_graph_async",
    "generate_declared_dependencies_graph",
    "generate_imported_dependencies_graph",
]
