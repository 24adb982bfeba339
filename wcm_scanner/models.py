"""Data models and configuration for the wcm-scanner pipelines."""

from __future__ import annotations

import enum
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from wcm_scanner.errors import ConfigurationError, NotFoundError, ParseError


class PackageManager(enum.Enum):
    BOWER = "bower"
    NPM = "npm"

    @property
    def dependencies_folder(self) -> str:
        return _DEPENDENCY_FOLDERS[self]

    @property
    def manifest_filename(self) -> str:
        return _MANIFEST_FILENAMES[self]

    @classmethod
    def parse(cls, value: PackageManager | str | None) -> PackageManager:
        """Coerce a config value into a PackageManager, rejecting anything unknown."""
        if isinstance(value, cls):
            return value
        if not value:
            raise ConfigurationError("A 'package_manager' must be supplied")
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(pm.value for pm in cls)
            raise ConfigurationError(
                f"Unsupported package manager {value!r} (expected one of: {choices})"
            ) from None


_DEPENDENCY_FOLDERS = {
    PackageManager.BOWER: "bower_components",
    PackageManager.NPM: "node_modules",
}

_MANIFEST_FILENAMES = {
    PackageManager.BOWER: ".bower.json",
    PackageManager.NPM: "package.json",
}


@dataclass(frozen=True)
class ImportDeclaration:
    """A resolved reference from a source file to another file."""
    import_path: str
    tag_name: str
    attribute_name: str

    def to_dict(self) -> dict[str, str]:
        return {
            "import_path": self.import_path,
            "tag_name": self.tag_name,
            "attribute_name": self.attribute_name,
        }


@dataclass(frozen=True)
class FileMetadata:
    """Result of inspecting a single source file."""
    file_path: str
    import_declarations: tuple[ImportDeclaration, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "import_declarations", tuple(self.import_declarations))

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": self.file_path,
            "import_declarations": [d.to_dict() for d in self.import_declarations],
        }


@dataclass
class ProjectConfig:
    """Configuration for building the declared-dependency graph."""
    project_path: Path
    package_manager: PackageManager
    skip_unreadable: bool = False
    strict_versions: bool = False

    def __post_init__(self):
        self.project_path = Path(self.project_path)
        self.package_manager = PackageManager.parse(self.package_manager)

    @property
    def dependencies_path(self) -> Path:
        return self.project_path / self.package_manager.dependencies_folder


@dataclass
class InspectionConfig:
    """Configuration for inspecting source files for markup imports."""
    entry_path: str
    source_root: str
    # placeholder -> replacement, applied in insertion order
    import_resolutions: dict[str, str] = field(default_factory=dict)
    # tag name -> attribute holding the import path
    import_tags: dict[str, str] = field(default_factory=lambda: {"link": "href"})

    def __post_init__(self):
        self.entry_path = str(self.entry_path)
        self.source_root = str(self.source_root)
        if not os.path.isabs(self.source_root):
            raise ConfigurationError(
                f"'source_root' must be an absolute path, got {self.source_root!r}"
            )
        self.import_resolutions = dict(self.import_resolutions)
        self.import_tags = dict(self.import_tags)

    @property
    def resolved_entry_path(self) -> str:
        return os.path.abspath(os.path.join(self.source_root, self.entry_path))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InspectionConfig:
        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data:
                    return data[key]
            return default

        entry_path = pick("entry_path", "entryPath")
        source_root = pick("source_root", "sourceRoot")
        if entry_path is None or source_root is None:
            raise ConfigurationError("Inspection config needs 'entry_path' and 'source_root'")

        kwargs: dict[str, Any] = {}
        resolutions = pick("import_resolutions", "importResolutions")
        if resolutions is not None:
            kwargs["import_resolutions"] = resolutions
        tags = pick("import_tags", "importTags")
        if tags is not None:
            kwargs["import_tags"] = tags
        return cls(entry_path=entry_path, source_root=source_root, **kwargs)

    @classmethod
    def from_file(cls, path: Path) -> InspectionConfig:
        """Load an inspection config from a JSON file."""
        return cls.from_dict(read_config_file(path))


def read_config_file(path: Path) -> dict[str, Any]:
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(f"Config file not found at path \"{path}\"", str(path))
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in config file {path}: {e}", str(path)) from e
    if not isinstance(data, dict):
        raise ParseError(f"Config file {path} must contain a JSON object", str(path))
    return data
