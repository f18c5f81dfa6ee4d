"""
Obsidian Dev Helper Plugin Models.

Defines the plugin manifest and the set of build artifacts to install.
Requires Python 3.11+.
"""

import json
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from obsidian_dev_helper.exceptions import ManifestError

MANIFEST_NAME = "manifest.json"
SCRIPT_NAME = "main.js"
STYLE_NAME = "styles.css"


class PluginManifest(BaseModel):
    """The fields of an Obsidian plugin's manifest.json that the helper reads."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(min_length=1)
    version: str = Field(min_length=1)
    name: str | None = None
    min_app_version: str | None = Field(default=None, alias="minAppVersion")
    description: str | None = None
    author: str | None = None
    author_url: str | None = Field(default=None, alias="authorUrl")
    is_desktop_only: bool | None = Field(default=None, alias="isDesktopOnly")

    @property
    def display_name(self) -> str:
        return self.name or self.id


def load_manifest(path: Path) -> PluginManifest:
    """
    Read and validate a plugin manifest.

    Args:
        path: Path to the manifest.json file

    Returns:
        The parsed manifest

    Raises:
        ManifestError: If the file is missing, not JSON, or lacks id/version
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ManifestError(f"plugin manifest not found: {path}") from None
    except OSError as e:
        raise ManifestError(f"could not read plugin manifest {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ManifestError(f"plugin manifest {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"plugin manifest {path} must contain a JSON object")

    try:
        return PluginManifest.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ManifestError(f"plugin manifest {path} is invalid ({fields})") from e


@dataclass(frozen=True, slots=True)
class PluginArtifacts:
    """The three files a plugin build produces."""

    manifest_file: Path
    script_file: Path
    style_file: Path

    @classmethod
    def from_build_directory(
        cls, build_dir: Path, manifest_file: Path | None = None
    ) -> "PluginArtifacts":
        """
        Locate the artifacts inside a build output directory.

        Args:
            build_dir: Directory holding main.js and styles.css
            manifest_file: Manifest override, defaults to build_dir/manifest.json
        """
        return cls(
            manifest_file=manifest_file if manifest_file is not None else build_dir / MANIFEST_NAME,
            script_file=build_dir / SCRIPT_NAME,
            style_file=build_dir / STYLE_NAME,
        )

    @property
    def paths(self) -> tuple[Path, Path, Path]:
        """All artifact paths, in watch order."""
        return (self.manifest_file, self.script_file, self.style_file)

    def install_targets(self) -> list[tuple[Path, str]]:
        """Pairs of (source file, file name inside the installed plugin directory)."""
        return [
            (self.manifest_file, MANIFEST_NAME),
            (self.script_file, SCRIPT_NAME),
            (self.style_file, STYLE_NAME),
        ]
