import os
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .errors import MissingOption
from .log import clamp_verbosity

ARCHIVE_EXT = "aar"
BUILD_VARIANT = "debug"
NESTED_ARCHIVE = "classes.jar"
PROPERTIES_NAME = "project.properties"
PROPERTIES_CONTENT = b"android.library=true"
MANIFEST_NAME = "AndroidManifest.xml"


def unity_plugin_dir(unity_path: str) -> str:
    return os.path.join(unity_path, "Assets", "Plugins", "Android")


def _ordered_unique(values: Iterable[str]) -> Tuple[str, ...]:
    seen = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return tuple(seen)


@dataclass(frozen=True)
class Config:
    """Everything a run needs, resolved once and never changed."""

    project_path: str
    module_name: str
    targets: Tuple[str, ...]
    entry_activity: str
    permissions: Tuple[str, ...] = ()
    exclusions: Tuple[str, ...] = ()
    manifest_template: Optional[str] = None
    backup_extension: Optional[str] = None
    verbosity: int = 0
    unity_path: Optional[str] = None

    @classmethod
    def resolve(
        cls,
        project_path: str,
        module_name: str,
        entry_activity: str,
        targets: Iterable[str] = (),
        permissions: Iterable[str] = (),
        exclusions: Iterable[str] = (),
        manifest_template: Optional[str] = None,
        backup_extension: Optional[str] = None,
        verbosity: int = 0,
        unity_path: Optional[str] = None,
    ) -> "Config":
        if not project_path:
            raise MissingOption("--android-path")
        if not module_name:
            raise MissingOption("--android-module-name")
        if not entry_activity:
            raise MissingOption("--entry-activity")
        targets = [os.path.abspath(t) for t in targets]
        if unity_path:
            unity_path = os.path.abspath(unity_path)
            targets.append(unity_plugin_dir(unity_path))
        resolved_targets = _ordered_unique(targets)
        if not resolved_targets:
            resolved_targets = (os.path.abspath(os.curdir),)
        return cls(
            project_path=os.path.abspath(project_path),
            module_name=module_name,
            targets=resolved_targets,
            entry_activity=entry_activity,
            permissions=_ordered_unique(permissions),
            exclusions=_ordered_unique(exclusions),
            manifest_template=os.path.abspath(manifest_template) if manifest_template else None,
            backup_extension=backup_extension or None,
            verbosity=clamp_verbosity(verbosity),
            unity_path=unity_path or None,
        )

    @property
    def module_dir(self) -> str:
        return os.path.join(self.project_path, self.module_name)

    @property
    def archive_dir(self) -> str:
        return os.path.join(self.module_dir, "build", "outputs", ARCHIVE_EXT)

    @property
    def archive_path(self) -> str:
        return os.path.join(self.archive_dir, f"{self.module_name}-{BUILD_VARIANT}.{ARCHIVE_EXT}")

    def plugin_dir(self, target: str) -> str:
        return os.path.join(target, self.module_name)

    def manifest_path(self, target: str) -> str:
        return os.path.join(target, MANIFEST_NAME)

    def properties_path(self, target: str) -> str:
        return os.path.join(self.plugin_dir(target), PROPERTIES_NAME)
