"""Turn a built Android module into a Unity plugin directory.

One run goes VALIDATING -> BUILDING -> EXTRACTING -> DONE. The first
error moves it to FAILED and is re-raised; there is no retry and nothing
that was already written is rolled back. Running again is the recovery
path, the backup policy keeps re-runs from clobbering anything.
"""
import enum
import logging
import os
import tempfile
from typing import Callable, Optional, Sequence

from .archive import build_archive, exclusion_filter, extract_archive, read_archive_names
from .backup import make_room, replace_file
from .build import build_module
from .config import NESTED_ARCHIVE, PROPERTIES_CONTENT, Config
from .errors import (
    BackupFailed,
    BuildArtifactMissing,
    DirectoryCreateFailed,
    PathNotFound,
    UpackError,
)
from .log import trace
from .manifest import render_manifest

logger = logging.getLogger(__name__)

Builder = Callable[[Config], None]


class Stage(enum.Enum):
    VALIDATING = "validating"
    BUILDING = "building"
    EXTRACTING = "extracting"
    DONE = "done"
    FAILED = "failed"


def check_dir_exist(path: str, what: str) -> None:
    if not os.path.exists(path):
        raise PathNotFound(path, what)
    if not os.path.isdir(path):
        raise PathNotFound(path, what, not_a_directory=True)


def make_dir(path: str) -> None:
    """Create ``path`` with its parents unless it is already a directory."""
    if os.path.isdir(path):
        return
    if os.path.exists(path):
        raise PathNotFound(path, "output directory", not_a_directory=True)
    try:
        os.makedirs(path)
    except OSError as e:
        raise DirectoryCreateFailed(path, e) from e


def filter_nested_archive(jar_path: str, exclusions: Sequence[str]) -> int:
    """Rewrite ``jar_path`` without the entries matching ``exclusions``.

    Returns the number of entries kept.
    """
    try:
        scratch = tempfile.mkdtemp(prefix="upack-")
    except OSError as e:
        raise DirectoryCreateFailed(tempfile.gettempdir(), e) from e
    try:
        extract_archive(jar_path, scratch)
        kept = build_archive(scratch, jar_path, exclusion_filter(exclusions))
    except UpackError:
        try:
            make_room(scratch)
        except BackupFailed as cleanup:
            logger.warning("could not remove scratch directory %s: %s", scratch, cleanup)
        raise
    make_room(scratch)
    logger.debug("filtered %s, %d entries kept", jar_path, kept)
    return kept


class Pipeline:
    def __init__(self, config: Config, builder: Builder = build_module):
        self.config = config
        self.builder = builder
        self.stage = Stage.VALIDATING
        self.failure: Optional[UpackError] = None
        self.manifest: Optional[bytes] = None

    def run(self) -> None:
        try:
            self._validate()
            self._build()
            self.stage = Stage.EXTRACTING
            for target in self.config.targets:
                self.process_target(target)
        except UpackError as e:
            self.stage = Stage.FAILED
            self.failure = e
            raise
        self.stage = Stage.DONE

    def _validate(self) -> None:
        cfg = self.config
        self.stage = Stage.VALIDATING
        check_dir_exist(cfg.project_path, "Android project")
        trace(logger, "Android project at: %s", cfg.project_path)
        check_dir_exist(cfg.module_dir, f"module {cfg.module_name}")
        trace(logger, "Module %s project at: %s", cfg.module_name, cfg.module_dir)
        if cfg.unity_path:
            check_dir_exist(cfg.unity_path, "Unity project")
            trace(logger, "Unity project at: %s", cfg.unity_path)
        for target in cfg.targets:
            if os.path.exists(target) and not os.path.isdir(target):
                raise PathNotFound(target, "output directory", not_a_directory=True)
        self.manifest = render_manifest(cfg.entry_activity, cfg.permissions, cfg.manifest_template)

    def _build(self) -> None:
        self.stage = Stage.BUILDING
        trace(logger, "start building Android project ...")
        self.builder(self.config)
        path = self.config.archive_path
        if not os.path.isfile(path):
            raise BuildArtifactMissing(path)
        trace(logger, "Android build result at: %s", path)

    def process_target(self, target: str) -> None:
        cfg = self.config
        ext = cfg.backup_extension
        make_dir(target)
        trace(logger, "Android plugin base directory at: %s", target)

        plugin_dir = cfg.plugin_dir(target)
        if os.path.isdir(plugin_dir) and not os.path.exists(cfg.properties_path(target)):
            logger.warning("%s has no project.properties, a previous run may have stopped midway",
                           plugin_dir)
        make_room(plugin_dir, ext)
        make_dir(plugin_dir)
        trace(logger, "Android current plugin directory at: %s", plugin_dir)

        trace(logger, "start unzipping aar ...")
        extract_archive(cfg.archive_path, plugin_dir)

        if cfg.exclusions:
            jar = os.path.join(plugin_dir, NESTED_ARCHIVE)
            if NESTED_ARCHIVE in read_archive_names(cfg.archive_path):
                trace(logger, "start filtering %s ...", NESTED_ARCHIVE)
                filter_nested_archive(jar, cfg.exclusions)
            else:
                logger.warning("no %s in %s, nothing to filter", NESTED_ARCHIVE, cfg.archive_path)

        trace(logger, "start generating properties file ...")
        replace_file(cfg.properties_path(target), PROPERTIES_CONTENT, ext)

        trace(logger, "start generating Android manifest file ...")
        replace_file(cfg.manifest_path(target), self.manifest, ext)
