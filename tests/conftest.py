"""Shared fixtures: zip builders and a fake Android project."""
import logging

import pytest

from upack.config import Config

from .utils import ENTRY_ACTIVITY, MODULE, write_zip, zip_bytes

logger = logging.getLogger(__name__)


@pytest.fixture
def make_zip(tmp_path):
    def _make(entries, name="archive.zip"):
        return write_zip(tmp_path / name, entries)

    return _make


@pytest.fixture
def classes_jar():
    return zip_bytes(
        {
            "com/example/Foo.class": b"\xca\xfe\xba\xbefoo",
            "com/unity/Keep.class": b"\xca\xfe\xba\xbekeep",
        }
    )


@pytest.fixture
def android_project(tmp_path):
    project = tmp_path / "android"
    (project / MODULE).mkdir(parents=True)
    return project


@pytest.fixture
def built_aar(android_project, classes_jar):
    """Return a builder that drops the module AAR where Gradle would."""
    entries = {
        "classes.jar": classes_jar,
        "AndroidManifest.xml": b'<manifest package="com.example.mymodule"/>',
        "res/": None,
        "res/values/values.xml": b"<resources/>",
    }
    calls = []

    def _builder(config):
        calls.append(config)
        logger.debug("fake build of %s", config.module_name)
        write_zip(config.archive_path, entries)

    _builder.calls = calls
    return _builder


@pytest.fixture
def config_for(android_project, tmp_path):
    def _config(**kwargs):
        kwargs.setdefault("targets", [str(tmp_path / "out")])
        return Config.resolve(
            project_path=str(android_project),
            module_name=MODULE,
            entry_activity=ENTRY_ACTIVITY,
            **kwargs,
        )

    return _config


@pytest.fixture(autouse=True)
def reset_upack_logger():
    """Undo whatever log.configure() did during a test."""
    yield
    upack_logger = logging.getLogger("upack")
    for handler in list(upack_logger.handlers):
        upack_logger.removeHandler(handler)
    upack_logger.setLevel(logging.NOTSET)
