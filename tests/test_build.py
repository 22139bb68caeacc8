"""Test the Gradle shell-out."""
import logging
import os
import sys

import pytest

from upack import build
from upack.errors import BuildFailed


def test_gradle_command_prefers_wrapper(tmp_path):
    wrapper = tmp_path / ("gradlew.bat" if os.name == "nt" else "gradlew")
    wrapper.write_text("")

    assert build.gradle_command(str(tmp_path)) == [str(wrapper), build.BUILD_TASK]


def test_gradle_command_falls_back_to_path(tmp_path):
    cmd = build.gradle_command(str(tmp_path))
    assert cmd[0] in ("gradlew", "gradlew.bat")
    assert cmd[1] == "assembleDebug"


def test_run_forwards_output(tmp_path, caplog):
    script = "import sys; print('out line'); print('err line', file=sys.stderr)"
    with caplog.at_level(logging.DEBUG, logger="upack"):
        build.run([sys.executable, "-c", script], cwd=str(tmp_path))

    messages = [r.getMessage() for r in caplog.records]
    assert "out line" in messages
    assert "err line" in messages


def test_run_failing_command(tmp_path):
    with pytest.raises(BuildFailed, match="status 3"):
        build.run([sys.executable, "-c", "raise SystemExit(3)"], cwd=str(tmp_path))


def test_run_missing_executable(tmp_path):
    with pytest.raises(BuildFailed):
        build.run([str(tmp_path / "no-such-gradlew"), "assembleDebug"])
