"""Shell out to Gradle to produce the module's AAR."""
import logging
import os
import subprocess
from typing import List, Optional

from .config import Config
from .errors import BuildFailed

logger = logging.getLogger(__name__)

BUILD_TASK = "assembleDebug"


def gradle_command(project_path: str) -> List[str]:
    # Prefer the project's wrapper, fall back to whatever is on PATH
    wrapper = "gradlew.bat" if os.name == "nt" else "gradlew"
    local = os.path.join(project_path, wrapper)
    if os.path.isfile(local):
        return [local, BUILD_TASK]
    return [wrapper, BUILD_TASK]


def run(cmd: List[str], cwd: Optional[str] = None) -> None:
    """Run ``cmd`` and forward its combined output to the log line by line."""
    logger.debug("$ %s", " ".join(cmd))
    try:
        proc = subprocess.Popen(
            cmd,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise BuildFailed(f"build Android project fail: {' '.join(cmd)}: {e}") from e
    with proc:
        for line in proc.stdout:
            logger.debug("%s", line.rstrip("\n"))
    if proc.returncode != 0:
        raise BuildFailed(
            f"build Android project fail: {' '.join(cmd)} exited with status {proc.returncode}"
        )


def build_module(config: Config) -> None:
    run(gradle_command(config.project_path), cwd=config.project_path)
