import argparse
import os
import sys
from typing import List, Optional

from . import __version__, log
from .config import Config
from .errors import UpackError
from .pipeline import Pipeline

ENV_PREFIX = "UPACK_"


def _env(name: str, default: str = "") -> str:
    return os.environ.get(ENV_PREFIX + name, default)


def _env_list(name: str, sep: str = ",") -> List[str]:
    return [v.strip() for v in _env(name).split(sep) if v.strip()]


def _env_int(name: str) -> int:
    try:
        return int(_env(name, "0"))
    except ValueError:
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="upack",
        description="Build an Android library module and unpack it as a Unity Android plugin.",
    )
    parser.add_argument("outputs", nargs="*",
                        help="output directories (default: current directory)")
    parser.add_argument("-m", "--android-module-name", default=_env("ANDROID_MODULE_NAME"),
                        help="Android module name")
    parser.add_argument("-a", "--android-path", default=_env("ANDROID_PROJECT_PATH"),
                        help="Android project path")
    parser.add_argument("-u", "--unity-path", default=_env("UNITY_PROJECT_PATH"),
                        help="Unity project path, outputs to Assets/Plugins/Android inside it")
    parser.add_argument("-e", "--entry-activity", default=_env("ENTRY_ACTIVITY"),
                        help="full name of entry activity")
    parser.add_argument("-p", "--android-permissions", action="append", default=None,
                        help="acquire permission in Android manifest (repeatable)")
    parser.add_argument("-x", "--exclude", action="append", default=None,
                        help="drop classes.jar entries whose path contains this text (repeatable)")
    parser.add_argument("-T", "--manifest-template", default=_env("MANIFEST_TEMPLATE"),
                        help="Android manifest template file path (Jinja2)")
    parser.add_argument("-B", "--backup-extension", default=_env("BACKUP_EXTENSION"),
                        help="keep the original files with the given ext name")
    parser.add_argument("-v", "--verbose", action="count", default=_env_int("VERBOSE"),
                        help="show debug output, twice for trace output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    targets = list(args.outputs) or _env_list("OUTPUT_DIRS", os.pathsep)
    permissions = args.android_permissions
    if permissions is None:
        permissions = _env_list("ANDROID_PERMISSIONS")
    exclusions = args.exclude
    if exclusions is None:
        exclusions = _env_list("EXCLUDE")
    return Config.resolve(
        project_path=args.android_path,
        module_name=args.android_module_name,
        entry_activity=args.entry_activity,
        targets=targets,
        permissions=permissions,
        exclusions=exclusions,
        manifest_template=args.manifest_template or None,
        backup_extension=args.backup_extension or None,
        verbosity=args.verbose,
        unity_path=args.unity_path or None,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = config_from_args(args)
        log.configure(config.verbosity)
        Pipeline(config).run()
    except UpackError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
