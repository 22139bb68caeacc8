"""Exceptions raised by upack.

Library code raises these; only the command line front end catches them
and turns them into a single ``ERROR:`` line and an exit code.
"""
from typing import Optional


class UpackError(Exception):
    """Base class of every error upack reports."""


# Configuration


class ConfigError(UpackError):
    pass


class MissingOption(ConfigError):
    def __init__(self, option: str):
        super().__init__(f"missing required option {option}")
        self.option = option


class PathNotFound(ConfigError):
    def __init__(self, path: str, what: str, not_a_directory: bool = False,
                 cause: Optional[BaseException] = None):
        if not_a_directory:
            msg = f"{what} is not a directory: {path}"
        else:
            msg = f"{what} not found: {path}"
        if cause is not None:
            msg = f"{msg} ({cause})"
        super().__init__(msg)
        self.path = path
        self.what = what
        self.not_a_directory = not_a_directory


# Build


class BuildError(UpackError):
    pass


class BuildFailed(BuildError):
    pass


class BuildArtifactMissing(BuildError):
    def __init__(self, path: str):
        super().__init__(f"Android build result not found: {path}")
        self.path = path


# Archives


class ArchiveError(UpackError):
    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class ArchiveOpenFailed(ArchiveError):
    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"cannot open archive {path}: {cause}", path)


class PathTraversal(ArchiveError):
    def __init__(self, entry: str, dest_dir: str):
        super().__init__(f"illegal entry path {entry!r} escapes {dest_dir}", entry)
        self.dest_dir = dest_dir


class EntryWriteFailed(ArchiveError):
    def __init__(self, entry: str, cause: BaseException):
        super().__init__(f"cannot extract entry {entry}: {cause}", entry)


class SourceReadFailed(ArchiveError):
    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"cannot read directory {path}: {cause}", path)


class ArchiveCreateFailed(ArchiveError):
    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"cannot create archive {path}: {cause}", path)


class EntryReadFailed(ArchiveError):
    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"cannot read {path} into archive: {cause}", path)


# Manifest templates


class TemplateError(UpackError):
    pass


class TemplateLoadFailed(TemplateError):
    pass


class TemplateParseFailed(TemplateError):
    pass


class TemplateRenderFailed(TemplateError):
    pass


# Filesystem


class FilesystemError(UpackError):
    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path


class BackupFailed(FilesystemError):
    def __init__(self, path: str, cause: BaseException, action: str = "backup"):
        super().__init__(f"{action} {path}: {cause}", path)


class DirectoryCreateFailed(FilesystemError):
    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"cannot create directory {path}: {cause}", path)


class WriteFailed(FilesystemError):
    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"cannot write {path}: {cause}", path)
