from __future__ import annotations


class CodegenError(RuntimeError):
    """Base class for every failure raised by the pipeline."""


class NetworkError(CodegenError):
    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ParseError(CodegenError):
    """Malformed registry XML or snapshot CSV."""


class StorageError(CodegenError):
    """Filesystem open/create/read/write failure."""


class TemplateError(CodegenError):
    """Template syntax or execution failure."""


class FormatError(CodegenError):
    """Rendered text could not be canonicalized as source code."""


class StageError(CodegenError):
    def __init__(self, *, stage: str, cause: Exception):
        super().__init__(f"{stage} failed: {cause}")
        self.stage = stage
        self.__cause__ = cause


class ConfigError(CodegenError):
    """Invalid configuration value (environment or CLI)."""
