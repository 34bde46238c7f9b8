"""
Code generation: template rendering + source canonicalization.

Template problems raise TemplateError; invalid generated source raises
FormatError.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
import shutil
import subprocess
from typing import Callable, Iterable, Mapping

import black
from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound
from jinja2 import TemplateError as JinjaTemplateError

from .errors import FormatError, StorageError, TemplateError
from .record import CurrencyRecord


LANGUAGE_GO = "go"
LANGUAGE_PYTHON = "python"

_LANGUAGE_BY_SUFFIX = {
    ".go": LANGUAGE_GO,
    ".py": LANGUAGE_PYTHON,
}

DEFAULT_HELPERS: Mapping[str, Callable] = {
    "lower": str.lower,
}

logger = logging.getLogger(__name__)


def language_for_path(path: str | os.PathLike) -> str:
    suffix = Path(path).suffix.lower()
    try:
        return _LANGUAGE_BY_SUFFIX[suffix]
    except KeyError:
        raise FormatError(f"no source formatter for {suffix or 'extensionless'} output: {path}") from None


def render_template(
    template_path: str | os.PathLike,
    records: Iterable[CurrencyRecord],
    helpers: Mapping[str, Callable] | None = None,
) -> str:
    """
    Render the template at ``template_path`` with ``currencies`` bound to the records.

    Helpers are exposed both as filters (``{{ c.code | lower }}``) and as
    functions (``{{ lower(c.code) }}``). Undefined names fail loudly.
    """
    path = Path(template_path)
    env = Environment(
        loader=FileSystemLoader(str(path.parent)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    # tojson yields valid Go/Python string literals; keep non-ASCII names readable
    env.policies["json.dumps_kwargs"] = {"ensure_ascii": False, "sort_keys": True}
    funcs = DEFAULT_HELPERS if helpers is None else helpers
    env.filters.update(funcs)
    env.globals.update(funcs)

    try:
        template = env.get_template(path.name)
    except TemplateNotFound as e:
        raise StorageError(f"template not found: {path}") from e
    except JinjaTemplateError as e:
        raise TemplateError(f"failed to parse template {path}: {e}") from e
    except OSError as e:
        raise StorageError(f"failed to read template {path}: {e}") from e

    try:
        return template.render(currencies=list(records))
    except Exception as e:
        raise TemplateError(f"failed to execute template {path}: {e}") from e


def _gofmt(text: str) -> bytes:
    gofmt = shutil.which("gofmt")
    if gofmt is None:
        raise FormatError("gofmt not found on PATH")
    proc = subprocess.run([gofmt], input=text.encode("utf-8"), capture_output=True, check=False)
    if proc.returncode != 0:
        detail = proc.stderr.decode("utf-8", errors="replace").strip()
        raise FormatError(f"gofmt rejected generated source: {detail}")
    return proc.stdout


def _black(text: str) -> bytes:
    try:
        formatted = black.format_str(text, mode=black.Mode())
    except black.InvalidInput as e:
        raise FormatError(f"black rejected generated source: {e}") from e
    return formatted.encode("utf-8")


def canonicalize_source(text: str, language: str) -> bytes:
    if language == LANGUAGE_GO:
        return _gofmt(text)
    if language == LANGUAGE_PYTHON:
        return _black(text)
    raise FormatError(f"unsupported language: {language}")


def render(
    template_path: str | os.PathLike,
    records: Iterable[CurrencyRecord],
    *,
    language: str = LANGUAGE_GO,
    helpers: Mapping[str, Callable] | None = None,
) -> bytes:
    text = render_template(template_path, records, helpers=helpers)
    logger.debug("Rendered %d characters from %s", len(text), template_path)
    return canonicalize_source(text, language)
