from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from time import perf_counter
from typing import Callable, TypeVar

from dotenv import load_dotenv

from .errors import ConfigError, StageError
from .io_utils import persist
from .ordering import order_records
from .registry import DEFAULT_TIMEOUT_SECONDS, REGISTRY_URL, refresh_snapshot
from .render import language_for_path, render
from .snapshot import load_snapshot


SNAPSHOT_PATH_DEFAULT = os.path.join("scripts", "currency", "currency_data.csv")
TEMPLATE_PATH_DEFAULT = os.path.join("scripts", "currency", "currency_data.tmpl")
OUTPUT_PATH_DEFAULT = "currency_data.go"

STAGE_CONFIG = "config"
STAGE_FETCH = "fetch"
STAGE_READ = "read"
STAGE_ORDER = "order"
STAGE_RENDER = "render"
STAGE_WRITE = "write"

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CodegenConfig:
    snapshot_path: str = SNAPSHOT_PATH_DEFAULT
    template_path: str = TEMPLATE_PATH_DEFAULT
    output_path: str = OUTPUT_PATH_DEFAULT
    registry_url: str = REGISTRY_URL
    request_timeout: float | None = DEFAULT_TIMEOUT_SECONDS
    fetch: bool = True


def config_from_env(**overrides) -> CodegenConfig:
    """
    Defaults < environment (.env supported) < explicit overrides.

    Overrides set to None are ignored so CLI flags can be passed through as-is.
    """
    load_dotenv()
    values: dict = {}
    env_map = {
        "registry_url": "CURRENCY_REGISTRY_URL",
        "snapshot_path": "CURRENCY_SNAPSHOT_PATH",
        "template_path": "CURRENCY_TEMPLATE_PATH",
        "output_path": "CURRENCY_OUTPUT_PATH",
    }
    for field, var in env_map.items():
        v = os.getenv(var)
        if v:
            values[field] = v
    timeout = os.getenv("CURRENCY_REQUEST_TIMEOUT")
    if timeout:
        try:
            values["request_timeout"] = float(timeout)
        except ValueError as e:
            cause = ConfigError(f"invalid CURRENCY_REQUEST_TIMEOUT={timeout!r}: expected seconds")
            cause.__cause__ = e
            raise StageError(stage=STAGE_CONFIG, cause=cause) from cause

    values.update({k: v for k, v in overrides.items() if v is not None})
    return CodegenConfig(**values)


def _run_stage(stage: str, fn: Callable[[], T]) -> T:
    t0 = perf_counter()
    try:
        result = fn()
    except Exception as e:
        raise StageError(stage=stage, cause=e) from e
    logger.info("[TIMING] %s: %.2fs", stage, perf_counter() - t0)
    return result


def run_codegen(cfg: CodegenConfig) -> Path:
    """
    Main pipeline (fail-fast).

    fetch -> read -> order -> render -> write. The first failure is raised
    as StageError naming the stage; nothing is retried or cleaned up.
    """
    t0 = perf_counter()

    if cfg.fetch:
        _run_stage(
            STAGE_FETCH,
            lambda: refresh_snapshot(cfg.snapshot_path, url=cfg.registry_url, timeout=cfg.request_timeout),
        )
    else:
        logger.info("Skipping registry fetch; using existing snapshot %s", cfg.snapshot_path)

    rows = _run_stage(STAGE_READ, lambda: load_snapshot(cfg.snapshot_path))
    records = _run_stage(STAGE_ORDER, lambda: order_records(rows))
    code = _run_stage(
        STAGE_RENDER,
        lambda: render(cfg.template_path, records, language=language_for_path(cfg.output_path)),
    )
    _run_stage(STAGE_WRITE, lambda: persist(cfg.output_path, code))

    logger.info("Generated %s from %d currencies in %.2fs", cfg.output_path, len(records), perf_counter() - t0)
    return Path(cfg.output_path)
