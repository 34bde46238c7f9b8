"""
Refresh the ISO 4217 snapshot and regenerate currency_data.go.

Exit codes:
  0 - snapshot refreshed and output written
  1 - a stage failed (message names the stage)
"""
import argparse
import logging
import sys
from pathlib import Path

# Add the repository root to the path to import from currency_codegen
sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from currency_codegen.errors import StageError
from currency_codegen.pipeline import config_from_env, run_codegen


logger = logging.getLogger("currency_codegen")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Update ISO 4217 currency data and generate Go code")
    p.add_argument("--snapshot", type=str, default=None, help="Snapshot CSV path (default: scripts/currency/currency_data.csv)")
    p.add_argument("--template", type=str, default=None, help="Template path (default: scripts/currency/currency_data.tmpl)")
    p.add_argument("--output", type=str, default=None, help="Generated source path (default: currency_data.go)")
    p.add_argument("--url", type=str, default=None, help="ISO 4217 list-one XML URL")
    p.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds")
    p.add_argument("--skip-fetch", action="store_true", help="Render from the existing snapshot without downloading")
    p.add_argument("-v", "--verbose", action="store_true", help="Log stage timings")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        cfg = config_from_env(
            snapshot_path=args.snapshot,
            template_path=args.template,
            output_path=args.output,
            registry_url=args.url,
            request_timeout=args.timeout,
            fetch=False if args.skip_fetch else None,
        )
        run_codegen(cfg)
    except StageError as e:
        logger.error("error updating currency data: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
