from __future__ import annotations

import argparse
import logging
from pathlib import Path

from flap.app_config import RunConfig, load_settings, save_settings
from flap.state import BEST_SCORE_KEY, JsonKeyValueStore


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="flap", description="Flap: side-scrolling obstacle game")
    parser.add_argument(
        "--smoke",
        action="store_true",
        help="Run briefly offscreen and exit (for quick verification).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for obstacle placement (same seed -> same obstacle stream).",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=Path("flap_settings.json"),
        help="Path to JSON settings file for gameplay tuning (missing file = defaults).",
    )
    parser.add_argument(
        "--write-settings",
        type=Path,
        default=None,
        help="Write the effective settings (defaults merged with --settings) to this path and exit.",
    )
    parser.add_argument(
        "--reset-best",
        action="store_true",
        help="Clear the stored best score and exit.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level for stderr output (default: INFO).",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.write_settings is not None:
        save_settings(args.write_settings, load_settings(args.settings))
        print(f"settings: {args.write_settings}")
        return

    if args.reset_best:
        store = JsonKeyValueStore()
        ok = store.delete(BEST_SCORE_KEY)
        print(f"best score cleared: {ok} ({store.path})")
        return

    # Imported late so the maintenance commands above work without a display stack.
    from flap.app import run

    run(RunConfig(smoke=args.smoke, seed=args.seed, settings_path=str(args.settings)))


if __name__ == "__main__":
    main()
