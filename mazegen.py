# mazegen.py
"""Generate the Great Labyrinth room graph.

Builds a perfect maze from a seed, pins the five city gates, scatters points
of interest and shortcut portals, and writes ``labyrinth.yaml`` into the
output directory.  Defaults come from ``config/mazegen.toml`` when present;
command-line flags take precedence.

Run ``python mazegen.py --help`` for details.
"""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog

from labyrinth.analysis import is_perfect_maze
from labyrinth.generator import DEFAULT_SEED, DEFAULT_SIZE, LabyrinthGenerator
from labyrinth.render import render_grid
from utils.logging_utils import LOG_LEVEL_NAMES, level_from_name, setup_logging

SCRIPT_DIR = Path(__file__).parent.resolve()
CONFIG_DIR = SCRIPT_DIR / "config"
SETTINGS_FILE = CONFIG_DIR / "mazegen.toml"

DEFAULT_OUT_DIR = "data/labyrinth"
MIN_SIZE = 2
SEED_MIN = -(2**63)
SEED_MAX = 2**63 - 1

log = structlog.get_logger(__name__)


def load_toml_config(config_path: Path, config_name: str) -> Dict[str, Any]:
    """Loads a TOML configuration file, returning ``{}`` if it is unusable."""
    if not config_path.is_file():
        log.debug(f"{config_name} config file not found", path=str(config_path))
        return {}
    try:
        with config_path.open("rb") as f:  # tomllib requires bytes mode
            config_data = tomllib.load(f)
        log.debug(f"{config_name} config loaded", path=str(config_path))
        return config_data
    except tomllib.TOMLDecodeError as e:
        log.error(f"Error parsing TOML for {config_name}", path=str(config_path), error=str(e))
        return {}
    except OSError as e:
        log.error(f"Failed to load {config_name} config", path=str(config_path), error=str(e))
        return {}


def _grid_size(value: str) -> int:
    size = int(value)
    if size < MIN_SIZE:
        raise argparse.ArgumentTypeError(f"size must be at least {MIN_SIZE}, got {size}")
    return size


def _seed(value: str) -> int:
    seed = int(value)
    if not SEED_MIN <= seed <= SEED_MAX:
        raise argparse.ArgumentTypeError(f"seed must fit in a signed 64-bit integer, got {seed}")
    return seed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mazegen",
        description="Generate the labyrinth connecting all cities as a static room graph.",
    )
    parser.add_argument(
        "--size",
        type=_grid_size,
        default=None,
        help=f"Maze width and height (default: {DEFAULT_SIZE})",
    )
    parser.add_argument(
        "--seed",
        type=_seed,
        default=None,
        help=f"Seed for random generation (default: {DEFAULT_SEED})",
    )
    parser.add_argument(
        "--out",
        default=None,
        help=f"Output directory (default: {DEFAULT_OUT_DIR}/)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=SETTINGS_FILE,
        help="Settings file supplying defaults (TOML, [generator] table).",
    )
    parser.add_argument(
        "--map",
        action="store_true",
        help="Print an ASCII map of the generated labyrinth.",
    )
    parser.add_argument(
        "--log-level",
        choices=list(LOG_LEVEL_NAMES),
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def resolve_options(args: argparse.Namespace, settings: Dict[str, Any]) -> argparse.Namespace:
    """Fill unset flags from the settings table, then from built-in defaults.

    Raises ``ValueError`` when the ``[generator]`` table or one of its values
    has the wrong type.
    """
    generator_cfg = settings.get("generator", {})
    if not isinstance(generator_cfg, dict):
        raise ValueError("[generator] must be a table")
    if args.size is None:
        args.size = _setting_int(generator_cfg, "size", DEFAULT_SIZE)
    if args.seed is None:
        args.seed = _setting_int(generator_cfg, "seed", DEFAULT_SEED)
    if args.out is None:
        out = generator_cfg.get("out", DEFAULT_OUT_DIR)
        if not isinstance(out, str):
            raise ValueError(f"generator.out must be a string, got {out!r}")
        args.out = out
    return args


def _setting_int(table: Dict[str, Any], key: str, default: int) -> int:
    value = table.get(key, default)
    # TOML booleans are ints to Python; reject them along with strings.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"generator.{key} must be an integer, got {value!r}")
    return value


def print_summary(gen: LabyrinthGenerator) -> None:
    summary = gen.summary()
    print("\nLabyrinth generated successfully!")
    print(f"  - Total rooms: {summary.rooms}")
    print(f"  - City gates: {summary.gates}")
    print(f"  - Treasure vaults: {summary.treasure}")
    print(f"  - Hidden merchants: {summary.merchants}")
    print(f"  - Lore NPCs: {summary.lore_npcs}")
    print(f"  - Secret shortcuts: {summary.shortcut_pairs} pairs")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else level_from_name(args.log_level, logging.WARNING)
    setup_logging(log_level)

    settings = load_toml_config(args.config, "Mazegen")
    try:
        args = resolve_options(args, settings)
    except ValueError as e:
        log.error("Invalid generator settings", path=str(args.config), error=str(e))
        parser.error(f"invalid settings in {args.config}: {e}")
    if args.size < MIN_SIZE:
        parser.error(f"size must be at least {MIN_SIZE}, got {args.size}")
    if not SEED_MIN <= args.seed <= SEED_MAX:
        parser.error(f"seed must fit in a signed 64-bit integer, got {args.seed}")

    output_dir = Path(args.out)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        log.error("Failed to create output directory", path=str(output_dir), error=str(e))
        print(f"Error: failed to create output directory: {e}", file=sys.stderr)
        return 1

    gen = LabyrinthGenerator(args.size, args.size, args.seed)

    print(f"Generating {args.size}x{args.size} labyrinth (seed: {args.seed})")
    print(f"Output directory: {output_dir}\n")

    print("Generating maze structure... ", end="")
    gen.carve()
    print("OK")
    if not is_perfect_maze(gen.grid):
        log.warning("Carved grid failed the perfect maze check", seed=args.seed)

    print("Placing city gates... ", end="")
    gen.place_gates()
    print(f"OK ({len(gen.gates)} gates)")

    print("Placing points of interest... ", end="")
    poi_count = gen.place_points_of_interest()
    print(f"OK ({poi_count} POIs)")

    print("Writing labyrinth.yaml... ", end="")
    try:
        path = gen.write(output_dir)
    except OSError as e:
        print("FAILED")
        log.error("Failed to write labyrinth document", path=str(output_dir), error=str(e))
        print(f"Error: failed to write labyrinth document: {e}", file=sys.stderr)
        return 1
    print("OK")
    log.info("Labyrinth written", path=str(path))

    print_summary(gen)
    if args.map:
        print()
        print(render_grid(gen.grid, legend=True), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
