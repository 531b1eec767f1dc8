"""Life Simulator - Entry Point.

    python simulator.py serve
    python simulator.py run --pattern glider --generations 100
    python simulator.py run --pattern-file glider.lif --generations 4 --sorted
"""

import argparse
import sys
from pathlib import Path

from config import load_config
from utils.crash import configure as configure_crash, install_crash_handler

config = load_config()
configure_crash(config.logging.crash_file)
install_crash_handler()

from core.errors import BaseSimError
from internal.logging import StructuredLogger, get_logger
from simulation.life106 import format_life106, parse_life106
from simulation.patterns import get_pattern, pattern_names
from simulation.world import World
from ui.app import create_app

app = create_app(config)


def run_generations(cells, generations, header, sort=False):
    """Batch driver: evaluate then commit ``generations`` times, return Life 1.06 text."""
    world = World(cells)
    for _ in range(generations):
        world.evaluate()
        world.update()
    return format_life106(world.cells(), header=header, sort=sort)


def build_parser():
    parser = argparse.ArgumentParser(prog="simulator", description="Sparse Conway's Game of Life")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="run the HTTP service")
    serve.add_argument("--host", default=config.server.host)
    serve.add_argument("--port", type=int, default=config.server.port)
    serve.add_argument("--reload", action="store_true")

    run = commands.add_parser("run", help="advance a pattern and print it as Life 1.06")
    source = run.add_mutually_exclusive_group()
    source.add_argument("--pattern", default=config.simulation.pattern, choices=pattern_names())
    source.add_argument("--pattern-file", type=Path)
    run.add_argument("--generations", type=int, default=1)
    run.add_argument("--sorted", action="store_true", help="order cells by x then y")
    run.add_argument("--header", default=config.simulation.print_header)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        import uvicorn
        uvicorn.run("simulator:app", host=args.host, port=args.port, reload=args.reload)
        return 0

    if args.generations < 0:
        print("--generations must be >= 0", file=sys.stderr)
        return 2
    StructuredLogger.configure(min_level=config.logging.level)
    if args.pattern_file:
        try:
            cells = parse_life106(args.pattern_file.read_text(encoding="utf-8-sig"))
        except (BaseSimError, OSError) as exc:
            print(f"{args.pattern_file}: {exc}", file=sys.stderr)
            return 2
    else:
        cells = get_pattern(args.pattern)
    get_logger().info("batch run", generations=args.generations, population=len(cells))
    sys.stdout.write(run_generations(cells, args.generations, args.header, sort=args.sorted))
    return 0


if __name__ == "__main__":
    sys.exit(main())
