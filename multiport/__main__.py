import argparse

from .config import HOST, PORT, RELOAD, LOG_LEVEL
from .logging_config import configure_logging
from .server import run


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="multiport-server", description="Run the hello server")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--reload", dest="reload", action="store_true", default=None,
                       help="restart on code changes")
    group.add_argument("--no-reload", dest="reload", action="store_false", default=None,
                       help="never restart on code changes")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(LOG_LEVEL)
    reload = RELOAD if args.reload is None else args.reload
    run(host=HOST, port=PORT, reload=reload)


if __name__ == "__main__":
    main()
