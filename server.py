#!/usr/bin/env python3
import argparse
import logging
import os
from datetime import date

import uvicorn

from app import TODO_FILE, app
from store import Store

VERSION = "0.0.1"
HOST = os.getenv("TODO_HOST", "localhost")
PORT = int(os.getenv("TODO_PORT", "8888"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        add_help=False,
        description=f"TODO API Server. Version {VERSION}\nCopyright {date.today().year}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--help", action="help", help="show this help message and exit")
    parser.add_argument("-h", dest="host", default=HOST, help="Server host")
    parser.add_argument("-p", dest="port", type=int, default=PORT, help="Server port")
    parser.add_argument("-f", dest="file", default=TODO_FILE, help="todo JSON file")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.state.store = Store(args.file)
    logging.getLogger(__name__).info("Local server starting on port %d", args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
