"""
main.py – Game catalog command line entry point.
Bootstraps a QCoreApplication, scans the game directories on a background
worker and prints what was found.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QCoreApplication

from models.search_context import SearchContext
from services import config_service
from services.exceptions import ConfigError
from workers.scan_worker import ScanWorker

logger = logging.getLogger(__name__)


def _parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="gamecatalog", add_help=True)
    p.add_argument("directories", nargs="*",
                   help="Directories containing a metadata file (default: read from the game directory list).")
    p.add_argument("--config", type=Path, default=None,
                   help=f"Game directory list file (default: {config_service.default_game_dirs_path()}).")
    p.add_argument("--json", action="store_true",
                   help="Print the whole catalog as JSON instead of a summary.")
    p.add_argument("--log-level", type=str, default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Console log level.")
    return p.parse_args(argv)


def format_summary(sctx: SearchContext) -> str:
    lines = []
    for name, coll in sctx.collections.items():
        lines.append(f"{coll}  ({len(sctx.collection_children.get(name, []))} games)")
        for game in sctx.children_of(name):
            lines.append(f"    {game}")
    lines.append(f"{len(sctx.collections)} collection(s), {len(sctx.games)} game(s)")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(levelname)s %(name)s: %(message)s")

    directories = args.directories
    if not directories:
        try:
            directories = config_service.load_game_dirs(args.config)
        except ConfigError as exc:
            logger.error("%s", exc)
            return 1

    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    app.setApplicationName("gamecatalog")

    result = {"code": 0}
    worker = ScanWorker(directories)

    def on_completed(sctx: SearchContext) -> None:
        if args.json:
            print(json.dumps(sctx.to_dict(), indent=2, ensure_ascii=False))
        else:
            print(format_summary(sctx))

    def on_error(message: str) -> None:
        print(message, file=sys.stderr)
        result["code"] = 1

    worker.status.connect(logger.info)
    worker.completed.connect(on_completed)
    worker.error.connect(on_error)
    worker.finished.connect(app.quit)
    worker.start()

    app.exec()
    worker.wait()
    return result["code"]


if __name__ == "__main__":
    raise SystemExit(main())
