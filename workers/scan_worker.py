"""
workers/scan_worker.py – Background QThread worker that builds the game
catalog without blocking the caller's event loop.

Signal contract
---------------
  progress(int, int)   : (steps_done, steps_total), for a progress bar
  status(str)          : Human-readable status message
  completed(object)    : The completed SearchContext
  error(str)           : User-friendly error message on failure

The catalog is only handed out through completed(), after the scan is
complete; nothing else touches it while the thread runs.
"""

from typing import List

from PySide6.QtCore import QThread, Signal

from services import catalog_service
from services.exceptions import ConfigError, GameCatalogError, ScanError


class ScanWorker(QThread):
    """
    Runs catalog_service.find_in_dirs() on a background thread.

    Instantiate, connect signals, then call start().
    """

    # ── Signals ───────────────────────────────────────────────────────────────
    progress  = Signal(int, int)   # (steps_done, steps_total)
    status    = Signal(str)        # status log message
    completed = Signal(object)     # SearchContext
    error     = Signal(str)        # user-facing error message

    def __init__(self, directories: List[str], parent=None) -> None:
        super().__init__(parent)
        self._directories = list(directories)

    # ── QThread entry point ───────────────────────────────────────────────────

    def run(self) -> None:
        """Scan executed on the worker thread."""
        try:
            self._run_scan()
        except ConfigError as exc:
            self.error.emit(f"Configuration error:\n{exc}")
        except ScanError as exc:
            self.error.emit(f"Scan failed:\n{exc}")
        except GameCatalogError as exc:
            self.error.emit(f"Error:\n{exc}")
        except Exception as exc:  # noqa: BLE001
            # Catch-all so the worker thread never silently dies.
            self.error.emit(f"Unexpected error:\n{type(exc).__name__}: {exc}")

    # ── Scan ──────────────────────────────────────────────────────────────────

    def _run_scan(self) -> None:
        if not self._directories:
            raise ConfigError("No game directories configured.")

        self.status.emit(f"Scanning {len(self._directories)} director(y/ies)…")
        sctx = catalog_service.find_in_dirs(
            self._directories,
            progress_callback=self._on_progress,
        )
        self.status.emit(
            f"Found {len(sctx.collections)} collection(s) and {len(sctx.games)} game(s)."
        )
        self.completed.emit(sctx)

    # ── Callbacks (called from worker thread; emit signals thread-safely) ─────

    def _on_progress(self, done: int, total: int) -> None:
        self.progress.emit(done, total)
