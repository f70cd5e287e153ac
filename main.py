from __future__ import annotations

from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.views.main_window import MainWindow
from infrastructure.api_repository import RestLocationRepository
from infrastructure.logging import init_logging
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def main() -> int:
    settings = JsonSettings(BASE_DIR / "settings.json")
    log_path = init_logging(settings.get("logging.dir"), settings.get("logging.level", "INFO"))
    logger.info("Starting NodeMap, logs in {}", log_path)

    app = QApplication(sys.argv)

    repo = RestLocationRepository(
        base_url=settings.get("api.base_url"),
        endpoint=settings.get("api.locations_endpoint", "/lcp-nap-locations"),
        timeout=settings.get_float("api.timeout_seconds", None),
    )
    logger.info("Location endpoint: {}", repo.url)

    win = MainWindow(repo=repo, settings=settings, log_dir=str(log_path))
    # The creation form lives outside this view; a saved location triggers a refresh there.
    win.addLocationRequested.connect(
        lambda: win.statusBar().showMessage("Open the location form to add an LCP/NAP", 4000)
    )
    win.show()
    win.mount()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
