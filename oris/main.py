from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication, QMessageBox

from oris.app_context import AppContext
from oris.config import get_settings
from oris.errors import StoreError
from oris.logging_config import setup_logging
from oris.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def main() -> int:
    settings = get_settings()
    setup_logging(settings)
    app = QApplication(sys.argv)
    app.setApplicationName("ORIS FORMATION - Gestion")

    try:
        ctx = AppContext.build(settings)
        ctx.company.load()
        ctx.refresh_statuses()
    except StoreError as e:
        logger.exception("Ouverture des données impossible")
        QMessageBox.critical(None, "ORIS FORMATION", str(e))
        return 1

    win = MainWindow(ctx)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
