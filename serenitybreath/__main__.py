"""Allow running SerenityBreath as a module: python -m serenitybreath."""

import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from .database.db import init_db
from .app import SerenityBreathApp

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def main() -> None:
    level = os.environ.get("SERENITYBREATH_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)

    init_db()
    logging.getLogger(__name__).info("SerenityBreath ready")

    app = QApplication(sys.argv)
    app.setApplicationName("SerenityBreath")
    app.setOrganizationName("SerenityBreath")

    window = SerenityBreathApp()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
