from __future__ import annotations

import os
import sys
from typing import Optional

from PySide6.QtCore import QCoreApplication, QSettings
from PySide6.QtWidgets import QApplication

ORG_ID = "docuverse"
APP_ID = "docuviz"
ORG_DOMAIN = "docuverse.dev"

VISIBLE_APP_NAME = "DocuVerse Engine"


def create_app(argv: Optional[list[str]] = None) -> QApplication:
    """Create and configure the QApplication instance."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setOrganizationDomain(ORG_DOMAIN)
    QCoreApplication.setApplicationName(APP_ID)
    # engine overrides live in <config dir>/docuverse/docuviz.ini under [engine]
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)

    app = QApplication.instance() or QApplication(argv if argv is not None else sys.argv)
    app.setApplicationDisplayName(QCoreApplication.translate("App", VISIBLE_APP_NAME))
    return app
