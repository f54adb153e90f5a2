"""
Application Initialization
==========================
This module parses the command line, configures logging and starts the Qt
Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Sets up logging (console + optional file).
2. Creates the QApplication and loads the engine configuration from QSettings.
3. Instantiates the Main Window, which builds the document and the engine.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from PySide6.QtCore import QSettings

from docuviz.application import create_app
from docuviz.config import load_config
from docuviz.logging_config import setup_logging
from docuviz.view.main_window import MainWindow


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="docuviz", description="Interactive architecture diagrams.")
    parser.add_argument("--debug", action="store_true", help="log at DEBUG level")
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    # 1. Setup Logging
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # 2. Create the Qt Application (also fixes the QSettings location)
    app = create_app([sys.argv[0]])

    # 3. Engine configuration
    config = load_config(QSettings())

    # 4. Initialize the Main Window
    window = MainWindow(config)
    window.show()

    # 5. Start Event Loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
