"""Точка входа приложения FocusBlocks.

Модуль настраивает логирование, подключает хранилище слотов, загружает
состояние и запускает главное окно.
"""

from __future__ import annotations

import logging
import sqlite3
import sys

from PyQt6.QtWidgets import QApplication

from focusblocks import config
from focusblocks.core.app_state import AppState
from focusblocks.data.state_store import StateStore
from focusblocks.data.storage import MemoryBackend, SqliteBackend
from focusblocks.ui.main_window import MainWindow
from focusblocks.ui.sound import QtAudioNotifier
from focusblocks.ui.styles import apply_theme


logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)


def build_store() -> StateStore:
    """Открывает SQLite-хранилище; при ошибке работает только в памяти."""
    try:
        backend = SqliteBackend(config.DB_PATH)
        backend.init_db()
    except (sqlite3.Error, OSError) as exc:
        logger.warning("State database %s is unavailable, keeping state in memory: %s", config.DB_PATH, exc)
        return StateStore(MemoryBackend())
    return StateStore(backend)


def main() -> int:
    """Создает зависимости приложения и запускает главный UI-цикл."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName(config.APP_NAME)
    apply_theme(app)

    notifier = QtAudioNotifier(app)
    app.aboutToQuit.connect(notifier.close)
    app_state = AppState(audio=notifier)
    app_state.load_from_storage(build_store())
    logger.info("Using state database at %s", config.DB_PATH)

    window = MainWindow(app_state=app_state)
    window.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
