from __future__ import annotations

from PyQt6.QtWidgets import QApplication


THEME_QSS = """
QWidget {
    background: #ffffff;
    color: #111827;
    font-size: 13px;
}

QLabel {
    background: transparent;
}

QLabel#Heading {
    font-size: 22px;
    font-weight: 700;
}

QLabel#SubtleTitle {
    font-size: 15px;
    font-weight: 600;
    color: #4b5563;
}

QPushButton {
    border: 1px solid #d1d5db;
    background: #ffffff;
    border-radius: 12px;
    padding: 7px 14px;
    font-weight: 600;
}

QPushButton:hover {
    background: #f9fafb;
}

QPushButton:disabled {
    color: #9ca3af;
    border-color: #e5e7eb;
}

QLineEdit, QSpinBox, QComboBox {
    border: 1px solid #d1d5db;
    border-radius: 12px;
    padding: 6px 10px;
    min-height: 22px;
}

QLineEdit:focus, QSpinBox:focus, QComboBox:focus {
    border-color: #111827;
}

QListWidget, QTableWidget {
    border: 1px solid #e5e7eb;
    border-radius: 12px;
    padding: 4px;
}

QListWidget::item {
    padding: 4px;
}

QListWidget::item:selected, QTableWidget::item:selected {
    background: #f3f4f6;
    color: #111827;
}

QHeaderView::section {
    background: #ffffff;
    border: none;
    color: #4b5563;
    padding: 4px;
}

QSlider::groove:horizontal {
    height: 6px;
    border-radius: 3px;
    background: #e5e7eb;
}

QSlider::handle:horizontal {
    width: 14px;
    margin: -5px 0;
    border-radius: 7px;
    background: #111827;
}
"""


def apply_theme(app: QApplication) -> None:
    app.setStyleSheet(THEME_QSS)
