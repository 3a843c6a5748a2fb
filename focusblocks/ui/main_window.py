from __future__ import annotations

from datetime import datetime

from PyQt6.QtCore import QRect, QTimer, Qt
from PyQt6.QtGui import QAction, QColor, QKeySequence, QPainter, QPen
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QPushButton,
    QSlider,
    QSpinBox,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from focusblocks import config
from focusblocks.core.app_state import AppState
from focusblocks.core.models import MAX_BREAK_MINUTES, MAX_FOCUS_MINUTES, MIN_MINUTES, LogEntry, Phase, SoundKind


PHASE_COLORS = {Phase.FOCUS: "#f59e0b", Phase.BREAK: "#10b981"}


def fmt_time(seconds: int) -> str:
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def fmt_timestamp(epoch_ms: int) -> str:
    return datetime.fromtimestamp(epoch_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")


def window_title(remaining_seconds: int, is_running: bool, phase: Phase) -> str:
    if is_running:
        return f"{fmt_time(remaining_seconds)} • {phase.label} — {config.APP_NAME}"
    return f"Paused • {phase.label} — {config.APP_NAME}"


class ProgressRing(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(200, 200)
        self._percent = 0
        self._phase = Phase.FOCUS
        self._remaining_text = "00:00"

    def set_state(self, percent: int, phase: Phase, remaining_text: str) -> None:
        self._percent = max(0, min(100, percent))
        self._phase = phase
        self._remaining_text = remaining_text
        self.update()

    def paintEvent(self, event) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        side = min(self.width(), self.height()) - 20
        circle_rect = QRect((self.width() - side) // 2, (self.height() - side) // 2, side, side)

        painter.setPen(QPen(QColor("#e5e7eb"), 10))
        painter.drawEllipse(circle_rect)
        pen = QPen(QColor(PHASE_COLORS[self._phase]), 10)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        painter.setPen(pen)
        painter.drawArc(circle_rect, 90 * 16, int(-360 * 16 * self._percent / 100))

        font = painter.font()
        font.setPointSize(28)
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QColor("#111827"))
        painter.drawText(circle_rect, Qt.AlignmentFlag.AlignCenter, self._remaining_text)


class LogEntryDialog(QDialog):
    def __init__(self, entry: LogEntry, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Session details")
        layout = QVBoxLayout(self)
        form = QFormLayout()
        form.addRow("Phase:", QLabel(entry.phase.label))
        form.addRow("Task:", QLabel(entry.task))
        form.addRow("Start:", QLabel(fmt_timestamp(entry.start)))
        form.addRow("End:", QLabel(fmt_timestamp(entry.end)))
        form.addRow("Duration:", QLabel(fmt_time(entry.duration_seconds)))
        form.addRow("Outcome:", QLabel(entry.reason.value.capitalize()))
        layout.addLayout(form)

        layout.addWidget(QLabel("Todos snapshot"))
        if not entry.todos:
            layout.addWidget(QLabel("No todos were attached to this session."))
        else:
            todos = QListWidget()
            for todo in entry.todos:
                item = QListWidgetItem(todo.text, todos)
                item.setFlags(Qt.ItemFlag.ItemIsEnabled)
                item.setCheckState(Qt.CheckState.Checked if todo.done else Qt.CheckState.Unchecked)
            layout.addWidget(todos)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)


class MainWindow(QMainWindow):
    def __init__(self, app_state: AppState) -> None:
        super().__init__()
        self.setWindowTitle(config.APP_NAME)
        self.resize(1100, 760)
        self._original_title = self.windowTitle()

        self.app_state = app_state
        self._syncing = False

        self._build_ui()
        self._connect_signals()

        self.tick_timer = QTimer(self)
        self.tick_timer.setInterval(config.TICK_INTERVAL_MS)
        self.tick_timer.timeout.connect(self._on_tick)

        self.clock_timer = QTimer(self)
        self.clock_timer.setInterval(config.CLOCK_INTERVAL_MS)
        self.clock_timer.timeout.connect(self._refresh_clock)
        self.clock_timer.start()

        self._refresh_clock()
        self._sync_settings()
        self._refresh_timer()
        self._refresh_todos()
        self._refresh_log()
        self.task_edit.setText(self.app_state.current_task)

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)
        root = QVBoxLayout(central)

        header = QHBoxLayout()
        title = QLabel(config.APP_NAME)
        title.setObjectName("Heading")
        self.clock_label = QLabel()
        self.clock_label.setObjectName("SubtleTitle")
        header.addWidget(title)
        header.addStretch()
        header.addWidget(self.clock_label)
        root.addLayout(header)

        body = QHBoxLayout()
        root.addLayout(body, 1)

        timer_box = QVBoxLayout()
        phase_bar = QHBoxLayout()
        self.focus_btn = QPushButton("Focus")
        self.break_btn = QPushButton("Break")
        self.phase_label = QLabel()
        phase_bar.addWidget(self.focus_btn)
        phase_bar.addWidget(self.break_btn)
        phase_bar.addWidget(self.phase_label)
        phase_bar.addStretch()
        timer_box.addLayout(phase_bar)

        self.ring = ProgressRing()
        timer_box.addWidget(self.ring, 1)

        self.task_edit = QLineEdit()
        self.task_edit.setPlaceholderText("Task for this focus window")
        timer_box.addWidget(self.task_edit)

        controls = QHBoxLayout()
        self.start_btn = QPushButton("Start")
        self.pause_btn = QPushButton("Pause")
        self.reset_btn = QPushButton("Reset")
        self.skip_btn = QPushButton("Skip")
        for button in (self.start_btn, self.pause_btn, self.reset_btn, self.skip_btn):
            controls.addWidget(button)
        controls.addStretch()
        timer_box.addLayout(controls)

        self.progress_label = QLabel()
        timer_box.addWidget(self.progress_label)

        timer_box.addWidget(QLabel("Checklist for this window"))
        todo_input = QHBoxLayout()
        self.todo_edit = QLineEdit()
        self.todo_edit.setPlaceholderText("Add a todo and press Enter")
        self.todo_add_btn = QPushButton("Add")
        todo_input.addWidget(self.todo_edit, 1)
        todo_input.addWidget(self.todo_add_btn)
        timer_box.addLayout(todo_input)
        self.todo_list = QListWidget()
        timer_box.addWidget(self.todo_list)
        todo_actions = QHBoxLayout()
        self.todo_remove_btn = QPushButton("Remove selected")
        self.clear_completed_btn = QPushButton("Clear completed")
        todo_actions.addWidget(self.todo_remove_btn)
        todo_actions.addWidget(self.clear_completed_btn)
        todo_actions.addStretch()
        timer_box.addLayout(todo_actions)
        body.addLayout(timer_box, 2)

        settings_box = QFormLayout()
        self.focus_spin = QSpinBox()
        self.focus_spin.setRange(MIN_MINUTES, MAX_FOCUS_MINUTES)
        self.break_spin = QSpinBox()
        self.break_spin.setRange(MIN_MINUTES, MAX_BREAK_MINUTES)
        self.sound_combo = QComboBox()
        for kind in SoundKind:
            self.sound_combo.addItem(kind.value.capitalize(), kind.value)
        self.volume_slider = QSlider(Qt.Orientation.Horizontal)
        self.volume_slider.setRange(0, 100)
        self.volume_label = QLabel()
        self.preview_btn = QPushButton("Test sound")
        settings_box.addRow("Focus length (min):", self.focus_spin)
        settings_box.addRow("Break length (min):", self.break_spin)
        settings_box.addRow("Alert sound:", self.sound_combo)
        settings_box.addRow(self.volume_label, self.volume_slider)
        settings_box.addRow(self.preview_btn)
        settings_panel = QWidget()
        settings_panel.setLayout(settings_box)
        body.addWidget(settings_panel, 1)

        log_bar = QHBoxLayout()
        log_title = QLabel("Session Log")
        log_title.setObjectName("SubtleTitle")
        self.clear_log_btn = QPushButton("Clear")
        log_bar.addWidget(log_title)
        log_bar.addStretch()
        log_bar.addWidget(self.clear_log_btn)
        root.addLayout(log_bar)

        self.log_table = QTableWidget(0, 6)
        self.log_table.setHorizontalHeaderLabels(["Phase", "Task", "Start", "End", "Duration", "Outcome"])
        self.log_table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.log_table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.log_table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.log_table.verticalHeader().setVisible(False)
        root.addWidget(self.log_table, 1)

        space_action = QAction(self)
        space_action.setShortcut(QKeySequence(Qt.Key.Key_Space))
        space_action.triggered.connect(self._space_toggle)
        self.addAction(space_action)

    def _connect_signals(self) -> None:
        self.start_btn.clicked.connect(lambda: self.app_state.start())
        self.pause_btn.clicked.connect(self.app_state.pause)
        self.reset_btn.clicked.connect(lambda: self.app_state.reset())
        self.skip_btn.clicked.connect(lambda: self.app_state.skip())
        self.focus_btn.clicked.connect(lambda: self.app_state.switch_phase(Phase.FOCUS))
        self.break_btn.clicked.connect(lambda: self.app_state.switch_phase(Phase.BREAK))
        self.task_edit.textEdited.connect(self.app_state.set_current_task)

        self.todo_edit.returnPressed.connect(self._add_todo)
        self.todo_add_btn.clicked.connect(self._add_todo)
        self.todo_list.itemChanged.connect(self._on_todo_item_changed)
        self.todo_remove_btn.clicked.connect(self._remove_selected_todo)
        self.clear_completed_btn.clicked.connect(self.app_state.clear_completed)

        self.focus_spin.valueChanged.connect(self._on_focus_minutes)
        self.break_spin.valueChanged.connect(self._on_break_minutes)
        self.sound_combo.currentIndexChanged.connect(self._on_sound_changed)
        self.volume_slider.valueChanged.connect(self._on_volume_changed)
        self.preview_btn.clicked.connect(self.app_state.preview_sound)

        self.clear_log_btn.clicked.connect(self.app_state.clear_log)
        self.log_table.cellDoubleClicked.connect(self._open_entry)

        self.app_state.timer_changed.connect(self._refresh_timer)
        self.app_state.running_changed.connect(self._on_running_changed)
        self.app_state.todos_changed.connect(self._refresh_todos)
        self.app_state.log_changed.connect(self._refresh_log)
        self.app_state.settings_changed.connect(lambda _key, _value: self._sync_settings())

    def _on_running_changed(self, running: bool) -> None:
        if running:
            self.tick_timer.start()
        else:
            self.tick_timer.stop()

    def _on_tick(self) -> None:
        self.app_state.tick()

    def _space_toggle(self) -> None:
        if self.todo_edit.hasFocus() or self.task_edit.hasFocus():
            return
        if self.app_state.is_running:
            self.app_state.pause()
        else:
            self.app_state.start()

    def _refresh_clock(self) -> None:
        self.clock_label.setText(datetime.now().strftime("%H:%M · %A, %d %b %Y"))

    def _refresh_timer(self) -> None:
        snapshot = self.app_state.snapshot()
        running = snapshot.is_running
        self.ring.set_state(snapshot.percent_complete, snapshot.phase, fmt_time(snapshot.remaining_seconds))
        self.setWindowTitle(window_title(snapshot.remaining_seconds, running, snapshot.phase))
        self.phase_label.setText(snapshot.phase.label)

        self.focus_btn.setEnabled(not running and snapshot.phase is not Phase.FOCUS)
        self.break_btn.setEnabled(not running and snapshot.phase is not Phase.BREAK)
        self.start_btn.setEnabled(not running)
        self.pause_btn.setEnabled(running)
        self.task_edit.setVisible(snapshot.phase is Phase.FOCUS)

        minutes = self.app_state.settings.minutes_for(snapshot.phase)
        text = f"Progress: {snapshot.percent_complete}%   Window: {minutes} min"
        if snapshot.phase is Phase.FOCUS and self.app_state.current_task:
            text += f"   Task: {self.app_state.current_task}"
        self.progress_label.setText(text)

    def _refresh_todos(self) -> None:
        self._syncing = True
        self.todo_list.clear()
        for todo in self.app_state.todos.items:
            item = QListWidgetItem(todo.text, self.todo_list)
            item.setData(Qt.ItemDataRole.UserRole, todo.id)
            item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable)
            item.setCheckState(Qt.CheckState.Checked if todo.done else Qt.CheckState.Unchecked)
        self.clear_completed_btn.setEnabled(any(todo.done for todo in self.app_state.todos.items))
        self._syncing = False

    def _refresh_log(self) -> None:
        entries = self.app_state.log.entries
        self.log_table.setRowCount(len(entries))
        for row, entry in enumerate(entries):
            values = [
                entry.phase.label,
                entry.task,
                fmt_timestamp(entry.start),
                fmt_timestamp(entry.end),
                fmt_time(entry.duration_seconds),
                entry.reason.value,
            ]
            for column, value in enumerate(values):
                cell = QTableWidgetItem(value)
                cell.setData(Qt.ItemDataRole.UserRole, entry.id)
                self.log_table.setItem(row, column, cell)

    def _sync_settings(self) -> None:
        settings = self.app_state.settings
        self._syncing = True
        self.focus_spin.setValue(settings.focus_minutes)
        self.break_spin.setValue(settings.break_minutes)
        self.sound_combo.setCurrentIndex(max(0, self.sound_combo.findData(settings.sound_kind.value)))
        self.volume_slider.setValue(round(settings.volume * 100))
        self.volume_label.setText(f"Volume: {round(settings.volume * 100)}%")
        self._syncing = False

    def _add_todo(self) -> None:
        if self.app_state.add_todo(self.todo_edit.text()) is not None:
            self.todo_edit.clear()

    def _on_todo_item_changed(self, item: QListWidgetItem) -> None:
        if self._syncing:
            return
        self.app_state.toggle_todo(item.data(Qt.ItemDataRole.UserRole))

    def _remove_selected_todo(self) -> None:
        item = self.todo_list.currentItem()
        if item is not None:
            self.app_state.remove_todo(item.data(Qt.ItemDataRole.UserRole))

    def _on_focus_minutes(self, value: int) -> None:
        if not self._syncing:
            self.app_state.set_focus_minutes(value)

    def _on_break_minutes(self, value: int) -> None:
        if not self._syncing:
            self.app_state.set_break_minutes(value)

    def _on_sound_changed(self, index: int) -> None:
        if not self._syncing:
            self.app_state.set_sound_kind(self.sound_combo.itemData(index))

    def _on_volume_changed(self, value: int) -> None:
        if not self._syncing:
            self.app_state.set_volume(value / 100)

    def _open_entry(self, row: int, _column: int) -> None:
        cell = self.log_table.item(row, 0)
        if cell is None:
            return
        entry = self.app_state.find_entry(cell.data(Qt.ItemDataRole.UserRole))
        if entry is not None:
            LogEntryDialog(entry, self).exec()

    def closeEvent(self, event) -> None:  # noqa: N802
        self.tick_timer.stop()
        self.clock_timer.stop()
        if self.app_state.is_running:
            self.app_state.pause()
        self.setWindowTitle(self._original_title)
        event.accept()
