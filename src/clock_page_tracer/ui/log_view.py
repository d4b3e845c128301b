"""
実行ログを表示するウィジェット。
"""
from typing import List, Tuple

from PySide6.QtWidgets import QWidget, QVBoxLayout, QTableWidget, QTableWidgetItem, QHeaderView
from PySide6.QtGui import QColor

from clock_page_tracer.core.state import LogType
from clock_page_tracer.ui.fonts import get_monospace_font

# ログ種別ごとの文字色
LOG_COLORS = {
    LogType.INFO: "#BBBBBB",
    LogType.HIT: "#99FF99",
    LogType.FAULT: "#FF9999",
    LogType.CHECK: "#FFAA00",
}

# @intent:responsibility ステップごとのメッセージを種別に応じた色で追記していくUIウィジェットを提供します。
class LogView(QWidget):
    """
    実行ログを表示するウィジェット。
    状態機械は直近1ステップ分の出力しか持たないため、蓄積はこのウィジェットが担います。
    """
    def __init__(self, parent=None):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)

        self.table = QTableWidget()
        self.table.setColumnCount(2)
        self.table.setHorizontalHeaderLabels(["Type", "Message"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeToContents) # Type
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.Stretch)          # Message

        self.table.setFont(get_monospace_font(10))
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setShowGrid(False)
        self.table.setStyleSheet("background-color: #101010; color: #BBBBBB; gridline-color: #303030;")

        self.layout.addWidget(self.table)

        self._entries: List[Tuple[str, LogType]] = []

    @property
    def entries(self) -> List[Tuple[str, LogType]]:
        return list(self._entries)

    # @intent:responsibility メッセージを1行追加し、最下行までスクロールします。空メッセージは無視します。
    def add_entry(self, message: str, log_type: LogType = LogType.INFO):
        if not message:
            return
        self._entries.append((message, log_type))

        row = self.table.rowCount()
        self.table.insertRow(row)
        color = QColor(LOG_COLORS[log_type])
        for column, text in enumerate((log_type.value, message)):
            item = QTableWidgetItem(text)
            item.setForeground(color)
            self.table.setItem(row, column, item)

        self.table.scrollToBottom()

    def clear(self):
        self._entries.clear()
        self.table.setRowCount(0)
