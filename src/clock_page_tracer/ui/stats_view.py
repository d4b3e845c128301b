# src/clock_page_tracer/ui/stats_view.py
"""
ヒット/フォールトの統計と現在のページを表示するウィジェット。
"""
from typing import Dict, Optional
from PySide6.QtWidgets import QWidget, QVBoxLayout, QFormLayout, QLabel, QGroupBox
from PySide6.QtCore import Qt

from clock_page_tracer.core.state import ClockState
from clock_page_tracer.ui.fonts import get_monospace_font_family

NO_PAGE_LABEL = "N/A"

# @intent:responsibility ヒット率をパーセント表記（小数点以下2桁）に整形します。
def format_hit_ratio(ratio: float) -> str:
    return f"{ratio * 100:.2f}%"

# @intent:responsibility 統計値を表示するUIウィジェットを提供します。
class StatsView(QWidget):
    """
    Hits、Faults、Hit Ratio、Current Pageを表示するウィジェット。
    """
    FIELDS = ("Hits", "Faults", "Hit Ratio", "Current Page", "Micro-step")

    def __init__(self, parent=None):
        super().__init__(parent)

        # Apply dark theme
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")

        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(5, 5, 5, 5)

        self._font_family = get_monospace_font_family()
        self._value_labels: Dict[str, QLabel] = {}
        self._setup_ui()
        self.clear()

    def _setup_ui(self):
        group_box = QGroupBox("Statistics")
        group_box.setStyleSheet("""
            QGroupBox {
                font-weight: bold;
                border: 1px solid #222;
                border-radius: 4px;
                margin-top: 20px;
                color: #EEE;
                background-color: #121212;
            }
            QGroupBox::title {
                subcontrol-origin: margin;
                subcontrol-position: top left;
                padding: 0 5px;
                left: 10px;
                color: #00AAAA;
            }
        """)
        form = QFormLayout(group_box)
        form.setLabelAlignment(Qt.AlignLeft)
        form.setContentsMargins(10, 15, 10, 10)
        form.setSpacing(5)

        for name in self.FIELDS:
            label_name = QLabel(f"{name}:")
            label_name.setStyleSheet("font-weight: bold; color: #BBBBBB;")

            label_value = QLabel("")
            label_value.setStyleSheet(f"font-family: '{self._font_family}', monospace; color: #FFD700;") # Gold color
            label_value.setAlignment(Qt.AlignRight)

            form.addRow(label_name, label_value)
            self._value_labels[name] = label_value

        self.layout.addWidget(group_box)
        self.layout.addStretch()

    def value_text(self, name: str) -> str:
        return self._value_labels[name].text()

    def clear(self):
        self._set_values(0, 0, 0.0, None, "-")

    # @intent:responsibility 状態から統計表示を更新します。
    def update_stats(self, state: Optional[ClockState]):
        if state is None:
            self.clear()
            return
        self._set_values(state.hits, state.faults, state.hit_ratio, state.current_page, state.micro_state.value)

    def _set_values(self, hits: int, faults: int, ratio: float, page: Optional[str], micro_state: str):
        self._value_labels["Hits"].setText(str(hits))
        self._value_labels["Faults"].setText(str(faults))
        self._value_labels["Hit Ratio"].setText(format_hit_ratio(ratio))
        self._value_labels["Current Page"].setText(page if page else NO_PAGE_LABEL)
        self._value_labels["Micro-step"].setText(micro_state)
