# src/clock_page_tracer/ui/main_window.py
"""
メインウィンドウの実装。
入力欄、実行制御ツールバー、時計キャンバス、統計表示、ログ表示を保持し、
シミュレーションコントローラとタイマーを結びつけます。
"""
import sys
from typing import Optional

import yaml
from PySide6.QtWidgets import (
    QMainWindow, QApplication, QDockWidget, QToolBar, QLabel, QLineEdit,
    QSlider, QFileDialog, QMessageBox
)
from PySide6.QtGui import QPalette, QColor, QAction, QCloseEvent
from PySide6.QtCore import Qt, QTimer, Slot

from clock_page_tracer.config.loader import ConfigLoader
from clock_page_tracer.config.builder import SimulationBuilder
from clock_page_tracer.config.models import SimulationConfig, DEFAULT_INTERVAL_MS, MIN_INTERVAL_MS, MAX_INTERVAL_MS
from clock_page_tracer.core.snapshot import Snapshot
from clock_page_tracer.core.state import LogType
from clock_page_tracer.debugger.controller import SimulationController
from .clock_canvas import ClockCanvasWidget
from .stats_view import StatsView
from .log_view import LogView
from .fonts import get_monospace_font_family

DEFAULT_FRAMES_TEXT = "3"
DEFAULT_REFERENCE_TEXT = "7, 0, 1, 2, 0, 3, 0, 4, 2, 3, 0, 3, 2"
WINDOW_TITLE = "Clock Page Tracer"

# スライダーは右に行くほど速くなる。間隔 = SPEED_BASE - 値
SPEED_BASE = MIN_INTERVAL_MS + MAX_INTERVAL_MS

# @intent:responsibility スライダー値を自動再生の間隔（ミリ秒）に変換します。
def slider_to_interval(value: int) -> int:
    return SPEED_BASE - value

def interval_to_slider(interval_ms: int) -> int:
    return SPEED_BASE - interval_ms

# @intent:responsibility アプリケーションのメインウィンドウを定義し、UIの主要なコンポーネントを組み立てます。
class MainWindow(QMainWindow):
    """
    アプリケーションのメインウィンドウクラス。
    コントローラはStart/Resetごとに作り直され、前の実行の状態や履歴は引き継ぎません。
    """
    def __init__(self, parent=None):
        super(MainWindow, self).__init__(parent)
        self.setWindowTitle(WINDOW_TITLE)
        self.setGeometry(100, 100, 1100, 700)

        self.controller: Optional[SimulationController] = None
        self._config_loader = ConfigLoader()
        self._builder = SimulationBuilder()

        # @intent:rationale 自動再生はGUIスレッド上のQTimerで駆動する。
        #                  tick()とstep_back()は同じスレッドからしか呼ばれないため、排他制御は不要。
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._on_tick)

        self._set_dark_theme()
        self._create_toolbar()
        self._create_central_canvas()
        self._create_side_panels()
        self._create_menus()

        self._update_ui_state()

    # @intent:responsibility メニューバーを作成し、シナリオファイル読み込みアクションを追加します。
    def _create_menus(self):
        menu_bar = self.menuBar()
        file_menu = menu_bar.addMenu("File")

        self.load_scenario_action = QAction("Load Scenario...", self)
        self.load_scenario_action.setShortcut("Ctrl+O")
        self.load_scenario_action.triggered.connect(self._load_scenario)
        file_menu.addAction(self.load_scenario_action)

    # @intent:responsibility 入力欄と実行制御用のツールバーを作成します。
    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        toolbar.addWidget(QLabel(" Frames: "))
        self.frames_input = QLineEdit(DEFAULT_FRAMES_TEXT)
        self.frames_input.setMaximumWidth(50)
        toolbar.addWidget(self.frames_input)

        toolbar.addWidget(QLabel(" Reference String: "))
        self.ref_string_input = QLineEdit(DEFAULT_REFERENCE_TEXT)
        self.ref_string_input.setMinimumWidth(260)
        toolbar.addWidget(self.ref_string_input)
        toolbar.addSeparator()

        # アクションの作成
        self.start_action = QAction("Start/Reset", self)
        self.start_action.triggered.connect(self._start_simulation)
        toolbar.addAction(self.start_action)

        self.play_action = QAction("Play", self)
        self.play_action.triggered.connect(self._toggle_play)
        toolbar.addAction(self.play_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self._step)
        toolbar.addAction(self.step_action)

        self.step_back_action = QAction("Step Back", self)
        self.step_back_action.triggered.connect(self._step_back)
        toolbar.addAction(self.step_back_action)
        toolbar.addSeparator()

        toolbar.addWidget(QLabel(" Speed: "))
        self.speed_slider = QSlider(Qt.Horizontal)
        self.speed_slider.setRange(MIN_INTERVAL_MS, MAX_INTERVAL_MS)
        self.speed_slider.setValue(interval_to_slider(DEFAULT_INTERVAL_MS))
        self.speed_slider.setMaximumWidth(150)
        self.speed_slider.valueChanged.connect(self._on_speed_changed)
        toolbar.addWidget(self.speed_slider)

    def _create_central_canvas(self):
        self.canvas_widget = ClockCanvasWidget()
        self.setCentralWidget(self.canvas_widget)

    # @intent:responsibility 右側に統計表示、下側にログ表示を配置します。
    def _create_side_panels(self):
        stats_dock = QDockWidget("Statistics", self)
        stats_dock.setAllowedAreas(Qt.RightDockWidgetArea)
        self.stats_view = StatsView()
        stats_dock.setWidget(self.stats_view)
        self.addDockWidget(Qt.RightDockWidgetArea, stats_dock)

        log_dock = QDockWidget("Execution Log", self)
        log_dock.setAllowedAreas(Qt.BottomDockWidgetArea | Qt.RightDockWidgetArea)
        self.log_view = LogView()
        log_dock.setWidget(self.log_view)
        self.addDockWidget(Qt.BottomDockWidgetArea, log_dock)

    # @intent:responsibility 実行状態に応じてUIコンポーネントの有効/無効を切り替えます。
    # @intent:rationale 自動再生中はStep Backを無効にし、両者が同時に操作されないようにします。
    def _update_ui_state(self):
        controller = self.controller
        is_playing = controller is not None and controller.is_playing

        self.play_action.setText("Pause" if is_playing else "Play")
        self.play_action.setEnabled(controller is not None and controller.can_play)
        self.step_action.setEnabled(controller is not None and controller.can_step)
        self.step_back_action.setEnabled(controller is not None and controller.can_step_back)
        self.load_scenario_action.setEnabled(not is_playing)
        self.frames_input.setEnabled(not is_playing)
        self.ref_string_input.setEnabled(not is_playing)

    # @intent:responsibility 入力欄の値で新しいシミュレーションを開始します。
    @Slot()
    def _start_simulation(self):
        self._stop_timer()
        if self.controller is not None:
            self.controller.pause()
        try:
            config = self._config_loader.parse_text(
                self.frames_input.text(),
                self.ref_string_input.text(),
                slider_to_interval(self.speed_slider.value()),
            )
        except ValueError as e:
            self.log_view.add_entry(f"Error: {e}", LogType.FAULT)
            self._update_ui_state()
            return
        self.apply_config(config)

    # @intent:responsibility 構成からコントローラを作り直し、全ビューを初期状態にします。
    def apply_config(self, config: SimulationConfig):
        self._stop_timer()
        self.controller = self._builder.build_controller(config)
        self.setWindowTitle(f"{WINDOW_TITLE} - {config.label}" if config.label else WINDOW_TITLE)

        self.canvas_widget.set_frame_count(config.num_frames)
        self.log_view.clear()
        self.log_view.add_entry("Simulation initialized. Ready to start.", LogType.INFO)
        self._refresh_views()
        self._update_ui_state()

    @Slot()
    def _toggle_play(self):
        if self.controller is None or self.controller.machine.is_done:
            return

        if self.controller.is_playing:
            self.controller.pause()
            self._stop_timer()
        else:
            self.controller.play()
            # 1ステップ即座に実行してからタイマーを開始する
            self._on_tick()
            if self.controller.is_playing:
                self._timer.start(self.controller.interval_ms)
        self._update_ui_state()

    # @intent:responsibility タイマーから呼ばれ、コントローラを1ティック進めます。
    @Slot()
    def _on_tick(self):
        if self.controller is None:
            self._stop_timer()
            return
        snapshot = self.controller.tick()
        if snapshot is not None:
            self._show_snapshot(snapshot)
        if not self.controller.is_playing:
            self._stop_timer()
        self._update_ui_state()

    @Slot()
    def _step(self):
        if self.controller is None or not self.controller.can_step:
            return
        snapshot = self.controller.step_forward()
        self._show_snapshot(snapshot)
        self._update_ui_state()

    @Slot()
    def _step_back(self):
        if self.controller is None or not self.controller.can_step_back:
            return
        state = self.controller.step_back()
        if state is not None:
            self.log_view.add_entry(f"Stepped back to micro-step {state.step_count}.", LogType.INFO)
            self._refresh_views()
        self._update_ui_state()

    # @intent:responsibility スナップショットの情報に基づいてUIを更新し、ログに追記します。
    def _show_snapshot(self, snapshot: Snapshot):
        self._refresh_views()
        output = snapshot.state.output
        if snapshot.metadata.message_emitted:
            self.log_view.add_entry(output.message, output.log_type)
        if snapshot.state.is_done:
            self.log_view.add_entry("Simulation finished.", LogType.INFO)

    def _refresh_views(self):
        state = self.controller.machine.get_state()
        self.canvas_widget.update_view(state)
        self.stats_view.update_stats(state)

    @Slot(int)
    def _on_speed_changed(self, value: int):
        if self.controller is None:
            return
        self.controller.set_interval_ms(slider_to_interval(value))
        if self._timer.isActive():
            # 再生中は新しい間隔を即座に反映する
            self._timer.setInterval(self.controller.interval_ms)

    @Slot()
    def _load_scenario(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open Scenario", "", "YAML Files (*.yaml *.yml);;All Files (*)")
        if file_name:
            try:
                config = self._config_loader.load_from_file(file_name)
            except (OSError, ValueError, yaml.YAMLError) as e:
                QMessageBox.critical(self, "Error", f"Failed to load scenario: {e}")
                return

            self.frames_input.setText(str(config.num_frames))
            self.ref_string_input.setText(", ".join(config.reference_string))
            self.speed_slider.setValue(interval_to_slider(config.interval_ms))
            self.apply_config(config)

    def _stop_timer(self):
        if self._timer.isActive():
            self._timer.stop()

    # @intent:responsibility アプリケーションにダークテーマのスタイルシートを適用します。
    def _set_dark_theme(self):
        dark_palette = QPalette()
        dark_palette.setColor(QPalette.Window, QColor(29, 29, 29))
        dark_palette.setColor(QPalette.WindowText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Base, QColor(30, 30, 30))
        dark_palette.setColor(QPalette.AlternateBase, QColor(53, 53, 53))
        dark_palette.setColor(QPalette.Text, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
        dark_palette.setColor(QPalette.ButtonText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
        dark_palette.setColor(QPalette.HighlightedText, QColor(0, 0, 0))
        QApplication.setPalette(dark_palette)

        font_family = get_monospace_font_family()
        self.setStyleSheet(f"""
            QWidget {{ font-family: '{font_family}', monospace; font-size: 10pt; }}
            QMainWindow, QToolBar {{ background-color: #1D1D1D; border: none; }}
            QDockWidget::title {{ text-align: left; background: #101010; padding: 4px; font-weight: bold; }}
            QLineEdit {{ background-color: #101010; border: 1px solid #2A82DA; padding: 2px; }}
        """)

    # @intent:responsibility ウィンドウを閉じる際に自動再生タイマーを停止します。
    def closeEvent(self, event: QCloseEvent):
        if self.controller is not None:
            self.controller.stop()
        self._stop_timer()
        event.accept()


if __name__ == '__main__':
    app = QApplication(sys.argv)
    main_win = MainWindow()
    main_win.show()
    sys.exit(app.exec())
