import os
import sys
import unittest
from PySide6.QtWidgets import QApplication
from unittest.mock import patch
from clock_page_tracer.ui.app import load_initial_scenario
from clock_page_tracer.ui.main_window import MainWindow, WINDOW_TITLE, slider_to_interval, interval_to_slider
from clock_page_tracer.config.models import SimulationConfig
from clock_page_tracer.core.state import LogType, MicroState


class TestMainWindowLogic(unittest.TestCase):
    """
    MainWindowの制御ロジック（入力検証、ステップ、巻き戻し、ボタンの有効/無効）を検証します。
    """
    @classmethod
    def setUpClass(cls):
        if not QApplication.instance():
            cls.app = QApplication(sys.argv)
        else:
            cls.app = QApplication.instance()

    def setUp(self):
        self.window = MainWindow()

    def tearDown(self):
        self.window.close()

    def _start(self, frames="1", refs="5, 5, 5"):
        self.window.frames_input.setText(frames)
        self.window.ref_string_input.setText(refs)
        self.window._start_simulation()

    def test_speed_mapping(self):
        self.assertEqual(slider_to_interval(50), 1950)
        self.assertEqual(slider_to_interval(1950), 50)
        self.assertEqual(interval_to_slider(1000), 1000)

    def test_controls_disabled_before_start(self):
        self.assertIsNone(self.window.controller)
        self.assertFalse(self.window.play_action.isEnabled())
        self.assertFalse(self.window.step_action.isEnabled())
        self.assertFalse(self.window.step_back_action.isEnabled())

    def test_invalid_input_is_logged(self):
        self._start(frames="0", refs="1,2")
        self.assertIsNone(self.window.controller)
        message, log_type = self.window.log_view.entries[-1]
        self.assertTrue(message.startswith("Error: Invalid input."))
        self.assertEqual(log_type, LogType.FAULT)

    # @intent:test_case_invalid_restart 再生中に不正な入力でStart/Resetした場合、再生が止まり操作が再び可能になることを検証します。
    def test_invalid_restart_pauses_running_simulation(self):
        self._start(frames="3", refs="1,2,3,4,1,2,5")
        self.window._toggle_play()
        self.assertTrue(self.window.controller.is_playing)

        self._start(frames="0", refs="1,2")
        self.assertFalse(self.window.controller.is_playing)
        self.assertFalse(self.window._timer.isActive())
        self.assertEqual(self.window.play_action.text(), "Play")
        self.assertTrue(self.window.play_action.isEnabled())
        self.assertTrue(self.window.step_action.isEnabled())
        self.assertTrue(self.window.step_back_action.isEnabled())
        self.assertEqual(self.window.log_view.entries[-1][1], LogType.FAULT)

    def test_start_step_and_step_back(self):
        self._start()
        self.assertEqual(self.window.log_view.entries, [("Simulation initialized. Ready to start.", LogType.INFO)])
        self.assertTrue(self.window.step_action.isEnabled())
        self.assertFalse(self.window.step_back_action.isEnabled())

        self.window._step()
        self.assertEqual(self.window.log_view.entries[-1], ("Accessing page 5...", LogType.INFO))
        self.assertEqual(self.window.stats_view.value_text("Current Page"), "5")
        self.assertTrue(self.window.step_back_action.isEnabled())

        self.window._step_back()
        self.assertEqual(self.window.controller.get_history_depth(), 0)
        self.assertEqual(self.window.stats_view.value_text("Current Page"), "N/A")
        self.assertFalse(self.window.step_back_action.isEnabled())

    def test_hit_pause_is_not_logged_twice(self):
        self._start()
        for _ in range(8): # フォールト1回 + ヒット1回 + HITの一時停止
            self.window._step()
        hit_lines = [m for m, t in self.window.log_view.entries if t is LogType.HIT]
        self.assertEqual(len(hit_lines), 1)

    def test_finishing_disables_play_and_step(self):
        self._start()
        while self.window.step_action.isEnabled():
            self.window._step()

        state = self.window.controller.machine.get_state()
        self.assertEqual(state.micro_state, MicroState.DONE)
        self.assertEqual(self.window.log_view.entries[-2][0], "Reference string finished.")
        self.assertEqual(self.window.log_view.entries[-1][0], "Simulation finished.")
        self.assertFalse(self.window.play_action.isEnabled())
        self.assertTrue(self.window.step_back_action.isEnabled())
        self.assertEqual(self.window.stats_view.value_text("Hit Ratio"), "66.67%")

    def test_play_disables_step_back(self):
        self._start(frames="3", refs="1,2,3,4,1,2,5")
        self.window._toggle_play()
        self.assertTrue(self.window.controller.is_playing)
        self.assertEqual(self.window.play_action.text(), "Pause")
        self.assertFalse(self.window.step_back_action.isEnabled())
        self.assertFalse(self.window.step_action.isEnabled())
        # 再生開始時に1ステップ即座に実行される
        self.assertEqual(self.window.controller.get_history_depth(), 1)

        self.window._toggle_play()
        self.assertFalse(self.window.controller.is_playing)
        self.assertEqual(self.window.play_action.text(), "Play")
        self.assertTrue(self.window.step_back_action.isEnabled())

    def test_reset_discards_previous_run(self):
        self._start()
        first = self.window.controller
        self.window._step()
        self._start(frames="2", refs="1,2")
        self.assertIsNot(self.window.controller, first)
        self.assertEqual(self.window.controller.get_history_depth(), 0)
        self.assertEqual(len(self.window.log_view.entries), 1)

    def test_apply_config_sets_interval(self):
        self.window.apply_config(SimulationConfig(num_frames=2, reference_string=["a", "b"], interval_ms=400))
        self.assertEqual(self.window.controller.interval_ms, 400)

    def test_label_is_shown_in_window_title(self):
        self.window.apply_config(SimulationConfig(num_frames=3, reference_string=["1"], label="Textbook example"))
        self.assertEqual(self.window.windowTitle(), f"{WINDOW_TITLE} - Textbook example")

        self._start(frames="2", refs="1,2")
        self.assertEqual(self.window.windowTitle(), WINDOW_TITLE)

    # @intent:test_case_startup_scenario 起動時のシナリオ読み込みに失敗しても、ウィンドウは空のまま使えることを検証します。
    def test_initial_scenario_failure_keeps_window_usable(self):
        with patch("builtins.print") as mock_print:
            self.assertFalse(load_initial_scenario(self.window, "/nonexistent/scenario.yaml"))
            mock_print.assert_called_once()
            self.assertIn("/nonexistent/scenario.yaml", mock_print.call_args[0][0])
        self.assertIsNone(self.window.controller)
        self.assertFalse(self.window.step_action.isEnabled())

    def test_initial_scenario_is_applied(self):
        path = os.path.join(os.path.dirname(__file__), "..", "..", "scenarios", "textbook.yaml")
        self.assertTrue(load_initial_scenario(self.window, path))
        self.assertIsNotNone(self.window.controller)
        self.assertEqual(self.window.windowTitle(), f"{WINDOW_TITLE} - Textbook example")

if __name__ == '__main__':
    unittest.main()
