# tests/debugger/test_controller.py
"""
clock_page_tracer.debugger.controllerモジュールの単体テスト。
前進/後退ステップ、履歴の深さ、自動再生との排他、連続実行を検証します。
"""
import pytest
from unittest.mock import patch

from clock_page_tracer.config.models import MAX_INTERVAL_MS, MIN_INTERVAL_MS
from clock_page_tracer.core.machine import ClockStateMachine
from clock_page_tracer.core.state import MicroState
from clock_page_tracer.debugger.controller import SimulationController

# @intent:test_suite シミュレーションコントローラの実行制御と履歴管理の検証。

class TestSimulationController:
    """
    SimulationControllerの単体テスト。
    """
    @pytest.fixture
    def setup_controller(self):
        machine = ClockStateMachine(3, ["1", "2", "3", "4", "1", "2", "5"])
        controller = SimulationController(machine)
        return controller, machine

    # @intent:test_case_step_forward step_forwardが直前の状態を履歴に積み、machine.stepを呼ぶことを検証します。
    def test_step_forward_pushes_previous_state(self, setup_controller):
        controller, machine = setup_controller
        initial = machine.get_state()

        with patch.object(machine, 'step', wraps=machine.step) as mock_step:
            snapshot = controller.step_forward()
            mock_step.assert_called_once()

        assert controller.get_history_depth() == 1
        assert controller.history.peek() is initial
        assert snapshot.state is machine.get_state()
        assert controller.get_last_snapshot() is snapshot

    # @intent:test_case_undo_round_trip N回前進してN回戻ると、完全に元の状態に戻ることを検証します。
    @pytest.mark.parametrize("count", [1, 5, 20, 48])
    def test_undo_round_trip(self, setup_controller, count):
        controller, machine = setup_controller
        for _ in range(3):
            controller.step_forward()
        origin = machine.get_state()
        origin_depth = controller.get_history_depth()

        for _ in range(count):
            controller.step_forward()
        for _ in range(count):
            controller.step_back()

        assert machine.get_state() == origin
        assert controller.get_history_depth() == origin_depth

    # @intent:test_case_identity 巻き戻しは状態機械の同一性を変えず、フィールドだけを上書きすることを検証します。
    def test_step_back_keeps_machine_identity(self, setup_controller):
        controller, machine = setup_controller
        before = machine.get_state()
        controller.step_forward()
        restored = controller.step_back()

        assert controller.machine is machine
        assert restored == before
        assert machine.get_state() == before

    def test_step_back_on_empty_history_is_noop(self, setup_controller):
        controller, machine = setup_controller
        before = machine.get_state()
        assert controller.step_back() is None
        assert machine.get_state() == before
        assert not controller.can_step_back

    # @intent:test_case_depth_invariant 履歴の深さが「前進回数 - 後退回数」に一致することを検証します。
    def test_history_depth_tracks_steps_minus_undos(self, setup_controller):
        controller, _ = setup_controller
        for _ in range(7):
            controller.step_forward()
        for _ in range(3):
            controller.step_back()
        assert controller.get_history_depth() == 4
        controller.step_forward()
        assert controller.get_history_depth() == 5

    # @intent:test_case_no_redo 後退後の前進は、取り消したステップを復元するのではなく、復元した地点から進むことを検証します。
    def test_forward_after_undo_discards_branch(self, setup_controller):
        controller, machine = setup_controller
        controller.step_forward()
        controller.step_forward()
        after_two = machine.get_state()

        controller.step_back()
        restored = machine.get_state()
        snapshot = controller.step_forward()

        # 同じ地点から同じ遷移を再実行するので内容は一致するが、履歴には復元地点が積まれる
        assert snapshot.state == after_two
        assert controller.history.peek() == restored
        assert controller.get_history_depth() == 2

    # @intent:test_case_play_excludes_step_back 自動再生中は巻き戻しが拒否されることを検証します。
    def test_step_back_disallowed_while_playing(self, setup_controller):
        controller, machine = setup_controller
        controller.step_forward()
        controller.play()

        assert controller.is_playing
        assert not controller.can_step_back
        assert not controller.can_step
        state = machine.get_state()
        assert controller.step_back() is None
        assert machine.get_state() == state
        assert controller.get_history_depth() == 1

        controller.pause()
        assert controller.can_step_back

    # @intent:test_case_tick tick()は再生中のみ1ステップ進め、DONEに達したら再生を止めることを検証します。
    def test_tick_stops_at_done(self):
        controller = SimulationController(ClockStateMachine(1, ["5", "5", "5"]))
        assert controller.tick() is None

        controller.play()
        ticks = 0
        while controller.is_playing:
            assert controller.tick() is not None
            ticks += 1

        assert ticks == 12
        assert controller.machine.get_state().micro_state is MicroState.DONE
        assert controller.get_history_depth() == 12
        assert not controller.can_play
        assert controller.play() is False
        assert controller.tick() is None

    def test_toggle_play(self, setup_controller):
        controller, _ = setup_controller
        assert controller.toggle_play() is True
        assert controller.toggle_play() is False

    def test_run_until_done(self, setup_controller):
        controller, machine = setup_controller
        with patch('builtins.print') as mock_print:
            controller.run()

            assert not controller.is_playing
            assert machine.is_done
            assert machine.statistics.faults == 7
            mock_print.assert_called_with("Simulation finished.")

    # @intent:test_case_run_until_stop run()がstop()で停止することを検証します。
    def test_run_until_stop(self, setup_controller):
        controller, machine = setup_controller
        real_step_forward = controller.step_forward

        def step_then_stop():
            snapshot = real_step_forward()
            controller.stop()
            return snapshot

        with patch.object(controller, 'step_forward', side_effect=step_then_stop) as mock_step_forward:
            with patch('builtins.print') as mock_print:
                controller.run()
                mock_print.assert_not_called()
            assert mock_step_forward.call_count == 1
            assert not controller.is_playing
            assert not machine.is_done

    def test_run_back_rewinds_to_start(self, setup_controller):
        controller, machine = setup_controller
        initial = machine.get_state()
        for _ in range(10):
            controller.step_forward()

        with patch('builtins.print') as mock_print:
            controller.run_back()
            mock_print.assert_called_with("Reached start of history.")

        assert machine.get_state() == initial
        assert controller.get_history_depth() == 0

    def test_interval_is_clamped(self, setup_controller):
        controller, _ = setup_controller
        controller.set_interval_ms(10)
        assert controller.interval_ms == MIN_INTERVAL_MS
        controller.set_interval_ms(10000)
        assert controller.interval_ms == MAX_INTERVAL_MS
        controller.set_interval_ms(700)
        assert controller.interval_ms == 700
