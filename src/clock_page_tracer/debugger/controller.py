# clock_page_tracer/debugger/controller.py
"""
シミュレーション制御モジュール。

状態機械の実行（単一ステップ、自動再生、巻き戻し）を制御し、
前進ステップごとに履歴を記録する責務を負います。
"""
from typing import Optional

from clock_page_tracer.config.models import DEFAULT_INTERVAL_MS, MAX_INTERVAL_MS, MIN_INTERVAL_MS
from clock_page_tracer.core.machine import ClockStateMachine
from clock_page_tracer.core.snapshot import Snapshot
from clock_page_tracer.core.state import ClockState
from clock_page_tracer.debugger.history import HistoryStack

# @intent:responsibility 状態機械の実行制御と履歴管理を行います。
class SimulationController:
    """
    ClockStateMachineの実行を制御するクラス。
    1回のシミュレーション実行ごとに生成され、リセット時には破棄されます。
    """
    def __init__(self, machine: ClockStateMachine, interval_ms: int = DEFAULT_INTERVAL_MS):
        self._machine = machine
        # @intent:responsibility 前進ステップ直前の状態を保持し、巻き戻しをサポートします。
        self._history = HistoryStack()
        self._playing: bool = False
        self._interval_ms: int = self._clamp_interval(interval_ms)
        self._last_snapshot: Optional[Snapshot] = None

    @property
    def machine(self) -> ClockStateMachine:
        return self._machine

    @property
    def history(self) -> HistoryStack:
        return self._history

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    # @intent:responsibility 自動再生の間隔を設定します。範囲外の値は丸めます。
    def set_interval_ms(self, interval_ms: int) -> None:
        self._interval_ms = self._clamp_interval(interval_ms)

    @staticmethod
    def _clamp_interval(interval_ms: int) -> int:
        return max(MIN_INTERVAL_MS, min(MAX_INTERVAL_MS, int(interval_ms)))

    def get_history_depth(self) -> int:
        return self._history.depth

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    # --- UIの有効/無効判定 ---

    @property
    def can_step(self) -> bool:
        return not self._playing and not self._machine.is_done

    @property
    def can_play(self) -> bool:
        return not self._machine.is_done

    # @intent:responsibility 自動再生中と履歴が空のときは巻き戻しを許可しません。
    @property
    def can_step_back(self) -> bool:
        return not self._playing and not self._history.is_empty

    # --- 実行制御 ---

    def step_forward(self) -> Snapshot:
        """
        現在の状態を履歴に積んでから、状態機械を1マイクロステップ進めます。
        """
        self._history.push(self._machine.get_state())
        snapshot = self._machine.step()
        self._last_snapshot = snapshot
        return snapshot

    def step_back(self) -> Optional[ClockState]:
        """
        直近の前進ステップを取り消し、その直前の状態を復元します。
        自動再生中、または履歴が空の場合は何もせずNoneを返します。
        """
        if self._playing:
            return None

        # 1. 履歴から直前の状態を取り出す
        previous_state = self._history.pop()
        if previous_state is None:
            return None

        # 2. 状態機械のフィールドを上書き
        self._machine.restore_state(previous_state)
        self._last_snapshot = None
        return previous_state

    def play(self) -> bool:
        """
        自動再生を開始します。完了済みの場合は開始しません。
        """
        if self._machine.is_done:
            self._playing = False
            return False
        self._playing = True
        return True

    def pause(self) -> None:
        self._playing = False

    def toggle_play(self) -> bool:
        if self._playing:
            self.pause()
        else:
            self.play()
        return self._playing

    # @intent:responsibility スケジューラ（タイマー）から1ティックごとに呼ばれ、1ステップ進めます。
    def tick(self) -> Optional[Snapshot]:
        if not self._playing:
            return None
        if self._machine.is_done:
            self._playing = False
            return None

        snapshot = self.step_forward()
        if snapshot.state.is_done:
            self._playing = False
        return snapshot

    def run(self) -> None:
        """
        完了するまで連続して実行します。
        """
        if not self.play():
            print("Simulation already finished.")
            return

        while self._playing:
            self.tick()

        if self._machine.is_done:
            print("Simulation finished.")

    def run_back(self) -> None:
        """
        履歴の先頭まで連続して巻き戻します。
        """
        self._playing = False

        while self.step_back() is not None:
            pass

        print("Reached start of history.")

    def stop(self) -> None:
        self._playing = False
