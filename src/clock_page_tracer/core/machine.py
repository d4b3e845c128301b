# clock_page_tracer/core/machine.py
"""
Core Layer (クロック状態機械)

このモジュールは、クロック（セカンドチャンス）ページ置換アルゴリズムを
1マイクロステップずつ進める状態機械を提供します。
1回のstep()呼び出しは、必ずちょうど1つの状態遷移を行います。
"""
from typing import Callable, Dict, Optional, Sequence, Tuple

from clock_page_tracer.common.types import PageId, Statistics
from clock_page_tracer.core.snapshot import Metadata, Snapshot, Transition
from clock_page_tracer.core.state import (
    ClockState,
    HighlightColor,
    LogType,
    MicroState,
    StepOutput,
)

StepHandler = Callable[[ClockState], ClockState]

# @intent:responsibility クロックアルゴリズムの状態管理とマイクロステップの駆動を行います。
class ClockStateMachine:
    """
    フレーム表、使用ビット、クロックの針を持ち、参照列を1マイクロステップずつ処理するクラス。
    入力値（フレーム数 >= 1、空でない参照列）の検証は呼び出し側の責務です。
    """
    # @intent:pre-condition `num_frames`は1以上、`ref_string`は空でないページ識別子の列である必要があります。
    def __init__(self, num_frames: int, ref_string: Sequence[PageId]):
        self._num_frames = num_frames
        self._ref_string: Tuple[PageId, ...] = tuple(ref_string)
        self._state: ClockState = self._create_initial_state()
        # @intent:rationale マイクロ状態ごとに1つのハンドラを対応させる。
        #                  Enumの全メンバーを網羅していることはテストで保証する。
        self._handlers: Dict[MicroState, StepHandler] = {
            MicroState.START: self._step_start,
            MicroState.CHECK_HIT: self._step_check_hit,
            MicroState.HIT: self._step_hit,
            MicroState.FAULT_START_SEARCH: self._step_fault_start_search,
            MicroState.FAULT_CHECK_BIT: self._step_fault_check_bit,
            MicroState.FAULT_SET_BIT_ZERO: self._step_fault_set_bit_zero,
            MicroState.FAULT_REPLACE: self._step_fault_replace,
            MicroState.DONE: self._step_done,
        }

    @property
    def num_frames(self) -> int:
        return self._num_frames

    @property
    def ref_string(self) -> Tuple[PageId, ...]:
        return self._ref_string

    @property
    def is_done(self) -> bool:
        return self._state.is_done

    @property
    def statistics(self) -> Statistics:
        return self._state.statistics

    def _create_initial_state(self) -> ClockState:
        return ClockState.initial(self._num_frames)

    # @intent:responsibility 同じ入力のまま初期状態に戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()

    # @intent:responsibility 現在の状態を返します。不変なので、そのまま履歴のスナップショットとして使えます。
    def get_state(self) -> ClockState:
        return self._state

    # @intent:responsibility 保存しておいた状態で全フィールドを上書きします。機械自体の同一性は変わりません。
    # @intent:pre-condition `state`は同じフレーム数の実行から得たものである必要があります。
    def restore_state(self, state: ClockState) -> None:
        self._state = state

    # @intent:responsibility 常駐しているページのフレーム番号を返します。見つからなければNone。
    def find_page(self, page: Optional[PageId]) -> Optional[int]:
        if page is None:
            return None
        for index, occupant in enumerate(self._state.frames):
            if occupant == page:
                return index
        return None

    # @intent:responsibility 状態機械をちょうど1遷移進め、その結果のスナップショットを返します。
    def step(self) -> Snapshot:
        """
        現在のマイクロ状態に対応するハンドラを1回だけ実行し、Snapshotを返します。
        DONE以降の呼び出しは状態を変えず、完了メッセージを再出力します。
        """
        source = self._state.micro_state
        next_state = self._handlers[source](self._state)
        if source is not MicroState.DONE:
            # DONE以降は状態を一切変えないため、ステップ数も数えない
            next_state = next_state.replace(step_count=self._state.step_count + 1)
        self._state = next_state

        transition = Transition(source=source, target=next_state.micro_state)
        return Snapshot(
            state=next_state,
            transition=transition,
            metadata=Metadata(
                step_count=next_state.step_count,
                message_emitted=not transition.is_pause,
            ),
        )

    # --- マイクロ状態ごとのハンドラ ---

    def _step_start(self, state: ClockState) -> ClockState:
        if state.ref_index >= len(self._ref_string):
            return state.replace(
                micro_state=MicroState.DONE,
                current_page=None,
                output=StepOutput(
                    message="Reference string finished.",
                    log_type=LogType.INFO,
                    highlight_color=state.output.highlight_color,
                ),
            )

        page = self._ref_string[state.ref_index]
        return state.replace(
            micro_state=MicroState.CHECK_HIT,
            current_page=page,
            output=StepOutput(
                message=f"Accessing page {page}...",
                log_type=LogType.INFO,
                highlight_frame=state.output.highlight_frame,
                highlight_color=state.output.highlight_color,
            ),
        )

    def _step_check_hit(self, state: ClockState) -> ClockState:
        found_index = self.find_page(state.current_page)
        if found_index is not None:
            # ページヒット
            return state.with_use_bit(found_index, 1).replace(
                micro_state=MicroState.HIT,
                hits=state.hits + 1,
                output=StepOutput(
                    message=f"Page {state.current_page} is a HIT. Setting use bit to 1.",
                    log_type=LogType.HIT,
                    highlight_frame=found_index,
                    highlight_color=HighlightColor.GREEN,
                ),
            )

        # ページフォールト
        return state.replace(
            micro_state=MicroState.FAULT_START_SEARCH,
            faults=state.faults + 1,
            output=StepOutput(
                message=f"Page {state.current_page} is a FAULT. Searching for victim...",
                log_type=LogType.FAULT,
                highlight_color=state.output.highlight_color,
            ),
        )

    # @intent:rationale HITはヒットを独立した1ステップとして見せるための一時停止状態。出力は変更しない。
    def _step_hit(self, state: ClockState) -> ClockState:
        return state.replace(
            micro_state=MicroState.START,
            ref_index=state.ref_index + 1,
        )

    def _step_fault_start_search(self, state: ClockState) -> ClockState:
        pointer = state.pointer
        return state.replace(
            micro_state=MicroState.FAULT_CHECK_BIT,
            output=StepOutput(
                message=f"Clock hand at frame {pointer} ({self._describe_frame(state, pointer)}).",
                log_type=LogType.CHECK,
                highlight_frame=pointer,
                highlight_color=HighlightColor.ORANGE,
            ),
        )

    def _step_fault_check_bit(self, state: ClockState) -> ClockState:
        pointer = state.pointer
        use_bit = state.use_bits[pointer]
        # 空きフレームの使用ビットは常に0なので、そのまま置換へ進む
        next_micro_state = MicroState.FAULT_SET_BIT_ZERO if use_bit == 1 else MicroState.FAULT_REPLACE
        return state.replace(
            micro_state=next_micro_state,
            output=StepOutput(
                message=f"Checking frame {pointer}. Use bit is {use_bit}.",
                log_type=LogType.CHECK,
                highlight_frame=pointer,
                highlight_color=state.output.highlight_color,
            ),
        )

    def _step_fault_set_bit_zero(self, state: ClockState) -> ClockState:
        pointer = state.pointer
        return state.with_use_bit(pointer, 0).replace(
            micro_state=MicroState.FAULT_CHECK_BIT,
            pointer=(pointer + 1) % self._num_frames,
            output=StepOutput(
                message=f"Set bit to 0 for frame {pointer}. Advancing pointer.",
                log_type=LogType.CHECK,
                highlight_frame=state.output.highlight_frame,
                highlight_color=HighlightColor.ORANGE,
            ),
        )

    def _step_fault_replace(self, state: ClockState) -> ClockState:
        pointer = state.pointer
        victim = state.frames[pointer]
        page = state.current_page
        if victim is None:
            message = f"Loading Page {page} into empty frame {pointer}. Setting bit to 1."
        else:
            message = f"Replacing Page {victim} at frame {pointer} with Page {page}. Setting bit to 1."

        return state.with_frame(pointer, page, 1).replace(
            micro_state=MicroState.START,
            pointer=(pointer + 1) % self._num_frames,
            ref_index=state.ref_index + 1,
            output=StepOutput(
                message=message,
                log_type=LogType.FAULT,
                highlight_frame=pointer,
                highlight_color=HighlightColor.RED,
            ),
        )

    def _step_done(self, state: ClockState) -> ClockState:
        return state.replace(
            output=StepOutput(
                message="Simulation complete.",
                log_type=LogType.INFO,
                highlight_frame=state.output.highlight_frame,
                highlight_color=state.output.highlight_color,
            ),
        )

    @staticmethod
    def _describe_frame(state: ClockState, index: int) -> str:
        occupant = state.frames[index]
        return "empty" if occupant is None else f"Page {occupant}"
