# clock_page_tracer/core/state.py
"""
Core Layer (クロック状態)

このモジュールは、クロック（セカンドチャンス）アルゴリズムの状態を保持する
不変のデータ構造を定義します。フレーム表、使用ビット、クロックの針、
参照列カーソル、マイクロ状態、統計値、直近ステップの出力を一つのレコードにまとめます。
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

from clock_page_tracer.common.types import FrameList, PageId, Statistics

# @intent:responsibility 1つの参照を処理する途中のどこにいるかを表すマイクロ状態。
class MicroState(Enum):
    START = "START"
    CHECK_HIT = "CHECK_HIT"
    HIT = "HIT"
    FAULT_START_SEARCH = "FAULT_START_SEARCH"
    FAULT_CHECK_BIT = "FAULT_CHECK_BIT"
    FAULT_SET_BIT_ZERO = "FAULT_SET_BIT_ZERO"
    FAULT_REPLACE = "FAULT_REPLACE"
    DONE = "DONE"

# @intent:responsibility ログ表示用のメッセージ種別。
class LogType(Enum):
    INFO = "info"
    HIT = "hit"
    FAULT = "fault"
    CHECK = "check"

# @intent:responsibility UIが強調表示に用いる色タグ。
class HighlightColor(Enum):
    GREEN = "green"
    ORANGE = "orange"
    RED = "red"

INITIAL_MESSAGE = "Simulation initialized. Click Start/Reset."

# @intent:responsibility 1マイクロステップが生成する一時的な出力を記録します。
@dataclass(frozen=True) # 不変データ構造
class StepOutput:
    """
    直近のマイクロステップが生成したメッセージと強調表示情報。
    毎ステップ上書きされ、蓄積はログ側の責務です。
    """
    message: str = INITIAL_MESSAGE
    log_type: LogType = LogType.INFO
    highlight_frame: Optional[int] = None
    highlight_color: Optional[HighlightColor] = None

# @intent:responsibility シミュレーションの可変部分すべてを一つの不変レコードとして保持します。
@dataclass(frozen=True) # 不変データ構造
class ClockState:
    """
    クロックアルゴリズムの完全な状態。
    フィールドはタプルとスカラーのみで構成されるため、参照を保持するだけで
    独立したスナップショットとして扱えます。
    """
    frames: FrameList
    use_bits: Tuple[int, ...]
    pointer: int = 0
    ref_index: int = 0
    current_page: Optional[PageId] = None
    micro_state: MicroState = MicroState.START
    hits: int = 0
    faults: int = 0
    step_count: int = 0
    output: StepOutput = field(default_factory=StepOutput)

    # @intent:rationale frozen=Trueにより、履歴に積んだ状態が後続のステップで書き換わることはない。
    #                  ページ識別子は文字列のまま保持し、数値への変換は一切行わない。

    # @intent:responsibility 空のフレーム表を持つ初期状態を生成します。
    @classmethod
    def initial(cls, num_frames: int) -> 'ClockState':
        return cls(frames=(None,) * num_frames, use_bits=(0,) * num_frames)

    @property
    def num_frames(self) -> int:
        return len(self.frames)

    @property
    def statistics(self) -> Statistics:
        return Statistics(hits=self.hits, faults=self.faults)

    @property
    def hit_ratio(self) -> float:
        return self.statistics.hit_ratio

    @property
    def is_done(self) -> bool:
        return self.micro_state is MicroState.DONE

    # @intent:responsibility dataclasses.replaceのラッパー。
    def replace(self, **changes) -> 'ClockState':
        return replace(self, **changes)

    # @intent:responsibility 指定フレームの内容と使用ビットを差し替えた新しい状態を返します。
    def with_frame(self, index: int, page: Optional[PageId], use_bit: int) -> 'ClockState':
        frames = list(self.frames)
        use_bits = list(self.use_bits)
        frames[index] = page
        use_bits[index] = use_bit
        return self.replace(frames=tuple(frames), use_bits=tuple(use_bits))

    # @intent:responsibility 指定フレームの使用ビットのみを差し替えた新しい状態を返します。
    def with_use_bit(self, index: int, use_bit: int) -> 'ClockState':
        use_bits = list(self.use_bits)
        use_bits[index] = use_bit
        return self.replace(use_bits=tuple(use_bits))
