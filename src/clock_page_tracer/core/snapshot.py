# clock_page_tracer/core/snapshot.py
"""
ステップ結果の不変スナップショット

このモジュールは、1マイクロステップ実行後の完全な状態と、
その遷移の内容を記録した不変のデータ構造を定義します。
UIへの情報提供と、ログ表示のための情報源としての責務を負います。
"""
from dataclasses import dataclass

from clock_page_tracer.core.state import ClockState, MicroState



# @intent:responsibility 実行された状態遷移（遷移元と遷移先）を記録します。
@dataclass(frozen=True) # 不変データ構造
class Transition:
    """
    1マイクロステップで起きた状態遷移を記録するデータクラス。
    """
    source: MicroState # 例: MicroState.CHECK_HIT
    target: MicroState # 例: MicroState.HIT

    # @intent:responsibility HIT後の一時停止ステップかどうかを返します。
    @property
    def is_pause(self) -> bool:
        return self.source is MicroState.HIT

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計ステップ数、新しいメッセージの有無）を記録するデータクラス。
    """
    step_count: int
    message_emitted: bool = True # HITの一時停止ステップではFalse

# @intent:responsibility ある一時点におけるクロックアルゴリズムの完全な状態を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    1マイクロステップ実行直後の状態と、その遷移内容を記録した不変のデータ構造。
    UIへの情報提供と、ログへの出力に用います。
    """
    state: ClockState
    transition: Transition
    metadata: Metadata

    @property
    def message(self) -> str:
        return self.state.output.message

    # @intent:rationale ClockState自体がfrozenなので、Snapshotはstateを参照で保持するだけで
    #                  後続のステップから影響を受けない。
