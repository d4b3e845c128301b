# clock_page_tracer/debugger/history.py
"""
実行履歴モジュール。

前進ステップの直前に取得した状態を積み上げ、1ステップずつ巻き戻すための
線形のUndoスタックを提供します。Redoはサポートしません。
"""
from typing import List, Optional

from clock_page_tracer.core.state import ClockState

# @intent:responsibility 前進ステップ直前の状態を保持し、直近のものから取り出せるようにします。
class HistoryStack:
    """
    ClockStateを積む線形Undoスタック。
    深さは「リセット以降の前進ステップ数 - Undo回数」に等しくなります。
    """
    def __init__(self):
        self._entries: List[ClockState] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def depth(self) -> int:
        return len(self._entries)

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def push(self, state: ClockState) -> None:
        self._entries.append(state)

    # @intent:responsibility 直近の状態を取り出します。空の場合は何もせずNoneを返します。
    def pop(self) -> Optional[ClockState]:
        if not self._entries:
            return None
        return self._entries.pop()

    def peek(self) -> Optional[ClockState]:
        if not self._entries:
            return None
        return self._entries[-1]

    def clear(self) -> None:
        self._entries.clear()

    # @intent:rationale ClockStateは不変なので、参照を積むだけで独立したスナップショットになる。
