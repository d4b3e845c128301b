"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される汎用的な型エイリアスなどを定義します。
"""
from typing import NamedTuple, Optional, Tuple

# @intent:data_structure ページ識別子。入力トークンをそのまま保持し、完全一致でのみ比較します。
# Core, Config, UIなど複数のレイヤーで共通して使用されます。
PageId = str

# @intent:data_structure 物理フレームの並び。Noneは空きフレームを表します。
FrameList = Tuple[Optional[PageId], ...]

# @intent:data_structure ヒット/フォールトの統計値。UIの統計表示が参照します。
class Statistics(NamedTuple):
    hits: int
    faults: int

    @property
    def total(self) -> int:
        return self.hits + self.faults

    # @intent:responsibility ヒット率を0.0〜1.0で返します。参照が一度もなければ0です。
    @property
    def hit_ratio(self) -> float:
        if self.total == 0:
            return 0.0
        return self.hits / self.total
