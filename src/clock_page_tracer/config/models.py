from dataclasses import dataclass, field
from typing import List

DEFAULT_INTERVAL_MS = 1000
MIN_INTERVAL_MS = 50
MAX_INTERVAL_MS = 1950

@dataclass
class SimulationConfig:
    num_frames: int
    reference_string: List[str] = field(default_factory=list)  # ページ識別子（文字列のまま）
    interval_ms: int = DEFAULT_INTERVAL_MS  # 自動再生の間隔
    label: str = ""
