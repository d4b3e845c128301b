import yaml
from typing import Dict, Any, List, Optional
from .models import SimulationConfig, DEFAULT_INTERVAL_MS

INVALID_INPUT_MESSAGE = "Invalid input. Check frames or reference string."

class ConfigLoader:
    def load_from_file(self, path: str) -> SimulationConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{INVALID_INPUT_MESSAGE} Scenario must be a mapping: {path}")
        return self._parse_config(data)

    # @intent:responsibility UIの入力欄のテキストからSimulationConfigを生成します。
    def parse_text(self, frames_text: str, ref_text: str, interval_ms: int = DEFAULT_INTERVAL_MS) -> SimulationConfig:
        return self._parse_config({
            "frames": frames_text,
            "reference_string": ref_text,
            "interval_ms": interval_ms,
        })

    def _parse_config(self, data: Dict[str, Any]) -> SimulationConfig:
        num_frames = self._parse_frames(data.get("frames"))
        reference_string = self.parse_reference_string(data.get("reference_string"))
        if not reference_string:
            raise ValueError(f"{INVALID_INPUT_MESSAGE} Reference string is empty.")

        return SimulationConfig(
            num_frames=num_frames,
            reference_string=reference_string,
            interval_ms=self._parse_int(data.get("interval_ms", DEFAULT_INTERVAL_MS)),
            label=data.get("label", ""),
        )

    # @intent:responsibility 参照列をカンマで分割し、前後の空白を除去して空トークンを捨てます。
    # @intent:rationale ページ識別子は文字列のまま扱い、"01"と"1"のような値を同一視しない。
    def parse_reference_string(self, value: Any) -> List[str]:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            tokens = [str(item) for item in value if item is not None]
        else:
            tokens = str(value).split(",")
        return [token.strip() for token in tokens if token.strip()]

    def _parse_frames(self, value: Optional[Any]) -> int:
        try:
            num_frames = self._parse_int(value)
        except ValueError:
            raise ValueError(f"{INVALID_INPUT_MESSAGE} Frames must be an integer: {value!r}")
        if num_frames < 1:
            raise ValueError(f"{INVALID_INPUT_MESSAGE} Frames must be at least 1: {num_frames}")
        return num_frames

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            return int(value.strip())
        raise ValueError(f"Invalid integer format: {value}")
