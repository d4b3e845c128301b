from clock_page_tracer.core.machine import ClockStateMachine
from clock_page_tracer.debugger.controller import SimulationController
from .loader import INVALID_INPUT_MESSAGE
from .models import SimulationConfig

# @intent:responsibility シミュレーション構成（Config）に基づいて、状態機械とコントローラを生成・接続します。
class SimulationBuilder:
    def build_machine(self, config: SimulationConfig) -> ClockStateMachine:
        self.validate(config)
        return ClockStateMachine(config.num_frames, config.reference_string)

    def build_controller(self, config: SimulationConfig) -> SimulationController:
        machine = self.build_machine(config)
        return SimulationController(machine, interval_ms=config.interval_ms)

    # @intent:responsibility 状態機械を構築する前に入力を検証します。状態機械自身は再検証しません。
    def validate(self, config: SimulationConfig) -> None:
        if not isinstance(config.num_frames, int) or isinstance(config.num_frames, bool) or config.num_frames < 1:
            raise ValueError(f"{INVALID_INPUT_MESSAGE} Frames must be at least 1: {config.num_frames!r}")
        if not config.reference_string:
            raise ValueError(f"{INVALID_INPUT_MESSAGE} Reference string is empty.")
        for token in config.reference_string:
            if not isinstance(token, str) or not token.strip():
                raise ValueError(f"{INVALID_INPUT_MESSAGE} Invalid page token: {token!r}")
