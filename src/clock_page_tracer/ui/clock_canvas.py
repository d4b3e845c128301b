"""
Clock Canvas モジュール。

物理フレームを円周上に配置し、各フレームのページ番号と使用ビット、
クロックの針、強調表示リングを描画します。
"""
import math

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGraphicsView, QGraphicsScene,
    QSlider, QLabel
)
from PySide6.QtCore import Qt, QPointF, Slot
from PySide6.QtGui import QPainter, QColor, QPen, QBrush, QFont

from typing import Dict, List, Optional, NamedTuple

from clock_page_tracer.core.state import ClockState, HighlightColor
from clock_page_tracer.ui.fonts import get_monospace_font_family

# --- 色定義 ---
COLOR_BG = "#1E1E1E"
COLOR_TITLE = "#EEEEEE"
COLOR_FRAME_BG = "#252525"
COLOR_FRAME_BORDER = "#00AAAA"
COLOR_PAGE_TEXT = "#FFD700"
COLOR_BIT_SET = "#99FF99"   # 明るい緑
COLOR_BIT_CLEAR = "#FF9999" # 明るい赤
COLOR_HAND = "#FF5555"

HIGHLIGHT_COLORS: Dict[HighlightColor, str] = {
    HighlightColor.GREEN: "#33CC33",
    HighlightColor.ORANGE: "#FFAA00",
    HighlightColor.RED: "#FF3333",
}

EMPTY_FRAME_LABEL = "-"

# QGraphicsItem.setData/data のキー
ITEM_ROLE_KEY = 0
ITEM_HIGHLIGHT_KEY = 1
ROLE_HAND = "hand"
ROLE_HIGHLIGHT = "highlight"

# @intent:data_structure 1フレームの描画位置（中心座標と円周上の角度）。
class FramePosition(NamedTuple):
    x: float
    y: float
    angle: float

class ClockCanvas(QGraphicsView):
    """
    クロックアルゴリズムのフレーム表を時計の文字盤として表示するキャンバス。
    """
    WIDTH = 500
    HEIGHT = 500
    FRAME_RADIUS = 25

    def __init__(self, parent=None):
        super().__init__(parent)
        self.scene = QGraphicsScene(self)
        self.setScene(self.scene)
        self.scene.setSceneRect(0, 0, self.WIDTH, self.HEIGHT)

        self.setRenderHint(QPainter.Antialiasing)
        self.setBackgroundBrush(QBrush(QColor(COLOR_BG)))

        self._font_family = get_monospace_font_family()
        self._num_frames = 0
        self._positions: List[FramePosition] = []
        self._state: Optional[ClockState] = None

        self.center = QPointF(self.WIDTH / 2, self.HEIGHT / 2 + 10) # タイトル分下げる
        self.radius = min(self.WIDTH, self.HEIGHT) * 0.3

        self._redraw()

    @property
    def frame_positions(self) -> List[FramePosition]:
        return list(self._positions)

    # @intent:responsibility フレーム数に応じて円周上の配置を再計算します。
    def set_frame_count(self, num_frames: int):
        self._num_frames = num_frames
        self._positions = self._compute_positions(num_frames)
        self._state = None
        self._redraw()

    def set_zoom(self, scale_factor: float):
        self.resetTransform()
        self.scale(scale_factor, scale_factor)

    # @intent:responsibility 先頭フレームを真上に置き、時計回りに等間隔で配置します。
    def _compute_positions(self, num_frames: int) -> List[FramePosition]:
        positions = []
        for i in range(num_frames):
            angle = (i / num_frames) * 2 * math.pi - math.pi / 2
            positions.append(FramePosition(
                self.center.x() + self.radius * math.cos(angle),
                self.center.y() + self.radius * math.sin(angle),
                angle,
            ))
        return positions

    def update_view(self, state: ClockState):
        if state.num_frames != self._num_frames:
            self.set_frame_count(state.num_frames)
        self._state = state
        self._redraw()

    def _redraw(self):
        self.scene.clear()
        title = self.scene.addSimpleText("Physical Memory Frames (Clock)", QFont(self._font_family, 11, QFont.Bold))
        title.setBrush(QBrush(QColor(COLOR_TITLE)))
        title.setPos(self.center.x() - title.boundingRect().width() / 2, 15)

        if not self._positions:
            return

        frames = self._state.frames if self._state else (None,) * self._num_frames
        use_bits = self._state.use_bits if self._state else (0,) * self._num_frames
        self._draw_frames(frames, use_bits)

        if self._state is None:
            return
        self._draw_pointer(self._state.pointer)

        output = self._state.output
        if output.highlight_frame is not None and output.highlight_color is not None:
            self._draw_highlight(output.highlight_frame, output.highlight_color)

    def _draw_frames(self, frames, use_bits):
        page_font = QFont(self._font_family, 12, QFont.Bold)
        bit_font = QFont(self._font_family, 9)
        r = self.FRAME_RADIUS

        for i, pos in enumerate(self._positions):
            self.scene.addEllipse(pos.x - r, pos.y - r, r * 2, r * 2,
                                  QPen(QColor(COLOR_FRAME_BORDER), 2), QBrush(QColor(COLOR_FRAME_BG)))

            page = frames[i]
            label = self.scene.addSimpleText(EMPTY_FRAME_LABEL if page is None else page, page_font)
            label.setBrush(QBrush(QColor(COLOR_PAGE_TEXT)))
            rect = label.boundingRect()
            label.setPos(pos.x - rect.width() / 2, pos.y - rect.height() / 2)

            # 使用ビットはフレームの外側に置き、左右の位置に応じて寄せる
            bit = self.scene.addSimpleText(f"bit: {use_bits[i]}", bit_font)
            bit.setBrush(QBrush(QColor(COLOR_BIT_SET if use_bits[i] == 1 else COLOR_BIT_CLEAR)))
            bit_rect = bit.boundingRect()
            bx = pos.x + (r + 15) * math.cos(pos.angle)
            by = pos.y + (r + 15) * math.sin(pos.angle)
            cos_a = math.cos(pos.angle)
            if cos_a < -0.01:
                bx -= bit_rect.width()
            elif -0.01 <= cos_a <= 0.01:
                bx -= bit_rect.width() / 2
            bit.setPos(bx, by - bit_rect.height() / 2)

    def _draw_pointer(self, pointer: int):
        pos = self._positions[pointer]
        length = self.radius - self.FRAME_RADIUS - 5
        tip = QPointF(self.center.x() + length * math.cos(pos.angle),
                      self.center.y() + length * math.sin(pos.angle))
        pen = QPen(QColor(COLOR_HAND), 4)
        hand = self.scene.addLine(self.center.x(), self.center.y(), tip.x(), tip.y(), pen)
        hand.setData(ITEM_ROLE_KEY, ROLE_HAND)
        self.scene.addEllipse(tip.x() - 6, tip.y() - 6, 12, 12, QPen(Qt.NoPen), QBrush(QColor(COLOR_HAND)))

    def _draw_highlight(self, frame_index: int, color: HighlightColor):
        pos = self._positions[frame_index]
        r = self.FRAME_RADIUS + 5
        ring = self.scene.addEllipse(pos.x - r, pos.y - r, r * 2, r * 2,
                                     QPen(QColor(HIGHLIGHT_COLORS[color]), 5), QBrush(Qt.NoBrush))
        ring.setData(ITEM_ROLE_KEY, ROLE_HIGHLIGHT)
        ring.setData(ITEM_HIGHLIGHT_KEY, color.value)

class ClockCanvasWidget(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.canvas = ClockCanvas()
        self.layout.addWidget(self.canvas)

        control_layout = QHBoxLayout()
        self.zoom_slider = QSlider(Qt.Horizontal)
        self.zoom_slider.setRange(10, 300)
        self.zoom_slider.setValue(100)
        self.zoom_slider.valueChanged.connect(self._on_zoom_changed)
        control_layout.addWidget(QLabel("Zoom:"))
        control_layout.addWidget(self.zoom_slider)
        self.layout.addLayout(control_layout)

    @Slot(int)
    def _on_zoom_changed(self, value: int):
        self.canvas.set_zoom(value / 100.0)

    def set_frame_count(self, num_frames: int): self.canvas.set_frame_count(num_frames)
    def update_view(self, state: ClockState): self.canvas.update_view(state)
