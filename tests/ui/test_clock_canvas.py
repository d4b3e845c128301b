import sys
import math
import unittest
from PySide6.QtWidgets import QApplication
from clock_page_tracer.ui.clock_canvas import (
    ClockCanvas, EMPTY_FRAME_LABEL, ITEM_ROLE_KEY, ITEM_HIGHLIGHT_KEY, ROLE_HAND, ROLE_HIGHLIGHT
)
from clock_page_tracer.core.machine import ClockStateMachine
from clock_page_tracer.core.state import ClockState, HighlightColor


def scene_texts(canvas):
    return [item.text() for item in canvas.scene.items() if hasattr(item, "text")]


def items_with_role(canvas, role):
    return [item for item in canvas.scene.items() if item.data(ITEM_ROLE_KEY) == role]


class TestClockCanvas(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        if not QApplication.instance():
            cls.app = QApplication(sys.argv)
        else:
            cls.app = QApplication.instance()

    def test_init(self):
        canvas = ClockCanvas()
        self.assertIsNotNone(canvas.scene)
        self.assertIn("Physical Memory Frames (Clock)", scene_texts(canvas))

    def test_first_frame_is_at_top(self):
        """
        先頭フレームが真上に置かれ、残りが等間隔に並ぶことを検証します。
        """
        canvas = ClockCanvas()
        canvas.set_frame_count(4)
        positions = canvas.frame_positions
        self.assertEqual(len(positions), 4)
        self.assertAlmostEqual(positions[0].x, canvas.center.x())
        self.assertLess(positions[0].y, canvas.center.y())
        self.assertAlmostEqual(positions[1].angle - positions[0].angle, math.pi / 2)

    def test_empty_frames_and_bits_are_drawn(self):
        canvas = ClockCanvas()
        canvas.update_view(ClockState.initial(3))
        texts = scene_texts(canvas)
        self.assertEqual(texts.count(EMPTY_FRAME_LABEL), 3)
        self.assertEqual(texts.count("bit: 0"), 3)

    def test_no_hand_before_first_state(self):
        canvas = ClockCanvas()
        canvas.set_frame_count(3)
        self.assertEqual(items_with_role(canvas, ROLE_HAND), [])
        self.assertEqual(items_with_role(canvas, ROLE_HIGHLIGHT), [])

    def test_pages_and_highlight_follow_state(self):
        machine = ClockStateMachine(2, ["7", "8"])
        for _ in range(5):
            machine.step()
        canvas = ClockCanvas()
        canvas.update_view(machine.get_state())

        texts = scene_texts(canvas)
        self.assertIn("7", texts)
        self.assertIn("bit: 1", texts)

        rings = items_with_role(canvas, ROLE_HIGHLIGHT)
        self.assertEqual(len(rings), 1)
        self.assertEqual(HighlightColor(rings[0].data(ITEM_HIGHLIGHT_KEY)), HighlightColor.RED)

        hands = items_with_role(canvas, ROLE_HAND)
        self.assertEqual(len(hands), 1)

if __name__ == '__main__':
    unittest.main()
