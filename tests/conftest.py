# tests/conftest.py
"""
テスト共通設定。
ディスプレイのない環境でもQtウィジェットのテストが動くよう、offscreenプラットフォームを使います。
"""
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
