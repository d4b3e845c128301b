# src/clock_page_tracer/ui/app.py
"""
Qtアプリケーションのエントリポイント。
アプリケーションを初期化し、メインウィンドウを起動します。
コマンドライン引数にシナリオファイル（YAML）が渡された場合は、それを読み込んだ状態で起動します。
"""
import sys

import yaml
from PySide6.QtWidgets import QApplication
from clock_page_tracer.config.loader import ConfigLoader
from .main_window import MainWindow

# @intent:responsibility 起動時に指定されたシナリオを読み込みます。失敗しても起動は続行します。
def load_initial_scenario(window: MainWindow, path: str) -> bool:
    try:
        config = ConfigLoader().load_from_file(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: failed to load scenario '{path}': {e}")
        return False
    window.apply_config(config)
    return True

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main():
    app = QApplication(sys.argv)
    main_win = MainWindow()
    if len(sys.argv) > 1:
        load_initial_scenario(main_win, sys.argv[1])
    main_win.show()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
