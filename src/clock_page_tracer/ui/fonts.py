"""
等幅フォントの選択。

時計キャンバス、統計パネル、ログパネルは同じ等幅フォントで描画する。
OSごとに入っているフォントが違うため、候補リストの先頭から順に探す。
"""
from PySide6.QtGui import QFont, QFontDatabase

PREFERRED_FONTS = ["Consolas", "Menlo", "Monaco", "DejaVu Sans Mono", "Courier New"]

# @intent:responsibility PREFERRED_FONTSのうちインストール済みの最初のファミリー名を返します。
def get_monospace_font_family() -> str:
    """
    候補が1つも見つからない環境では、QtがFixedFontとして報告するファミリーを使う。
    """
    available_families = QFontDatabase.families()

    for font in PREFERRED_FONTS:
        if font in available_families:
            return font

    # 候補なし
    return QFontDatabase.systemFont(QFontDatabase.FixedFont).family()

def get_monospace_font(size: int = 10) -> QFont:
    return QFont(get_monospace_font_family(), size)
