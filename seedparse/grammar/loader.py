"""Grammar file loader"""

from __future__ import annotations
from pathlib    import Path


def load_grammar_text(path: str) -> str:
    """
    Read a grammar file as UTF-8 text.
    - a leading byte-order mark is dropped (utf-8-sig), so it never reaches
      the scanner as an unexpected character
    - '\\r\\n' and '\\r' become '\\n', keeping line:col in error messages right
    """
    text = Path(path).read_text(encoding="utf-8-sig")
    return text.replace("\r\n", "\n").replace("\r", "\n")
