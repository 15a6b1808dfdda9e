"""选项序号与字母映射。 / Option index <-> choice letter mapping.

调查结果中选项按位置隐式映射为字母：0 -> "A"，1 -> "B" ……
/ Survey options map to letters by position: 0 -> "A", 1 -> "B", ...

仅支持 26 个选项（A-Z）；超出范围视为不支持的输入，显式抛错而非回绕。
/ Only 26 options (A-Z) are supported; anything beyond is rejected, never wrapped.
"""

from typing import List

MAX_OPTIONS = 26


class UnsupportedOptionIndexError(ValueError):
    """选项序号或字母超出 A-Z 范围。 / Option index or letter outside A-Z."""


def index_to_letter(index: int) -> str:
    """0 -> "A", 25 -> "Z"."""
    if not isinstance(index, int) or index < 0 or index >= MAX_OPTIONS:
        raise UnsupportedOptionIndexError(
            f"Option index {index!r} is outside the supported range 0-{MAX_OPTIONS - 1}"
        )
    return chr(ord("A") + index)


def letter_to_index(letter: str) -> int:
    """"A" -> 0, "z" -> 25."""
    if not isinstance(letter, str) or len(letter.strip()) != 1:
        raise UnsupportedOptionIndexError(f"Invalid choice letter: {letter!r}")
    normalized = letter.strip().upper()
    if not "A" <= normalized <= "Z":
        raise UnsupportedOptionIndexError(f"Invalid choice letter: {letter!r}")
    return ord(normalized) - ord("A")


def option_letters(count: int) -> List[str]:
    """返回前 count 个选项字母。 / Letters for the first `count` options."""
    return [index_to_letter(i) for i in range(count)]


def option_for_letter(options: List[str], letter: str, default: str = "") -> str:
    """按字母查找选项文本，越界或非法字母时返回 default。
    / Look up option text by letter; returns `default` when out of range.
    """
    try:
        idx = letter_to_index(letter)
    except UnsupportedOptionIndexError:
        return default
    if idx < len(options):
        return options[idx]
    return default
