# tests/primitives/test_options.py
# 选项序号 / 字母映射测试 / Option index <-> letter mapping tests

"""选项序号 / 字母映射测试。"""
import pytest

from surveylens.utils.options import (
    UnsupportedOptionIndexError,
    index_to_letter,
    letter_to_index,
    option_for_letter,
    option_letters,
)


class TestIndexLetterMapping:
    def test_bounds(self):
        assert index_to_letter(0) == "A"
        assert index_to_letter(25) == "Z"
        assert letter_to_index("A") == 0
        assert letter_to_index("z") == 25

    @pytest.mark.parametrize("index", [-1, 26, 100])
    def test_out_of_range_index(self, index):
        with pytest.raises(UnsupportedOptionIndexError):
            index_to_letter(index)

    @pytest.mark.parametrize("letter", ["", "AB", "1", "?"])
    def test_invalid_letter(self, letter):
        with pytest.raises(UnsupportedOptionIndexError):
            letter_to_index(letter)

    def test_is_value_error(self):
        assert issubclass(UnsupportedOptionIndexError, ValueError)

    def test_option_letters(self):
        assert option_letters(3) == ["A", "B", "C"]

    def test_option_for_letter(self):
        options = ["Alpha", "Beta"]
        assert option_for_letter(options, "b") == "Beta"
        assert option_for_letter(options, "C", "missing") == "missing"
        assert option_for_letter(options, "", "none") == "none"
