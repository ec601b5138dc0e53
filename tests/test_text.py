"""Tests for dashterm.core.text."""

from dashterm.core.text import wrap, wrap_paragraphs


class TestWrap:
    def test_empty_string_is_one_empty_line(self) -> None:
        assert wrap("", len, 10) == [""]

    def test_greedy_accumulation(self) -> None:
        assert wrap("aaa bbb ccc", len, 8) == ["aaa bbb", "ccc"]

    def test_width_must_stay_strictly_below_max(self) -> None:
        assert wrap("aaa bbb", len, 7) == ["aaa", "bbb"]
        assert wrap("aaa bbb", len, 8) == ["aaa bbb"]

    def test_wide_word_gets_its_own_line(self) -> None:
        assert wrap("a verylongword b", len, 5) == ["a", "verylongword", "b"]

    def test_words_survive_in_order(self) -> None:
        text = "the quick brown fox jumps over the lazy dog again and again"
        lines = wrap(text, len, 12)
        assert all(len(line) < 12 for line in lines)
        assert " ".join(lines).split(" ") == text.split(" ")

    def test_injected_measure_is_used(self) -> None:
        double = lambda s: 2 * len(s)
        assert wrap("ab cd", double, 10) == ["ab", "cd"]
        assert wrap("ab cd", len, 10) == ["ab cd"]


class TestWrapParagraphs:
    def test_blank_paragraph_yields_one_empty_line(self) -> None:
        assert wrap_paragraphs("one\n\ntwo", len, 10) == ["one", "", "two"]

    def test_each_paragraph_wraps_independently(self) -> None:
        assert wrap_paragraphs("aaa bbb\nccc", len, 5) == ["aaa", "bbb", "ccc"]
