"""Unit tests for LaTeX normalization of model output."""

import pytest

from qurse.rendering.latex import (
    _fix_break_before_end,
    convert_bracket_math,
    looks_like_latex,
    normalize,
    repair_latex,
)


@pytest.mark.unit
class TestLooksLikeLatex:
    """Tests for the bracket-content LaTeX detector."""

    @pytest.mark.parametrize(
        "content",
        [
            " \\det(A) ",
            "\\frac{1}{2}",
            "\\begin{pmatrix} 1 \\end{pmatrix}",
            "x \\pm y",
            "\\alpha + \\beta",
        ],
    )
    def test_latex_tokens_detected(self, content):
        assert looks_like_latex(content)

    @pytest.mark.parametrize("content", ["1, 2, 3", "regular link text", "x + y = z"])
    def test_plain_text_not_detected(self, content):
        assert not looks_like_latex(content)


@pytest.mark.unit
class TestConvertBracketMath:
    """Tests for [ ... ] to \\[ ... \\] conversion."""

    def test_determinant_is_wrapped(self):
        assert "\\[ \\det(A) \\]" in normalize("[ \\det(A) ]")

    def test_fraction_in_sentence(self):
        result = convert_bracket_math("The half is [ \\frac{1}{2} ] exactly.")
        assert result == "The half is \\[ \\frac{1}{2} \\] exactly."

    def test_markdown_link_unchanged(self):
        text = "[regular link text](url)"
        assert normalize(text) == text

    def test_link_with_command_in_label_unchanged(self):
        text = "[\\alpha notes](https://example.com)"
        assert convert_bracket_math(text) == text

    def test_plain_list_unchanged(self):
        text = "Values: [1, 2, 3]"
        assert normalize(text) == text

    def test_existing_display_math_untouched(self):
        text = "\\[ a \\\\[4pt] b \\]"
        assert convert_bracket_math(text) == text

    def test_dollar_math_untouched(self):
        text = "$$[\\frac{1}{2}]$$"
        assert convert_bracket_math(text) == text

    def test_multiple_groups(self):
        result = convert_bracket_math("[ \\sqrt{2} ] and [ \\sum x ]")
        assert result == "\\[ \\sqrt{2} \\] and \\[ \\sum x \\]"


@pytest.mark.unit
class TestRepairChain:
    """Tests for the individual LaTeX repairs."""

    def test_single_backslash_row_break_doubled(self):
        text = "\\begin{pmatrix}\n1 & 2 \\\n3 & 4\n\\end{pmatrix}"
        expected = "\\begin{pmatrix}\n1 & 2 \\\\\n3 & 4\n\\end{pmatrix}"
        assert repair_latex(text) == expected

    def test_break_before_end_doubled(self):
        text = "x \\\n\\end{cases}"
        assert _fix_break_before_end(text) == "x \\\\\n\\end{cases}"

    def test_space_before_command_removed(self):
        assert repair_latex("2 \\times 3") == "2\\times 3"

    def test_repeated_rightarrow_collapsed(self):
        assert repair_latex("a \\Rightarrow ; \\Rightarrow b") == "a \\Rightarrow b"

    def test_semicolon_line_break(self):
        assert repair_latex("x = 1 \\ ; \\ y = 2") == "x = 1 \\\\ y = 2"

    def test_double_semicolon(self):
        assert repair_latex("a;;b") == "a, b"

    def test_matrix_cells_separated(self):
        text = "\\begin{bmatrix}\n1 2 3 \\\\\n4 5 6\n\\end{bmatrix}"
        expected = "\\begin{bmatrix}\n1 & 2 & 3 \\\\\n4 & 5 & 6\n\\end{bmatrix}"
        assert repair_latex(text) == expected

    def test_matrix_rows_with_separators_kept(self):
        text = "\\begin{bmatrix}\n1 & 2 & 3\n\\end{bmatrix}"
        assert repair_latex(text) == text

    def test_two_wide_rows_not_separated(self):
        text = "\\begin{pmatrix}\n1 2\n\\end{pmatrix}"
        assert repair_latex(text) == text

    def test_lambda_spacing(self):
        assert repair_latex("(\\lambda = 3)") == "(\\lambda=3)"

    def test_boxed_content_trimmed(self):
        assert repair_latex("\\boxed{ 42 }") == "\\boxed{42}"

    def test_well_formed_boxed_untouched(self):
        assert repair_latex("\\boxed{x^{2}}") == "\\boxed{x^{2}}"


@pytest.mark.unit
class TestNormalize:
    """Tests for the full normalize pipeline."""

    @pytest.mark.parametrize(
        "text",
        [
            "[ \\det(A) ]",
            "The answer is \\boxed{ 7 }.",
            "\\begin{bmatrix}\n1 2 3 \\\\\n4 5 6\n\\end{bmatrix}",
            "Eigenvalue [ (\\lambda = 2) \\Rightarrow ; \\Rightarrow x ]",
            "[link](http://a.b) and [ \\frac{a}{b} ]",
            "x = 1 \\ ; \\ y = 2",
        ],
    )
    def test_idempotent(self, text):
        once = normalize(text)
        assert normalize(once) == once

    def test_inline_code_protected(self):
        text = "Use `[ \\det(A) ]` literally"
        assert normalize(text) == text

    def test_fenced_code_protected(self):
        text = "Before [ \\sqrt{x} ]\n```latex\n[ \\frac{1}{2} ]\na;;b\n```\n"
        result = normalize(text)
        assert result.startswith("Before \\[ \\sqrt{x} \\]")
        assert "```latex\n[ \\frac{1}{2} ]\na;;b\n```" in result

    def test_non_string_returned_unchanged(self):
        assert normalize(None) is None
        assert normalize(42) == 42

    def test_empty_string(self):
        assert normalize("") == ""

    def test_plain_prose_unchanged(self):
        text = "Paris is the capital of France. See [1] for details."
        assert normalize(text) == text

    def test_failure_returns_input(self, monkeypatch):
        def boom(_):
            raise RuntimeError("boom")

        monkeypatch.setattr("qurse.rendering.latex._normalize_prose", boom)
        assert normalize("[ \\det(A) ]") == "[ \\det(A) ]"
