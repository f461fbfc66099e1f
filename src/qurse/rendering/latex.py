"""Normalize model-generated markdown so its math renders.

Models frequently emit display math as ``[ ... ]`` instead of ``\\[ ... \\]``
and produce a handful of recurring LaTeX typos (single-backslash row breaks,
``\\ ; \\`` separators, space-separated matrix cells). ``normalize`` rewrites
bracketed math into display-math delimiters and then runs a fixed, ordered
chain of regex repairs.

The repairs are heuristic. They skip fenced and inline code, never raise, and
a second pass over their output is a no-op.
"""

import logging
import re
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)

# Tokens that mark a bracket group as LaTeX. Any other backslash command
# qualifies as well, see _COMMAND.
LATEX_TOKENS = (
    "\\frac",
    "\\sqrt",
    "\\sum",
    "\\int",
    "\\det",
    "\\begin{",
    "\\end{",
    "\\lambda",
    "\\Delta",
    "\\boxed",
    "\\Rightarrow",
    "\\pm",
)

MATRIX_ENVIRONMENTS = (
    "matrix",
    "pmatrix",
    "bmatrix",
    "Bmatrix",
    "vmatrix",
    "Vmatrix",
    "smallmatrix",
    "array",
)

_CODE = re.compile(r"(```[\s\S]*?```|~~~[\s\S]*?~~~|`[^`\n]*`)")

_COMMAND = re.compile(r"\\[A-Za-z]+")

# Existing math spans are matched first and returned unchanged so that
# brackets inside them (e.g. ``\\[4pt]``) are never rewrapped.
_MATH_OR_BRACKET = re.compile(
    r"(?P<display>(?<!\\)\\\[[\s\S]*?(?<!\\)\\\])"
    r"|(?P<dollars>\$\$[\s\S]*?\$\$)"
    r"|(?P<inline>(?<!\\)\\\([\s\S]*?(?<!\\)\\\))"
    r"|(?<!\\)\[(?P<body>[^\[\]]*(?:\[[^\[\]]*\][^\[\]]*)*)\](?!\()"
)

_ENVIRONMENT = re.compile(r"\\begin\{([A-Za-z]+\*?)\}(.*?)\\end\{\1\}", re.DOTALL)
_ROW_END_SINGLE_BACKSLASH = re.compile(r"(?<!\\)\\(?=[ \t]*(?:\n|$))")
_SINGLE_BACKSLASH_BEFORE_END = re.compile(r"(?<!\\)\\(\s+)\\end\{")
_SPACE_BEFORE_COMMAND = re.compile(r"(\d|\\[A-Za-z]+)[ \t]+(?=\\[A-Za-z])")
_REPEATED_RIGHTARROW = re.compile(r"\\Rightarrow(?:\s*;\s*\\Rightarrow)+")
_SEMICOLON_LINE_BREAK = re.compile(r"(?<!\\)\\\s*;\s*\\(?![A-Za-z\\])")
_DOUBLE_SEMICOLON = re.compile(r";;")
_MATRIX_ENVIRONMENT = re.compile(
    r"(\\begin\{(" + "|".join(MATRIX_ENVIRONMENTS) + r")\}(?:\{[^{}]*\})?)"
    r"(.*?)(\\end\{\2\})",
    re.DOTALL,
)
_ROW_SPLIT = re.compile(r"(\\\\|\n)")
_NUMBER = r"-?\d+(?:\.\d+)?"
_THREE_NUMBER_ROW = re.compile(
    rf"(\s*)({_NUMBER})[ \t]+({_NUMBER})[ \t]+({_NUMBER})(\s*)"
)
_LAMBDA_ASSIGNMENT = re.compile(r"\(\s*\\lambda\s*=\s*(" + _NUMBER + r")\s*\)")
_BOXED = re.compile(r"\\boxed\{((?:[^{}]|\{[^{}]*\})*)\}")


def looks_like_latex(content: str) -> bool:
    """Return True if bracket content contains a LaTeX-indicative token."""
    if any(token in content for token in LATEX_TOKENS):
        return True
    return _COMMAND.search(content) is not None


def _convert_bracket(match: re.Match) -> str:
    body = match.group("body")
    if body is None:
        # Already delimited math
        return match.group(0)
    if looks_like_latex(body):
        return f"\\[{body}\\]"
    return match.group(0)


def convert_bracket_math(text: str) -> str:
    """Rewrite ``[ X ]`` groups containing LaTeX as ``\\[ X \\]``.

    Markdown links (``[text](url)``) and groups that are already display math
    are left alone.
    """
    return _MATH_OR_BRACKET.sub(_convert_bracket, text)


def _double_row_breaks(match: re.Match) -> str:
    body = _ROW_END_SINGLE_BACKSLASH.sub(r"\\\\", match.group(2))
    return f"\\begin{{{match.group(1)}}}{body}\\end{{{match.group(1)}}}"


def _fix_row_breaks(text: str) -> str:
    return _ENVIRONMENT.sub(_double_row_breaks, text)


def _fix_break_before_end(text: str) -> str:
    return _SINGLE_BACKSLASH_BEFORE_END.sub(r"\\\\\1\\end{", text)


def _remove_space_before_command(text: str) -> str:
    return _SPACE_BEFORE_COMMAND.sub(r"\1", text)


def _collapse_rightarrows(text: str) -> str:
    return _REPEATED_RIGHTARROW.sub(r"\\Rightarrow", text)


def _fix_semicolon_breaks(text: str) -> str:
    return _SEMICOLON_LINE_BREAK.sub(r"\\\\", text)


def _fix_double_semicolons(text: str) -> str:
    return _DOUBLE_SEMICOLON.sub(", ", text)


def _separate_row(row: str) -> str:
    match = _THREE_NUMBER_ROW.fullmatch(row)
    if match is None:
        return row
    lead, a, b, c, trail = match.groups()
    return f"{lead}{a} & {b} & {c}{trail}"


def _separate_matrix_cells(match: re.Match) -> str:
    opening, _, body, closing = match.groups()
    parts = _ROW_SPLIT.split(body)
    # Odd indices hold the row separators themselves
    rows = [p if i % 2 else _separate_row(p) for i, p in enumerate(parts)]
    return opening + "".join(rows) + closing


def _fix_matrix_cells(text: str) -> str:
    return _MATRIX_ENVIRONMENT.sub(_separate_matrix_cells, text)


def _fix_lambda_spacing(text: str) -> str:
    return _LAMBDA_ASSIGNMENT.sub(r"(\\lambda=\1)", text)


def _fix_boxed(text: str) -> str:
    return _BOXED.sub(lambda m: f"\\boxed{{{m.group(1).strip()}}}", text)


# Order matters: later rules assume the earlier ones already ran.
REPAIRS: Tuple[Tuple[str, Callable[[str], str]], ...] = (
    ("row_breaks", _fix_row_breaks),
    ("break_before_end", _fix_break_before_end),
    ("space_before_command", _remove_space_before_command),
    ("collapse_rightarrows", _collapse_rightarrows),
    ("semicolon_breaks", _fix_semicolon_breaks),
    ("double_semicolons", _fix_double_semicolons),
    ("matrix_cells", _fix_matrix_cells),
    ("lambda_spacing", _fix_lambda_spacing),
    ("boxed", _fix_boxed),
)


def repair_latex(text: str) -> str:
    """Apply the ordered LaTeX repair chain to a prose segment."""
    for _, repair in REPAIRS:
        text = repair(text)
    return text


def _normalize_prose(text: str) -> str:
    return repair_latex(convert_bracket_math(text))


def _split_code(text: str) -> List[str]:
    """Split text so that odd indices hold fenced or inline code spans."""
    return _CODE.split(text)


def normalize(text: str) -> str:
    """Prepare model output for a markdown + math renderer.

    Converts bracket-delimited math to ``\\[ ... \\]`` and repairs common
    LaTeX mistakes outside code spans.

    Args:
        text: Markdown produced by a model.

    Returns:
        The normalized text. Input that is not a string, or that trips an
        unexpected error, is returned unchanged.
    """
    if not isinstance(text, str) or not text:
        return text

    try:
        segments = _split_code(text)
        return "".join(
            segment if i % 2 else _normalize_prose(segment)
            for i, segment in enumerate(segments)
        )
    except Exception as e:
        logger.warning(f"LaTeX normalization failed, returning input unchanged: {e}")
        return text
