"""Text post-processing applied to model output before it reaches the browser."""

from .latex import convert_bracket_math, looks_like_latex, normalize, repair_latex

__all__ = ["convert_bracket_math", "looks_like_latex", "normalize", "repair_latex"]
