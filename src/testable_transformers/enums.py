"""
Enumerations for testable-transformers.

This module defines the categories used when describing and validating
the shape of a transformer definition.
"""

from enum import Enum


class ParameterKind(str, Enum):
  """
  How a parameter of a candidate transformer is bound.

  Only `POSITIONAL` parameters are allowed in a transformer signature.
  """

  POSITIONAL = "positional"
  VAR_POSITIONAL = "var_positional"  # *args
  KEYWORD_ONLY = "keyword_only"
  VAR_KEYWORD = "var_keyword"  # **kwargs

  @property
  def prefix(self) -> str:
    """Star prefix used when rendering a parameter of this kind."""
    if self is ParameterKind.VAR_POSITIONAL:
      return "*"
    if self is ParameterKind.VAR_KEYWORD:
      return "**"
    return ""


class ParameterRole(str, Enum):
  """
  Semantic type expected at each position of a transformer signature.
  """

  ATTRIBUTES = "AttributeArguments"
  ITEM = "ItemTree"
