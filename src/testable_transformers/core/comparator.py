"""
Structural Equivalence of Syntax Trees.

Two trees are equivalent iff their canonical renderings are identical
strings. The canonical rendering re-parses a tree's source with the
standard library `ast` module and prints it with `ast.unparse`, reusing that
printer's normalization instead of re-deriving one.

Normalization policy:

- Discarded: source positions, whitespace, indentation width, blank lines,
  comments, backslash continuations, redundant parentheses, trailing commas,
  string quote style (``'a'`` vs ``"a"``), string prefix spelling
  (``u"a"`` and ``r"a"`` vs ``"a"``) and implicit string
  concatenation.
- Kept: identifiers, keywords, literal values, nesting, decorator order and
  the order of items, statements, parameters and fields.

Trees that are only equivalent under a looser notion (e.g. reordered
decorators) are reported as different.
"""

import difflib
from typing import List, Optional

import libcst as cst
from pydantic import BaseModel, Field

from testable_transformers.core.syntax import DEFAULT_CONVERTER, SyntaxConverter


class ComparisonResult(BaseModel):
  """
  Outcome of comparing an actual tree with an expected one.

  Truthy iff the trees are equivalent.
  """

  equivalent: bool = Field(..., description="True if both canonical renderings are identical.")
  actual: str = Field("", description="Canonical rendering of the actual tree.")
  expected: str = Field("", description="Canonical rendering of the expected tree.")

  def __bool__(self) -> bool:
    return self.equivalent

  def diff(self, context: int = 3) -> str:
    """
    Line-level unified diff from expected to actual.

    Args:
        context (int): Number of unchanged lines shown around each change.

    Returns:
        str: The diff, empty when the trees are equivalent.
    """
    lines = difflib.unified_diff(
      self.expected.splitlines(),
      self.actual.splitlines(),
      fromfile="expected",
      tofile="actual",
      n=context,
      lineterm="",
    )
    return "\n".join(lines)

  def report(self, context: int = 3) -> str:
    """
    Human-readable failure message: the diff followed by both renderings.

    Args:
        context (int): Context lines for the diff.

    Returns:
        str: The report text.
    """
    if self.equivalent:
      return "Actual output is equivalent to the expected output."

    sections: List[str] = [
      "Actual output is not equivalent to the expected output.",
      self.diff(context),
      "Expected (canonical):",
      _indent(self.expected),
      "Actual (canonical):",
      _indent(self.actual),
    ]
    return "\n\n".join(sections)


def _indent(text: str) -> str:
  return "\n".join(f"    {line}" for line in text.splitlines()) or "    <empty>"


def canonical_render(node: cst.CSTNode, converter: Optional[SyntaxConverter] = None) -> str:
  """
  Renders a tree to its canonical textual form.

  Args:
      node: The tree (or detached node) to render.
      converter: Syntax converter to use. Defaults to LibCST.

  Returns:
      str: The canonical text.
  """
  return (converter or DEFAULT_CONVERTER).render(node)


def compare(
  actual: cst.CSTNode,
  expected: cst.CSTNode,
  converter: Optional[SyntaxConverter] = None,
) -> ComparisonResult:
  """
  Compares two trees structurally.

  Args:
      actual: The tree produced by a transformer.
      expected: The tree it should be equivalent to.
      converter: Syntax converter to use. Defaults to LibCST.

  Returns:
      ComparisonResult: Equivalent, or not equivalent with both renderings.
  """
  actual_text = canonical_render(actual, converter)
  expected_text = canonical_render(expected, converter)
  return ComparisonResult(equivalent=actual_text == expected_text, actual=actual_text, expected=expected_text)
