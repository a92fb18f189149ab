"""
Error taxonomy for transformer generation and testing.

Generation-time failures (`ShapeMismatch`, `ScopeConflict`) abort the adapter
before anything is emitted. Test-time failures (`ParseFailure`,
`TransformationMismatch`) are local to the single assertion that raised them.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
  from testable_transformers.core.comparator import ComparisonResult


class TransformerError(Exception):
  """Base class for all errors raised by testable-transformers."""


class ShapeMismatch(TransformerError, TypeError):
  """
  Raised when a transformer definition does not have the required signature.

  Attributes:
      name (str): Name of the offending definition.
      expected (str): The required signature, rendered.
      actual (str): The signature that was found, rendered.
  """

  def __init__(self, name: str, expected: str, actual: str):
    self.name = name
    self.expected = expected
    self.actual = actual
    super().__init__(f"'{name}' cannot be used as a transformer.\n  expected: {expected}\n  found:    {actual}")


class ScopeConflict(TransformerError):
  """Raised when the implementation scope name is already bound to something else."""


class MisplacedTransformer(TransformerError):
  """
  Raised by source expansion when a marked function is not defined at module
  level (inside a class, a function or an `if`/`try`/`with` block).
  """


class ParseFailure(TransformerError, ValueError):
  """
  Raised when raw source cannot be parsed into a syntax tree.

  Attributes:
      label (str): What was being parsed (e.g. 'item', 'expected', a file path).
  """

  def __init__(self, label: str, detail: str):
    self.label = label
    super().__init__(f"Failed to parse {label}: {detail}")


class RenderFailure(TransformerError, ValueError):
  """Raised when a tree cannot be rendered to canonical text."""


class ImplementationNotFound(TransformerError, LookupError):
  """Raised when a transformer reference cannot be resolved to its implementation."""


class TransformationMismatch(AssertionError):
  """
  Test failure raised when a transformer output differs from the expected item.

  Subclasses `AssertionError` so any test runner reports it as a failed assertion.
  """

  def __init__(self, result: "ComparisonResult", message: Optional[str] = None):
    self.result = result
    super().__init__(message or result.report())
