"""
Transformer Signature Validation.

A transformer must have exactly the shape::

    def name(args: AttributeArguments, item: ItemTree) -> ItemTree

The check runs at generation time, either on a live function (the
`@transformer` decorator, at import) or on a LibCST `FunctionDef` (source
expansion). Both build a `TransformerSignature` and share `check_shape`.

Annotations are compared by their last dotted segment, so ``tt.ItemTree``,
``"ItemTree"`` and ``libcst.Module`` (the same type as `ItemTree`) all match.
"""

import inspect
from typing import Any, Callable, Dict, FrozenSet, List, Optional

import libcst as cst
from pydantic import BaseModel, Field

from testable_transformers.core.errors import ShapeMismatch
from testable_transformers.core.syntax import AttributeArguments, ItemTree, capture_node_source
from testable_transformers.enums import ParameterKind, ParameterRole

ACCEPTED_NAMES: Dict[ParameterRole, FrozenSet[str]] = {
  ParameterRole.ATTRIBUTES: frozenset({"AttributeArguments"}),
  ParameterRole.ITEM: frozenset({"ItemTree", "Module"}),
}

EXPECTED_SIGNATURE = "def {name}(args: AttributeArguments, item: ItemTree) -> ItemTree"

_INSPECT_KINDS = {
  inspect.Parameter.POSITIONAL_ONLY: ParameterKind.POSITIONAL,
  inspect.Parameter.POSITIONAL_OR_KEYWORD: ParameterKind.POSITIONAL,
  inspect.Parameter.VAR_POSITIONAL: ParameterKind.VAR_POSITIONAL,
  inspect.Parameter.KEYWORD_ONLY: ParameterKind.KEYWORD_ONLY,
  inspect.Parameter.VAR_KEYWORD: ParameterKind.VAR_KEYWORD,
}


class ParameterShape(BaseModel):
  """A single parameter of a candidate transformer."""

  name: str
  annotation: Optional[str] = Field(None, description="Annotation text, None when unannotated.")
  kind: ParameterKind = ParameterKind.POSITIONAL

  def render(self) -> str:
    text = f"{self.kind.prefix}{self.name}"
    if self.annotation:
      text += f": {self.annotation}"
    return text


class TransformerSignature(BaseModel):
  """
  Description of a candidate transformer's signature, independent of where
  it was read from.
  """

  name: str
  parameters: List[ParameterShape] = Field(default_factory=list)
  returns: Optional[str] = Field(None, description="Return annotation text, None when unannotated.")
  is_async: bool = False

  def render(self) -> str:
    """
    Renders the signature as a `def` line (without the trailing colon).

    Returns:
        str: e.g. ``def f(args: AttributeArguments, item: ItemTree) -> ItemTree``.
    """
    parts = []
    kw_marker_needed = True
    for param in self.parameters:
      if param.kind is ParameterKind.VAR_POSITIONAL:
        kw_marker_needed = False
      if param.kind is ParameterKind.KEYWORD_ONLY and kw_marker_needed:
        parts.append("*")
        kw_marker_needed = False
      parts.append(param.render())

    returns = f" -> {self.returns}" if self.returns else ""
    prefix = "async def" if self.is_async else "def"
    return f"{prefix} {self.name}({', '.join(parts)}){returns}"

  @classmethod
  def from_callable(cls, fn: Callable[..., Any]) -> "TransformerSignature":
    """
    Reads the signature of a live function.

    Args:
        fn: The function object.

    Returns:
        TransformerSignature: The described signature.
    """
    sig = inspect.signature(fn)
    params = [
      ParameterShape(name=p.name, annotation=_runtime_annotation(p.annotation), kind=_INSPECT_KINDS[p.kind])
      for p in sig.parameters.values()
    ]
    return cls(
      name=fn.__name__,
      parameters=params,
      returns=_runtime_annotation(sig.return_annotation),
      is_async=inspect.iscoroutinefunction(fn),
    )

  @classmethod
  def from_function_def(cls, node: cst.FunctionDef) -> "TransformerSignature":
    """
    Reads the signature of a LibCST function definition.

    Args:
        node: The `def` node.

    Returns:
        TransformerSignature: The described signature.
    """
    params = node.params
    shapes: List[ParameterShape] = []

    for param in [*params.posonly_params, *params.params]:
      shapes.append(_cst_param(param, ParameterKind.POSITIONAL))
    if isinstance(params.star_arg, cst.Param):
      shapes.append(_cst_param(params.star_arg, ParameterKind.VAR_POSITIONAL))
    for param in params.kwonly_params:
      shapes.append(_cst_param(param, ParameterKind.KEYWORD_ONLY))
    if params.star_kwarg is not None:
      shapes.append(_cst_param(params.star_kwarg, ParameterKind.VAR_KEYWORD))

    return cls(
      name=node.name.value,
      parameters=shapes,
      returns=_cst_annotation(node.returns),
      is_async=node.asynchronous is not None,
    )


def _runtime_annotation(annotation: Any) -> Optional[str]:
  if annotation is inspect.Parameter.empty:
    return None
  if isinstance(annotation, str):
    return annotation
  if annotation is ItemTree:
    return ParameterRole.ITEM.value
  if annotation is AttributeArguments:
    return ParameterRole.ATTRIBUTES.value
  return getattr(annotation, "__qualname__", None) or repr(annotation)


def _cst_annotation(annotation: Optional[cst.Annotation]) -> Optional[str]:
  if annotation is None:
    return None
  expr = annotation.annotation
  if isinstance(expr, cst.SimpleString):
    value = expr.evaluated_value
    return value.decode("utf-8") if isinstance(value, bytes) else value
  return capture_node_source(expr).strip()


def _cst_param(param: cst.Param, kind: ParameterKind) -> ParameterShape:
  return ParameterShape(name=param.name.value, annotation=_cst_annotation(param.annotation), kind=kind)


def _leaf(annotation: Optional[str]) -> str:
  """Last dotted segment of an annotation, e.g. 'cst.Module' -> 'Module'."""
  if not annotation:
    return ""
  return annotation.strip().rsplit(".", 1)[-1]


def matches_shape(signature: TransformerSignature) -> bool:
  """
  Checks a signature against the required transformer shape.

  Args:
      signature: The candidate signature.

  Returns:
      bool: True if it has two positional parameters typed
      (AttributeArguments, ItemTree) and returns ItemTree.
  """
  if signature.is_async or len(signature.parameters) != 2:
    return False

  attributes, item = signature.parameters
  if attributes.kind is not ParameterKind.POSITIONAL or item.kind is not ParameterKind.POSITIONAL:
    return False

  return (
    _leaf(attributes.annotation) in ACCEPTED_NAMES[ParameterRole.ATTRIBUTES]
    and _leaf(item.annotation) in ACCEPTED_NAMES[ParameterRole.ITEM]
    and _leaf(signature.returns) in ACCEPTED_NAMES[ParameterRole.ITEM]
  )


def check_shape(signature: TransformerSignature) -> None:
  """
  Validates a signature, raising on mismatch.

  Raises:
      ShapeMismatch: Naming the expected and the actual signature.
  """
  if not matches_shape(signature):
    raise ShapeMismatch(
      name=signature.name,
      expected=EXPECTED_SIGNATURE.format(name=signature.name),
      actual=signature.render(),
    )
