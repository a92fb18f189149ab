"""
Syntax Model Boundary.

Transformers never see raw source text. This module defines the structured
types they operate on and the `SyntaxConverter` capability that moves between
raw text and those types:

- `ItemTree`: a LibCST `Module`, i.e. a sequence of items/statements.
- `AttributeArguments`: the arguments written at the annotation site,
  e.g. ``@make_answer(name="ANSWER", value=42)``.

The boundary layer (entry points, the test harness) depends on the
`SyntaxConverter` abstraction; `LibCSTConverter` is the only implementation.
"""

import ast
import io
import textwrap
import tokenize
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple, Union

import libcst as cst

from testable_transformers.core.errors import ParseFailure, RenderFailure

ItemTree = cst.Module
RawSource = Union[str, bytes]

# A dummy module used as a context to render detached nodes.
_RENDER_CTX = cst.parse_module("")


def capture_node_source(node: cst.CSTNode) -> str:
  """
  Renders a LibCST node into its Python source code string representation.

  Works for nodes taken from a parsed tree as well as for freshly
  constructed (detached) nodes.

  Args:
      node: The CST node to serialise.

  Returns:
      str: The Python code string.

  Raises:
      TypeError: If `node` is not a LibCST node.
  """
  if not isinstance(node, cst.CSTNode):
    raise TypeError(f"Expected a LibCST node, got {type(node).__name__}")
  return _RENDER_CTX.code_for_node(node)


def _to_text(raw: RawSource, label: str) -> str:
  """
  Decodes raw source, honouring a PEP 263 coding cookie (UTF-8 otherwise).

  Raises:
      ParseFailure: If the bytes cannot be decoded.
      TypeError: If `raw` is neither str nor bytes.
  """
  if isinstance(raw, bytes):
    try:
      encoding, _ = tokenize.detect_encoding(io.BytesIO(raw).readline)
      return raw.decode(encoding)
    except (SyntaxError, UnicodeDecodeError, LookupError) as e:
      raise ParseFailure(label, f"undecodable source: {e}") from e
  if not isinstance(raw, str):
    raise TypeError(f"Expected source text (str or bytes), got {type(raw).__name__}")
  return raw


@dataclass(frozen=True, repr=False, eq=False)
class AttributeArguments:
  """
  Immutable view over the arguments supplied at an annotation site.

  Attributes:
      args (Tuple[cst.Arg, ...]): The argument nodes, in source order.
  """

  args: Tuple[cst.Arg, ...] = ()

  def __post_init__(self) -> None:
    object.__setattr__(self, "args", tuple(self.args))

  def __iter__(self) -> Iterator[cst.Arg]:
    return iter(self.args)

  def __len__(self) -> int:
    return len(self.args)

  def __getitem__(self, index: int) -> cst.Arg:
    return self.args[index]

  def __repr__(self) -> str:
    return f"AttributeArguments({self.render()})"

  @property
  def positional(self) -> Tuple[cst.BaseExpression, ...]:
    """Values of the arguments passed without a keyword."""
    return tuple(arg.value for arg in self.args if arg.keyword is None and not arg.star)

  def names(self) -> Tuple[str, ...]:
    """
    Bare identifiers among the positional arguments.

    For ``@derive(Debug, Clone)`` this returns ``("Debug", "Clone")``.
    """
    return tuple(value.value for value in self.positional if isinstance(value, cst.Name))

  def keyword(self, name: str) -> Optional[cst.BaseExpression]:
    """
    Looks up the expression bound to a keyword argument.

    Args:
        name (str): The keyword.

    Returns:
        Optional[cst.BaseExpression]: The value node, or None if absent.
    """
    for arg in self.args:
      if arg.keyword is not None and arg.keyword.value == name:
        return arg.value
    return None

  def value(self, name: str, default: Any = None) -> Any:
    """
    Evaluates the literal bound to a keyword argument.

    Args:
        name (str): The keyword.
        default (Any): Returned when the keyword is absent.

    Returns:
        Any: The Python value of the literal.

    Raises:
        ValueError: If the bound expression is not a literal.
    """
    node = self.keyword(name)
    if node is None:
      return default

    source = capture_node_source(node).strip()
    try:
      return ast.literal_eval(source)
    except (ValueError, SyntaxError) as e:
      raise ValueError(f"Argument '{name}' is not a literal: {source}") from e

  def render(self) -> str:
    """Renders the arguments back to source, comma separated."""
    return ", ".join(capture_node_source(arg.with_changes(comma=cst.MaybeSentinel.DEFAULT)) for arg in self.args)


class SyntaxConverter(ABC):
  """
  Capability set required from the syntax library: parse, render, serialize.
  """

  @abstractmethod
  def parse_item(self, raw: RawSource, label: str = "item") -> ItemTree:
    """Parses raw source into an ItemTree. Raises ParseFailure on malformed input."""

  @abstractmethod
  def parse_arguments(self, raw: RawSource) -> AttributeArguments:
    """Parses the raw content of an annotation argument list."""

  @abstractmethod
  def render(self, node: cst.CSTNode) -> str:
    """Renders a tree to its canonical textual form."""

  @abstractmethod
  def serialize(self, node: cst.CSTNode) -> str:
    """Serializes a tree to the raw output form handed back to the host."""


class LibCSTConverter(SyntaxConverter):
  """
  `SyntaxConverter` backed by LibCST for parsing and by the standard library
  `ast` printer for canonical rendering.
  """

  def parse_item(self, raw: RawSource, label: str = "item") -> ItemTree:
    """
    Parses an item block.

    The text is dedented and leading blank lines are dropped, so literal
    blocks can be written indented inside triple-quoted strings.

    Args:
        raw: Source text (str or UTF-8 bytes).
        label: Name of the block, used in error messages.

    Returns:
        ItemTree: The parsed module.

    Raises:
        ParseFailure: If the text is not valid Python.
    """
    text = textwrap.dedent(_to_text(raw, label)).lstrip("\n")
    try:
      return cst.parse_module(text)
    except cst.ParserSyntaxError as e:
      raise ParseFailure(label, str(e)) from e

  def parse_arguments(self, raw: RawSource) -> AttributeArguments:
    """
    Parses the inside of an annotation argument list, e.g. ``name="x", value=42``.

    Args:
        raw: Argument text (str or UTF-8 bytes). Blank text means no arguments.

    Returns:
        AttributeArguments: The parsed arguments.

    Raises:
        ParseFailure: If the text is not a valid argument list.
    """
    text = _to_text(raw, "attribute arguments").strip()
    if not text:
      return AttributeArguments()

    try:
      call = cst.parse_expression(f"_({text})")
    except cst.ParserSyntaxError as e:
      raise ParseFailure("attribute arguments", str(e)) from e

    # Reject input that closes the synthetic call early, e.g. "a)(b"
    if not (isinstance(call, cst.Call) and isinstance(call.func, cst.Name) and call.func.value == "_"):
      raise ParseFailure("attribute arguments", f"not an argument list: {text!r}")

    return AttributeArguments(tuple(call.args))

  def render(self, node: cst.CSTNode) -> str:
    """
    Renders a node canonically by re-parsing its source with `ast` and printing
    it with `ast.unparse`.

    Raises:
        TypeError: If `node` is not a LibCST node.
        RenderFailure: If the node's source is not a parseable Python fragment.
    """
    source = self.serialize(node)
    try:
      tree = ast.parse(textwrap.dedent(source))
    except (SyntaxError, ValueError) as e:
      raise RenderFailure(f"Cannot render {type(node).__name__} canonically: {e}") from e

    # `u"a"` and `"a"` are the same literal
    for sub in ast.walk(tree):
      if isinstance(sub, ast.Constant):
        sub.kind = None
    return ast.unparse(tree)

  def serialize(self, node: cst.CSTNode) -> str:
    """Returns the exact source of the node, formatting preserved."""
    if isinstance(node, cst.Module):
      return node.code
    return capture_node_source(node)


DEFAULT_CONVERTER: SyntaxConverter = LibCSTConverter()
