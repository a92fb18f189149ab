"""
Source-Level Adapter Generation.

Expands transformer definitions in source code, producing the code that the
`@transformer` decorator builds at runtime. Useful to inspect what a module
looks like from the host's point of view, and to ship modules that must not
depend on the decorator at import time.

Transformation::

    @transformer
    def make_answer(args: AttributeArguments, item: ItemTree) -> ItemTree:
        <body>

Becomes::

    from testable_transformers import invoke_boundary

    def make_answer(attributes: str, item: str) -> str:
        return invoke_boundary(implementation.make_answer, attributes, item)

    class implementation:
        \"\"\"Implementation functions of the transformers defined in this module.\"\"\"

        @staticmethod
        def make_answer(args: AttributeArguments, item: ItemTree) -> ItemTree:
            <body>

Marked functions must be defined at module level; a marker inside a class,
function or compound statement raises `MisplacedTransformer`. Expansion is deterministic: the
same input always produces the same output.
"""

from typing import List, Optional, Sequence, Union

import libcst as cst

from testable_transformers.core.adapter import SCOPE_NAME
from testable_transformers.core.errors import MisplacedTransformer, ScopeConflict
from testable_transformers.core.signature import TransformerSignature, check_shape
from testable_transformers.core.syntax import DEFAULT_CONVERTER, ItemTree, RawSource, capture_node_source

DEFAULT_MARKERS = ("transformer",)

_BOUNDARY_TEMPLATE = (
  "def {name}(attributes: str, item: str) -> str:\n    return invoke_boundary({scope}.{name}, attributes, item)\n"
)
_BOUNDARY_IMPORT = "from testable_transformers import invoke_boundary"
_SCOPE_DOCSTRING = '"""Implementation functions of the transformers defined in this module."""'


class AdapterGenerator(cst.CSTTransformer):
  """
  Rewrites marked module-level functions into boundary entry points and
  collects their implementations into a module-level scope class.

  Attributes:
      marker_decorators (frozenset): Decorator names that mark a transformer.
      implementations (List[cst.FunctionDef]): Collected implementation functions,
          in source order.
  """

  def __init__(self, marker_decorators: Sequence[str] = DEFAULT_MARKERS):
    super().__init__()
    self.marker_decorators = frozenset(marker_decorators)
    self.implementations: List[cst.FunctionDef] = []
    self._depth = 0

  @property
  def expanded_names(self) -> List[str]:
    """Names of the transformers expanded so far."""
    return [impl.name.value for impl in self.implementations]

  def _is_marker(self, decorator: cst.Decorator) -> bool:
    expr = decorator.decorator
    if isinstance(expr, cst.Name):
      return expr.value in self.marker_decorators
    if isinstance(expr, cst.Attribute):
      return expr.attr.value in self.marker_decorators
    return False

  def visit_IndentedBlock(self, node: cst.IndentedBlock) -> Optional[bool]:
    self._depth += 1
    return True

  def leave_IndentedBlock(self, original_node: cst.IndentedBlock, updated_node: cst.IndentedBlock) -> cst.IndentedBlock:
    self._depth -= 1
    return updated_node

  def leave_FunctionDef(
    self, original_node: cst.FunctionDef, updated_node: cst.FunctionDef
  ) -> Union[cst.FunctionDef, cst.BaseStatement]:
    """
    Replaces a marked function with its boundary entry point.

    Raises:
        ShapeMismatch: If the marked function has the wrong signature.
        MisplacedTransformer: If the marked function is not at module level.
    """
    if not any(self._is_marker(d) for d in original_node.decorators):
      return updated_node

    name = original_node.name.value
    if self._depth:
      raise MisplacedTransformer(
        f"Transformer '{name}' must be defined at module level; "
        "expansion would leave it registered in a scope the generated class replaces."
      )

    check_shape(TransformerSignature.from_function_def(original_node))

    remaining = [d for d in updated_node.decorators if not self._is_marker(d)]
    self.implementations.append(
      updated_node.with_changes(
        decorators=[cst.Decorator(decorator=cst.Name("staticmethod")), *remaining],
        leading_lines=[cst.EmptyLine()],
      )
    )

    entry = cst.parse_statement(_BOUNDARY_TEMPLATE.format(name=name, scope=SCOPE_NAME))
    return entry.with_changes(leading_lines=updated_node.leading_lines)

  def leave_Module(self, original_node: cst.Module, updated_node: cst.Module) -> cst.Module:
    """
    Appends the implementation scope and the boundary import.

    Raises:
        ScopeConflict: If the module already binds the scope name.
    """
    if not self.implementations:
      return updated_node

    body = list(updated_node.body)
    if any(_binds_name(stmt, SCOPE_NAME) for stmt in body):
      raise ScopeConflict(f"Module already binds '{SCOPE_NAME}'; cannot emit the implementation scope.")

    docstring = cst.SimpleStatementLine(body=[cst.Expr(value=cst.SimpleString(_SCOPE_DOCSTRING))])
    scope = cst.ClassDef(
      name=cst.Name(SCOPE_NAME),
      body=cst.IndentedBlock(body=[docstring, *self.implementations]),
      leading_lines=[cst.EmptyLine(), cst.EmptyLine()],
    )

    if not any(_imports_name(stmt, "invoke_boundary") for stmt in body):
      body.insert(_import_index(body), cst.parse_statement(_BOUNDARY_IMPORT))
    body.append(scope)
    return updated_node.with_changes(body=body)


def _is_docstring(stmt: cst.BaseStatement) -> bool:
  return (
    isinstance(stmt, cst.SimpleStatementLine)
    and len(stmt.body) == 1
    and isinstance(stmt.body[0], cst.Expr)
    and isinstance(stmt.body[0].value, (cst.SimpleString, cst.ConcatenatedString))
  )


def _is_future_import(stmt: cst.BaseStatement) -> bool:
  if not isinstance(stmt, cst.SimpleStatementLine):
    return False
  first = stmt.body[0]
  return isinstance(first, cst.ImportFrom) and isinstance(first.module, cst.Name) and first.module.value == "__future__"


def _import_index(body: List[cst.BaseStatement]) -> int:
  """Position after the module docstring and `__future__` imports."""
  index = 1 if body and _is_docstring(body[0]) else 0
  while index < len(body) and _is_future_import(body[index]):
    index += 1
  return index


def _alias_names(names: Union[Sequence[cst.ImportAlias], cst.ImportStar]) -> List[str]:
  if isinstance(names, cst.ImportStar):
    return []
  bound = []
  for alias in names:
    if alias.asname is not None and isinstance(alias.asname.name, cst.Name):
      bound.append(alias.asname.name.value)
    elif isinstance(alias.name, cst.Name):
      bound.append(alias.name.value)
    else:
      # 'import a.b' binds 'a'
      bound.append(capture_node_source(alias.name).split(".", 1)[0])
  return bound


def _imports_name(stmt: cst.BaseStatement, name: str) -> bool:
  if not isinstance(stmt, cst.SimpleStatementLine):
    return False
  return any(isinstance(small, cst.ImportFrom) and name in _alias_names(small.names) for small in stmt.body)


def _binds_name(stmt: cst.BaseStatement, name: str) -> bool:
  """Whether a module-level statement binds `name`."""
  if isinstance(stmt, (cst.FunctionDef, cst.ClassDef)):
    return stmt.name.value == name
  if not isinstance(stmt, cst.SimpleStatementLine):
    return False

  for small in stmt.body:
    if isinstance(small, cst.Assign):
      if any(isinstance(t.target, cst.Name) and t.target.value == name for t in small.targets):
        return True
    elif isinstance(small, cst.AnnAssign):
      if isinstance(small.target, cst.Name) and small.target.value == name:
        return True
    elif isinstance(small, (cst.Import, cst.ImportFrom)):
      if name in _alias_names(small.names):
        return True
  return False


def expand_module(module: ItemTree, marker_decorators: Sequence[str] = DEFAULT_MARKERS) -> ItemTree:
  """
  Expands every marked transformer in a parsed module.

  Args:
      module: The parsed module.
      marker_decorators: Decorator names that mark a transformer.

  Returns:
      ItemTree: The expanded module. Unchanged if nothing is marked.
  """
  return module.visit(AdapterGenerator(marker_decorators))


def expand_source(
  source: RawSource,
  marker_decorators: Sequence[str] = DEFAULT_MARKERS,
  label: str = "module",
) -> str:
  """
  Expands every marked transformer in a module's source code.

  Args:
      source: Module source text.
      marker_decorators: Decorator names that mark a transformer.
      label: Name of the source, used in parse errors.

  Returns:
      str: The expanded source code.

  Raises:
      ParseFailure: If the source is not valid Python.
      ShapeMismatch: If a marked function has the wrong signature.
      MisplacedTransformer: If a marked function is not at module level.
      ScopeConflict: If the module already binds the scope name.
  """
  module = DEFAULT_CONVERTER.parse_item(source, label)
  return expand_module(module, marker_decorators).code
