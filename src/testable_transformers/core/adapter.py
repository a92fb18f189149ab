"""
Runtime Adapter Generation.

Provides the `@transformer` decorator. Applied to a function of shape
``(args: AttributeArguments, item: ItemTree) -> ItemTree`` it:

1.  Validates the shape at definition time (raising `ShapeMismatch`).
2.  Registers the original function, untouched, as
    ``<module>.implementation.<name>``. This is the pure, directly callable
    implementation used by tests.
3.  Returns a boundary entry point with the same name that speaks raw source
    text: ``name(attributes: str, item: str) -> str``.

Usage
-----

.. code-block:: python

    from testable_transformers import AttributeArguments, ItemTree, transformer

    @transformer
    def make_answer(args: AttributeArguments, item: ItemTree) -> ItemTree:
        ...

    make_answer("value=42", "class Foo: pass")           # raw text in, raw text out
    implementation.make_answer(args, tree)              # structured in, structured out
"""

import inspect
from typing import Any, Callable, Dict, Iterator, Optional

from testable_transformers.core.errors import ScopeConflict, ShapeMismatch
from testable_transformers.core.signature import EXPECTED_SIGNATURE, TransformerSignature, check_shape
from testable_transformers.core.syntax import (
  DEFAULT_CONVERTER,
  AttributeArguments,
  ItemTree,
  RawSource,
  SyntaxConverter,
)

SCOPE_NAME = "implementation"

ImplementationFunction = Callable[[AttributeArguments, ItemTree], ItemTree]
BoundaryEntryPoint = Callable[[RawSource, RawSource], str]


class ImplementationScope:
  """
  Namespace holding the implementation functions of one module.

  Bound as ``implementation`` in the module that defines transformers, so an
  implementation is reachable as ``module.implementation.name`` without being
  the public, host-facing symbol.
  """

  def __init__(self, module_name: str):
    self._module_name = module_name
    self._functions: Dict[str, ImplementationFunction] = {}

  @property
  def module_name(self) -> str:
    return self._module_name

  def register(self, fn: ImplementationFunction) -> ImplementationFunction:
    """
    Adds a function to the scope under its own name.

    Re-registering a name (e.g. on module reload) replaces the previous entry.
    """
    self._functions[fn.__name__] = fn
    return fn

  def get(self, name: str) -> Optional[ImplementationFunction]:
    """Returns the implementation registered under `name`, or None."""
    return self._functions.get(name)

  def __getattr__(self, name: str) -> ImplementationFunction:
    functions = self.__dict__.get("_functions", {})
    if name in functions:
      return functions[name]
    raise AttributeError(f"No transformer implementation named '{name}' in {self.__dict__.get('_module_name')}")

  def __iter__(self) -> Iterator[str]:
    return iter(sorted(self._functions))

  def __contains__(self, name: object) -> bool:
    return name in self._functions

  def __repr__(self) -> str:
    return f"<ImplementationScope {self._module_name}: {', '.join(self)}>"


def invoke_boundary(
  implementation: ImplementationFunction,
  attributes: RawSource,
  item: RawSource,
  converter: Optional[SyntaxConverter] = None,
) -> str:
  """
  Runs an implementation function on raw host input.

  Parses the raw attribute arguments and the raw item, calls the
  implementation and serializes its result back to source text.

  Args:
      implementation: The structured transformer.
      attributes: Raw annotation arguments, e.g. ``'name="ANSWER", value=42'``.
      item: Raw source of the annotated item.
      converter: Syntax converter to use. Defaults to LibCST.

  Returns:
      str: Source text of the transformed item.
  """
  converter = converter or DEFAULT_CONVERTER
  args = converter.parse_arguments(attributes)
  tree = converter.parse_item(item)
  return converter.serialize(implementation(args, tree))


def _scope_for(fn: Callable[..., Any]) -> ImplementationScope:
  namespace = fn.__globals__
  scope = namespace.get(SCOPE_NAME)
  if scope is None:
    scope = ImplementationScope(fn.__module__)
    namespace[SCOPE_NAME] = scope
  elif not isinstance(scope, ImplementationScope):
    raise ScopeConflict(
      f"Module '{fn.__module__}' already binds '{SCOPE_NAME}' to a {type(scope).__name__}; "
      f"cannot register transformer '{fn.__name__}'."
    )
  return scope


def transformer(fn: ImplementationFunction) -> BoundaryEntryPoint:
  """
  Splits a transformer into a boundary entry point and an implementation.

  Args:
      fn: A function of shape ``(AttributeArguments, ItemTree) -> ItemTree``.

  Returns:
      BoundaryEntryPoint: ``fn.__name__(attributes, item) -> str``.

  Raises:
      ShapeMismatch: If `fn` is not a function of the required shape.
      ScopeConflict: If the module binds ``implementation`` to something else.
  """
  if not inspect.isfunction(fn):
    name = getattr(fn, "__name__", type(fn).__name__)
    raise ShapeMismatch(
      name=name,
      expected=EXPECTED_SIGNATURE.format(name=name),
      actual=f"{type(fn).__name__} object (only functions can be transformers)",
    )

  check_shape(TransformerSignature.from_callable(fn))
  implementation = _scope_for(fn).register(fn)
  implementation.__qualname__ = f"{SCOPE_NAME}.{fn.__name__}"

  def entry(attributes: RawSource, item: RawSource) -> str:
    return invoke_boundary(implementation, attributes, item)

  entry.__name__ = fn.__name__
  entry.__qualname__ = fn.__name__
  entry.__module__ = fn.__module__
  entry.__doc__ = fn.__doc__
  return entry
