"""
testable-transformers Package.

Write attribute transformers (functions that rewrite a source item based on
the arguments of the decorator applied to it) as pure functions over LibCST
trees, and test them without going through the host that will run them.

Usage
-----

Defining a Transformer
^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import libcst as cst
    from testable_transformers import AttributeArguments, ItemTree, transformer

    @transformer
    def make_answer(args: AttributeArguments, item: ItemTree) -> ItemTree:
        value = args.value("value", 42)
        ...

``make_answer`` is now the host-facing entry point (raw source in, raw source
out) and ``implementation.make_answer`` is the original, structured function.

Testing It
^^^^^^^^^^

.. code-block:: python

    from testable_transformers import assert_transformation

    assert_transformation(
        "my_package.attributes:make_answer",
        item="@make_answer(value=7)\\nclass Foo: pass",
        expected="class Foo:\\n    ANSWER = 7",
    )
"""

from testable_transformers.core.adapter import ImplementationScope, invoke_boundary, transformer
from testable_transformers.core.comparator import ComparisonResult, canonical_render, compare
from testable_transformers.core.errors import (
  ImplementationNotFound,
  MisplacedTransformer,
  ParseFailure,
  RenderFailure,
  ScopeConflict,
  ShapeMismatch,
  TransformationMismatch,
  TransformerError,
)
from testable_transformers.core.generator import AdapterGenerator, expand_module, expand_source
from testable_transformers.core.syntax import (
  DEFAULT_CONVERTER,
  AttributeArguments,
  ItemTree,
  LibCSTConverter,
  SyntaxConverter,
)
from testable_transformers.testing.harness import assert_transformation

__version__ = "0.1.0"

__all__ = [
  "AdapterGenerator",
  "AttributeArguments",
  "ComparisonResult",
  "DEFAULT_CONVERTER",
  "ImplementationNotFound",
  "ImplementationScope",
  "ItemTree",
  "LibCSTConverter",
  "MisplacedTransformer",
  "ParseFailure",
  "RenderFailure",
  "ScopeConflict",
  "ShapeMismatch",
  "SyntaxConverter",
  "TransformationMismatch",
  "TransformerError",
  "__version__",
  "assert_transformation",
  "canonical_render",
  "compare",
  "expand_module",
  "expand_source",
  "invoke_boundary",
  "transformer",
]
