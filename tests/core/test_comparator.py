"""
Tests for the Equivalence Comparator.
"""

import libcst as cst
import pytest

from testable_transformers.core.comparator import ComparisonResult, canonical_render, compare


def _tree(source: str) -> cst.Module:
  return cst.parse_module(source)


@pytest.mark.parametrize(
  "source",
  [
    "",
    "x = 1\n",
    "class Foo:\n    pass\n",
    "@dataclass\nclass Point:\n    x: int = 0\n    y: int = 0\n",
    "async def f(*a, **k):\n    return [i async for i in a]\n",
  ],
)
def test_reflexive(source):
  result = compare(_tree(source), _tree(source))
  assert result.equivalent
  assert bool(result)
  assert result.diff() == ""


@pytest.mark.parametrize(
  "left, right",
  [
    ("x=(1)\ny = 'a'  # note\n", 'x = 1\n\n\ny = "a"\n'),
    ("def f(a,b,):\n  return a+b\n", "def f(a, b):\n        return (a + b)\n"),
    ("class Foo: pass\n", "class Foo:\n    pass\n"),
    ("value = ('a'\n         'b')\n", "value = 'ab'\n"),
    ("total = 1 + \\\n    2\n", "total = 1 + 2\n"),
    ("x = u'a'\n", "x = 'a'\n"),
    ("x = r'a'\n", "x = 'a'\n"),
  ],
)
def test_formatting_insensitive(left, right):
  assert compare(_tree(left), _tree(right)).equivalent


@pytest.mark.parametrize(
  "left, right",
  [
    ("x = 1\n", "y = 1\n"),
    ("x = 1\n", "x = 2\n"),
    ("x = 'a'\n", "x = 'b'\n"),
    ("a = 1\nb = 2\n", "b = 2\na = 1\n"),
    ("@a\n@b\ndef f():\n    pass\n", "@b\n@a\ndef f():\n    pass\n"),
    ("def f(a, b):\n    pass\n", "def f(b, a):\n    pass\n"),
  ],
)
def test_structural_differences(left, right):
  result = compare(_tree(left), _tree(right))

  assert not result.equivalent
  assert not result
  report = result.report()
  assert result.actual in report
  assert result.expected in report


def test_missing_method_shows_in_diff():
  actual = _tree("class Foo:\n    @staticmethod\n    def get_answer() -> int:\n        return 42\n")
  expected = _tree("class Foo:\n    pass\n")

  result = compare(actual, expected)
  diff = result.diff()

  assert diff.startswith("--- expected\n+++ actual")
  assert "-    pass" in diff
  assert "+    def get_answer() -> int:" in diff
  assert "+        return 42" in diff


def test_diff_context_lines():
  expected = _tree("a = 1\nb = 2\nc = 3\nd = 4\ne = 5\n")
  actual = _tree("a = 1\nb = 2\nc = 30\nd = 4\ne = 5\n")
  result = compare(actual, expected)

  narrow = result.diff(context=0)
  assert "b = 2" not in narrow
  assert "-c = 3" in narrow
  assert "+c = 30" in narrow
  assert "b = 2" in result.diff(context=1)


def test_report_sections():
  result = compare(_tree("x = 2\n"), _tree("x = 1\n"))
  report = result.report()

  assert report.startswith("Actual output is not equivalent to the expected output.")
  assert "Expected (canonical):\n\n    x = 1" in report
  assert "Actual (canonical):\n\n    x = 2" in report


def test_report_when_equivalent():
  result = ComparisonResult(equivalent=True, actual="x = 1", expected="x = 1")
  assert result.report() == "Actual output is equivalent to the expected output."


def test_empty_rendering_in_report():
  result = compare(_tree(""), _tree("x = 1\n"))
  assert "    <empty>" in result.report()


def test_detached_nodes_compare():
  left = cst.parse_statement("def f( a ):  return a\n")
  right = cst.parse_statement("def f(a):\n    return a\n")
  assert compare(left, right).equivalent


def test_canonical_render():
  assert canonical_render(_tree("if  x :\n  y=[1,2,]\n")) == "if x:\n    y = [1, 2]"


def test_non_node_rejected():
  with pytest.raises(TypeError):
    compare("x = 1", _tree("x = 1\n"))  # type: ignore[arg-type]
