"""
Tests for edit merging and patch application.
"""

import pytest

from foreach_fixer.core.errors import InternalRuleError
from foreach_fixer.core.fixer import EditOperation, Patch, RuleFixer, apply_patches
from foreach_fixer.core.source import SourceCode


@pytest.fixture
def source():
  return SourceCode.parse("foo(bar);")


def test_fixer_factories(source):
  fixer = RuleFixer()
  bar = source.tokens[2]

  assert fixer.insert_text_before(bar, "x").range == (4, 4)
  assert fixer.insert_text_after(bar, "x").range == (7, 7)
  assert fixer.remove(bar) == EditOperation(range=(4, 7), text="")
  assert fixer.replace_text(bar, "baz").text == "baz"
  assert fixer.insert_text_before(bar, "x").is_insertion
  assert not fixer.remove(bar).is_insertion


def test_merge_keeps_unchanged_text_between_edits(source):
  fixer = RuleFixer()
  edits = [
    fixer.replace_text(source.tokens[2], "baz"),
    fixer.replace_text(source.tokens[0], "qux"),
  ]

  patch = Patch.from_edits(edits, source)

  assert patch.range == (0, 7)
  assert patch.text == "qux(baz"
  assert [edit.range for edit in patch.edits] == [(0, 3), (4, 7)]


def test_merge_orders_insertions_at_same_offset_stably(source):
  fixer = RuleFixer()
  edits = [
    fixer.insert_text_before_range((0, 0), "a"),
    fixer.insert_text_before_range((0, 0), "b"),
    fixer.remove_range((0, 3)),
  ]

  patch = Patch.from_edits(edits, source)

  assert patch.range == (0, 3)
  assert patch.text == "ab"


def test_merge_allows_adjacent_edits(source):
  fixer = RuleFixer()
  patch = Patch.from_edits([fixer.remove_range((0, 3)), fixer.remove_range((3, 4))], source)
  assert patch.text == ""
  assert patch.range == (0, 4)


def test_merge_rejects_overlap(source):
  fixer = RuleFixer()
  with pytest.raises(InternalRuleError, match="must not be overlapped"):
    Patch.from_edits([fixer.remove_range((0, 4)), fixer.remove_range((2, 6))], source)


def test_merge_rejects_empty(source):
  with pytest.raises(InternalRuleError, match="no edits"):
    Patch.from_edits([], source)


def test_apply_defers_touching_patches():
  text = "abcdef"
  first = Patch(range=(0, 2), text="X")
  touching = Patch(range=(2, 4), text="Y")
  later = Patch(range=(5, 6), text="Z")

  output, applied, deferred = apply_patches(text, [later, touching, first])

  assert output == "XcdeZ"
  assert applied == [first, later]
  assert deferred == [touching]


def test_apply_handles_multibyte_offsets():
  text = "é = 1;"
  # "é" is two bytes, "=" starts at byte 3
  output, applied, _ = apply_patches(text, [Patch(range=(3, 4), text="==")])
  assert output == "é == 1;"
  assert len(applied) == 1
