"""
Fix Primitives and Patch Application.

Rules describe a fix as a sequence of small text edits. Before application the
edits of one report are merged into a single `Patch` spanning from the first
edit's start to the last edit's end, so that a report's fix is applied
atomically or not at all.

Patches from many reports are then applied in one left-to-right pass; patches
overlapping an already applied one are deferred to the next pass.
"""

from typing import Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from foreach_fixer.core.errors import InternalRuleError
from foreach_fixer.core.source import Locatable, SourceCode, span_of


class EditOperation(BaseModel):
  """
  Replace the half-open byte range with `text`.

  An empty range is an insertion, empty text a removal.
  """

  model_config = ConfigDict(frozen=True)

  range: Tuple[int, int]
  text: str = ""

  @property
  def is_insertion(self) -> bool:
    return self.range[0] == self.range[1]


class RuleFixer:
  """
  Factory for edit operations handed to a rule's fix function.
  """

  def insert_text_before(self, target: Locatable, text: str) -> EditOperation:
    return self.insert_text_before_range(span_of(target), text)

  def insert_text_after(self, target: Locatable, text: str) -> EditOperation:
    return self.insert_text_after_range(span_of(target), text)

  def insert_text_before_range(self, span: Tuple[int, int], text: str) -> EditOperation:
    return EditOperation(range=(span[0], span[0]), text=text)

  def insert_text_after_range(self, span: Tuple[int, int], text: str) -> EditOperation:
    return EditOperation(range=(span[1], span[1]), text=text)

  def remove(self, target: Locatable) -> EditOperation:
    return self.remove_range(span_of(target))

  def remove_range(self, span: Tuple[int, int]) -> EditOperation:
    return EditOperation(range=span, text="")

  def replace_text(self, target: Locatable, text: str) -> EditOperation:
    return self.replace_text_range(span_of(target), text)

  def replace_text_range(self, span: Tuple[int, int], text: str) -> EditOperation:
    return EditOperation(range=span, text=text)


class Patch(BaseModel):
  """
  A single contiguous replacement produced by merging a report's edits.
  """

  range: Tuple[int, int] = Field(description="Byte range replaced by the patch.")
  text: str = Field(description="Replacement text.")
  edits: List[EditOperation] = Field(default_factory=list, description="The ordered edits merged into this patch.")

  @classmethod
  def from_edits(cls, edits: Iterable[EditOperation], source_code: SourceCode) -> "Patch":
    """
    Merges edit operations into one patch.

    Edits are ordered by `(start, end)`; edits with equal ranges keep the order
    in which the rule produced them. Adjacent edits and insertions at a shared
    boundary are fine, strictly overlapping ones are not.

    Args:
        edits: The edit operations of one report.
        source_code: The file the offsets refer to.

    Returns:
        Patch: The merged replacement.

    Raises:
        InternalRuleError: If the report produced no edits or overlapping edits.
    """
    ordered = sorted(edits, key=lambda edit: edit.range)
    if not ordered:
      raise InternalRuleError("Fix function produced no edits.")

    start = ordered[0].range[0]
    end = max(edit.range[1] for edit in ordered)
    parts: List[str] = []
    cursor = start
    for edit in ordered:
      edit_start, edit_end = edit.range
      if edit_start < cursor:
        raise InternalRuleError("Fix objects must not be overlapped in a report.")
      parts.append(source_code.get_text((cursor, edit_start)))
      parts.append(edit.text)
      cursor = edit_end
    parts.append(source_code.get_text((cursor, end)))
    return cls(range=(start, end), text="".join(parts), edits=ordered)


def apply_patches(text: str, patches: Iterable[Patch]) -> Tuple[str, List[Patch], List[Patch]]:
  """
  Applies non-overlapping patches to source text in one pass.

  Args:
      text: The source the patches were computed against.
      patches: Candidate patches, in any order.

  Returns:
      Tuple[str, List[Patch], List[Patch]]: The new text, the applied patches and
      the patches deferred because they touch an already patched region.
  """
  data = text.encode("utf-8")
  applied: List[Patch] = []
  deferred: List[Patch] = []
  output: List[bytes] = []
  cursor = 0
  last_end = -1
  for patch in sorted(patches, key=lambda p: p.range):
    start, end = patch.range
    if start <= last_end:
      deferred.append(patch)
      continue
    output.append(data[cursor:start])
    output.append(patch.text.encode("utf-8"))
    cursor = end
    last_end = end
    applied.append(patch)
  output.append(data[cursor:])
  return b"".join(output).decode("utf-8"), applied, deferred
