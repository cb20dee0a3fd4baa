"""
Base Class and Registry for Lint Rules.

A rule is instantiated once per lint run with a `RuleContext` and exposes a
listener table for the `Traverser`. Rules register themselves under their id so
the engine can run every available rule without importing them by name.
"""

import abc
from typing import Dict, List, Optional, Type

from foreach_fixer.core.context import RuleContext
from foreach_fixer.core.traversal import Listener


class Rule(abc.ABC):
  """
  Interface implemented by every rule.

  Attributes:
      rule_id (str): Unique identifier, used in diagnostics.
      messages (Dict[str, str]): Catalog of report messages by message id.
      fixable (bool): Whether the rule may attach fixes.
  """

  rule_id: str = ""
  messages: Dict[str, str] = {}
  fixable: bool = False

  def __init__(self, context: RuleContext):
    self.context = context

  @abc.abstractmethod
  def listeners(self) -> Dict[str, Listener]:
    """Returns the traversal listener table (``kind`` / ``kind:exit`` keys)."""


_RULE_REGISTRY: Dict[str, Type[Rule]] = {}


def register_rule(cls: Type[Rule]) -> Type[Rule]:
  _RULE_REGISTRY[cls.rule_id] = cls
  return cls


def get_rule(rule_id: str) -> Optional[Type[Rule]]:
  return _RULE_REGISTRY.get(rule_id)


def available_rules() -> List[str]:
  return sorted(_RULE_REGISTRY.keys())
