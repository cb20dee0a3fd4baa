"""
Lint Rules.

Importing this package registers every bundled rule.
"""

from foreach_fixer.rules.base import Rule, available_rules, get_rule, register_rule
from foreach_fixer.rules.no_array_for_each import NoArrayForEachRule

__all__ = ["Rule", "available_rules", "get_rule", "register_rule", "NoArrayForEachRule"]
