"""
Rule `no-array-for-each`: prefer `for…of` over `Array#forEach(…)`.
"""

from foreach_fixer.rules.no_array_for_each.messages import MESSAGE_ID, MESSAGES, RULE_ID
from foreach_fixer.rules.no_array_for_each.rule import NoArrayForEachRule

__all__ = ["MESSAGE_ID", "MESSAGES", "RULE_ID", "NoArrayForEachRule"]
