"""
Token Assertions.
"""

from typing import Iterable, Optional, Union

from foreach_fixer.core.errors import InternalRuleError
from foreach_fixer.core.source import Token


def assert_token(token: Optional[Token], expected: Union[str, Iterable[str]], rule_id: Optional[str] = None) -> Token:
  """
  Fails loudly if a token is not what the rule's tree-shape assumptions say.

  Args:
      token: The token to check.
      expected: Allowed token value(s).
      rule_id: Rule to name in the error.

  Returns:
      Token: The same token, for chaining.

  Raises:
      InternalRuleError: If the token is missing or has another value.
  """
  values = [expected] if isinstance(expected, str) else list(expected)
  if token is None or token.value not in values:
    actual = token.value if token is not None else None
    wanted = " or ".join(f"'{value}'" for value in values)
    raise InternalRuleError(f"Expected token {wanted}, got '{actual}'.", rule_id)
  return token
