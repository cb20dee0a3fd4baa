"""Message catalog of the `no-array-for-each` rule."""

RULE_ID = "no-array-for-each"

MESSAGE_ID = "no-array-for-each"

MESSAGES = {
  MESSAGE_ID: "Use `for…of` instead of `Array#forEach(…)`.",
}
