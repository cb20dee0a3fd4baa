"""
Core Package.

Contains the host machinery rules run on:
- Source model (tree-sitter parse + token stream)
- Traversal and rule context
- Fix primitives and patch application
- Lint/fix engine and result models
"""
