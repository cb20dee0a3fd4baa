"""
Lexical Scope Analysis.

This module builds an ESLint-style scope model over a tree-sitter parse of a
JavaScript file. Rules use it to answer questions that plain syntax cannot:

1.  **Declarations**: Which variables does a function declare, and how often?
2.  **Resolution**: Which binding does an identifier refer to from a given scope?
3.  **Writes**: Is a variable ever reassigned after its declaration?
4.  **Self reference**: Does a function body use `this`, `arguments` or `new.target`?

The `ScopeManager` is built in two passes. The declaration pass creates scopes
and registers every binding (hoisting `var` to the enclosing function), so the
reference pass can resolve identifiers regardless of declaration order.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Union

from tree_sitter import Node

from foreach_fixer.core.kinds import (
  CLASS_KINDS,
  FUNCTION_EXPRESSION_KINDS,
  FUNCTION_KINDS,
  PATTERN_KINDS,
  REFERENCE_IDENTIFIER_KINDS,
)
from foreach_fixer.core.nodes import function_parameters, named_children, same_node
from foreach_fixer.core.source import SourceCode
from foreach_fixer.enums import DefinitionType, ScopeType


@dataclass(eq=False)
class Definition:
  """
  A single declaration site of a variable.
  """

  type: DefinitionType
  """How the binding was introduced."""

  name: Node
  """The identifier node carrying the name."""

  node: Node
  """The declaring construct (function, declarator, catch clause, ...)."""

  kind: Optional[str] = None
  """`var`, `let` or `const` for variable definitions."""


@dataclass(eq=False)
class Reference:
  """
  An identifier occurrence that refers to a variable.
  """

  identifier: Node
  from_scope: "Scope"
  resolved: Optional["Variable"] = None
  is_write: bool = False
  is_read: bool = True


@dataclass(eq=False)
class Variable:
  """
  A named binding in a scope.
  """

  name: str
  scope: "Scope"
  defs: List[Definition] = field(default_factory=list)
  references: List[Reference] = field(default_factory=list)
  implicit: bool = False
  """True for engine-provided bindings such as a function's `arguments`."""

  @property
  def is_reassigned(self) -> bool:
    """True if any reference writes to the variable."""
    return any(ref.is_write for ref in self.references)


class Scope:
  """
  Represents a lexical scope (global, function, block, ...).
  """

  def __init__(self, scope_type: ScopeType, block: Node, upper: Optional["Scope"] = None):
    """
    Initialize the scope.

    Args:
        scope_type: Kind of scope.
        block: The node that owns the scope.
        upper: The enclosing scope (None for global).
    """
    self.type = scope_type
    self.block = block
    self.upper = upper
    self.children: List["Scope"] = []
    self.variables: Dict[str, Variable] = {}
    self.references: List[Reference] = []
    self.this_found = False
    if upper is not None:
      upper.children.append(self)

  def set(self, name: str) -> Variable:
    """
    Returns the variable `name` of this scope, creating it if missing.

    Args:
        name: Variable identifier.
    """
    variable = self.variables.get(name)
    if variable is None:
      variable = Variable(name=name, scope=self)
      self.variables[name] = variable
    return variable

  def resolve(self, name: str) -> Optional[Variable]:
    """
    Finds the binding visible under `name`, walking up the scope chain.

    Returns:
        Optional[Variable]: None if the name is not declared anywhere (a global).
    """
    scope: Optional[Scope] = self
    while scope is not None:
      if name in scope.variables:
        return scope.variables[name]
      scope = scope.upper
    return None

  @property
  def variable_scope(self) -> "Scope":
    """The nearest function or global scope, where `var` declarations land."""
    scope = self
    while scope.type not in (ScopeType.FUNCTION, ScopeType.GLOBAL) and scope.upper is not None:
      scope = scope.upper
    return scope

  def __repr__(self) -> str:
    return f"Scope({self.type.value}, {self.block.type}@{self.block.start_byte})"


def is_same_or_ancestor(ancestor: Scope, scope: Scope) -> bool:
  """
  Checks whether `ancestor` is `scope` itself or one of its enclosing scopes.
  """
  current: Optional[Scope] = scope
  while current is not None:
    if current is ancestor:
      return True
    current = current.upper
  return False


def binding_identifiers(pattern: Optional[Node]) -> List[Node]:
  """
  Collects the identifiers bound by a declaration target.

  Walks destructuring patterns, skipping default values and property keys.

  Args:
      pattern: Identifier or destructuring pattern.

  Returns:
      List[Node]: Binding identifiers in document order.
  """
  found: List[Node] = []
  stack = [pattern]
  while stack:
    node = stack.pop()
    if node is None:
      continue
    if node.type in ("identifier", "shorthand_property_identifier_pattern"):
      found.append(node)
    elif node.type in ("object_pattern", "array_pattern", "rest_pattern"):
      stack.extend(reversed(named_children(node)))
    elif node.type in ("assignment_pattern", "object_assignment_pattern"):
      stack.append(node.child_by_field_name("left"))
    elif node.type == "pair_pattern":
      stack.append(node.child_by_field_name("value"))
  return found


class ScopeManager:
  """
  Scope model of a whole file.

  Attributes:
      global_scope (Scope): The root scope.
      scopes (List[Scope]): Every scope in creation order.
  """

  def __init__(self, source_code: SourceCode):
    self.source_code = source_code
    self.global_scope = Scope(ScopeType.GLOBAL, source_code.ast)
    self.scopes: List[Scope] = [self.global_scope]
    self._by_block: Dict[int, Scope] = {source_code.ast.id: self.global_scope}
    self._declared_names: Set[int] = set()
    self._declared_by: Dict[int, List[Variable]] = {}
    self._references: Dict[int, Reference] = {}

    self._declare_pass()
    self._add_implicit_arguments()
    self._reference_pass()

  # --- Queries ---

  def acquire(self, node: Node) -> Optional[Scope]:
    """Returns the scope owned by `node`, if it creates one."""
    return self._by_block.get(node.id)

  def innermost_scope(self, node: Node) -> Scope:
    """
    Returns the innermost scope enclosing `node` (a scope-owning node yields its own).
    """
    current: Optional[Node] = node
    while current is not None:
      scope = self._by_block.get(current.id)
      if scope is not None:
        return scope
      current = current.parent
    return self.global_scope

  def find_variable(self, initial_scope: Scope, target: Union[str, Node]) -> Optional[Variable]:
    """
    Resolves a name or identifier node to its variable.

    Args:
        initial_scope: Scope to resolve from. For identifier nodes lying inside it,
            resolution starts from the identifier's own innermost scope instead.
        target: A plain name or an identifier node.

    Returns:
        Optional[Variable]: The binding, or None for undeclared globals.
    """
    if isinstance(target, str):
      return initial_scope.resolve(target)
    scope = self.innermost_scope(target)
    if not is_same_or_ancestor(initial_scope, scope):
      scope = initial_scope
    return scope.resolve(self.source_code.get_text(target))

  def get_declared_variables(self, node: Node) -> List[Variable]:
    """
    Lists the variables a construct declares (a function's parameters and own name).
    """
    return list(self._declared_by.get(node.id, []))

  def reference_for(self, identifier: Node) -> Optional[Reference]:
    """Returns the reference created for an identifier node, if it is one."""
    return self._references.get(identifier.id)

  def iter_references(self) -> Iterator[Reference]:
    return iter(self._references.values())

  # --- Declaration pass ---

  def _register(self, scope: Scope) -> Scope:
    self.scopes.append(scope)
    self._by_block[scope.block.id] = scope
    return scope

  def _declare_pass(self) -> None:
    stack = [(self.source_code.ast, self.global_scope)]
    while stack:
      node, scope = stack.pop()
      inner = self._open_scope(node, scope)
      self._declare(node, scope, inner)
      for child in reversed(named_children(node)):
        stack.append((child, inner))

  def _open_scope(self, node: Node, scope: Scope) -> Scope:
    kind = node.type
    if node.id == self.source_code.ast.id:
      return scope
    if kind in FUNCTION_KINDS:
      upper = scope
      name = node.child_by_field_name("name")
      if kind in FUNCTION_EXPRESSION_KINDS and name is not None:
        upper = self._register(Scope(ScopeType.FUNCTION_EXPRESSION_NAME, node, scope))
        self._add(upper, name, DefinitionType.FUNCTION_NAME, node)
        # Both scopes share the block; lookups by block must find the function scope.
      return self._register(Scope(ScopeType.FUNCTION, node, upper))
    if kind == "class_static_block":
      return self._register(Scope(ScopeType.FUNCTION, node, scope))
    if kind in CLASS_KINDS:
      inner = self._register(Scope(ScopeType.CLASS, node, scope))
      name = node.child_by_field_name("name")
      if kind == "class" and name is not None:
        self._add(inner, name, DefinitionType.CLASS_NAME, node)
      return inner
    if kind == "statement_block":
      parent = node.parent
      if parent is not None and (parent.type in FUNCTION_KINDS or parent.type == "class_static_block"):
        return scope
      return self._register(Scope(ScopeType.BLOCK, node, scope))
    if kind in ("for_statement", "for_in_statement"):
      return self._register(Scope(ScopeType.FOR, node, scope))
    if kind == "switch_statement":
      return self._register(Scope(ScopeType.SWITCH, node, scope))
    if kind == "catch_clause":
      return self._register(Scope(ScopeType.CATCH, node, scope))
    return scope

  def _declare(self, node: Node, scope: Scope, inner: Scope) -> None:
    kind = node.type
    if kind in ("function_declaration", "generator_function_declaration"):
      name = node.child_by_field_name("name")
      if name is not None:
        self._add(scope, name, DefinitionType.FUNCTION_NAME, node)
    if kind in FUNCTION_KINDS:
      for parameter in function_parameters(node):
        for identifier in binding_identifiers(parameter):
          self._add(inner, identifier, DefinitionType.PARAMETER, node)
    elif kind == "class_declaration":
      name = node.child_by_field_name("name")
      if name is not None:
        self._add(scope, name, DefinitionType.CLASS_NAME, node)
    elif kind == "variable_declaration":
      self._declare_declarators(node, scope.variable_scope, "var")
    elif kind == "lexical_declaration":
      self._declare_declarators(node, scope, self._text(node.child_by_field_name("kind")))
    elif kind == "for_in_statement":
      kind_node = node.child_by_field_name("kind")
      if kind_node is not None:
        declaration_kind = self._text(kind_node)
        target = inner.variable_scope if declaration_kind == "var" else inner
        for identifier in binding_identifiers(node.child_by_field_name("left")):
          self._add(target, identifier, DefinitionType.VARIABLE, node, declaration_kind)
    elif kind == "catch_clause":
      for identifier in binding_identifiers(node.child_by_field_name("parameter")):
        self._add(inner, identifier, DefinitionType.CATCH_CLAUSE, node)
    elif kind == "import_statement":
      for identifier in self._import_bindings(node):
        self._add(self.global_scope, identifier, DefinitionType.IMPORT_BINDING, node)

  def _declare_declarators(self, node: Node, target: Scope, declaration_kind: str) -> None:
    for declarator in named_children(node):
      if declarator.type != "variable_declarator":
        continue
      for identifier in binding_identifiers(declarator.child_by_field_name("name")):
        self._add(target, identifier, DefinitionType.VARIABLE, declarator, declaration_kind)

  def _import_bindings(self, node: Node) -> List[Node]:
    found: List[Node] = []
    for clause in named_children(node):
      if clause.type != "import_clause":
        continue
      for part in named_children(clause):
        if part.type == "identifier":
          found.append(part)
        elif part.type == "namespace_import":
          found.extend(child for child in named_children(part) if child.type == "identifier")
        elif part.type == "named_imports":
          for specifier in named_children(part):
            if specifier.type != "import_specifier":
              continue
            binding = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
            if binding is not None and binding.type == "identifier":
              found.append(binding)
    return found

  def _add(
    self,
    scope: Scope,
    identifier: Node,
    def_type: DefinitionType,
    node: Node,
    declaration_kind: Optional[str] = None,
  ) -> None:
    variable = scope.set(self._text(identifier))
    variable.defs.append(Definition(def_type, identifier, node, declaration_kind))
    self._declared_names.add(identifier.id)
    declared = self._declared_by.setdefault(node.id, [])
    if variable not in declared:
      declared.append(variable)

  def _add_implicit_arguments(self) -> None:
    for scope in self.scopes:
      if scope.type is not ScopeType.FUNCTION:
        continue
      if scope.block.type not in FUNCTION_KINDS or scope.block.type == "arrow_function":
        continue
      if "arguments" not in scope.variables:
        scope.variables["arguments"] = Variable(name="arguments", scope=scope, implicit=True)

  # --- Reference pass ---

  def _reference_pass(self) -> None:
    stack = [(self.source_code.ast, self.global_scope)]
    while stack:
      node, scope = stack.pop()
      current = self._by_block.get(node.id, scope)
      kind = node.type
      if kind in REFERENCE_IDENTIFIER_KINDS:
        if node.id not in self._declared_names and self._is_reference_position(node):
          self._add_reference(node, current)
      elif kind in ("this", "super"):
        self._mark_this(current)
      elif kind == "meta_property" and self._text(node).startswith("new"):
        self._mark_this(current)
      for child in reversed(named_children(node)):
        stack.append((child, current))

  def _is_reference_position(self, node: Node) -> bool:
    parent = node.parent
    if parent is None:
      return True
    if parent.type in ("import_specifier", "namespace_import", "import_clause"):
      return False
    if parent.type == "export_specifier":
      if same_node(parent.child_by_field_name("alias"), node):
        return False
      statement = parent.parent.parent if parent.parent is not None else None
      # `export { a } from "mod"` re-exports without touching a local binding.
      if statement is not None and statement.child_by_field_name("source") is not None:
        return False
    return True

  def _add_reference(self, node: Node, scope: Scope) -> None:
    variable = scope.resolve(self._text(node))
    is_write, is_read = self._write_flags(node)
    reference = Reference(identifier=node, from_scope=scope, resolved=variable, is_write=is_write, is_read=is_read)
    scope.references.append(reference)
    self._references[node.id] = reference
    if variable is not None:
      variable.references.append(reference)

  def _write_flags(self, node: Node):
    child = node
    parent = node.parent
    while parent is not None and parent.type in PATTERN_KINDS:
      if parent.type in ("assignment_pattern", "object_assignment_pattern"):
        if not same_node(parent.child_by_field_name("left"), child):
          return False, True
      elif parent.type == "pair_pattern":
        if not same_node(parent.child_by_field_name("value"), child):
          return False, True
      child, parent = parent, parent.parent
    if parent is None:
      return False, True
    if parent.type == "assignment_expression" and same_node(parent.child_by_field_name("left"), child):
      return True, False
    if parent.type == "augmented_assignment_expression" and same_node(parent.child_by_field_name("left"), child):
      return True, True
    if parent.type == "update_expression":
      return True, True
    if parent.type == "for_in_statement" and same_node(parent.child_by_field_name("left"), child):
      return True, False
    return False, True

  def _mark_this(self, scope: Scope) -> None:
    current: Optional[Scope] = scope
    while current is not None:
      if current.type is ScopeType.CLASS:
        return
      if current.type is ScopeType.FUNCTION and current.block.type != "arrow_function":
        current.this_found = True
        return
      current = current.upper

  def _text(self, node: Optional[Node]) -> str:
    return self.source_code.get_text(node) if node is not None else ""
