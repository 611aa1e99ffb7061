"""
Binder - turns parsed TypeScript/JavaScript modules into symbols.

Each source file gets a ModuleRecord, built lazily on first use and cached
until the project changes:

    locals        names declared or imported at module scope
    exports       exported name -> symbol (inline, clause, re-export, default)
    star_exports  specifiers of ``export * from '...'`` in source order

Import and re-export bindings are alias symbols whose target is resolved
lazily, so files can be bound in any order and cyclic module graphs never
recurse at bind time.

Bindings below module scope (block locals, parameters, object members,
class members, enum members) are created on demand and cached per
declaration node, which keeps symbol identity stable for the resolution
engine's cycle detection.

Thread Safety:
    Not thread-safe. A Project binds from one thread.
"""

import logging
import posixpath
from typing import Dict, Iterator, List, Optional, Set, Tuple, TYPE_CHECKING

from origintrace.core.models import DeclarationKind
from origintrace.host.nodes import SourceFile, SyntaxNode
from origintrace.host.symbols import HostDeclaration, HostSymbol

if TYPE_CHECKING:
    from origintrace.host.project import Project

logger = logging.getLogger(__name__)

DeclaredName = Tuple[str, SyntaxNode, DeclarationKind, Optional[SyntaxNode]]

# Destructuring pattern nodes a binding identifier can be nested in
_PATTERN_TYPES = {
    'object_pattern',
    'array_pattern',
    'pair_pattern',
    'assignment_pattern',
    'object_assignment_pattern',
    'rest_pattern',
}

_FUNCTION_EXPRESSION_TYPES = {'function', 'function_expression', 'generator_function'}

_CLASS_EXPRESSION_TYPES = {'class'}


class ModuleRecord:
    """
    Module-scope bindings of one source file.

    Attributes:
        source_file: The bound file
        locals: Names declared or imported at module scope
        exports: Exported name -> symbol, in source order
        star_exports: Specifiers of ``export * from`` statements
    """

    def __init__(self, source_file: SourceFile):
        self.source_file = source_file
        self.locals: Dict[str, HostSymbol] = {}
        self.exports: Dict[str, HostSymbol] = {}
        self.star_exports: List[str] = []

    def __repr__(self) -> str:
        return (
            f"ModuleRecord({self.source_file.path!r}, locals={len(self.locals)}, "
            f"exports={len(self.exports)}, star_exports={len(self.star_exports)})"
        )


def _string_value(node: SyntaxNode) -> str:
    """Text of a string literal without its quotes."""
    text = node.text
    if len(text) >= 2 and text[0] in '\'"`' and text[-1] == text[0]:
        return text[1:-1]
    return text


def _member_name(node: Optional[SyntaxNode]) -> Optional[str]:
    if node is None:
        return None
    if node.kind == 'string':
        return _string_value(node)
    return node.text


def _pattern_bindings(node: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield the name nodes bound by a destructuring pattern or parameter list."""
    kind = node.kind
    if kind in ('identifier', 'shorthand_property_identifier_pattern'):
        yield node
    elif kind == 'pair_pattern':
        value = node.get_child_by_field('value')
        if value is not None:
            yield from _pattern_bindings(value)
    elif kind in ('assignment_pattern', 'object_assignment_pattern'):
        left = node.get_child_by_field('left')
        if left is not None:
            yield from _pattern_bindings(left)
    elif kind in ('required_parameter', 'optional_parameter'):
        pattern = node.get_child_by_field('pattern')
        if pattern is not None:
            yield from _pattern_bindings(pattern)
    elif kind in ('object_pattern', 'array_pattern', 'rest_pattern', 'formal_parameters'):
        for child in node.get_named_children():
            yield from _pattern_bindings(child)


class Binder:
    """
    Builds and caches symbols for the files of one Project.

    Args:
        project: Owning project; used to resolve module specifiers
    """

    def __init__(self, project: 'Project'):
        self.project = project
        self._records: Dict[str, ModuleRecord] = {}
        self._module_symbols: Dict[str, HostSymbol] = {}
        self._symbols_by_node: Dict[Tuple[str, tuple], HostSymbol] = {}

    def invalidate(self) -> None:
        """Drop all cached records and symbols."""
        if self._records:
            logger.debug(f"Invalidating {len(self._records)} module records")
        self._records.clear()
        self._module_symbols.clear()
        self._symbols_by_node.clear()

    # ------------------------------------------------------------------
    # Module records
    # ------------------------------------------------------------------

    def get_record(self, source_file: SourceFile) -> ModuleRecord:
        """Return the module record of a file, binding it on first use."""
        record = self._records.get(source_file.path)
        if record is None:
            record = ModuleRecord(source_file)
            self._records[source_file.path] = record
            for statement in source_file.root.get_named_children():
                self._bind_statement(record, statement)
            logger.debug(f"Bound {record}")
        return record

    def get_module_symbol(self, source_file: SourceFile) -> HostSymbol:
        """Return the symbol standing for a whole module (namespace imports)."""
        symbol = self._module_symbols.get(source_file.path)
        if symbol is None:
            name = posixpath.basename(source_file.path)
            declaration = HostDeclaration(DeclarationKind.SOURCE_FILE, source_file.root, name)
            symbol = HostSymbol(name, [declaration])
            self._module_symbols[source_file.path] = symbol
            self._symbols_by_node[(source_file.path, source_file.root.key)] = symbol
        return symbol

    def resolve_export(
        self,
        source_file: SourceFile,
        name: str,
        visited: Optional[Set[str]] = None,
    ) -> Optional[HostSymbol]:
        """
        Find the symbol a module exports under ``name``.

        Own exports win over star re-exports; star re-exports are searched
        depth-first in source order and never provide ``default``.

        Args:
            source_file: Exporting module
            name: Exported name
            visited: Modules already searched (cycle protection)

        Returns:
            Exported symbol, or None
        """
        visited = visited if visited is not None else set()
        if source_file.path in visited:
            return None
        visited.add(source_file.path)

        record = self.get_record(source_file)
        symbol = record.exports.get(name)
        if symbol is not None or name == 'default':
            return symbol

        for specifier in record.star_exports:
            target = self.project.resolve_module(specifier, source_file.path)
            if target is None:
                continue
            symbol = self.resolve_export(target, name, visited)
            if symbol is not None:
                return symbol
        return None

    def get_module_exports(
        self,
        source_file: SourceFile,
        visited: Optional[Set[str]] = None,
    ) -> Dict[str, HostSymbol]:
        """
        All names a module exports, including star re-exports.

        Returns:
            Exported name -> symbol; own exports first, then re-exported
            names in star export order
        """
        visited = visited if visited is not None else set()
        if source_file.path in visited:
            return {}
        visited.add(source_file.path)

        record = self.get_record(source_file)
        exports = dict(record.exports)
        for specifier in record.star_exports:
            target = self.project.resolve_module(specifier, source_file.path)
            if target is None:
                continue
            for name, symbol in self.get_module_exports(target, visited).items():
                if name != 'default':
                    exports.setdefault(name, symbol)
        return exports

    # ------------------------------------------------------------------
    # Module-scope binding
    # ------------------------------------------------------------------

    def _bind_statement(self, record: ModuleRecord, statement: SyntaxNode) -> None:
        config = statement.config
        if statement.kind in config['import_types']:
            self._bind_import(record, statement)
        elif statement.kind in config['export_types']:
            self._bind_export(record, statement)
        else:
            for name, node, kind, initializer in self._declared_names(statement):
                self._declare_local(record, name, node, kind, initializer)

    def _declare_local(
        self,
        record: ModuleRecord,
        name: str,
        node: SyntaxNode,
        kind: DeclarationKind,
        initializer: Optional[SyntaxNode] = None,
    ) -> HostSymbol:
        declaration = HostDeclaration(kind, node, name, initializer)
        symbol = record.locals.get(name)
        if symbol is not None and not symbol.is_alias():
            # Declaration merging: overloads, interface + class, namespace + function
            symbol.add_declaration(declaration)
        else:
            symbol = HostSymbol(name, [declaration])
            record.locals[name] = symbol
        self._register(node, symbol)
        return symbol

    def _declare_alias(self, node: SyntaxNode, name: str, kind: DeclarationKind, resolver) -> HostSymbol:
        symbol = HostSymbol(name, [HostDeclaration(kind, node, name)], target_resolver=resolver)
        self._register(node, symbol)
        return symbol

    def _register(self, node: SyntaxNode, symbol: HostSymbol) -> None:
        self._symbols_by_node[(node.source_file.path, node.key)] = symbol

    def _bind_import(self, record: ModuleRecord, statement: SyntaxNode) -> None:
        source = statement.get_child_by_field('source')
        clause = statement.get_first_child_of_kind('import_clause')
        if source is None or clause is None:
            # Side-effect import or ``import x = require(...)``
            return

        path = record.source_file.path
        specifier = _string_value(source)
        for child in clause.get_named_children():
            if child.kind == 'identifier':
                record.locals[child.text] = self._declare_alias(
                    child, child.text, DeclarationKind.DEFAULT_IMPORT,
                    self._import_resolver(path, specifier, 'default'),
                )
            elif child.kind == 'namespace_import':
                identifier = child.get_first_child_of_kind('identifier')
                if identifier is not None:
                    record.locals[identifier.text] = self._declare_alias(
                        child, identifier.text, DeclarationKind.NAMESPACE_IMPORT,
                        self._module_resolver(path, specifier),
                    )
            elif child.kind == 'named_imports':
                for import_specifier in child.get_named_children():
                    if import_specifier.kind != 'import_specifier':
                        continue
                    imported = _member_name(import_specifier.get_child_by_field('name'))
                    alias = import_specifier.get_child_by_field('alias')
                    local = alias.text if alias is not None else imported
                    if not imported:
                        continue
                    record.locals[local] = self._declare_alias(
                        import_specifier, local, DeclarationKind.IMPORT_SPECIFIER,
                        self._import_resolver(path, specifier, imported),
                    )

    def _bind_export(self, record: ModuleRecord, statement: SyntaxNode) -> None:
        path = record.source_file.path
        is_default = statement.has_child_of_kind('default')

        declaration = statement.get_child_by_field('declaration')
        if declaration is not None:
            symbols = [
                self._declare_local(record, name, node, kind, initializer)
                for name, node, kind, initializer in self._declared_names(declaration)
            ]
            if is_default and symbols:
                record.exports['default'] = symbols[0]
            else:
                for symbol in symbols:
                    record.exports[symbol.name] = symbol
            return

        value = statement.get_child_by_field('value')
        if value is None and statement.has_child_of_kind('='):
            # TypeScript ``export = expression``
            named = statement.get_named_children()
            value = named[-1] if named else None
        if value is not None:
            record.exports['default'] = self._bind_default_value(record, statement, value)
            return

        source = statement.get_child_by_field('source')
        clause = statement.get_first_child_of_kind('export_clause')
        if source is not None:
            specifier = _string_value(source)
            namespace_export = statement.get_first_child_of_kind('namespace_export')
            if clause is not None:
                for export_specifier in self._export_specifiers(clause):
                    name, exported = self._export_names(export_specifier)
                    record.exports[exported] = self._declare_alias(
                        export_specifier, exported, DeclarationKind.EXPORT_SPECIFIER,
                        self._import_resolver(path, specifier, name),
                    )
            elif namespace_export is not None:
                identifier = namespace_export.get_first_child_of_kind('identifier', 'string')
                if identifier is not None:
                    exported = _member_name(identifier)
                    record.exports[exported] = self._declare_alias(
                        namespace_export, exported, DeclarationKind.NAMESPACE_EXPORT,
                        self._module_resolver(path, specifier),
                    )
            elif statement.has_child_of_kind('*'):
                record.star_exports.append(specifier)
        elif clause is not None:
            for export_specifier in self._export_specifiers(clause):
                name, exported = self._export_names(export_specifier)
                record.exports[exported] = self._declare_alias(
                    export_specifier, exported, DeclarationKind.EXPORT_SPECIFIER,
                    self._local_resolver(record, name),
                )

    def _bind_default_value(self, record: ModuleRecord, statement: SyntaxNode, value: SyntaxNode) -> HostSymbol:
        expression = self.unwrap_expression(value)
        name_node = expression.get_child_by_field('name')
        if name_node is not None and expression.kind in _FUNCTION_EXPRESSION_TYPES | _CLASS_EXPRESSION_TYPES:
            kind = DeclarationKind.CLASS if expression.kind in _CLASS_EXPRESSION_TYPES else DeclarationKind.FUNCTION
            return self._declare_local(record, name_node.text, expression, kind)

        if expression.is_identifier() or expression.is_property_access():
            return self._declare_alias(
                statement, 'default', DeclarationKind.EXPORT_ASSIGNMENT,
                lambda: self.get_binding(expression),
            )

        symbol = HostSymbol('default', [
            HostDeclaration(DeclarationKind.EXPORT_ASSIGNMENT, statement, 'default', initializer=value),
        ])
        self._register(statement, symbol)
        return symbol

    @staticmethod
    def _export_specifiers(clause: SyntaxNode) -> List[SyntaxNode]:
        return [child for child in clause.get_named_children() if child.kind == 'export_specifier']

    @staticmethod
    def _export_names(export_specifier: SyntaxNode) -> Tuple[str, str]:
        """Return (local or imported name, exported name)."""
        name = _member_name(export_specifier.get_child_by_field('name'))
        alias = _member_name(export_specifier.get_child_by_field('alias'))
        return name, alias or name

    def _import_resolver(self, importer: str, specifier: str, name: str):
        def resolve() -> Optional[HostSymbol]:
            target = self.project.resolve_module(specifier, importer)
            if target is None:
                return None
            return self.resolve_export(target, name)
        return resolve

    def _module_resolver(self, importer: str, specifier: str):
        def resolve() -> Optional[HostSymbol]:
            target = self.project.resolve_module(specifier, importer)
            return self.get_module_symbol(target) if target is not None else None
        return resolve

    @staticmethod
    def _local_resolver(record: ModuleRecord, name: str):
        return lambda: record.locals.get(name)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    @staticmethod
    def _statement_kind(node: SyntaxNode) -> Optional[DeclarationKind]:
        """Declaration kind of a named declaration statement, if it is one."""
        config = node.config
        kind = node.kind
        if kind in config['function_types']:
            return DeclarationKind.FUNCTION
        if kind in config['class_types']:
            return DeclarationKind.CLASS
        if kind in config['interface_types']:
            return DeclarationKind.INTERFACE
        if kind in config['type_alias_types']:
            return DeclarationKind.TYPE_ALIAS
        if kind in config['enum_types']:
            return DeclarationKind.ENUM
        if kind in config['namespace_types']:
            return DeclarationKind.NAMESPACE
        return None

    def _declared_names(self, statement: SyntaxNode) -> Iterator[DeclaredName]:
        """Yield (name, declaration node, kind, initializer) for a statement."""
        config = statement.config
        kind = statement.kind

        if kind in config['variable_types']:
            for declarator in statement.get_named_children():
                if declarator.kind != 'variable_declarator':
                    continue
                name = declarator.get_child_by_field('name')
                if name is None:
                    continue
                if name.kind == 'identifier':
                    yield name.text, declarator, DeclarationKind.VARIABLE, declarator.get_child_by_field('value')
                else:
                    for binding in _pattern_bindings(name):
                        yield binding.text, binding, DeclarationKind.VARIABLE, None
            return

        declaration_kind = self._statement_kind(statement)
        if declaration_kind is not None:
            name = statement.get_child_by_field('name')
            # ``declare module 'pkg'`` declares no local name
            if name is not None and name.kind != 'string':
                yield name.text.split('.')[0], statement, declaration_kind, None
            return

        if kind in config['ambient_types'] or kind == 'expression_statement':
            # ``declare const X`` and top-level ``namespace X {}``
            for child in statement.get_named_children():
                if child.kind in config['variable_types'] or self._statement_kind(child) is not None:
                    yield from self._declared_names(child)
            return

        if kind in config['export_types']:
            # Exports nested in namespace bodies
            declaration = statement.get_child_by_field('declaration')
            if declaration is not None:
                yield from self._declared_names(declaration)

    def symbol_for_declaration_node(self, node: SyntaxNode) -> Optional[HostSymbol]:
        """
        Return the symbol declared by a declaration node.

        Args:
            node: A declaration node (declarator, specifier, member, ...)

        Returns:
            The declared symbol, or None if node declares nothing
        """
        key = (node.source_file.path, node.key)
        symbol = self._symbols_by_node.get(key)
        if symbol is not None:
            return symbol

        # Module-scope declarations are registered while the record is built
        self.get_record(node.source_file)
        symbol = self._symbols_by_node.get(key)
        if symbol is not None:
            return symbol

        if node.kind == 'program':
            return self.get_module_symbol(node.source_file)

        description = self._describe_declaration(node)
        if description is None:
            return None
        kind, name, initializer = description
        symbol = HostSymbol(name, [HostDeclaration(kind, node, name, initializer)])
        self._symbols_by_node[key] = symbol
        return symbol

    def _describe_declaration(
        self, node: SyntaxNode
    ) -> Optional[Tuple[DeclarationKind, str, Optional[SyntaxNode]]]:
        """Classify a declaration node below module scope."""
        kind = node.kind
        parent = node.get_parent()

        if kind == 'variable_declarator':
            name = node.get_child_by_field('name')
            if name is not None and name.kind == 'identifier':
                return DeclarationKind.VARIABLE, name.text, node.get_child_by_field('value')
            return None

        statement_kind = self._statement_kind(node)
        if statement_kind is not None:
            name = node.get_child_by_field('name')
            if name is None or name.kind == 'string':
                return None
            return statement_kind, name.text.split('.')[0], None

        if kind in _FUNCTION_EXPRESSION_TYPES or kind in _CLASS_EXPRESSION_TYPES:
            name = node.get_child_by_field('name')
            if name is None:
                return None
            expression_kind = DeclarationKind.CLASS if kind in _CLASS_EXPRESSION_TYPES else DeclarationKind.FUNCTION
            return expression_kind, name.text, None

        if kind == 'pair':
            name = _member_name(node.get_child_by_field('key'))
            return (DeclarationKind.PROPERTY, name, node.get_child_by_field('value')) if name else None

        if kind == 'shorthand_property_identifier':
            return DeclarationKind.PROPERTY, node.text, None

        if kind == 'method_definition':
            name = _member_name(node.get_child_by_field('name'))
            return (DeclarationKind.METHOD, name, None) if name else None

        if kind in ('public_field_definition', 'field_definition'):
            name = _member_name(node.get_child_by_field('name') or node.get_child_by_field('property'))
            return (DeclarationKind.PROPERTY, name, node.get_child_by_field('value')) if name else None

        if parent is not None and parent.kind == 'enum_body':
            if kind == 'enum_assignment':
                name = _member_name(node.get_child_by_field('name') or (node.get_named_children() or [None])[0])
                return (DeclarationKind.ENUM_MEMBER, name, None) if name else None
            if kind in ('property_identifier', 'string'):
                return DeclarationKind.ENUM_MEMBER, _member_name(node), None
            return None

        if kind in ('identifier', 'shorthand_property_identifier_pattern'):
            binding_kind = self._binding_kind(node)
            if binding_kind is not None:
                return binding_kind, node.text, None

        return None

    @staticmethod
    def _binding_kind(node: SyntaxNode) -> Optional[DeclarationKind]:
        """Kind of binding a pattern or parameter name introduces, if any."""
        child, parent = node, node.get_parent()
        while parent is not None and parent.kind in _PATTERN_TYPES:
            if parent.kind == 'pair_pattern' and child != parent.get_child_by_field('value'):
                return None
            if parent.kind in ('assignment_pattern', 'object_assignment_pattern') and child != parent.get_child_by_field('left'):
                return None
            child, parent = parent, parent.get_parent()

        if parent is None:
            return None
        if parent.kind == 'variable_declarator':
            # A plain name is declared by the declarator itself
            if child is not node and child == parent.get_child_by_field('name'):
                return DeclarationKind.VARIABLE
            return None
        if parent.kind in ('required_parameter', 'optional_parameter'):
            return DeclarationKind.PARAMETER if child == parent.get_child_by_field('pattern') else None
        if parent.kind == 'formal_parameters':
            return DeclarationKind.PARAMETER
        if parent.kind == 'arrow_function':
            return DeclarationKind.PARAMETER if child == parent.get_child_by_field('parameter') else None
        if parent.kind == 'catch_clause':
            return DeclarationKind.VARIABLE if child == parent.get_child_by_field('parameter') else None
        if parent.kind == 'for_in_statement' and parent.get_child_by_field('kind') is not None:
            return DeclarationKind.VARIABLE if child == parent.get_child_by_field('left') else None
        return None

    @staticmethod
    def _declaration_name_node(declaration: SyntaxNode) -> Optional[SyntaxNode]:
        kind = declaration.kind
        if kind in ('import_specifier', 'export_specifier'):
            return declaration.get_child_by_field('alias') or declaration.get_child_by_field('name')
        if kind in ('namespace_import', 'namespace_export'):
            return declaration.get_first_child_of_kind('identifier')
        if kind == 'pair':
            return declaration.get_child_by_field('key')
        if kind == 'field_definition':
            return declaration.get_child_by_field('property')
        if kind == 'enum_assignment':
            named = declaration.get_named_children()
            return declaration.get_child_by_field('name') or (named[0] if named else None)
        return declaration.get_child_by_field('name')

    # ------------------------------------------------------------------
    # Member tables used by the type evaluator
    # ------------------------------------------------------------------

    def class_static_members(self, class_node: SyntaxNode) -> Dict[str, HostSymbol]:
        members: Dict[str, HostSymbol] = {}
        body = class_node.get_child_by_field('body')
        if body is None:
            return members
        for member in body.get_named_children():
            if member.kind not in member.config['class_member_types'] or not member.has_child_of_kind('static'):
                continue
            symbol = self.symbol_for_declaration_node(member)
            if symbol is not None:
                members.setdefault(symbol.name, symbol)
        return members

    def enum_members(self, enum_node: SyntaxNode) -> Dict[str, HostSymbol]:
        members: Dict[str, HostSymbol] = {}
        body = enum_node.get_child_by_field('body')
        if body is None:
            return members
        for member in body.get_named_children():
            symbol = self.symbol_for_declaration_node(member)
            if symbol is not None:
                members.setdefault(symbol.name, symbol)
        return members

    def namespace_exports(self, namespace_node: SyntaxNode) -> Dict[str, HostSymbol]:
        members: Dict[str, HostSymbol] = {}
        body = namespace_node.get_child_by_field('body')
        if body is None:
            return members
        for statement in body.get_named_children():
            if statement.kind not in statement.config['export_types']:
                continue
            for name, node, _, _ in self._declared_names(statement):
                symbol = self.symbol_for_declaration_node(node)
                if symbol is not None:
                    members.setdefault(name, symbol)
        return members

    # ------------------------------------------------------------------
    # Name binding
    # ------------------------------------------------------------------

    def get_binding(self, node: SyntaxNode) -> Optional[HostSymbol]:
        """
        Return the symbol a node binds to.

        Declaration nodes and the names of declarations bind to the declared
        symbol; identifiers bind through scope lookup; dotted accesses bind
        to the member of the object's structural type.
        """
        symbol = self.symbol_for_declaration_node(node)
        if symbol is not None:
            return symbol

        parent = node.get_parent()
        if parent is not None and self._names_declaration(parent, node):
            symbol = self.symbol_for_declaration_node(parent)
            if symbol is not None:
                return symbol

        kind = node.kind
        if kind in ('property_identifier', 'private_property_identifier'):
            if parent is not None and parent.is_property_access() and parent.get_child_by_field('property') == node:
                return self._property_binding(parent)
            return None
        if node.is_identifier():
            return self.lookup_name(node, node.text)
        if node.is_property_access():
            return self._property_binding(node)
        if kind in node.config['wrapper_expression_types']:
            return self.get_binding(self.unwrap_expression(node))
        return None

    def _names_declaration(self, parent: SyntaxNode, node: SyntaxNode) -> bool:
        if parent.kind == 'import_specifier':
            return True
        if parent.kind == 'export_specifier':
            statement = parent.get_parent().get_parent() if parent.get_parent() is not None else None
            if statement is not None and statement.get_child_by_field('source') is not None:
                return True
        return self._declaration_name_node(parent) == node

    def _property_binding(self, access: SyntaxNode) -> Optional[HostSymbol]:
        operand = access.get_object_operand()
        name = access.get_property_name()
        if operand is None or not name:
            return None
        declarations = self.project.types.type_of_expression(operand).get_property(name)
        if not declarations:
            return None
        return self.symbol_for_declaration_node(declarations[0].node)

    @staticmethod
    def unwrap_expression(node: SyntaxNode) -> SyntaxNode:
        """Strip parentheses, ``as``/``satisfies`` casts and non-null assertions."""
        while node.kind in node.config['wrapper_expression_types']:
            named = node.get_named_children()
            if not named:
                break
            # ``<T>expr`` puts the type first
            node = named[-1] if node.kind == 'type_assertion' else named[0]
        return node

    def lookup_name(self, node: SyntaxNode, name: str) -> Optional[HostSymbol]:
        """
        Resolve a name by walking the scopes enclosing node.

        Args:
            node: Reference position
            name: Name to look up

        Returns:
            The innermost binding of name, or None if it is unbound
        """
        current: Optional[SyntaxNode] = node.get_parent()
        while current is not None:
            if current.kind == 'program':
                return self.get_record(current.source_file).locals.get(name)
            found = self._lookup_in_scope(current, name)
            if found is not None:
                return self.symbol_for_declaration_node(found)
            current = current.get_parent()
        return None

    def _lookup_in_scope(self, scope: SyntaxNode, name: str) -> Optional[SyntaxNode]:
        """Return the declaration node of name directly in scope, if any."""
        config = scope.config
        kind = scope.kind

        if kind in config['block_scope_types'] or kind in ('class_static_block', 'switch_case', 'switch_default'):
            for statement in scope.get_named_children():
                for declared, node, _, _ in self._declared_names(statement):
                    if declared == name:
                        return node
            return None

        if kind in config['function_scope_types'] or kind in _CLASS_EXPRESSION_TYPES:
            parameters = scope.get_child_by_field('parameters')
            if parameters is not None:
                for binding in _pattern_bindings(parameters):
                    if binding.text == name:
                        return binding
            parameter = scope.get_child_by_field('parameter')
            if parameter is not None and parameter.text == name:
                return parameter
            own_name = scope.get_child_by_field('name')
            if kind in _FUNCTION_EXPRESSION_TYPES | _CLASS_EXPRESSION_TYPES and own_name is not None and own_name.text == name:
                return scope
            return None

        if kind == 'catch_clause':
            parameter = scope.get_child_by_field('parameter')
            if parameter is not None:
                for binding in _pattern_bindings(parameter):
                    if binding.text == name:
                        return binding
            return None

        if kind == 'for_statement':
            initializer = scope.get_child_by_field('initializer')
            if initializer is not None:
                for declared, node, _, _ in self._declared_names(initializer):
                    if declared == name:
                        return node
            return None

        if kind == 'for_in_statement' and scope.get_child_by_field('kind') is not None:
            left = scope.get_child_by_field('left')
            if left is not None:
                for binding in _pattern_bindings(left):
                    if binding.text == name:
                        return binding
        return None
