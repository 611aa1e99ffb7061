"""Minimal in-test semantic host for exercising the resolution engine."""
from origintrace.core.interfaces import (
    IDeclaration,
    ISemanticHost,
    IStructuralType,
    ISymbol,
    ISyntaxNode,
)
from origintrace.core.models import DeclarationKind


class FakeNode(ISyntaxNode):

    def __init__(self, kind="identifier", text="", path="/root/src/index.ts", host=None, children=()):
        self._kind = kind
        self.text = text
        self.path = path
        self.host = host
        self.parent = None
        self.property_name = None
        self.children = list(children)
        for child in self.children:
            child.parent = self

    def __repr__(self):
        return f"FakeNode({self._kind}, {self.text!r})"

    @property
    def kind(self):
        return self._kind

    def is_identifier(self):
        return self._kind == "identifier"

    def is_property_access(self):
        return self._kind == "member"

    def get_parent(self):
        return self.parent

    def get_object_operand(self):
        return self.children[0] if self.is_property_access() else None

    def get_property_name(self):
        return self.property_name if self.is_property_access() else None

    def get_first_descendant_identifier(self):
        for child in self.children:
            if child.is_identifier():
                return child
            found = child.get_first_descendant_identifier()
            if found is not None:
                return found
        return None

    def get_source_file_path(self):
        return self.path

    def get_host(self):
        if self.host is None:
            raise RuntimeError("node has no host")
        return self.host


def member(obj, property_name, path=None):
    """Build ``obj.property_name``."""
    prop = FakeNode("property", property_name, path=path or obj.path, host=obj.host)
    access = FakeNode("member", f"{obj.text}.{property_name}", path=path or obj.path,
                      host=obj.host, children=[obj, prop])
    access.property_name = property_name
    return access


class FakeType(IStructuralType):

    def __init__(self, members=None):
        self.members = members or {}

    def get_property(self, name):
        return self.members.get(name)


class FakeDeclaration(IDeclaration):

    def __init__(self, node, kind=DeclarationKind.VARIABLE, initializer=None, structural_type=None):
        self._node = node
        self._kind = kind
        self.initializer = initializer
        self.structural_type = structural_type if structural_type is not None else FakeType()

    @property
    def kind(self):
        return self._kind

    @property
    def node(self):
        return self._node

    def get_initializer(self):
        return self.initializer

    def get_structural_type(self):
        return self.structural_type

    def get_owning_file_location(self):
        return self._node.path


class FakeSymbol(ISymbol):

    def __init__(self, name, declarations=(), aliased=None, alias=False):
        self._name = name
        self.declarations = list(declarations)
        self.aliased = aliased
        self.alias = alias or aliased is not None

    def __repr__(self):
        return f"FakeSymbol({self._name!r})"

    @property
    def name(self):
        return self._name

    def is_alias(self):
        return self.alias

    def get_aliased_symbol(self):
        return self.aliased

    def get_declarations(self):
        return list(self.declarations)


class FakeHost(ISemanticHost):

    def __init__(self):
        self.bindings = {}
        self.queries = 0

    def bind(self, node, symbol):
        self.bindings[id(node)] = symbol
        return symbol

    def get_binding(self, node):
        self.queries += 1
        return self.bindings.get(id(node))

    def node(self, text="", kind="identifier", path="/root/src/index.ts"):
        return FakeNode(kind, text, path=path, host=self)

    def define(self, name, path, kind=DeclarationKind.VARIABLE, initializer=None,
               structural_type=None, aliased=None):
        """Create a symbol with one declaration whose node binds back to it."""
        declaration_node = self.node(name, kind="declaration", path=path)
        declaration = FakeDeclaration(declaration_node, kind, initializer, structural_type)
        symbol = FakeSymbol(name, [declaration], aliased=aliased)
        self.bind(declaration_node, symbol)
        return symbol


class FaultyHost(ISemanticHost):

    def get_binding(self, node):
        raise RuntimeError("type checker crashed")
