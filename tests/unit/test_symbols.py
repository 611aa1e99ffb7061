"""Unit tests for host symbols and structural types."""
from origintrace.core.models import DeclarationKind
from origintrace.host.symbols import (
    EMPTY_TYPE,
    HostDeclaration,
    HostSymbol,
    StructuralType,
    UNKNOWN_SYMBOL,
)


def alias_to(name, target):
    return HostSymbol(name, target_resolver=lambda: target)


class TestHostSymbol:

    def test_non_alias(self):
        symbol = HostSymbol("Foo")
        assert not symbol.is_alias()
        assert symbol.get_aliased_symbol() is None
        assert symbol.get_immediate_target() is None

    def test_alias_chain_is_followed_to_the_end(self):
        origin = HostSymbol("Foo")
        first = alias_to("Foo", alias_to("Foo", alias_to("Foo", origin)))

        assert first.get_aliased_symbol() is origin

    def test_target_is_resolved_once(self):
        calls = []
        origin = HostSymbol("Foo")
        alias = HostSymbol("Foo", target_resolver=lambda: calls.append(1) or origin)

        alias.get_aliased_symbol()
        alias.get_aliased_symbol()

        assert calls == [1]

    def test_broken_chain_is_unknown(self):
        alias = alias_to("Foo", alias_to("Foo", None))

        target = alias.get_aliased_symbol()

        assert target is UNKNOWN_SYMBOL
        assert target.get_declarations() == []

    def test_circular_chain_is_unknown(self):
        holder = {}
        a = HostSymbol("A", target_resolver=lambda: holder["b"])
        holder["b"] = HostSymbol("B", target_resolver=lambda: a)

        assert a.get_aliased_symbol() is UNKNOWN_SYMBOL

    def test_declaration_merging(self):
        first = HostDeclaration(DeclarationKind.FUNCTION, None, "f")
        second = HostDeclaration(DeclarationKind.FUNCTION, None, "f")
        symbol = HostSymbol("f", [first])

        symbol.add_declaration(second)

        assert symbol.get_declarations() == [first, second]

    def test_declarations_are_copied(self):
        symbol = HostSymbol("f", [HostDeclaration(DeclarationKind.VARIABLE, None, "f")])
        symbol.get_declarations().clear()
        assert len(symbol.get_declarations()) == 1


class TestStructuralType:

    def test_get_property(self):
        structural_type = StructuralType({"Foo": ["a"], "Empty": []})
        assert structural_type.get_property("Foo") == ["a"]
        assert structural_type.get_property("Empty") is None
        assert structural_type.get_property("Missing") is None

    def test_spread_later_wins(self):
        merged = StructuralType.spread([
            StructuralType({"Foo": ["a"], "Bar": ["a"]}),
            StructuralType({"Foo": ["b"]}),
        ])
        assert merged.get_property("Foo") == ["b"]
        assert merged.get_property("Bar") == ["a"]

    def test_intersection_keeps_argument_order(self):
        merged = StructuralType.intersection([
            StructuralType({"Foo": ["a"]}),
            StructuralType({"Foo": ["b"], "Bar": ["b"]}),
        ])
        assert merged.get_property("Foo") == ["a", "b"]
        assert merged.get_property_names() == ["Foo", "Bar"]

    def test_empty(self):
        assert EMPTY_TYPE.get_property_names() == []
        assert StructuralType.spread([]).get_property_names() == []
