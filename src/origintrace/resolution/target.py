"""
Target node selection.

A caller may hand in either half of ``Foo.Bar``, the whole access, or a
larger expression. The node whose binding is traced is always the object
operand of a dotted access, or else the first name reference.
"""

from typing import Optional

from origintrace.core.interfaces import ISyntaxNode


def select_target_node(node: Optional[ISyntaxNode]) -> Optional[ISyntaxNode]:
    """
    Determine the node whose binding should be resolved.

    Args:
        node: Any reference node

    Returns:
        The node to resolve, or None if node is None

    Example:
        >>> select_target_node(bar_in_foo_dot_bar) == foo_in_foo_dot_bar
        True
    """
    if node is None:
        return None

    # Foo.Bar -> Foo
    if node.is_property_access():
        return node.get_object_operand()

    # Either half of Foo.Bar -> Foo
    parent = node.get_parent()
    if parent is not None and parent.is_property_access():
        return parent.get_object_operand()

    if node.is_identifier():
        return node

    identifier = node.get_first_descendant_identifier()
    return identifier if identifier is not None else node


def is_property_access_object(node: ISyntaxNode) -> bool:
    """True if node is the object operand of its parent dotted access."""
    parent = node.get_parent()
    if parent is None or not parent.is_property_access():
        return False
    return parent.get_object_operand() == node
