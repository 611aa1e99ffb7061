"""
Composite property resolution.

Finds the declaration that structurally contributes a property to a merged
value, e.g. ``Foo`` in ``Object.assign({}, A, C)`` where ``A`` is a namespace
import, and walks that declaration to its own origin.
"""

import logging
from typing import Optional, TYPE_CHECKING

from origintrace.core.interfaces import ISymbol

if TYPE_CHECKING:
    from origintrace.resolution.walker import SymbolOriginWalker

logger = logging.getLogger(__name__)


def resolve_composite_property(
    symbol: ISymbol,
    property_name: str,
    walker: 'SymbolOriginWalker',
) -> Optional[ISymbol]:
    """
    Resolve the symbol that contributes ``property_name`` to ``symbol``.

    The first contributing declaration reported by the host is walked with
    the caller's walker, so alias and reassignment rules apply to the
    merged-in value and the caller's step budget bounds the recursion.

    Args:
        symbol: Symbol of the object operand
        property_name: Name of the accessed property
        walker: Walker of the current trace

    Returns:
        The contributing origin symbol, or None if the property is not part
        of the symbol's structural type
    """
    declarations = symbol.get_declarations()
    if not declarations:
        return None

    structural_type = declarations[0].get_structural_type()
    if structural_type is None:
        return None

    contributors = structural_type.get_property(property_name)
    if not contributors:
        logger.debug(f"Property '{property_name}' not found on '{symbol.name}'")
        return None

    return walker.walk(contributors[0].node)
