"""
Per-request context helpers.

The caller owns the context value. When extensions are active for a request,
the runner records the request's ExtensionStack on it under
EXTENSION_STACK_KEY (mapping contexts) or as an attribute of that name
(object contexts), so field middleware can reach the stack from info.context.
Such a context must therefore be a mutable mapping or accept attributes.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ..extensions.base import ExtensionStack


EXTENSION_STACK_KEY = "_extension_stack"


def attach_extension_stack(context: Any, stack: "ExtensionStack") -> None:
    """
    Record the request's extension stack on its context.

    Raises:
        TypeError: If the context can hold neither a key nor an attribute
    """
    if isinstance(context, MutableMapping):
        context[EXTENSION_STACK_KEY] = stack
        return
    if isinstance(context, Mapping):
        raise TypeError(
            f"Context of type {type(context).__name__} is read-only; "
            "extensions need a mutable mapping or an object accepting attributes"
        )
    try:
        setattr(context, EXTENSION_STACK_KEY, stack)
    except AttributeError as e:
        raise TypeError(
            f"Context of type {type(context).__name__} does not accept attributes; "
            "extensions need a mutable mapping or an object accepting attributes"
        ) from e


def get_extension_stack(context: Any) -> Optional["ExtensionStack"]:
    """Get the extension stack attached to a context, if any."""
    if context is None:
        return None
    if isinstance(context, MutableMapping):
        return context.get(EXTENSION_STACK_KEY)
    return getattr(context, EXTENSION_STACK_KEY, None)
