"""Structural provider discrimination.

A provider is a *constructor* when it is a class (``inspect.isclass``) and a
*factory* when it is any other callable. Callable instances, lambdas,
functions, bound methods and ``functools.partial`` objects are factories.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from ._errors import InvalidProviderError, InvalidRegistrationError


if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import TypeGuard


def is_constructor(provider: object) -> TypeGuard[type]:
    return inspect.isclass(provider)


def is_factory(provider: object) -> TypeGuard[Callable[[], Any]]:
    return not inspect.isclass(provider) and callable(provider)


def identifier_for(value: object) -> str:
    """Derive the string identifier of `value`.

    - strings are used as is
    - classes are named by their ``__name__``
    - factories have no inferable name
    """
    if isinstance(value, str):
        return value
    if is_constructor(value):
        return value.__name__
    if is_factory(value):
        msg = f"Factories must be registered with an explicit string identifier (got {value!r})"
        raise InvalidRegistrationError(msg)
    msg = f"Invalid provider type: {type(value).__name__}"
    raise InvalidProviderError(msg)
