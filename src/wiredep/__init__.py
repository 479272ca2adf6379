"""Minimal dependency injection library.

This package provides a small dependency injection container for Python: a
registry mapping string identifiers to providers (classes or zero-argument
factories), plus class-level annotations telling the container which
registered dependency feeds each constructor parameter.

Exports:
- `Container`: registry of providers; resolves identifiers with constructor injection.
- `annotate` / `inject`: record that a constructor parameter is fed by an identifier.
- `injectable`: class marker that checks recorded annotations against the constructor.
- `get_annotations` / `clear_annotations` / `default_store`: access the process-wide
  annotation table; `AnnotationStore` builds an isolated one.
- Errors: `ContainerError` and its subclasses `NotRegisteredError`,
  `InvalidRegistrationError`, `InvalidProviderError`, `InvalidAnnotationError`.
"""

from ._annotations import (
    Annotation,
    AnnotationStore,
    annotate,
    clear_annotations,
    default_store,
    get_annotations,
    inject,
    injectable,
)
from ._container import Container
from ._errors import (
    ContainerError,
    InvalidAnnotationError,
    InvalidProviderError,
    InvalidRegistrationError,
    NotRegisteredError,
)


__all__ = [
    "Annotation",
    "AnnotationStore",
    "Container",
    "ContainerError",
    "InvalidAnnotationError",
    "InvalidProviderError",
    "InvalidRegistrationError",
    "NotRegisteredError",
    "annotate",
    "clear_annotations",
    "default_store",
    "get_annotations",
    "inject",
    "injectable",
]
