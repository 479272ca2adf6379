from __future__ import annotations

import inspect
import logging
import threading
import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING, overload

from ._errors import InvalidAnnotationError
from ._providers import identifier_for


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import TypeVar

    C = TypeVar("C", bound=type)


@dataclass(frozen=True)
class Annotation:
    parameter_index: int
    identifier: str


class AnnotationStore:
    """Class-level record of which identifier feeds which constructor parameter.

    Annotations are keyed weakly by the class object itself and kept in
    insertion order, so recording them never keeps a class alive. They are
    not inherited: a subclass has its own (possibly empty) sequence.
    """

    def __init__(self) -> None:
        self._annotations: weakref.WeakKeyDictionary[type, list[Annotation]] = weakref.WeakKeyDictionary()
        self._lock = threading.Lock()
    def annotate(self, cls: type, parameter_index: int, identifier: str | type) -> None:
        """Record that constructor parameter `parameter_index` of `cls` is `identifier`.

        Example:
          store.annotate(Service, 0, "db")
          store.annotate(Service, 1, Cache)  # identifier "Cache"

        """
        if not inspect.isclass(cls):
            msg = f"Annotations can only be recorded on classes, got {cls!r}"
            raise InvalidAnnotationError(msg)

        if isinstance(parameter_index, bool) or not isinstance(parameter_index, int) or parameter_index < 0:
            msg = f"Parameter index must be a non-negative integer, got {parameter_index!r}"
            raise InvalidAnnotationError(msg)

        ident = identifier_for(identifier)

        with self._lock:
            existing = self._annotations.setdefault(cls, [])
            for ann in existing:
                if ann.parameter_index == parameter_index:
                    msg = (
                        f"Parameter {parameter_index} of {cls.__name__} is already annotated "
                        f"with {ann.identifier!r}; cannot annotate it again with {ident!r}"
                    )
                    raise InvalidAnnotationError(msg)
            existing.append(Annotation(parameter_index=parameter_index, identifier=ident))

        logger.debug("Annotated %s parameter %d with %r", cls.__qualname__, parameter_index, ident)

    def get_annotations(self, cls: type) -> tuple[Annotation, ...]:
        if not inspect.isclass(cls):
            return ()
        with self._lock:
            return tuple(self._annotations.get(cls, ()))

    def clear(self, cls: type | None = None) -> None:
        """Forget the annotations of `cls`, or of every class when `cls` is None."""
        with self._lock:
            if cls is None:
                self._annotations.clear()
            else:
                self._annotations.pop(cls, None)

    def __contains__(self, cls: object) -> bool:
        if not inspect.isclass(cls):
            return False
        with self._lock:
            return bool(self._annotations.get(cls))


_default_store = AnnotationStore()


def default_store() -> AnnotationStore:
    return _default_store


def annotate(cls: type, parameter_index: int, identifier: str | type) -> None:
    _default_store.annotate(cls, parameter_index, identifier)


def get_annotations(cls: type) -> tuple[Annotation, ...]:
    return _default_store.get_annotations(cls)


def clear_annotations(cls: type | None = None) -> None:
    _default_store.clear(cls)


def inject(
    parameter_index: int,
    identifier: str | type,
    *,
    store: AnnotationStore | None = None,
) -> Callable[[C], C]:
    """Class decorator form of `annotate`.

    Example:
      @inject(1, "cache")
      @inject(0, Database)
      class Repo:
          def __init__(self, db, cache): ...

    """
    target = store if store is not None else _default_store

    def decorator(cls: C) -> C:
        target.annotate(cls, parameter_index, identifier)
        return cls

    return decorator


@overload
def injectable(cls: C, *, store: AnnotationStore | None = ...) -> C: ...


@overload
def injectable(cls: None = ..., *, store: AnnotationStore | None = ...) -> Callable[[C], C]: ...


def injectable(cls: C | None = None, *, store: AnnotationStore | None = None) -> C | Callable[[C], C]:
    """Mark a class as injectable and check its annotations fit its constructor.

    The annotated indices must run 0..N-1, and each must address a positional
    parameter of ``__init__`` (``self`` excluded) unless the constructor
    takes ``*args``.
    """
    target = store if store is not None else _default_store

    def decorator(klass: C) -> C:
        ordered = ordered_annotations(klass, target.get_annotations(klass))
        _validate_against_signature(klass, ordered)
        klass._wiredep_injectable = True  # type: ignore[attr-defined]
        return klass

    if cls is None:
        return decorator
    return decorator(cls)


def ordered_annotations(cls: type, annotations: tuple[Annotation, ...]) -> list[Annotation]:
    """Sort `annotations` by parameter index, rejecting gaps in the indices."""
    ordered = sorted(annotations, key=lambda ann: ann.parameter_index)

    # Positional injection cannot skip a parameter
    for expected, ann in enumerate(ordered):
        if ann.parameter_index != expected:
            msg = (
                f"Cannot construct {cls.__name__}: constructor parameter {expected} is not annotated "
                f"(annotated indices: {[a.parameter_index for a in ordered]})"
            )
            raise InvalidAnnotationError(msg)

    return ordered


def _validate_against_signature(cls: type, annotations: list[Annotation]) -> None:
    if not annotations:
        return

    try:
        sig = inspect.signature(cls)
    except (TypeError, ValueError):
        # builtins without a retrievable signature
        logger.debug("No signature available for %s; skipping annotation check", cls.__qualname__)
        return

    positional = [
        p
        for p in sig.parameters.values()
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in sig.parameters.values()):
        return

    for ann in annotations:
        if ann.parameter_index >= len(positional):
            msg = (
                f"{cls.__name__} annotates parameter {ann.parameter_index} with {ann.identifier!r}, "
                f"but its constructor takes only {len(positional)} positional parameter(s)"
            )
            raise InvalidAnnotationError(msg)
