from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._annotations import default_store, ordered_annotations
from ._errors import InvalidProviderError, NotRegisteredError
from ._providers import identifier_for, is_constructor, is_factory


logger = logging.getLogger(__name__)

T = TypeVar("T")

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._annotations import Annotation, AnnotationStore

    Provider = type[T] | Callable[[], T]


class Container:
    """Minimal DI container.

    - register classes or zero-argument factories under string identifiers
    - classes are registered under their ``__name__`` unless told otherwise
    - resolve with constructor injection driven by recorded annotations
    """

    def __init__(self, annotations: AnnotationStore | None = None) -> None:
        self._providers: dict[str, Provider[Any]] = {}
        self._annotations = annotations if annotations is not None else default_store()
        self._lock = threading.RLock()

    def register_provider(self, provider: Provider[T], identifier: str | type | None = None) -> Container:
        """Register a class or a factory, returning the container for chaining.

        Example:
          container.register_provider(Database)
          container.register_provider(lambda: Settings.from_env(), "settings")
          container.register_provider(SqliteRepo, Repo)  # identifier "Repo"

        """
        if not is_constructor(provider) and not is_factory(provider):
            msg = f"Invalid provider: {provider!r} is neither a class nor a callable"
            raise InvalidProviderError(msg)

        ident = identifier_for(identifier if identifier is not None else provider)

        with self._lock:
            if ident in self._providers:
                logger.debug("Replacing provider registered as %r", ident)
            self._providers[ident] = provider

        logger.debug("Registered provider %r as %r", provider, ident)
        return self

    @overload
    def get(self, identifier: type[T]) -> T: ...

    @overload
    def get(self, identifier: str) -> Any: ...

    def get(self, identifier: str | type[T]) -> Any:
        """Resolve the identifier to a new instance.

        - class providers are constructed with their annotated dependencies,
          each resolved through this container, in parameter order
        - factory providers are called with no arguments
        """
        ident = identifier_for(identifier)

        with self._lock:
            provider = self._providers.get(ident)
            if provider is None:
                raise NotRegisteredError(ident)

            logger.debug("Resolving %r", ident)
            return self._resolve_provider(provider)

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, str) and not is_constructor(identifier):
            return False
        with self._lock:
            return identifier_for(identifier) in self._providers

    def _resolve_provider(self, provider: Provider[T]) -> T:
        if is_constructor(provider):
            return self._resolve_constructor(provider)
        if is_factory(provider):
            return provider()
        msg = f"Invalid provider: {provider!r}"
        raise InvalidProviderError(msg)

    def _resolve_constructor(self, cls: type[T]) -> T:
        ordered = self._ordered_annotations(cls)
        args = [self.get(ann.identifier) for ann in ordered]
        return cls(*args)

    def _ordered_annotations(self, cls: type) -> list[Annotation]:
        return ordered_annotations(cls, self._annotations.get_annotations(cls))
