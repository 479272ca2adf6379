import gc
import weakref

import pytest

from wiredep import (
    Annotation,
    AnnotationStore,
    InvalidAnnotationError,
    InvalidProviderError,
    InvalidRegistrationError,
    annotate,
    clear_annotations,
    default_store,
    get_annotations,
    inject,
    injectable,
)


def test_get_annotations_of_unannotated_class_is_empty():
    class Plain: ...

    assert get_annotations(Plain) == ()


def test_annotations_are_kept_in_insertion_order():
    class Service:
        def __init__(self, a, b): ...

    annotate(Service, 1, "b")
    annotate(Service, 0, "a")

    assert get_annotations(Service) == (
        Annotation(parameter_index=1, identifier="b"),
        Annotation(parameter_index=0, identifier="a"),
    )


def test_class_identifier_uses_class_name():
    class Database: ...

    class Repo:
        def __init__(self, db): ...

    annotate(Repo, 0, Database)
    assert get_annotations(Repo) == (Annotation(0, "Database"),)


def test_factory_identifier_is_rejected():
    class Repo:
        def __init__(self, db): ...

    with pytest.raises(InvalidRegistrationError):
        annotate(Repo, 0, lambda: None)  # type: ignore[arg-type]
    assert get_annotations(Repo) == ()


def test_non_provider_identifier_is_rejected():
    class Repo:
        def __init__(self, db): ...

    with pytest.raises(InvalidProviderError):
        annotate(Repo, 0, 12)  # type: ignore[arg-type]


@pytest.mark.parametrize("index", [-1, 1.0, "0", True])
def test_invalid_parameter_index_is_rejected(index):
    class Repo:
        def __init__(self, db): ...

    with pytest.raises(InvalidAnnotationError):
        annotate(Repo, index, "db")


def test_annotating_non_class_is_rejected():
    def not_a_class(db): ...

    with pytest.raises(InvalidAnnotationError):
        annotate(not_a_class, 0, "db")  # type: ignore[arg-type]


def test_duplicate_index_is_rejected():
    class Repo:
        def __init__(self, db): ...

    annotate(Repo, 0, "db")
    with pytest.raises(InvalidAnnotationError) as ctx:
        annotate(Repo, 0, "other_db")
    assert "already annotated with 'db'" in str(ctx.value)
    assert get_annotations(Repo) == (Annotation(0, "db"),)


def test_annotations_are_not_inherited():
    @inject(0, "db")
    class Base:
        def __init__(self, db): ...

    class Child(Base): ...

    assert get_annotations(Child) == ()
    assert get_annotations(Base) == (Annotation(0, "db"),)


def test_clear_annotations_for_one_class():
    @inject(0, "a")
    class First:
        def __init__(self, a): ...

    @inject(0, "b")
    class Second:
        def __init__(self, b): ...

    clear_annotations(First)
    assert get_annotations(First) == ()
    assert get_annotations(Second) == (Annotation(0, "b"),)


def test_store_clear_all_and_contains():
    store = AnnotationStore()

    class First: ...

    class Second: ...

    store.annotate(First, 0, "a")
    store.annotate(Second, 0, "b")
    assert First in store
    assert Second in store

    store.clear()
    assert First not in store
    assert store.get_annotations(Second) == ()


@pytest.mark.parametrize("value", [[], "First", 0, None])
def test_store_contains_non_class_is_false(value):
    store = AnnotationStore()
    assert value not in store
    assert store.get_annotations(value) == ()


def test_store_does_not_keep_annotated_class_alive():
    store = AnnotationStore()

    def make_class():
        class Temp:
            def __init__(self, dep): ...

        store.annotate(Temp, 0, "dep")
        annotate(Temp, 0, "dep")
        return weakref.ref(Temp)

    ref = make_class()
    gc.collect()
    assert ref() is None


def test_default_store_backs_module_functions():
    class Service:
        def __init__(self, dep): ...

    annotate(Service, 0, "dep")
    assert default_store().get_annotations(Service) == get_annotations(Service)


def test_returned_sequence_is_a_snapshot():
    class Service:
        def __init__(self, a, b): ...

    annotate(Service, 0, "a")
    snapshot = get_annotations(Service)
    annotate(Service, 1, "b")
    assert len(snapshot) == 1
    assert len(get_annotations(Service)) == 2


def test_inject_returns_the_class_unchanged():
    class Service:
        def __init__(self, dep): ...

    assert inject(0, "dep")(Service) is Service


def test_injectable_marks_class_bare_and_called():
    @injectable
    class Bare: ...

    @injectable()
    class Called: ...

    assert Bare._wiredep_injectable is True
    assert Called._wiredep_injectable is True


def test_injectable_is_idempotent():
    @inject(0, "dep")
    class Service:
        def __init__(self, dep): ...

    assert injectable(injectable(Service)) is Service


def test_injectable_accepts_annotations_within_signature():
    @injectable
    @inject(1, "b")
    @inject(0, "a")
    class Service:
        def __init__(self, a, b, c=None): ...

    assert len(get_annotations(Service)) == 2


def test_injectable_rejects_index_beyond_constructor():
    with pytest.raises(InvalidAnnotationError) as ctx:

        @injectable
        @inject(2, "c")
        @inject(1, "b")
        @inject(0, "a")
        class Service:
            def __init__(self, a, b): ...

    assert "takes only 2 positional parameter(s)" in str(ctx.value)


def test_injectable_rejects_gap_in_indices():
    with pytest.raises(InvalidAnnotationError) as ctx:

        @injectable
        @inject(2, "c")
        @inject(0, "a")
        class Service:
            def __init__(self, a, b, c): ...

    assert "parameter 1 is not annotated" in str(ctx.value)


def test_injectable_allows_var_positional_constructor():
    @injectable
    @inject(1, "second")
    @inject(0, "first")
    class Service:
        def __init__(self, *deps): ...

    assert Service._wiredep_injectable is True


def test_injectable_with_explicit_store():
    store = AnnotationStore()

    class Service:
        def __init__(self): ...

    store.annotate(Service, 0, "dep")
    with pytest.raises(InvalidAnnotationError):
        injectable(Service, store=store)

    # nothing recorded in the default store, so nothing to validate
    assert injectable(Service) is Service
