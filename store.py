"""
Path-addressed updates for checklist documents.

Paths are dotted strings ("brakes.frontLeft.pads") resolved against a closed
table of locators built from the session schema. Updates are structural: the
addressed leaf is replaced on fresh copies of every model along the path and
every sibling is carried over untouched.
"""

import logging
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Iterator, Mapping, NamedTuple, Tuple, Type, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from errors import FieldValueError, UnknownFieldPath

logger = logging.getLogger(__name__)

CHECKLIST_FIELD = "checklist"

Path = Union[str, Tuple[str, ...]]


class Target(str, Enum):
    IDENTITY = "identity"
    CHECKLIST = "checklist"


class FieldLocator(NamedTuple):
    target: Target
    segments: Tuple[str, ...]
    annotation: Any

    @property
    def path(self) -> str:
        return ".".join(self.segments)

    @property
    def is_leaf(self) -> bool:
        return not _is_model(self.annotation)


def _is_model(annotation) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _walk(model_cls: Type[BaseModel], prefix: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], Any]]:
    for name, field in model_cls.model_fields.items():
        segments = prefix + (name,)
        yield segments, field.annotation
        if _is_model(field.annotation):
            yield from _walk(field.annotation, segments)


@lru_cache(maxsize=None)
def locators(session_cls: Type[BaseModel]) -> Mapping[str, FieldLocator]:
    """Every addressable path of a session schema, keyed by dotted path.

    Top-level fields other than ``checklist`` are identity locators. Everything
    under ``checklist`` is addressed without the ``checklist.`` prefix.
    """
    table = {}
    checklist_cls = session_cls.model_fields[CHECKLIST_FIELD].annotation
    for segments, annotation in _walk(checklist_cls):
        table[".".join(segments)] = FieldLocator(Target.CHECKLIST, segments, annotation)

    for name, field in session_cls.model_fields.items():
        if name == CHECKLIST_FIELD:
            continue
        if name in table:
            raise TypeError(f"{session_cls.__name__}.{name} shadows a checklist section")
        table[name] = FieldLocator(Target.IDENTITY, (name,), field.annotation)
    return MappingProxyType(table)


def identity_fields(session_cls: Type[BaseModel]) -> Tuple[str, ...]:
    return tuple(n for n in session_cls.model_fields if n != CHECKLIST_FIELD)


def resolve(session_cls: Type[BaseModel], path: str) -> FieldLocator:
    try:
        return locators(session_cls)[path]
    except KeyError:
        raise UnknownFieldPath(path) from None


@lru_cache(maxsize=None)
def _adapter(annotation) -> TypeAdapter:
    return TypeAdapter(annotation)


def _split(path: Path) -> Tuple[str, ...]:
    segments = tuple(path.split(".")) if isinstance(path, str) else tuple(path)
    if not segments or not all(segments):
        raise UnknownFieldPath(".".join(segments) if segments else "")
    return segments


def _set(model: BaseModel, segments: Tuple[str, ...], value: Any, full_path: str) -> BaseModel:
    head, rest = segments[0], segments[1:]
    field = type(model).model_fields.get(head)
    if field is None:
        raise UnknownFieldPath(full_path)

    if rest:
        child = getattr(model, head)
        if not isinstance(child, BaseModel):
            raise UnknownFieldPath(full_path)
        new_value = _set(child, rest, value, full_path)
    else:
        try:
            new_value = _adapter(field.annotation).validate_python(value)
        except ValidationError as e:
            raise FieldValueError(full_path, e.errors()[0]["msg"]) from e

    return model.model_copy(update={head: new_value})


def apply(document: BaseModel, path: Path, value: Any) -> BaseModel:
    """Return a copy of ``document`` with the field at ``path`` set to ``value``.

    Works on any pydantic document at any depth. The input document is left
    unchanged. The value is coerced by the field's declared type, so a status
    string becomes a CheckStatus and a dict becomes the sub-model it addresses.
    """
    segments = _split(path)
    return _set(document, segments, value, ".".join(segments))


def apply_to_session(session: BaseModel, path: str, value: Any) -> BaseModel:
    """Route an update either to an identifying field or into the checklist."""
    locator = resolve(type(session), path)
    logger.debug(f"{type(session).__name__}: set {locator.target.value} field {path}")
    if locator.target is Target.IDENTITY:
        return apply(session, locator.segments, value)
    return apply(session, (CHECKLIST_FIELD,) + locator.segments, value)


def read(document: BaseModel, path: Path) -> Any:
    value = document
    for segment in _split(path):
        if not isinstance(value, BaseModel) or segment not in type(value).model_fields:
            raise UnknownFieldPath(path if isinstance(path, str) else ".".join(path))
        value = getattr(value, segment)
    return value
