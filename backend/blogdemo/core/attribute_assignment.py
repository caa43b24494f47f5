"""
Mass assignment for SQLAlchemy models

Models built on ``Base`` accept an attributes tree in their constructor and in
``assign_attributes``/``update_attributes``. Every tree goes through two
checks, in this order:

1. ``sanitize_for_mass_assignment`` rejects unpermitted ``Parameters``.
2. Each key is looked up in the model's setter table; keys without a setter
   raise ``UnknownAttributeError``.

Values are cast and nested ids looked up for the whole tree before any
attribute is written, so a failing tree leaves the record unchanged.

Models list associations in ``__nested_attributes__`` to also accept
``<association>_attributes`` keys, which create or update related records.
"""
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from functools import partial
from typing import Any, Callable, Dict, List

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import object_session

from blogdemo.core.errors import (ForbiddenAttributesError,
                                  InvalidAttributeValue, RecordNotFound,
                                  UnknownAttributeError)
from blogdemo.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

NESTED_ATTRIBUTES_SUFFIX = "_attributes"

Assignment = Callable[[], None]
Setter = Callable[[Any, Any], Assignment]

_setter_tables: Dict[type, Dict[str, Setter]] = {}


def sanitize_for_mass_assignment(attributes):
    """Reject trees that carry a permitted flag which is not set"""
    if not isinstance(attributes, Mapping):
        raise TypeError("When assigning attributes, you must pass a mapping as an argument")
    if getattr(attributes, "permitted", True) is False:
        raise ForbiddenAttributesError("unpermitted parameters cannot be used for mass assignment")
    return attributes


def _cast(python_type: type, value: Any) -> Any:
    """Cast form/JSON strings to the column's Python type"""
    if not isinstance(value, str) or python_type is str:
        return value
    if value.strip() == "":
        return None
    if python_type is bool:
        return value.strip().lower() in ("1", "true", "t", "yes", "on")
    if python_type in (int, float, Decimal):
        return python_type(value.strip())
    if python_type is datetime:
        return datetime.fromisoformat(value)
    if python_type is date:
        return date.fromisoformat(value)
    if python_type is time:
        return time.fromisoformat(value)
    return value


def _column_setter(key: str, python_type: Any, record, value) -> Assignment:
    if python_type is not None:
        try:
            value = _cast(python_type, value)
        except (ValueError, ArithmeticError) as e:
            raise InvalidAttributeValue(record, key, python_type) from e
    return partial(setattr, record, key, value)


def _plain_setter(key: str, record, value) -> Assignment:
    return partial(setattr, record, key, value)


def _run_all(assignments: List[Assignment]) -> None:
    for assignment in assignments:
        assignment()


def _is_blank_id(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _without_id(attributes: Mapping) -> Dict[str, Any]:
    return {key: value for key, value in attributes.items() if key != "id"}


def _assign_nested_record(name: str, record, attributes) -> Assignment:
    """Create or update the single record behind a many-to-one/one-to-one association"""
    attributes = sanitize_for_mass_assignment(attributes)
    related_cls = sa_inspect(type(record)).relationships[name].mapper.class_
    existing = getattr(record, name)
    record_id = attributes.get("id")

    if _is_blank_id(record_id):
        return partial(setattr, record, name, related_cls(_without_id(attributes)))
    if existing is not None and str(existing.id) == str(record_id):
        return existing.prepare_assignment(_without_id(attributes))
    raise RecordNotFound(
        related_cls.__name__, record_id,
        owner=f"{type(record).__name__} with id={record.id}"
    )


def _collection_items(attributes_collection) -> List[Mapping]:
    if isinstance(attributes_collection, Mapping):
        attributes_collection = sanitize_for_mass_assignment(attributes_collection)
        if "id" in attributes_collection:
            return [attributes_collection]
        # {"0": {...}, "1": {...}}: index keys carry no meaning
        return list(attributes_collection.values())
    if isinstance(attributes_collection, (list, tuple)):
        return list(attributes_collection)
    raise TypeError(
        f"Mapping or list expected for nested collection attributes, got {type(attributes_collection).__name__}"
    )


def _assign_nested_collection(name: str, record, attributes_collection) -> Assignment:
    """Create or update records of a one-to-many association"""
    related_cls = sa_inspect(type(record)).relationships[name].mapper.class_
    collection = getattr(record, name)
    existing = {str(item.id): item for item in collection if item.id is not None}

    pending: List[Assignment] = []
    for attributes in _collection_items(attributes_collection):
        attributes = sanitize_for_mass_assignment(attributes)
        record_id = attributes.get("id")
        if _is_blank_id(record_id):
            pending.append(partial(collection.append, related_cls(_without_id(attributes))))
        elif str(record_id) in existing:
            pending.append(existing[str(record_id)].prepare_assignment(_without_id(attributes)))
        else:
            raise RecordNotFound(
                related_cls.__name__, record_id,
                owner=f"{type(record).__name__} with id={record.id}"
            )
    return partial(_run_all, pending)


def _column_python_type(column_attr) -> Any:
    try:
        return column_attr.columns[0].type.python_type
    except NotImplementedError:
        return None


def attribute_setters(model: type) -> Dict[str, Setter]:
    """
    Setter lookup table for a mapped class, keyed by assignable attribute name.

    A setter checks and casts its value and returns the write to perform.
    """
    table = _setter_tables.get(model)
    if table is not None:
        return table

    mapper = sa_inspect(model)
    table = {}
    for column_attr in mapper.column_attrs:
        table[column_attr.key] = partial(_column_setter, column_attr.key, _column_python_type(column_attr))
    for relationship in mapper.relationships:
        table[relationship.key] = partial(_plain_setter, relationship.key)
    for name in getattr(model, "__nested_attributes__", ()):
        relationship = mapper.relationships[name]
        assign = _assign_nested_collection if relationship.uselist else _assign_nested_record
        table[f"{name}{NESTED_ATTRIBUTES_SUFFIX}"] = partial(assign, name)

    _setter_tables[model] = table
    return table


class AttributeAssignmentMixin:
    """Constructor and mass-assignment methods shared by all models"""

    __nested_attributes__ = ()

    def __init__(self, attributes=None, **kwargs):
        if attributes is not None:
            self.assign_attributes(attributes)
        if kwargs:
            self.assign_attributes(kwargs)

    def prepare_assignment(self, attributes) -> Assignment:
        """Check every key, cast values and look up nested ids without writing anything"""
        attributes = sanitize_for_mass_assignment(attributes)
        setters = attribute_setters(type(self))

        plain: List[Assignment] = []
        nested: List[Assignment] = []
        for key, value in attributes.items():
            setter = setters.get(key)
            if setter is None:
                logger.warning(
                    "Unknown attribute in mass assignment",
                    extra={"model": type(self).__name__, "attribute": key}
                )
                raise UnknownAttributeError(self, key)
            if key.endswith(NESTED_ATTRIBUTES_SUFFIX):
                nested.append(setter(self, value))
            else:
                plain.append(setter(self, value))

        # Nested records are attached after the owner's own columns are set
        return partial(_run_all, plain + nested)

    def assign_attributes(self, attributes) -> None:
        self.prepare_assignment(attributes)()

    def update_attributes(self, attributes):
        """Assign attributes and flush them if the record belongs to a session"""
        self.assign_attributes(attributes)
        session = object_session(self)
        if session is not None:
            session.flush()
        return self
