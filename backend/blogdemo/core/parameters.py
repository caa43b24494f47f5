"""
Strong parameters: filtering untrusted request input before mass assignment

A ``Parameters`` tree wraps a raw request body. It starts out unpermitted and
can only be used for model construction after ``permit`` has produced a
filtered copy of it.

    params = Parameters(await request.json())
    attrs = params.require("comment").permit(
        "author", article_attributes=["id", "title", "body"]
    )
    comment = Comment(attrs)
"""
import json
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, List, Optional

from blogdemo.core.config import get_settings
from blogdemo.core.errors import (ParameterMissing, ParameterTypeMismatch,
                                  UnfilteredParameters)
from blogdemo.core.logging_config import LoggingConfig
from blogdemo.core.notifications import instrument_unpermitted_parameters

logger = LoggingConfig.get_logger(__name__)

PERMITTED_SCALAR_TYPES = (str, bool, int, float, Decimal, date, datetime, time, type(None))

_MISSING = object()
_DROP = object()


def _normalize(value: Any) -> Any:
    """Copy a raw tree, converting keys to strings and unwrapping nested Parameters"""
    if isinstance(value, Parameters):
        value = value._data
    if isinstance(value, Mapping):
        return {str(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    return value


def _is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Mapping, list, tuple)):
        return len(value) == 0
    return False


def _is_permitted_scalar(value: Any) -> bool:
    return isinstance(value, PERMITTED_SCALAR_TYPES)


def _is_indexed_collection(value: Mapping) -> bool:
    """True for ``{"0": {...}, "1": {...}}`` style trees sent by nested forms"""
    return bool(value) and all(key.lstrip("-").isdigit() for key in value)


def _as_spec_list(spec: Any) -> List[Any]:
    if isinstance(spec, (str, Mapping)):
        return [spec]
    return list(spec)


def _filter_tree(data: Dict[str, Any], filters: List[Any], unpermitted: List[str]) -> Dict[str, Any]:
    """Single pass over one level of ``data``; nested levels recurse through ``_filter_nested``"""
    output: Dict[str, Any] = {}

    for entry in filters:
        if isinstance(entry, Mapping):
            for key, spec in entry.items():
                key = str(key)
                if key not in data:
                    continue
                value = _filter_nested(key, data[key], _as_spec_list(spec), unpermitted)
                if value is not _DROP:
                    output[key] = value
        else:
            key = str(entry)
            # A scalar filter never lets a tree or a list through
            if key in data and _is_permitted_scalar(data[key]):
                output[key] = data[key]

    always_permitted = get_settings().always_permitted_parameters_list
    for key in data:
        if key not in output and key not in always_permitted:
            unpermitted.append(key)

    return output


def _filter_nested(key: str, value: Any, spec: List[Any], unpermitted: List[str]) -> Any:
    if not spec:
        # key=[] permits an array of scalars and nothing else
        if isinstance(value, list) and all(_is_permitted_scalar(v) for v in value):
            return list(value)
        return _DROP

    if isinstance(value, Mapping):
        if _is_indexed_collection(value):
            output = {}
            for index, item in value.items():
                if isinstance(item, Mapping):
                    output[index] = _filter_tree(item, spec, unpermitted)
                else:
                    unpermitted.append(index)
            return output
        return _filter_tree(value, spec, unpermitted)

    if isinstance(value, list):
        items = [_filter_tree(item, spec, unpermitted) for item in value if isinstance(item, Mapping)]
        if len(items) != len(value):
            unpermitted.append(key)
        return items

    return _DROP


class Parameters(Mapping):
    """Request parameter tree with permitted/unpermitted tracking"""

    def __init__(self, data: Optional[Mapping] = None, permitted: bool = False):
        self._data: Dict[str, Any] = _normalize(data or {})
        self._permitted = permitted

    @classmethod
    def from_json(cls, text) -> "Parameters":
        data = json.loads(text) if text else {}
        if not isinstance(data, dict):
            raise ValueError("request body must be a JSON object")
        return cls(data)

    @property
    def permitted(self) -> bool:
        return self._permitted

    def _convert(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            return Parameters(value, permitted=self._permitted)
        if isinstance(value, list):
            return [self._convert(v) for v in value]
        return value

    def __getitem__(self, key):
        return self._convert(self._data[str(key)])

    def __contains__(self, key) -> bool:
        return str(key) in self._data

    def __iter__(self):
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other) -> bool:
        if isinstance(other, Parameters):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == _normalize(other)
        return NotImplemented

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None

    def __repr__(self) -> str:
        return f"<Parameters {self._data!r} permitted: {self._permitted}>"

    def require(self, key):
        """
        Return the value at ``key`` or raise ``ParameterMissing``.

        Absent keys and blank values (None, False, empty or whitespace
        strings, empty trees and lists) are treated alike. A list of keys
        returns a list of values. The result is still unpermitted.
        """
        if isinstance(key, (list, tuple)):
            return [self.require(k) for k in key]

        key = str(key)
        value = self._data.get(key)
        if _is_blank(value):
            logger.debug("Required parameter missing", extra={"param": key})
            raise ParameterMissing(key)
        return self._convert(value)

    def require_tree(self, key) -> "Parameters":
        """``require`` for a root key that must hold a tree, as request bodies do"""
        value = self.require(key)
        if not isinstance(value, Parameters):
            logger.debug("Required parameter is not a tree", extra={"param": str(key)})
            raise ParameterTypeMismatch(str(key))
        return value

    def fetch(self, key, default=_MISSING):
        """Like ``require`` for presence only: blank values are returned, not rejected"""
        key = str(key)
        if key in self._data:
            return self._convert(self._data[key])
        if default is _MISSING:
            raise ParameterMissing(key)
        return self._convert(_normalize(default))

    def permit(self, *filters, **nested) -> "Parameters":
        """
        Return a permitted copy holding only the keys allowed by the filters.

        Positional names permit scalar values. Keyword arguments (or dicts
        passed positionally) permit nested trees filtered by their own
        spec; an empty list permits an array of scalars. Dropped keys are
        reported once per call.
        """
        spec: List[Any] = list(filters)
        if nested:
            spec.append(nested)

        unpermitted: List[str] = []
        output = _filter_tree(self._data, spec, unpermitted)

        if unpermitted:
            instrument_unpermitted_parameters(unpermitted)

        return Parameters(output, permitted=True)

    def permit_all(self) -> "Parameters":
        """Mark a copy of the whole tree as permitted without filtering it"""
        return Parameters(self._data, permitted=True)

    def to_dict(self) -> Dict[str, Any]:
        if not self._permitted:
            raise UnfilteredParameters()
        return _normalize(self._data)

    def to_unsafe_dict(self) -> Dict[str, Any]:
        return _normalize(self._data)
