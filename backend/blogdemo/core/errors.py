"""
Errors raised by parameter filtering and mass assignment
"""
from typing import Any, Iterable, List, Optional


class ParametersError(Exception):
    """Base class for request parameter errors"""


class ParameterMissing(ParametersError, KeyError):
    """Raised by ``Parameters.require`` when a key is absent or its value is blank"""

    def __init__(self, param: str):
        self.param = param
        super().__init__(param)

    def __str__(self) -> str:
        return f"param is missing or the value is empty: {self.param}"


class UnpermittedParameters(ParametersError):
    """Raised when ``action_on_unpermitted_parameters`` is ``raise`` and keys were dropped"""

    def __init__(self, params: Iterable[str]):
        self.params: List[str] = list(params)
        super().__init__(f"found unpermitted parameters: {', '.join(self.params)}")


class ParameterTypeMismatch(ParameterMissing):
    """Raised when a required key holds a scalar where a tree is expected"""

    def __str__(self) -> str:
        return f"param is not a tree: {self.param}"


class UnfilteredParameters(ParametersError):
    """Raised when an unpermitted tree is converted to a plain dict"""

    def __init__(self):
        super().__init__("unable to convert unpermitted parameters to dict")


class ModelError(Exception):
    """Base class for mass-assignment errors"""


class ForbiddenAttributesError(ModelError):
    """Unfiltered parameters were passed to model construction or update"""


class UnknownAttributeError(ModelError):
    """A permitted key has no matching attribute on the model"""

    def __init__(self, record: Any, attribute: str):
        self.record = record
        self.attribute = attribute
        super().__init__(f"unknown attribute: {attribute}")


class InvalidAttributeValue(ModelError):
    """A string value cannot be cast to the column's type"""

    def __init__(self, record: Any, attribute: str, python_type: type):
        self.record = record
        self.attribute = attribute
        super().__init__(f"invalid value for {attribute}: expected {python_type.__name__}")


class RecordNotFound(ModelError, LookupError):
    """A nested attributes ``id`` does not match an associated record"""

    def __init__(self, model: str, record_id: Any, owner: Optional[str] = None):
        self.model = model
        self.record_id = record_id
        self.owner = owner
        message = f"Couldn't find {model} with id={record_id}"
        if owner:
            message = f"{message} for {owner}"
        super().__init__(message)
