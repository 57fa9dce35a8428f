# -*- coding: utf-8 -*-
"""
Validation Strategy Pattern - Abstract interface for wizard step validation.

Each strategy maps a record (the slice of the draft a step owns) to a
field-path -> message error map. Strategies are pure: they never mutate
the record and keep no state between calls.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Tuple, Type

from pydantic import BaseModel, ValidationError

# Key used when pydantic reports an error that is not tied to a field
SCHEMA_ERROR_KEY = "_schema"


class ValidationStrategy(ABC):
    """
    Abstract base class for validation strategies.
    """

    @abstractmethod
    def fields(self) -> Tuple[str, ...]:
        """Names of the draft fields this strategy looks at."""
        pass

    @abstractmethod
    def validate(self, record: Mapping[str, Any]) -> Dict[str, str]:
        """
        Validate a record and return its error map.

        Args:
            record: Mapping containing the fields to validate

        Returns:
            Dotted field path -> message (empty dict if valid)
        """
        pass

    def is_valid(self, record: Mapping[str, Any]) -> bool:
        """Check if record is valid."""
        return len(self.validate(record)) == 0


class NoValidationStrategy(ValidationStrategy):
    """Strategy for steps without required fields: always valid."""

    def fields(self) -> Tuple[str, ...]:
        return ()

    def validate(self, record: Mapping[str, Any]) -> Dict[str, str]:
        return {}


class SchemaValidationStrategy(ValidationStrategy):
    """
    Validates a record against a pydantic model.

    Only the model's own fields are read from the record; fields holding
    None are treated as absent so model defaults and "Field required"
    apply.
    """

    def __init__(self, schema: Type[BaseModel]):
        self.schema = schema

    def fields(self) -> Tuple[str, ...]:
        return tuple(self.schema.model_fields.keys())

    def validate(self, record: Mapping[str, Any]) -> Dict[str, str]:
        data = {
            name: record[name]
            for name in self.fields()
            if name in record and record[name] is not None
        }
        try:
            self.schema.model_validate(data)
        except ValidationError as e:
            return flatten_errors(e)
        return {}


def flatten_errors(error: ValidationError) -> Dict[str, str]:
    """
    Turn pydantic errors into a dotted path -> message map.

    The first message reported for a path wins.
    """
    errors: Dict[str, str] = {}
    for item in error.errors():
        path = ".".join(str(part) for part in item.get("loc", ())) or SCHEMA_ERROR_KEY
        message = item.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators with "Value error, "
        if item.get("type") == "value_error" and message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(path, message)
    return errors
