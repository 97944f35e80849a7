"""
Bookshelf Backend: Book Schema Validator
=========================================

What:  Validates POST/PUT request bodies against fixed JSON Schemas.
How:   jsonschema's Draft7Validator collects every violation; each one is
       rendered as a short human-readable message and the list is sorted by
       the declared field order.
Who:   Called by the books router before any store access.

Message phrasing:
    missing required   → instance requires property "isbn"
    wrong type         → instance.pages is not of a type(s) integer
    out of range       → instance.pages must be less than or equal to 2147483647
    non-object body    → instance is not of a type(s) object

Schemas:
    create  requires all eight fields.
    update  requires every field except isbn; an isbn in the body is accepted
            and then ignored by the update statement. Unknown properties are
            allowed on both (ignored, not stripped).
"""

import logging
from typing import Any, Dict, List, Tuple

from jsonschema import Draft7Validator, validators
from jsonschema.exceptions import ValidationError as SchemaViolation

from bookshelf.exceptions import ValidationError
from bookshelf.models.book import BOOK_FIELDS, BOOK_UPDATE_FIELDS

logger = logging.getLogger(__name__)

# Columns are 4-byte INTEGER; larger values would fail at the store instead of here
INT_MAX = 2147483647

_STRING = {"type": "string"}
_COUNT = {"type": "integer", "minimum": 0, "maximum": INT_MAX}

_PROPERTY_SCHEMAS = {
    "isbn": _STRING,
    "amazon_url": _STRING,
    "author": _STRING,
    "language": _STRING,
    "pages": _COUNT,
    "publisher": _STRING,
    "title": _STRING,
    "year": _COUNT,
}


def _is_strict_integer(checker: Any, instance: Any) -> bool:
    """Draft 7 accepts 687.0 as an integer; the store driver does not."""
    return isinstance(instance, int) and not isinstance(instance, bool)


BookSchemaValidator = validators.extend(
    Draft7Validator,
    type_checker=Draft7Validator.TYPE_CHECKER.redefine("integer", _is_strict_integer),
)

BOOK_CREATE_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "BookNew",
    "type": "object",
    "properties": {name: dict(_PROPERTY_SCHEMAS[name]) for name in BOOK_FIELDS},
    "required": list(BOOK_FIELDS),
}

BOOK_UPDATE_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "BookUpdate",
    "type": "object",
    "properties": {name: dict(_PROPERTY_SCHEMAS[name]) for name in BOOK_FIELDS},
    "required": list(BOOK_UPDATE_FIELDS),
}


def _location(error: SchemaViolation) -> str:
    """instance, instance.pages, instance.tags.0 ..."""
    return ".".join(["instance", *(str(part) for part in error.absolute_path)])


class BookValidator:
    """
    Renders jsonschema violations for book payloads.

    Validators are compiled once; both are safe to share across requests.
    """

    def __init__(self) -> None:
        self._validators: Dict[int, Any] = {}
        for schema in (BOOK_CREATE_SCHEMA, BOOK_UPDATE_SCHEMA):
            BookSchemaValidator.check_schema(schema)
            self._validators[id(schema)] = BookSchemaValidator(schema)

    def validate(self, data: Any, schema: Dict[str, Any]) -> List[str]:
        """
        Return every violation of ``schema`` in ``data`` as a message list.

        An empty list means the payload is valid. Messages are ordered by the
        position of the offending property in the schema's ``properties``;
        body-level problems (not an object) come first.
        """
        validator = self._validators.get(id(schema)) or BookSchemaValidator(schema)
        order = list(schema.get("properties", {}))

        def rank(name: str) -> int:
            return order.index(name) if name in order else len(order)

        found: List[Tuple[int, str]] = []
        reported_missing = set()

        for error in validator.iter_errors(data):
            if error.validator == "required":
                # One error per missing property; recover names in declared order
                for name in error.validator_value:
                    if name not in error.instance and name not in reported_missing:
                        reported_missing.add(name)
                        found.append((rank(name), f'instance requires property "{name}"'))
                continue

            field = str(error.absolute_path[0]) if error.absolute_path else None
            position = rank(field) if field is not None else -1
            if error.validator == "type":
                expected = error.validator_value
                if isinstance(expected, list):
                    expected = ",".join(expected)
                message = f"{_location(error)} is not of a type(s) {expected}"
            elif error.validator == "maximum":
                message = f"{_location(error)} must be less than or equal to {error.validator_value}"
            elif error.validator == "minimum":
                message = f"{_location(error)} must be greater than or equal to {error.validator_value}"
            else:
                message = f"{_location(error)} {error.message}"
            found.append((position, message))

        found.sort(key=lambda item: item[0])
        return [message for _, message in found]

    def ensure_valid(self, data: Any, schema: Dict[str, Any]) -> None:
        """Raise ValidationError carrying all violations, if there are any."""
        messages = self.validate(data, schema)
        if messages:
            logger.debug("%s rejected: %s", schema.get("title", "payload"), messages)
            raise ValidationError(messages, context={"schema": schema.get("title")})

    def validate_create(self, data: Any) -> None:
        """POST /books body: all eight fields required."""
        self.ensure_valid(data, BOOK_CREATE_SCHEMA)

    def validate_update(self, data: Any) -> None:
        """PUT /books/{isbn} body: every field but isbn required."""
        self.ensure_valid(data, BOOK_UPDATE_SCHEMA)


book_validator = BookValidator()
