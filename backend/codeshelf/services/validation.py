"""
CodeShelf Backend — Snippet Field Validation
==============================================

What:  Trim / lowercase / length rules for snippet content fields.
How:   One normalizer per field. `validate_create` and `validate_update`
       apply them to request payloads; the ORM model applies the same
       normalizers on every attribute assignment, so a value can never reach
       the table without passing through them.
Who:   SnippetService (payload checks) and models.snippet (store constraint).

Rules:
    title     required, trimmed, at most TITLE_MAX_LENGTH characters
    language  required, trimmed, lowercased
    code      required, trimmed, no maximum
"""

from typing import Any, Callable, Dict, Mapping

from codeshelf.exceptions import ValidationError

TITLE_MAX_LENGTH = 100

CONTENT_FIELDS = ("title", "language", "code")

REQUIRED_MESSAGE = "Title, language, and code are required."


def _trimmed(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(message=f"{field.capitalize()} must be a string", field=field)
    value = value.strip()
    if not value:
        raise ValidationError(
            message=f"{field.capitalize()} cannot be empty",
            field=field,
            missing={name: name == field for name in CONTENT_FIELDS},
        )
    return value


def normalize_title(value: Any) -> str:
    title = _trimmed("title", value)
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(
            message=f"Title cannot be more than {TITLE_MAX_LENGTH} characters",
            field="title",
            context={"max_length": TITLE_MAX_LENGTH, "length": len(title)},
        )
    return title


def normalize_language(value: Any) -> str:
    return _trimmed("language", value).lower()


def normalize_code(value: Any) -> str:
    return _trimmed("code", value)


NORMALIZERS: Dict[str, Callable[[Any], str]] = {
    "title": normalize_title,
    "language": normalize_language,
    "code": normalize_code,
}


def normalize_field(field: str, value: Any) -> str:
    """Runs the normalizer registered for `field`."""
    return NORMALIZERS[field](value)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_create(payload: Mapping[str, Any]) -> Dict[str, str]:
    """
    Validate and normalize a create payload.

    Every content field is required. Absent, null and whitespace-only values
    are reported together in the `missing` map before any other rule runs.

    Returns:
        {title, language, code} normalized and ready to store.

    Raises:
        ValidationError: a field is missing, not a string, or too long.
    """
    missing = {field: _is_blank(payload.get(field)) for field in CONTENT_FIELDS}
    if any(missing.values()):
        raise ValidationError(message=REQUIRED_MESSAGE, missing=missing)

    return {field: normalize_field(field, payload[field]) for field in CONTENT_FIELDS}


def validate_update(payload: Mapping[str, Any]) -> Dict[str, str]:
    """
    Validate and normalize a partial update payload.

    Only supplied fields are returned; a field sent as null counts as not
    supplied. Supplied fields follow the same rules as on create.
    """
    return {
        field: normalize_field(field, payload[field])
        for field in CONTENT_FIELDS
        if payload.get(field) is not None
    }
