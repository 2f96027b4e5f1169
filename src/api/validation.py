"""Declarative request validation.

Each route declares a list of ``FieldRule`` checks. ``RequestValidator``
runs all of them against the raw JSON payload, so the client sees every
problem at once, and only a fully valid payload reaches the route.
"""

import json
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import email_validator
from email_validator import EmailNotValidError, validate_email
from fastapi import Request

from src.api.errors import FieldError, RequestValidationError

PASSWORD_MIN_LENGTH = 4
PASSWORD_MAX_LENGTH = 20

# Emails are checked for syntax only, so reserved domains (.test, .local,
# .invalid) are valid. The library reads this list on every call.
email_validator.SPECIAL_USE_DOMAIN_NAMES = []


@dataclass(frozen=True)
class FieldRule:
    """A single check against one payload field.

    Attributes:
        field: Payload key to check.
        message: Failure message reported to the client.
        check: Predicate over the (sanitized) value; True means valid.
        sanitize: Optional transform applied before the check and kept in
            the validated payload.
    """

    field: str
    message: str
    check: Callable[[Any], bool]
    sanitize: Callable[[Any], Any] | None = None


def trim(value: Any) -> Any:
    """Strip surrounding whitespace from strings."""
    return value.strip() if isinstance(value, str) else value


def is_present(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def is_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def length_between(minimum: int, maximum: int) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        return isinstance(value, str) and minimum <= len(value) <= maximum

    return check


class RequestValidator:
    """Runs a fixed list of field rules over a payload."""

    def __init__(self, rules: Sequence[FieldRule]) -> None:
        self._rules = tuple(rules)

    @property
    def fields(self) -> tuple[str, ...]:
        """Payload fields covered by the rules, in declaration order."""
        return tuple(dict.fromkeys(rule.field for rule in self._rules))

    def validate(self, payload: Any) -> dict[str, Any]:
        """Validate a payload against every rule.

        Args:
            payload: Decoded request body. Anything other than a mapping is
                treated as an empty payload.

        Returns:
            The declared fields, sanitized.

        Raises:
            RequestValidationError: With every failed rule, in order.
        """
        source: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}
        values = {field: source.get(field) for field in self.fields}
        errors: list[FieldError] = []

        for rule in self._rules:
            if rule.sanitize is not None:
                values[rule.field] = rule.sanitize(values[rule.field])
            if not rule.check(values[rule.field]):
                errors.append(
                    FieldError(field=rule.field, message=rule.message, value=values[rule.field])
                )

        if errors:
            raise RequestValidationError(errors)

        return values


_EMAIL_RULES = [
    FieldRule("email", "Email must be provided", is_present),
    FieldRule("email", "Email must be valid", is_email),
]

SIGNUP_VALIDATOR = RequestValidator(
    [
        *_EMAIL_RULES,
        FieldRule("password", "You must supply a password", is_present, sanitize=trim),
        FieldRule(
            "password",
            f"Password must be between {PASSWORD_MIN_LENGTH} and "
            f"{PASSWORD_MAX_LENGTH} characters",
            length_between(PASSWORD_MIN_LENGTH, PASSWORD_MAX_LENGTH),
            sanitize=trim,
        ),
    ]
)

SIGNIN_VALIDATOR = RequestValidator(
    [
        *_EMAIL_RULES,
        FieldRule("password", "You must supply a password", is_present, sanitize=trim),
    ]
)


async def read_json_body(request: Request) -> Any:
    """Decode a JSON request body, treating a missing or bad body as empty."""
    body = await request.body()
    if not body:
        return {}
    try:
        return json.loads(body)
    except ValueError:
        return {}
