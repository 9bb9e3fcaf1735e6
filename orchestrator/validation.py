"""
Input validation for holiday email requests.

Provides email extraction and the form validation used before a request is
sent to the webhook.
"""

import re
from dataclasses import dataclass, field

# Basic shape check, not RFC 5322
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
RECIPIENT_SEPARATORS = re.compile(r"[,\n]+")

HOLIDAY_NAME_REQUIRED = "Holiday name is required."
SENDER_NAME_REQUIRED = "Sender name is required."
RECIPIENTS_REQUIRED = "At least one recipient email is required."
RECIPIENTS_INVALID = "Please enter at least one valid email address."


@dataclass
class FormValidationResult:
    """Validation outcome with one message per invalid field."""

    errors: dict[str, str] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.errors


def is_valid_email(email: str) -> bool:
    """Check that a string looks like an email address. Whitespace is not trimmed."""
    return EMAIL_PATTERN.fullmatch(email) is not None


def extract_emails(raw: str) -> list[str]:
    """
    Split a comma or newline separated recipient string.

    Args:
        raw: Raw recipients text as typed by the user

    Returns:
        Trimmed, non-empty entries in input order
    """
    return [part.strip() for part in RECIPIENT_SEPARATORS.split(raw) if part.strip()]


def validate_form(
    holiday_name: str,
    sender_name: str,
    recipients: str,
) -> FormValidationResult:
    """
    Validate the required fields of a holiday email request.

    Recipients must contain at least one entry that looks like an email;
    other malformed entries are tolerated here and left to the webhook.

    Returns:
        FormValidationResult keyed by form field name
    """
    result = FormValidationResult()

    if not holiday_name.strip():
        result.errors["holidayName"] = HOLIDAY_NAME_REQUIRED

    if not sender_name.strip():
        result.errors["senderName"] = SENDER_NAME_REQUIRED

    if not recipients.strip():
        result.errors["recipients"] = RECIPIENTS_REQUIRED
    else:
        emails = extract_emails(recipients)
        if not emails:
            result.errors["recipients"] = RECIPIENTS_REQUIRED
        elif not any(is_valid_email(email) for email in emails):
            result.errors["recipients"] = RECIPIENTS_INVALID

    return result
