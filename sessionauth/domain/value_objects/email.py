"""A Value Object representing an email address in the domain.

Emails are normalized (stripped and lower-cased) before they are compared or
stored. This normalization is applied once here and used by every entry point
(registration, login, OAuth provisioning, profile update), so that
``Alice@Example.com`` and ``alice@example.com`` always refer to the same
account.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

from structlog import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Email:
    """An immutable, self-validating, normalized email address.

    Raises:
        TypeError: If the value is not a string.
        ValueError: If the value is too long, too short or malformed.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 254
    MIN_LENGTH: ClassVar[int] = 3
    EMAIL_PATTERN: ClassVar[re.Pattern] = re.compile(
        r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    )

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise TypeError("Email value must be a string.")

        normalized_value = self.normalize(self.value)
        object.__setattr__(self, "value", normalized_value)

        if not (self.MIN_LENGTH <= len(normalized_value) <= self.MAX_LENGTH):
            raise ValueError(
                f"Email length must be between {self.MIN_LENGTH} and {self.MAX_LENGTH} characters."
            )
        if not self.EMAIL_PATTERN.match(normalized_value):
            raise ValueError("Invalid email format.")

    @staticmethod
    def normalize(value: str) -> str:
        """Canonical form used for storage and lookups."""
        return value.strip().lower()

    def mask_for_logging(self) -> str:
        """Returns a masked version of the email for safe logging.

        Example: 'al***@e*********m'
        """
        local, domain_part = self.value.split("@")
        masked_local = f"{local[:2]}{'*' * max(len(local) - 2, 0)}"
        masked_domain = f"{domain_part[:1]}{'*' * max(len(domain_part) - 2, 0)}{domain_part[-1:]}"
        return f"{masked_local}@{masked_domain}"

    def __str__(self) -> str:
        return self.value


def mask_email(value: str) -> str:
    """Mask a raw, possibly invalid, email string for logging."""
    try:
        return Email(value).mask_for_logging()
    except (TypeError, ValueError):
        return "<invalid>"
