"""Location catalog exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound, ValidationFailed


class InvalidWilaya(ValidationFailed):
    """Wilaya id must be between 1 and 58."""

    code = "INVALID_WILAYA"


class WilayaNotFound(NotFound):
    """The requested wilaya does not exist."""

    code = "WILAYA_NOT_FOUND"


class InvalidBaladiya(ValidationFailed):
    """The baladiya does not exist or does not belong to the wilaya."""

    code = "INVALID_BALADIYA"


class InvalidSearchQuery(ValidationFailed):
    """Search query must be at least 2 characters long."""

    code = "INVALID_QUERY"
