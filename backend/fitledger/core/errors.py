"""
Errors raised by the activity core and mapped to HTTP responses in main.py.
"""


class FitLedgerError(Exception):
    """Base class for core errors."""
    pass


class NotFoundError(FitLedgerError):
    """
    Entity does not exist or belongs to another user.

    The two cases are deliberately indistinguishable to the caller.
    """

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ConflictError(FitLedgerError):
    """Unique field already taken (username, email)."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"{field_name} already in use")
