"""
Error taxonomy for the OkapiFlow core.

- DomainValidationError: input rejected before any store write.
- NotFoundError: the addressed Space or child entity does not exist.
- SchemaVersionError: the store on disk is newer than this code.
- CascadeError: a multi-step Space operation finished with some steps failed.

Store-layer failures are not wrapped; SQLAlchemy errors propagate as-is.
"""
from __future__ import annotations

from dataclasses import dataclass


class OkapiFlowError(Exception):
    """Base class for errors raised by the OkapiFlow core."""
    pass


class DomainValidationError(OkapiFlowError):
    """Raised when a command is rejected by domain validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(message)


class NotFoundError(OkapiFlowError):
    """Raised when an entity id does not resolve to a stored row."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} not found.")


class SchemaVersionError(OkapiFlowError):
    """Raised when the stored schema version is newer than the code's."""

    def __init__(self, store_name: str, stored_version: int, code_version: int):
        self.store_name = store_name
        self.stored_version = stored_version
        self.code_version = code_version
        super().__init__(
            f"Store '{store_name}' is at schema version {stored_version}, "
            f"this build only understands up to {code_version}"
        )


@dataclass
class FailedStep:
    """One step of a cascading operation that raised."""
    step: str
    error: BaseException


class CascadeError(OkapiFlowError):
    """
    Raised when a cascading Space operation partially failed.

    Nothing is rolled back: the steps listed in ``failed`` left their
    collections untouched, every other step completed. Repeating the
    operation is safe.
    """

    def __init__(
        self,
        operation: str,
        space_id: str,
        failed: list[FailedStep],
        *,
        partial_space_id: str | None = None,
    ):
        self.operation = operation
        self.space_id = space_id
        self.failed = failed
        self.partial_space_id = partial_space_id
        steps = ", ".join(f.step for f in failed)
        super().__init__(
            f"{operation} of space {space_id} incomplete; failed steps: {steps}"
        )
