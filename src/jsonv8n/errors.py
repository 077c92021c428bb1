"""Fatal error channel: compile, decode and registry failures.

Data problems never raise; they become violations. Everything here signals that the
schema, the input bytes or the process-wide registries are unusable.
"""

from __future__ import annotations

from jsonv8n.constants import FMT_WRAPPED


class JsonV8nError(Exception):
    """Base class for every fatal error raised by the package."""


class CompileError(JsonV8nError, ValueError):
    """Structured schema compilation failure."""

    message: str
    field_name: str | None
    property_name: str | None
    record: str | None

    def __init__(
        self,
        *,
        message: str,
        field_name: str | None = None,
        property_name: str | None = None,
        record: str | None = None,
    ) -> None:
        self.message = message
        self.field_name = field_name
        self.property_name = property_name
        self.record = record
        if field_name is not None:
            rendered = FMT_WRAPPED.format(field_name, property_name or field_name, message)
        else:
            rendered = message
        if record is not None:
            rendered = f"{record}: {rendered}"
        super().__init__(rendered)

    def located(
        self,
        *,
        field_name: str,
        property_name: str,
        record: str | None = None,
    ) -> CompileError:
        """Return a copy of this error attributed to a record field."""

        if self.field_name is not None:
            if record is not None and self.record is None:
                return type(self)(
                    message=self.message,
                    field_name=self.field_name,
                    property_name=self.property_name,
                    record=record,
                )
            return self
        return type(self)(
            message=self.message,
            field_name=field_name,
            property_name=property_name,
            record=record if record is not None else self.record,
        )


class TagSyntaxError(CompileError):
    """Raised for unbalanced quotes/brackets and malformed presence expressions."""

    position: int | None

    def __init__(
        self,
        *,
        message: str,
        position: int | None = None,
        field_name: str | None = None,
        property_name: str | None = None,
        record: str | None = None,
    ) -> None:
        self.position = position
        super().__init__(
            message=message,
            field_name=field_name,
            property_name=property_name,
            record=record,
        )

    def located(
        self,
        *,
        field_name: str,
        property_name: str,
        record: str | None = None,
    ) -> CompileError:
        if self.field_name is not None:
            return self
        return TagSyntaxError(
            message=self.message,
            position=self.position,
            field_name=field_name,
            property_name=property_name,
            record=record if record is not None else self.record,
        )


class DecodeError(JsonV8nError, ValueError):
    """Raised when input bytes cannot be decoded or bound to a record target."""

    message: str
    position: int | None
    target: str | None

    def __init__(
        self,
        *,
        message: str,
        position: int | None = None,
        target: str | None = None,
    ) -> None:
        self.message = message
        self.position = position
        self.target = target
        rendered = message
        if target is not None:
            rendered = f"{target}: {rendered}"
        if position is not None:
            rendered = f"{rendered} (at position {position})"
        super().__init__(rendered)


class RegistryError(JsonV8nError, KeyError):
    """Raised when a registry entry already exists and overwrite was not requested."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


__all__ = [
    "CompileError",
    "DecodeError",
    "JsonV8nError",
    "RegistryError",
    "TagSyntaxError",
]
