"""jsonv8n: declarative JSON validation driven by ``v8n`` tags on record fields.

Importing the package has no side effects beyond populating the built-in constraint registry;
logging and configuration are only set up by the command line front end.
"""

from jsonv8n.compiler import (
    CompileOptions,
    compile_validator,
    properties_repo_reset,
    register_properties,
    register_property,
)
from jsonv8n.constraints import (
    Constraint,
    ConstraintSet,
    CustomConstraint,
    SetConditionFrom,
    SetConditionProperty,
    get_registered_constraint,
    register_constraint,
    register_constraints,
    register_named_constraint,
    register_named_constraints,
    registry_has,
    registry_reset,
)
from jsonv8n.descriptors import FieldDescriptor, RecordDescriptor, describe, load_descriptors
from jsonv8n.errors import CompileError, DecodeError, JsonV8nError, RegistryError, TagSyntaxError
from jsonv8n.http import validate_request, validate_request_into
from jsonv8n.messages import MappingMessageSource, reset_message_source, set_message_source
from jsonv8n.schema import ConditionalVariant, ObjectValidator, PropertyValidator
from jsonv8n.tags.extensions import register_custom_tag_token, register_tag_token_alias
from jsonv8n.tags.parser import parse_tag
from jsonv8n.validation import (
    validate,
    validate_bytes,
    validate_into,
    validate_reader,
    validate_reader_into,
    validate_string,
    validate_string_into,
)
from jsonv8n.values import JsonKind, JsonNumber
from jsonv8n.violations import Violation, ViolationCode, sort_violations

__version__ = "0.1.0"

__all__ = [
    "CompileError",
    "CompileOptions",
    "ConditionalVariant",
    "Constraint",
    "ConstraintSet",
    "CustomConstraint",
    "DecodeError",
    "FieldDescriptor",
    "JsonKind",
    "JsonNumber",
    "JsonV8nError",
    "MappingMessageSource",
    "ObjectValidator",
    "PropertyValidator",
    "RecordDescriptor",
    "RegistryError",
    "SetConditionFrom",
    "SetConditionProperty",
    "TagSyntaxError",
    "Violation",
    "ViolationCode",
    "__version__",
    "compile_validator",
    "describe",
    "get_registered_constraint",
    "load_descriptors",
    "parse_tag",
    "properties_repo_reset",
    "register_constraint",
    "register_constraints",
    "register_custom_tag_token",
    "register_named_constraint",
    "register_named_constraints",
    "register_properties",
    "register_property",
    "register_tag_token_alias",
    "registry_has",
    "registry_reset",
    "reset_message_source",
    "set_message_source",
    "sort_violations",
    "validate",
    "validate_bytes",
    "validate_into",
    "validate_reader",
    "validate_reader_into",
    "validate_request",
    "validate_request_into",
    "validate_string",
    "validate_string_into",
]
