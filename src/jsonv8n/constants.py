"""Stable message texts, tag token names and defaults shared across the validator."""

from __future__ import annotations

from typing import Final

# Tag channels.
TAG_NAME_V8N: Final[str] = "v8n"
TAG_NAME_V8N_AS: Final[str] = "v8n_as"
TAG_NAME_JSON: Final[str] = "json"

# Property and object walk messages.
MSG_MISSING_PROPERTY: Final[str] = "Missing property"
MSG_UNKNOWN_PROPERTY: Final[str] = "Unknown property"
MSG_UNWANTED_PROPERTY: Final[str] = "Property must not be present"
MSG_INVALID_PROPERTY: Final[str] = "Invalid property"
MSG_INVALID_PROPERTY_NAME: Final[str] = "Invalid property name"
MSG_ONLY_PROPERTY: Final[str] = "Property must be the only property"
MSG_VALUE_CANNOT_BE_NULL: Final[str] = "Value cannot be null"
FMT_VALUE_EXPECTED_TYPE: Final[str] = "Value expected to be of type {0}"
MSG_VALUE_MUST_BE_OBJECT: Final[str] = "Value must be an object"
MSG_VALUE_MUST_BE_ARRAY: Final[str] = "Value must be an array"
MSG_VALUE_MUST_BE_OBJECT_OR_ARRAY: Final[str] = "Value must be an object or array"
FMT_ARRAY_ELEMENT_MUST_BE_OBJECT: Final[str] = "JsonArray element [{0}] must be an object"
MSG_PROPERTY_VALUE_MUST_BE_OBJECT: Final[str] = "Property value must be an object"

# Decode stage messages ("JSON" for readers/strings, "Request body" for requests).
MSG_UNABLE_TO_DECODE: Final[str] = "Unable to decode as JSON"
MSG_NOT_JSON_NULL: Final[str] = "JSON must not be JSON null"
MSG_NOT_JSON_ARRAY: Final[str] = "JSON must not be JSON array"
MSG_NOT_JSON_OBJECT: Final[str] = "JSON must not be JSON object"
MSG_EXPECTED_JSON_ARRAY: Final[str] = "JSON expected to be JSON array"
MSG_EXPECTED_JSON_OBJECT: Final[str] = "JSON expected to be JSON object"
MSG_ERROR_READING: Final[str] = "Unexpected error reading reader"
MSG_ERROR_UNMARSHALLING: Final[str] = "Unexpected error during unmarshalling"
MSG_REQUEST_BODY_EMPTY: Final[str] = "Request body is empty"
MSG_UNABLE_TO_DECODE_REQUEST: Final[str] = "Unable to decode request body as JSON"
MSG_REQUEST_BODY_NOT_JSON_NULL: Final[str] = "Request body must not be JSON null"
MSG_REQUEST_BODY_NOT_JSON_ARRAY: Final[str] = "Request body must not be JSON array"
MSG_REQUEST_BODY_NOT_JSON_OBJECT: Final[str] = "Request body must not be JSON object"
MSG_REQUEST_BODY_EXPECTED_JSON_ARRAY: Final[str] = "Request body expected to be JSON array"
MSG_REQUEST_BODY_EXPECTED_JSON_OBJECT: Final[str] = "Request body expected to be JSON object"

# Constraint default messages.
MSG_NOT_EMPTY: Final[str] = "Value must not be empty"
MSG_NOT_EMPTY_STRING: Final[str] = "String value must not be an empty string"
MSG_NOT_BLANK_STRING: Final[str] = "String value must not be a blank string"
MSG_NO_CONTROL_CHARS: Final[str] = "String value must not contain control characters"
MSG_VALID_PATTERN: Final[str] = "String value must have valid pattern"
FMT_UNKNOWN_PRESET_PATTERN: Final[str] = "Unknown preset pattern '{0}'"
FMT_VALID_TOKEN: Final[str] = 'String value must be valid token - "{0}"'
MSG_INVALID_CHARACTERS: Final[str] = "String value must not have invalid characters"
FMT_STRING_MIN_LEN: Final[str] = "String value length must be at least {0} characters"
FMT_STRING_MIN_LEN_EXC: Final[str] = "String value length must be greater than {0} characters"
FMT_STRING_MAX_LEN: Final[str] = "String value length must not exceed {0} characters"
FMT_STRING_MAX_LEN_EXC: Final[str] = "String value length must be less than {0} characters"
FMT_STRING_EXACT_LEN: Final[str] = "String value length must be {0} characters"
FMT_STRING_MIN_MAX_LEN: Final[str] = "String value length must be between {0} ({1}) and {2} ({3})"
MSG_STRING_LOWERCASE: Final[str] = "String value must contain only lowercase letters"
MSG_STRING_UPPERCASE: Final[str] = "String value must contain only uppercase letters"
MSG_STRING_VALID_JSON: Final[str] = "String value must be valid JSON"
FMT_STRING_CONTAINS: Final[str] = "String must contain {0}"
FMT_STRING_NOT_CONTAINS: Final[str] = "String must not contain {0}"
FMT_STRING_STARTS_WITH: Final[str] = "String value must start with {0}"
FMT_STRING_NOT_STARTS_WITH: Final[str] = "String value must not start with {0}"
FMT_STRING_ENDS_WITH: Final[str] = "String value must end with {0}"
FMT_STRING_NOT_ENDS_WITH: Final[str] = "String value must not end with {0}"
FMT_MIN_LEN: Final[str] = "Value length must be at least {0}"
FMT_MIN_LEN_EXC: Final[str] = "Value length must be greater than {0}"
FMT_EXACT_LEN: Final[str] = "Value length must be {0}"
FMT_MIN_MAX_LEN: Final[str] = "Value length must be between {0} ({1}) and {2} ({3})"
MSG_POSITIVE: Final[str] = "Value must be positive"
MSG_POSITIVE_OR_ZERO: Final[str] = "Value must be positive or zero"
MSG_NEGATIVE: Final[str] = "Value must be negative"
MSG_NEGATIVE_OR_ZERO: Final[str] = "Value must be negative or zero"
MSG_NULL: Final[str] = "Value must be null"
FMT_GT: Final[str] = "Value must be greater than {0}"
FMT_GTE: Final[str] = "Value must be greater than or equal to {0}"
FMT_LT: Final[str] = "Value must be less than {0}"
FMT_LTE: Final[str] = "Value must be less than or equal to {0}"
FMT_RANGE: Final[str] = "Value must be between {0} ({1}) and {2} ({3})"
FMT_MULTIPLE_OF: Final[str] = "Value must be a multiple of {0}"
FMT_ARRAY_ELEMENT_TYPE: Final[str] = "Array elements must be of type {0}"
FMT_ARRAY_ELEMENT_TYPE_OR_NULL: Final[str] = "Array elements must be of type {0} or null"
MSG_ARRAY_UNIQUE: Final[str] = "Array elements must be unique"
FMT_ARRAY_DISTINCT_PROPERTY: Final[str] = (
    "Array elements must have distinct values for property '{0}'"
)
MSG_VALID_UUID: Final[str] = "Value must be a valid UUID"
FMT_UUID_MIN_VERSION: Final[str] = "Value must be a valid UUID (minimum version {0})"
FMT_UUID_CORRECT_VERSION: Final[str] = "Value must be a valid UUID (version {0})"
MSG_VALID_EMAIL: Final[str] = "Value must be an email address"
FMT_EQUALS_OTHER: Final[str] = "Value must equal the value of property '{0}'"
FMT_NOT_EQUALS_OTHER: Final[str] = "Value must not equal the value of property '{0}'"
FMT_GT_OTHER: Final[str] = "Value must be greater than value of property '{0}'"
FMT_GTE_OTHER: Final[str] = "Value must be greater than or equal to value of property '{0}'"
FMT_LT_OTHER: Final[str] = "Value must be less than value of property '{0}'"
FMT_LTE_OTHER: Final[str] = "Value must be less than or equal to value of property '{0}'"
FMT_DT_GT: Final[str] = "Value must be after '{0}'"
FMT_DT_GTE: Final[str] = "Value must be after or equal to '{0}'"
FMT_DT_LT: Final[str] = "Value must be before '{0}'"
FMT_DT_LTE: Final[str] = "Value must be before or equal to '{0}'"
FMT_STR_GT: Final[str] = "Value must be greater than '{0}'"
FMT_STR_GTE: Final[str] = "Value must be greater than or equal to '{0}'"
FMT_STR_LT: Final[str] = "Value must be less than '{0}'"
FMT_STR_LTE: Final[str] = "Value must be less than or equal to '{0}'"
MSG_VALID_CARD_NUMBER: Final[str] = "Value must be a valid card number"
MSG_UNICODE_NORMALIZATION_NFC: Final[str] = "String value must be correct normalization form NFC"
MSG_UNICODE_NORMALIZATION_NFKC: Final[str] = "String value must be correct normalization form NFKC"
MSG_UNICODE_NORMALIZATION_NFD: Final[str] = "String value must be correct normalization form NFD"
MSG_UNICODE_NORMALIZATION_NFKD: Final[str] = "String value must be correct normalization form NFKD"
MSG_FAILURE: Final[str] = "Validation failed"
MSG_VALID_ISO_DATE: Final[str] = "Value must be a valid date string (format: YYYY-MM-DD)"
MSG_VALID_ISO_DATETIME: Final[str] = (
    "Value must be a valid date/time string (format: YYYY-MM-DDThh:mm:ss.sss[Z|+-hh:mm])"
)
MSG_DATETIME_FUTURE: Final[str] = "Value must be a valid date/time in the future"
MSG_DATETIME_FUTURE_OR_PRESENT: Final[str] = (
    "Value must be a valid date/time in the future or present"
)
MSG_DATETIME_PAST: Final[str] = "Value must be a valid date/time in the past"
MSG_DATETIME_PAST_OR_PRESENT: Final[str] = "Value must be a valid date/time in the past or present"
MSG_DATETIME_DAY_OF_WEEK: Final[str] = "Value must be a valid day of week"
MSG_VALID_IP: Final[str] = "Value must be a valid IP address"
MSG_VALID_CIDR: Final[str] = "Value must be a valid CIDR address"
MSG_VALID_HOSTNAME: Final[str] = "Value must be a valid hostname"
MSG_VALID_URL: Final[str] = "Value must be a valid URL"

# Words substituted into range messages.
TOKEN_INCLUSIVE: Final[str] = "inclusive"
TOKEN_EXCLUSIVE: Final[str] = "exclusive"

# Tag DSL compile error texts (always prefixed with MSG_V8N_PREFIX).
MSG_V8N_PREFIX: Final[str] = f"tag {TAG_NAME_V8N} - "
FMT_UNKNOWN_PROPERTY_TYPE: Final[str] = MSG_V8N_PREFIX + "unknown property type '{0}'"
FMT_UNKNOWN_TOKEN: Final[str] = MSG_V8N_PREFIX + "unknown token '{0}'"
FMT_UNEXPECTED_COLON: Final[str] = MSG_V8N_PREFIX + "unexpected ':' colon after token '{0}'"
FMT_EXPECTED_COLON: Final[str] = MSG_V8N_PREFIX + "expected ':' colon after token '{0}'"
FMT_CONSTRAINTS_FORMAT: Final[str] = (
    MSG_V8N_PREFIX + "must specify constraints in the format '&name{{}}' (found \"{0}\")"
)
FMT_CONDITIONAL_CONSTRAINTS_FORMAT: Final[str] = (
    MSG_V8N_PREFIX
    + "must specify conditional constraints in the format '&[token,...]name{{}}'"
    + " or '&<expr>name{{}}' (found \"{0}\")"
)
FMT_CONDITIONAL_EXPR: Final[str] = (
    MSG_V8N_PREFIX + 'invalid other properties expression "{0}" - {1}'
)
FMT_UNKNOWN_CONSTRAINT: Final[str] = MSG_V8N_PREFIX + "contains unknown constraint '{0}'"
FMT_CONSTRAINT_FIELD_UNKNOWN: Final[str] = (
    MSG_V8N_PREFIX + "constraint '{0}{{}}' field '{1}' is unknown or not assignable"
)
FMT_CONSTRAINT_FIELD_INVALID_VALUE: Final[str] = (
    MSG_V8N_PREFIX + "constraint '{0}{{}}' field '{1}' cannot be assigned with value specified"
)
FMT_CONSTRAINT_ARGS_PARSE_ERROR: Final[str] = (
    MSG_V8N_PREFIX + "constraint '{0}{{}}' - args parsing error ({1})"
)
FMT_UNKNOWN_TAG_VALUE: Final[str] = (
    MSG_V8N_PREFIX + "token '{0}' expected {1} value (found \"{2}\")"
)
FMT_PROPERTY_NOT_OBJECT: Final[str] = (
    MSG_V8N_PREFIX + "token '{0}' cannot be used on non object/array field"
)
FMT_UNCLOSED: Final[str] = "unclosed parenthesis or quote started at position {0}"
FMT_UNOPENED: Final[str] = "unopened parenthesis at position {0}"
FMT_WRAPPED: Final[str] = "field '{0}' (property '{1}') - {2}"
FMT_CYCLIC_TAG_ALIAS: Final[str] = "cyclic tag alias reference '${0}'"
FMT_UNKNOWN_TAG_ALIAS: Final[str] = "unknown tag alias reference '${0}'"
FMT_ALIAS_PARSE: Final[str] = "error parsing resolved tag alias '${0}' - {1}"
FMT_CONSTRAINT_EXISTS: Final[str] = 'constraint "{0}" already exists in registry'
FMT_PROPERTY_NOT_IN_REPO: Final[str] = (
    TAG_NAME_V8N_AS + " cannot find property name '{0}' in properties repository"
)
FMT_INCOMPATIBLE_PROPERTY_TYPE: Final[str] = (
    TAG_NAME_V8N_AS + " has incompatible field type for property name '{0}'"
)

# Runtime configuration.
DEFAULT_CONFIG_FILE: Final[str] = "jsonv8n.toml"
ENV_PREFIX: Final[str] = "JSONV8N_"
DEFAULT_LOGGER_NAME: Final[str] = "jsonv8n"


# Constraint set fallbacks and preset pattern messages.
FMT_CONSTRAINT_SET_ALL_OF: Final[str] = (
    "Constraint set must pass all of {0} undisclosed validations"
)
FMT_CONSTRAINT_SET_ONE_OF: Final[str] = (
    "Constraint set must pass one of {0} undisclosed validations"
)
MSG_PRESET_ALPHA: Final[str] = "Value must be only alphabet characters (A-Z, a-z)"
MSG_PRESET_ALPHA_NUMERIC: Final[str] = "Value must be only alphanumeric characters (A-Z, a-z, 0-9)"
MSG_PRESET_BASE64: Final[str] = "Value must be a valid base64 encoded string"
MSG_PRESET_BASE64_URL: Final[str] = "Value must be a valid base64 URL encoded string"
MSG_PRESET_E164: Final[str] = "Value must be a valid E.164 code"
MSG_PRESET_EAN13: Final[str] = "Value must be a valid EAN-13 code"
MSG_PRESET_HEXADECIMAL: Final[str] = "Value must be a valid hexadecimal string"
MSG_PRESET_HTML_COLOR: Final[str] = "Value must be a valid HTML colour string"
MSG_PRESET_INTEGER: Final[str] = "Value must be a valid integer string (characters 0-9)"
MSG_PRESET_NUMERIC: Final[str] = "Value must be a valid number string"
MSG_PRESET_ULID: Final[str] = "Value must be a valid ULID"
MSG_PRESET_UUID: Final[str] = "Value must be a valid UUID"
FMT_PRESET_UUID_VERSION: Final[str] = "Value must be a valid UUID (Version {0})"
MSG_VALID_ISO_DATETIME_NO_OFFSET: Final[str] = (
    "Value must be a valid date/time string (format: YYYY-MM-DDThh:mm:ss.sss)"
)
MSG_VALID_ISO_DATETIME_NO_MILLIS: Final[str] = (
    "Value must be a valid date/time string (format: YYYY-MM-DDThh:mm:ss[Z|+-hh:mm])"
)
MSG_VALID_ISO_DATETIME_MIN: Final[str] = (
    "Value must be a valid date/time string (format: YYYY-MM-DDThh:mm:ss)"
)
