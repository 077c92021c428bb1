"""Tag DSL: lexing helpers and extension registries.

The token parser lives in :mod:`jsonv8n.tags.parser` and the constraint literal builder in
:mod:`jsonv8n.tags.literals`; both depend on the schema model and are imported directly.
"""

from jsonv8n.tags.extensions import (
    ALIAS_PREFIX,
    CustomTokenHandler,
    clear_custom_tag_tokens,
    clear_tag_token_aliases,
    custom_tag_tokens,
    register_custom_tag_token,
    register_tag_token_alias,
    register_tag_token_aliases,
    tag_aliases,
)
from jsonv8n.tags.lexer import (
    bracketed_items,
    first_valid_colon_at,
    is_bracketed,
    parse_commas,
    split_token,
    unquote,
)

__all__ = [
    "ALIAS_PREFIX",
    "CustomTokenHandler",
    "bracketed_items",
    "clear_custom_tag_tokens",
    "clear_tag_token_aliases",
    "custom_tag_tokens",
    "first_valid_colon_at",
    "is_bracketed",
    "parse_commas",
    "register_custom_tag_token",
    "register_tag_token_alias",
    "register_tag_token_aliases",
    "split_token",
    "tag_aliases",
    "unquote",
]
