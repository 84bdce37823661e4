# Azure DevOps Provider Utils
from azdo_provider.utils.converter import atoi, to_bool, to_int, to_string
from azdo_provider.utils.response import response_was_not_found
from azdo_provider.utils.validate import int_at_least, no_empty_strings, string_in_slice

__all__ = [
    "atoi",
    "to_bool",
    "to_int",
    "to_string",
    "response_was_not_found",
    "int_at_least",
    "no_empty_strings",
    "string_in_slice",
]
