"""Resource identity for role parameter bindings."""

from __future__ import annotations

ID_SEPARATOR = "_"


def generate_alter_role_id(role_name: str, parameter_key: str, parameter_value: str) -> str:
    """Join role, key and value with `_`.

    Not injective: a field that itself contains `_` can produce the same id as a different
    combination (`a_b` + `c` vs `a` + `b_c`). Existing state is keyed by this format.
    """

    return ID_SEPARATOR.join((role_name, parameter_key, parameter_value))
