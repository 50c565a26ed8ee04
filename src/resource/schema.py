"""Resource schema (Pydantic model + declarative field surface).

The three input fields are required and immutable; changing any of them means destroy + recreate,
which is the reconciliation framework's job, not this package's.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ResourceStatus(StrEnum):
    """Where a binding is in its lifecycle."""

    absent = "absent"
    pending = "pending"
    present = "present"


class RoleParameterBinding(BaseModel):
    """One session parameter bound to one role."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    role_name: str = Field(min_length=1, alias="alter_role")
    parameter_key: str = Field(min_length=1, alias="alter_parameter_key")
    parameter_value: str = Field(alias="alter_parameter_value")


@dataclass(frozen=True)
class FieldSpec:
    """Declarative description of one resource field."""

    description: str
    type: str = "string"
    required: bool = True
    force_new: bool = True


RESOURCE_SCHEMA: dict[str, FieldSpec] = {
    "alter_role": FieldSpec(description="The name of the role to alter the attributes of"),
    "alter_parameter_key": FieldSpec(description="The name of the parameter to alter on the role"),
    "alter_parameter_value": FieldSpec(description="The value of the parameter which is being set"),
}


@dataclass
class ResourceData:
    """Mutable state of one resource instance.

    `binding` holds the desired fields before create and the observed fields after a read.
    An empty `id` means the resource has no identity (never created, or gone).
    """

    binding: RoleParameterBinding
    id: str = ""
    status: ResourceStatus = field(default=ResourceStatus.absent)

    def attributes(self) -> dict[str, str]:
        return {**self.binding.model_dump(by_alias=True), "id": self.id}
