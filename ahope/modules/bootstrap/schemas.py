from typing import List

from pydantic import BaseModel

from ahope.modules.roles.models import RoleHierarchy
from ahope.modules.schema.models import SchemaState


class BootstrapResult(BaseModel):
    schemas: List[SchemaState]
    roles: RoleHierarchy
    permissions_applied: List[str]
