from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict


class PermissionPolicy(BaseModel):
    """Class-level permissions for one class, expressed as role names per operation."""

    model_config = ConfigDict(frozen=True)

    get: Tuple[str, ...] = ()
    find: Tuple[str, ...] = ()
    create: Tuple[str, ...] = ()
    update: Tuple[str, ...] = ()
    delete: Tuple[str, ...] = ()
    add_field: Tuple[str, ...] = ()

    def to_class_level_permissions(self) -> Dict[str, Dict[str, bool]]:
        """Render as a Parse classLevelPermissions document ({"get": {"role:Viewer": true}, ...})"""
        operations = {
            "get": self.get,
            "find": self.find,
            "create": self.create,
            "update": self.update,
            "delete": self.delete,
            "addField": self.add_field,
        }
        return {
            operation: {f"role:{role}": True for role in roles}
            for operation, roles in operations.items()
        }
