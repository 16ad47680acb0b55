# Parse keeps roles in the "_Role" class; member roles live in its "roles" relation.
# A user holding role X also holds every role whose "roles" relation contains X.

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from ahope.core.exceptions import InvariantViolation

ROLE_CLASS_NAME = "_Role"


class RoleAcl(BaseModel):
    model_config = ConfigDict(frozen=True)

    public_read: bool = True
    public_write: bool = False

    def to_parse(self) -> Dict[str, Any]:
        public: Dict[str, bool] = {}
        if self.public_read:
            public["read"] = True
        if self.public_write:
            public["write"] = True
        return {"*": public} if public else {}

    @classmethod
    def from_parse(cls, acl: Optional[Dict[str, Any]]) -> "RoleAcl":
        public = (acl or {}).get("*", {})
        return cls(public_read=bool(public.get("read")), public_write=bool(public.get("write")))


# Readable by anyone, writable by no one without the master key.
IMMUTABLE_ROLE_ACL = RoleAcl(public_read=True, public_write=False)


class Role(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    object_id: Optional[str] = None
    acl: RoleAcl = IMMUTABLE_ROLE_ACL

    @property
    def token(self) -> str:
        """Name used for this role in ACLs and class-level permissions"""
        return f"role:{self.name}"

    def to_pointer(self) -> Dict[str, str]:
        if not self.object_id:
            raise InvariantViolation(f"Role '{self.name}' has not been saved yet and cannot be referenced")
        return {"__type": "Pointer", "className": ROLE_CLASS_NAME, "objectId": self.object_id}

    @classmethod
    def from_parse(cls, data: Dict[str, Any]) -> "Role":
        return cls(
            name=data["name"],
            object_id=data.get("objectId"),
            acl=RoleAcl.from_parse(data.get("ACL")),
        )


class RoleHierarchy(BaseModel):
    administrator: Role
    editor: Role
    writer: Role
    viewer: Role

    def all_roles(self) -> List[Role]:
        return [self.administrator, self.editor, self.writer, self.viewer]
