import copy
from typing import Any, Dict, Iterable, List, Optional

import pytest

from ahope.core.exceptions import (
    INVALID_CLASS_NAME,
    ParseApiError,
    SchemaFetchResult,
    TransportError,
)
from ahope.core.dependencies import limiter
from ahope.modules.roles.models import Role, RoleAcl

# Fields Parse Server adds to every class it creates.
DEFAULT_FIELDS = {
    "objectId": {"type": "String"},
    "createdAt": {"type": "Date"},
    "updatedAt": {"type": "Date"},
    "ACL": {"type": "ACL"},
}

WRITE_OPERATIONS = (
    "create_schema",
    "update_schema",
    "put_permission_policy",
    "create_role",
    "add_role_members",
)


class FakeParseStore:
    """In-memory stand-in for ParseClient that records every call it receives."""

    def __init__(self):
        self.schemas: Dict[str, Dict[str, Any]] = {}
        self.roles: Dict[str, Dict[str, Any]] = {}
        self.calls: List[tuple] = []
        self.fetch_errors: Dict[str, TransportError] = {}
        self.role_errors: Dict[str, TransportError] = {}
        self._next_id = 0

    # Helpers

    def add_class(self, class_name: str, field_names: Iterable[str] = (), indexes: Optional[Dict] = None):
        fields = dict(DEFAULT_FIELDS)
        fields.update({name: {"type": "String"} for name in field_names})
        self.schemas[class_name] = {"className": class_name, "fields": fields, "indexes": dict(indexes or {})}

    def add_role(self, name: str, acl: Optional[Dict] = None) -> Role:
        self._next_id += 1
        object_id = f"role{self._next_id}"
        self.roles[name] = {
            "objectId": object_id,
            "name": name,
            "ACL": acl if acl is not None else {"*": {"read": True}},
            "members": set(),
        }
        return Role.from_parse(self.roles[name])

    def calls_to(self, operation: str) -> List[tuple]:
        return [args for op, args in self.calls if op == operation]

    def write_calls(self) -> List[tuple]:
        return [(op, args) for op, args in self.calls if op in WRITE_OPERATIONS]

    def members_of(self, name: str) -> set:
        by_id = {role["objectId"]: role["name"] for role in self.roles.values()}
        return {by_id[member_id] for member_id in self.roles[name]["members"]}

    def snapshot(self) -> Dict[str, Any]:
        return copy.deepcopy({"schemas": self.schemas, "roles": self.roles})

    # ParseClient interface

    async def fetch_schema(self, class_name: str) -> SchemaFetchResult:
        self.calls.append(("fetch_schema", (class_name,)))
        if class_name in self.fetch_errors:
            return SchemaFetchResult.failed(class_name, self.fetch_errors[class_name])
        if class_name not in self.schemas:
            error = ParseApiError(400, INVALID_CLASS_NAME, f"Class {class_name} does not exist.")
            return SchemaFetchResult.class_not_found(class_name, error)
        return SchemaFetchResult.found(class_name, copy.deepcopy(self.schemas[class_name]))

    async def create_schema(self, class_name, fields, indexes=None):
        self.calls.append(("create_schema", (class_name, fields, indexes)))
        if class_name in self.schemas:
            raise ParseApiError(400, INVALID_CLASS_NAME, f"Class {class_name} already exists.")
        self.schemas[class_name] = {
            "className": class_name,
            "fields": {**DEFAULT_FIELDS, **fields},
            "indexes": dict(indexes or {}),
        }
        return self.schemas[class_name]

    async def update_schema(self, class_name, fields, indexes=None):
        self.calls.append(("update_schema", (class_name, fields, indexes)))
        schema = self.schemas[class_name]
        for name in fields:
            if name in schema["fields"]:
                raise ParseApiError(400, 255, f"Field {name} exists, cannot update.")
        schema["fields"].update(fields)
        schema["indexes"].update(indexes or {})
        return schema

    async def put_permission_policy(self, class_name, policy):
        self.calls.append(("put_permission_policy", (class_name, policy)))
        if class_name not in self.schemas:
            raise ParseApiError(400, INVALID_CLASS_NAME, f"Class {class_name} does not exist.")
        self.schemas[class_name]["classLevelPermissions"] = copy.deepcopy(policy)
        return {}

    async def find_role(self, name: str) -> Optional[Role]:
        self.calls.append(("find_role", (name,)))
        if name in self.role_errors:
            raise self.role_errors[name]
        if name not in self.roles:
            return None
        return Role.from_parse(self.roles[name])

    async def create_role(self, name: str, acl: RoleAcl) -> Role:
        self.calls.append(("create_role", (name, acl)))
        if name in self.roles:
            raise ParseApiError(400, 137, "A duplicate value for a field with unique values was provided")
        role = self.add_role(name, acl.to_parse())
        return role

    async def list_role_members(self, role: Role) -> List[Role]:
        self.calls.append(("list_role_members", (role.name,)))
        members = self.roles[role.name]["members"]
        return [Role.from_parse(r) for r in self.roles.values() if r["objectId"] in members]

    async def add_role_members(self, role: Role, members):
        members = list(members)
        self.calls.append(("add_role_members", (role.name, [m.name for m in members])))
        self.roles[role.name]["members"].update(m.object_id for m in members)
        return {}


@pytest.fixture
def store():
    return FakeParseStore()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()
