import json
import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx

from ahope.config.settings import ParseServerConfig
from ahope.core.exceptions import (
    ParseApiError,
    ParseTransportError,
    SchemaFetchResult,
)
from ahope.modules.roles.models import Role, RoleAcl

logger = logging.getLogger(__name__)


class ParseClient:
    """
    Async client for the Parse Server REST API, authenticated with the master key.

    Only the schema, role and class-level-permission endpoints the bootstrap
    needs are exposed. Errors are raised as ParseApiError (Parse answered with
    an error body) or ParseTransportError (no answer at all).
    """

    def __init__(
        self,
        config: ParseServerConfig,
        server_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.server_url = (server_url or config.server_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.server_url,
            headers={
                "X-Parse-Application-Id": config.app_id,
                "X-Parse-Master-Key": config.master_key,
            },
            timeout=config.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ParseClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, params=params, json=body)
        except httpx.HTTPError as e:
            raise ParseTransportError(f"{method} {self.server_url}{path} failed: {e}") from e

        if response.is_error:
            try:
                error_body = response.json()
            except ValueError:
                error_body = response.text
            raise ParseApiError.from_response_body(response.status_code, error_body)

        if not response.content:
            return {}
        return response.json()

    # Schemas

    async def fetch_schema(self, class_name: str) -> SchemaFetchResult:
        """Fetch the stored schema of a class; a missing class is reported, not raised"""
        try:
            schema = await self._request("GET", f"/schemas/{class_name}")
        except ParseApiError as e:
            if e.is_class_not_found:
                return SchemaFetchResult.class_not_found(class_name, e)
            return SchemaFetchResult.failed(class_name, e)
        except ParseTransportError as e:
            return SchemaFetchResult.failed(class_name, e)
        return SchemaFetchResult.found(class_name, schema)

    async def create_schema(
        self,
        class_name: str,
        fields: Dict[str, Dict[str, Any]],
        indexes: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"className": class_name, "fields": fields}
        if indexes:
            body["indexes"] = indexes
        return await self._request("POST", f"/schemas/{class_name}", body=body)

    async def update_schema(
        self,
        class_name: str,
        fields: Dict[str, Dict[str, Any]],
        indexes: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """Add fields/indexes to an existing class. Existing fields are never sent."""
        body: Dict[str, Any] = {"className": class_name, "fields": fields}
        if indexes:
            body["indexes"] = indexes
        return await self._request("PUT", f"/schemas/{class_name}", body=body)

    async def put_permission_policy(self, class_name: str, policy: Dict[str, Dict[str, bool]]) -> Dict[str, Any]:
        """Replace the class-level permissions of a class"""
        body = {"className": class_name, "classLevelPermissions": policy}
        return await self._request("PUT", f"/schemas/{class_name}", body=body)

    # Roles

    async def find_role(self, name: str) -> Optional[Role]:
        result = await self._request(
            "GET", "/roles", params={"where": json.dumps({"name": name}), "limit": 1}
        )
        roles = result.get("results") or []
        if not roles:
            return None
        return Role.from_parse(roles[0])

    async def create_role(self, name: str, acl: RoleAcl) -> Role:
        result = await self._request("POST", "/roles", body={"name": name, "ACL": acl.to_parse()})
        return Role(name=name, object_id=result["objectId"], acl=acl)

    async def list_role_members(self, role: Role) -> List[Role]:
        """Roles contained in the "roles" relation of `role`"""
        where = {"$relatedTo": {"object": role.to_pointer(), "key": "roles"}}
        result = await self._request("GET", "/roles", params={"where": json.dumps(where)})
        return [Role.from_parse(item) for item in result.get("results") or []]

    async def add_role_members(self, role: Role, members: Iterable[Role]) -> Dict[str, Any]:
        """Add member roles to the "roles" relation of `role` (already present members are no-ops)"""
        pointer = role.to_pointer()
        body = {
            "roles": {
                "__op": "AddRelation",
                "objects": [member.to_pointer() for member in members],
            }
        }
        return await self._request("PUT", f"/roles/{pointer['objectId']}", body=body)
