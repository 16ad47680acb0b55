import asyncio
import logging
from typing import List, Optional, Sequence

from ahope.config.schema_config import CLASS_PERMISSION_POLICY, MANAGED_SCHEMAS
from ahope.config.settings import ParseServerConfig
from ahope.database.parse_client import ParseClient
from ahope.modules.bootstrap.schemas import BootstrapResult
from ahope.modules.permissions.service import PermissionService
from ahope.modules.roles.service import RoleService
from ahope.modules.schema.models import RecordType
from ahope.modules.schema.service import SchemaService

logger = logging.getLogger(__name__)


class BootstrapService:
    def __init__(self, client: ParseClient):
        self.schema_service = SchemaService(client)
        self.role_service = RoleService(client)
        self.permission_service = PermissionService(client, CLASS_PERMISSION_POLICY)

    async def bootstrap(self, desired_schemas: Sequence[RecordType]) -> BootstrapResult:
        """
        Reconcile schemas and roles concurrently, then apply class permissions.

        Permissions are written only once every schema and the whole role
        hierarchy are in place. The first failure (in launch order) is raised
        after all concurrent steps have settled; nothing is retried.
        """
        logger.info(f"Bootstrapping {len(desired_schemas)} class(es) and the role hierarchy")

        outcomes = await asyncio.gather(
            self.role_service.provision_hierarchy(),
            *(self.schema_service.reconcile_class(schema) for schema in desired_schemas),
            return_exceptions=True,
        )
        failures = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]
        for failure in failures:
            logger.error(f"Bootstrap step failed: {failure}")
        if failures:
            raise failures[0]

        roles, *schema_states = outcomes

        applied: List[str] = []
        for schema in desired_schemas:
            await self.permission_service.apply_permissions(schema.name)
            applied.append(schema.name)

        logger.info("Bootstrap completed successfully")
        return BootstrapResult(schemas=schema_states, roles=roles, permissions_applied=applied)


async def initialize_application_data(
    server_config: ParseServerConfig,
    local_url: Optional[str] = None,
) -> BootstrapResult:
    """
    Create or update the application's classes, roles and permissions.

    Safe to call repeatedly: existing fields and roles are reused, only the
    class-level permissions are rewritten every time. `local_url` routes the
    requests through a loopback endpoint instead of the public server URL.
    """
    async with ParseClient(server_config, server_url=local_url) as client:
        return await BootstrapService(client).bootstrap(MANAGED_SCHEMAS)
