import logging

from ahope.config.schema_config import CLASS_PERMISSION_POLICY
from ahope.database.parse_client import ParseClient
from ahope.modules.permissions.models import PermissionPolicy

logger = logging.getLogger(__name__)


class PermissionService:
    def __init__(self, client: ParseClient, policy: PermissionPolicy = CLASS_PERMISSION_POLICY):
        self.client = client
        self.policy = policy

    async def apply_permissions(self, class_name: str) -> None:
        """Overwrite the class-level permissions of a class with the canonical policy"""
        await self.client.put_permission_policy(class_name, self.policy.to_class_level_permissions())
        logger.info(f"Applied class-level permissions to '{class_name}'")
