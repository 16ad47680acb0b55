import logging
from typing import Iterable

from ahope.config.schema_config import ADMINISTRATOR, EDITOR, VIEWER, WRITER
from ahope.database.parse_client import ParseClient
from ahope.modules.roles.models import IMMUTABLE_ROLE_ACL, Role, RoleHierarchy

logger = logging.getLogger(__name__)


class RoleService:
    def __init__(self, client: ParseClient):
        self.client = client

    async def ensure_role(self, name: str, members: Iterable[Role] = ()) -> Role:
        """Find or create a role by name, then add any missing member roles"""
        members = list(members)
        # Raises InvariantViolation before any remote call if a member was never saved
        for member in members:
            member.to_pointer()

        role = await self.client.find_role(name)
        if role is not None:
            logger.debug(f"Role '{name}' already exists ({role.object_id})")
        else:
            role = await self.client.create_role(name, IMMUTABLE_ROLE_ACL)
            logger.info(f"Created role '{name}' ({role.object_id})")

        if members:
            existing_ids = {member.object_id for member in await self.client.list_role_members(role)}
            new_members = []
            for member in members:
                if member.object_id not in existing_ids:
                    existing_ids.add(member.object_id)
                    new_members.append(member)
            if new_members:
                await self.client.add_role_members(role, new_members)
                logger.info(f"Added {[m.name for m in new_members]} as members of role '{name}'")

        return role

    async def provision_hierarchy(self) -> RoleHierarchy:
        """
        Build Administrator -> Editor -> Writer/Viewer.

        Members of a role inherit its grants, so Administrator (member of
        Editor) and Editor (member of Writer and Viewer) can read and write
        whatever Viewer and Writer can. Each role must exist before it is
        passed on as a member, hence the strict order.
        """
        administrator = await self.ensure_role(ADMINISTRATOR)
        editor = await self.ensure_role(EDITOR, [administrator])
        writer = await self.ensure_role(WRITER, [editor])
        viewer = await self.ensure_role(VIEWER, [editor])
        return RoleHierarchy(administrator=administrator, editor=editor, writer=writer, viewer=viewer)
