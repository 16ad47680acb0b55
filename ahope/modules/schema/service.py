import logging

from ahope.core.exceptions import SchemaErrorKind
from ahope.database.parse_client import ParseClient
from ahope.modules.schema.differ import diff_fields
from ahope.modules.schema.models import RecordType, SchemaAction, SchemaState

logger = logging.getLogger(__name__)


class SchemaService:
    def __init__(self, client: ParseClient):
        self.client = client

    async def reconcile_class(self, desired: RecordType) -> SchemaState:
        """
        Converge the remote schema of one class towards `desired`.

        Creates the class when Parse reports it missing, otherwise adds only the
        fields and indexes it lacks. Existing fields are never changed or
        removed. Any fetch failure other than a missing class is raised as is.
        """
        result = await self.client.fetch_schema(desired.name)

        if result.ok:
            missing = diff_fields(result.field_names | result.index_names, desired)
            if missing.is_empty:
                logger.debug(f"Schema of class '{desired.name}' is up to date")
                return SchemaState(class_name=desired.name, action=SchemaAction.UNCHANGED)

            await self.client.update_schema(
                desired.name, missing.to_parse_fields(), missing.to_parse_indexes()
            )
            logger.info(
                f"Added {len(missing.fields)} field(s) and {len(missing.indexes)} index(es) "
                f"to class '{desired.name}': {', '.join(missing.field_names + missing.index_names)}"
            )
            return SchemaState(
                class_name=desired.name,
                action=SchemaAction.UPDATED,
                added_fields=missing.field_names,
                added_indexes=missing.index_names,
            )

        if result.error_kind is SchemaErrorKind.CLASS_NOT_FOUND:
            await self.client.create_schema(
                desired.name, desired.to_parse_fields(), desired.to_parse_indexes()
            )
            logger.info(f"Created class '{desired.name}' with {len(desired.fields)} field(s)")
            return SchemaState(
                class_name=desired.name,
                action=SchemaAction.CREATED,
                added_fields=desired.field_names,
                added_indexes=desired.index_names,
            )

        raise result.error
