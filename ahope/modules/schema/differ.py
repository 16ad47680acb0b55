from typing import Iterable

from ahope.modules.schema.models import RecordType


def diff_fields(existing: Iterable[str], desired: RecordType) -> RecordType:
    """
    Return a copy of `desired` without any field or index already present remotely.

    `existing` holds the remote field and index names. The result carries only
    what still has to be created; an empty result (`is_empty`) means no update
    is necessary. Fields present remotely but absent from `desired` are simply
    ignored, never removed.
    """
    existing_names = set(existing)
    return RecordType(
        name=desired.name,
        fields=tuple(field for field in desired.fields if field.name not in existing_names),
        indexes={
            name: definition
            for name, definition in desired.indexes.items()
            if name not in existing_names
        },
    )
