"""
Schema, Roles and Permissions Configuration
This config declares the Parse classes the application stores its data in,
the role hierarchy, and the class-level permissions applied to every class.
Used by the bootstrap service (init endpoint and init_schema script).
"""

from typing import Dict, List, Optional, Tuple

from ahope.modules.permissions.models import PermissionPolicy
from ahope.modules.schema.models import FieldKind, FieldSpec, RecordType

ADMINISTRATOR = "Administrator"
EDITOR = "Editor"
WRITER = "Writer"
VIEWER = "Viewer"


def _fields(definitions: Dict[FieldKind, List[str]], relations: Optional[Dict[str, str]] = None) -> Tuple[FieldSpec, ...]:
    specs = [
        FieldSpec(name=name, kind=kind)
        for kind, names in definitions.items()
        for name in names
    ]
    for name, target in (relations or {}).items():
        specs.append(FieldSpec(name=name, kind=FieldKind.RELATION, related_type=target))
    return tuple(specs)


# Fields are listed by type and in alphabetical order.
CONTACTS_SCHEMA = RecordType(
    name="contacts",
    fields=_fields({
        FieldKind.ARRAY: ["otherDrugs", "otherDrugsAggregate"],
        FieldKind.BOOLEAN: [
            "didOdLastYear", "hasHealthInsurance", "hispanic",
            "isEnrolled", "isInCareForHepC", "isInCareForHiv",
        ],
        FieldKind.DATE: ["ageOfFirstInjection", "dateOfBirth", "dateOfLastVisit"],
        FieldKind.NUMBER: ["syringesGivenAggregate", "syringesTakenAggregate"],
        FieldKind.STRING: [
            "countryOfBirth", "ethnicity", "genderIdentity", "healthInsurer",
            "hepCStatus", "hivStatus", "housingStatus", "primaryDrug",
            "profileNotes", "uid", "zipCode",
        ],
    }),
)

EVENT_SCHEMA = RecordType(
    name="event",
    fields=_fields(
        {
            FieldKind.ARRAY: ["otherDrugs", "referrals"],
            FieldKind.BOOLEAN: [
                "didOdLastYear", "hasHealthInsurance", "hispanic",
                "isEnrolled", "isInCareForHepC", "isInCareForHiv",
                "isOutreach", "narcanWasOffered", "narcanWasTaken",
            ],
            FieldKind.DATE: ["date", "dateOfBirth", "newContactDate"],
            FieldKind.NUMBER: [
                "ageOfFirstInjection", "numberOfOthersHelping",
                "syringesGiven", "syringesTaken",
            ],
            FieldKind.STRING: [
                "countryOfBirth", "ethnicity", "eventNotes", "genderIdentity",
                "healthInsurer", "hepCStatus", "hivStatus", "housingStatus",
                "primaryDrug", "profileNotes", "zipCode",
            ],
        },
        relations={"uid": "contacts"},
    ),
)

MANAGED_SCHEMAS: List[RecordType] = [CONTACTS_SCHEMA, EVENT_SCHEMA]

# Viewer reads, Writer writes; Editor holds both and Administrator holds Editor.
# Nobody but the master key may add fields.
CLASS_PERMISSION_POLICY = PermissionPolicy(
    get=(VIEWER,),
    find=(VIEWER,),
    create=(WRITER,),
    update=(WRITER,),
    delete=(WRITER,),
    add_field=(),
)
