from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FieldKind(str, Enum):
    ARRAY = "Array"
    BOOLEAN = "Boolean"
    DATE = "Date"
    NUMBER = "Number"
    STRING = "String"
    RELATION = "Relation"
    POINTER = "Pointer"
    OBJECT = "Object"


# Kinds that must name the class they point at.
REFERENCE_KINDS = (FieldKind.RELATION, FieldKind.POINTER)


class FieldSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    kind: FieldKind
    related_type: Optional[str] = None

    @model_validator(mode="after")
    def _check_related_type(self) -> "FieldSpec":
        if self.kind in REFERENCE_KINDS and not self.related_type:
            raise ValueError(f"{self.kind.value} field '{self.name}' needs a related_type")
        if self.kind not in REFERENCE_KINDS and self.related_type:
            raise ValueError(f"{self.kind.value} field '{self.name}' cannot reference '{self.related_type}'")
        return self

    def to_parse(self) -> Dict[str, Any]:
        """Parse schema field definition, e.g. {"type": "Relation", "targetClass": "contacts"}"""
        definition: Dict[str, Any] = {"type": self.kind.value}
        if self.related_type:
            definition["targetClass"] = self.related_type
        return definition


class RecordType(BaseModel):
    """Desired definition of one Parse class: its fields and indexes."""

    model_config = ConfigDict(frozen=True)

    name: str
    fields: Tuple[FieldSpec, ...] = ()
    indexes: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_unique_field_names(self) -> "RecordType":
        seen = set()
        for field in self.fields:
            if field.name in seen:
                raise ValueError(f"Duplicate field '{field.name}' in class '{self.name}'")
            seen.add(field.name)
        return self

    @property
    def field_names(self) -> List[str]:
        return [field.name for field in self.fields]

    @property
    def index_names(self) -> List[str]:
        return list(self.indexes)

    @property
    def is_empty(self) -> bool:
        return not self.fields and not self.indexes

    def to_parse_fields(self) -> Dict[str, Dict[str, Any]]:
        return {field.name: field.to_parse() for field in self.fields}

    def to_parse_indexes(self) -> Dict[str, Dict[str, Any]]:
        return {name: dict(definition) for name, definition in self.indexes.items()}


class SchemaAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class SchemaState(BaseModel):
    class_name: str
    action: SchemaAction
    added_fields: List[str] = []
    added_indexes: List[str] = []
