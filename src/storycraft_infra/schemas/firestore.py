from typing import Literal

from pydantic import BaseModel, Field, field_validator

from ..core import LAST_MODIFIED_FIELD, OWNER_FIELD, STORY_COLLECTION

IndexOrder = Literal["ASCENDING", "DESCENDING"]


class IndexField(BaseModel):
    field_path: str = Field(min_length=1)
    order: IndexOrder


class CompositeIndex(BaseModel):
    """
    A Firestore composite index.

    Equality/filter fields (ascending) always come before the sort field
    (descending), so the declared order of ``fields`` does not matter.
    """

    collection: str = Field(min_length=1)
    query_scope: Literal["COLLECTION", "COLLECTION_GROUP"] = "COLLECTION"
    fields: list[IndexField] = Field(min_length=2)

    @field_validator("fields")
    @classmethod
    def order_fields(cls, fields: list[IndexField]) -> list[IndexField]:
        paths = [f.field_path for f in fields]
        if len(set(paths)) != len(paths):
            raise ValueError(f"Duplicate field paths in index: {paths}")
        # sorted() is stable, so fields sharing a direction keep their order
        return sorted(fields, key=lambda f: f.order == "DESCENDING")

    def signature(self) -> list[tuple[str, str]]:
        return [(f.field_path, f.order) for f in self.fields]


def story_index() -> CompositeIndex:
    """Most recent stories per owner: userId ASC, updatedAt DESC."""
    return CompositeIndex(
        collection=STORY_COLLECTION,
        fields=[
            IndexField(field_path=LAST_MODIFIED_FIELD, order="DESCENDING"),
            IndexField(field_path=OWNER_FIELD, order="ASCENDING"),
        ],
    )
