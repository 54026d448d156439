import pulumi
import pulumi_gcp as gcp

from ..config import StackSettings
from ..core import FIRESTORE_TYPE
from ..schemas.firestore import CompositeIndex, story_index


def create_database(
    settings: StackSettings, depends_on: list[pulumi.Resource]
) -> gcp.firestore.Database:
    return gcp.firestore.Database(
        "firestore-database",
        project=settings.project_id,
        name=settings.firestore_database_id,
        location_id=settings.database_location,
        type=FIRESTORE_TYPE,
        delete_protection_state="DELETE_PROTECTION_DISABLED",
        deletion_policy="DELETE",
        opts=pulumi.ResourceOptions(depends_on=depends_on),
    )


def create_index(
    settings: StackSettings,
    database: gcp.firestore.Database,
    index: CompositeIndex | None = None,
) -> gcp.firestore.Index:
    """Declares a composite index; defaults to the per-owner recency index."""
    index = index or story_index()
    return gcp.firestore.Index(
        f"{index.collection}-index",
        project=settings.project_id,
        database=database.name,
        collection=index.collection,
        query_scope=index.query_scope,
        fields=[
            gcp.firestore.IndexFieldArgs(field_path=f.field_path, order=f.order)
            for f in index.fields
        ],
    )
