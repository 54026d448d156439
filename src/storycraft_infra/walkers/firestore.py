from google.api_core.exceptions import NotFound
from tenacity import retry

from ..clients import get_firestore_admin_client
from ..core import RETRY_CONFIG
from ..logger import logger
from ..schemas.status import DeployedDatabase, DeployedIndex

# Firestore appends the document key to every composite index
IMPLICIT_INDEX_FIELD = "__name__"


@retry(**RETRY_CONFIG)  # type: ignore[call-overload, untyped-decorator]
def get_database(
    project_id: str, database_id: str, collection: str
) -> DeployedDatabase | None:
    """
    Fetches the Firestore database and the composite indexes of one collection.
    Returns None if the database does not exist.
    """
    client = get_firestore_admin_client()
    db_name = f"projects/{project_id}/databases/{database_id}"

    try:
        db = client.get_database(name=db_name)
    except NotFound:
        logger.debug(f"Firestore database {db_name} not found")
        return None

    indexes = []
    for index in client.list_indexes(
        parent=f"{db_name}/collectionGroups/{collection}"
    ):
        fields = [
            (f.field_path, f.order.name)
            for f in index.fields
            if f.field_path != IMPLICIT_INDEX_FIELD
        ]
        indexes.append(DeployedIndex(collection=collection, fields=fields))

    return DeployedDatabase(
        name=db.name.split("/")[-1],
        location_id=db.location_id,
        type=db.type_.name,
        delete_protection_state=db.delete_protection_state.name,
        indexes=indexes,
    )
