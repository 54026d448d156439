from typing import Any

from tenacity import retry

from ..clients import get_storage_client
from ..core import RETRY_CONFIG
from ..logger import logger
from ..schemas.status import DeployedBucket


def _delete_ages(lifecycle_rules: Any) -> list[int]:
    # Rules come back as dicts: {"action": {"type": "Delete"}, "condition": {"age": 30}}
    ages = []
    for rule in lifecycle_rules or []:
        if rule.get("action", {}).get("type") != "Delete":
            continue
        age = rule.get("condition", {}).get("age")
        if age is not None:
            ages.append(int(age))
    return sorted(ages)


@retry(**RETRY_CONFIG)  # type: ignore[call-overload, untyped-decorator]
def get_bucket(bucket_name: str) -> DeployedBucket | None:
    """
    Fetches bucket policy metadata. Returns None if the bucket does not exist.
    """
    storage_client = get_storage_client()
    bucket = storage_client.lookup_bucket(bucket_name)
    if bucket is None:
        logger.debug(f"Bucket {bucket_name} not found")
        return None

    origins: list[str] = []
    methods: list[str] = []
    for policy in bucket.cors or []:
        origins.extend(policy.get("origin", []))
        methods.extend(policy.get("method", []))

    return DeployedBucket(
        name=bucket.name,
        location=bucket.location,
        uniform_bucket_level_access=(
            bucket.iam_configuration.uniform_bucket_level_access_enabled
        ),
        versioning_enabled=bool(bucket.versioning_enabled),
        lifecycle_delete_age_days=_delete_ages(bucket.lifecycle_rules),
        cors_origins=sorted(set(origins)),
        cors_methods=sorted(set(methods)),
    )
