"""Cloud Storage bucket for story assets (images, audio, exports)."""

import pulumi
import pulumi_gcp as gcp

from ..config import StackSettings
from ..core import (
    BUCKET_CORS_MAX_AGE_SECONDS,
    BUCKET_CORS_METHODS,
    BUCKET_CORS_ORIGINS,
    BUCKET_CORS_RESPONSE_HEADERS,
    BUCKET_OBJECT_MAX_AGE_DAYS,
    BUCKET_OBJECT_ROLE,
)
from .iam import service_account_member


def create_bucket(
    settings: StackSettings, depends_on: list[pulumi.Resource]
) -> gcp.storage.Bucket:
    return gcp.storage.Bucket(
        "assets-bucket",
        name=settings.bucket_name,
        project=settings.project_id,
        location=settings.region,
        storage_class="STANDARD",
        uniform_bucket_level_access=True,
        # Deletes the bucket contents on `pulumi destroy`
        force_destroy=True,
        versioning=gcp.storage.BucketVersioningArgs(enabled=False),
        lifecycle_rules=[
            gcp.storage.BucketLifecycleRuleArgs(
                action=gcp.storage.BucketLifecycleRuleActionArgs(type="Delete"),
                condition=gcp.storage.BucketLifecycleRuleConditionArgs(
                    age=BUCKET_OBJECT_MAX_AGE_DAYS
                ),
            ),
        ],
        cors=[
            gcp.storage.BucketCorArgs(
                origins=BUCKET_CORS_ORIGINS,
                methods=BUCKET_CORS_METHODS,
                response_headers=BUCKET_CORS_RESPONSE_HEADERS,
                max_age_seconds=BUCKET_CORS_MAX_AGE_SECONDS,
            ),
        ],
        labels=settings.labels,
        opts=pulumi.ResourceOptions(depends_on=depends_on),
    )


def grant_bucket_access(
    bucket: gcp.storage.Bucket, account: gcp.serviceaccount.Account
) -> gcp.storage.BucketIAMMember:
    return gcp.storage.BucketIAMMember(
        "assets-bucket-object-admin",
        bucket=bucket.name,
        role=BUCKET_OBJECT_ROLE,
        member=service_account_member(account.email),
    )
