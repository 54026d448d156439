from datetime import datetime

from pydantic import BaseModel, Field


class DeployedService(BaseModel):
    name: str
    region: str
    url: str
    image: str
    service_account: str
    update_time: datetime | None = None
    min_instance_count: int = 0
    max_instance_count: int = 0
    cpu: str = ""
    memory: str = ""
    cpu_idle: bool = False
    env_names: list[str] = Field(default_factory=list)
    latest_traffic_percent: int = 0
    # True when allUsers holds roles/run.invoker; None if the policy was unreadable
    public: bool | None = False


class DeployedBucket(BaseModel):
    name: str
    location: str
    uniform_bucket_level_access: bool = False
    versioning_enabled: bool = False
    lifecycle_delete_age_days: list[int] = Field(default_factory=list)
    cors_origins: list[str] = Field(default_factory=list)
    cors_methods: list[str] = Field(default_factory=list)


class DeployedServiceAccount(BaseModel):
    email: str
    display_name: str
    disabled: bool
    project_roles: list[str] = Field(default_factory=list)


class DeployedIndex(BaseModel):
    collection: str
    fields: list[tuple[str, str]] = Field(
        default_factory=list, description="(field_path, order) pairs"
    )


class DeployedDatabase(BaseModel):
    name: str
    location_id: str
    type: str
    delete_protection_state: str
    indexes: list[DeployedIndex] = Field(default_factory=list)


class DeployedRepository(BaseModel):
    name: str
    format: str
    description: str = ""


class Check(BaseModel):
    resource: str
    check: str
    expected: str
    actual: str
    ok: bool


class VerificationReport(BaseModel):
    project_id: str
    region: str
    scan_time: datetime
    checks: list[Check] = Field(default_factory=list)
    service: DeployedService | None = None

    @property
    def ok(self) -> bool:
        return all(c.ok for c in self.checks)

    @property
    def failures(self) -> list[Check]:
        return [c for c in self.checks if not c.ok]
