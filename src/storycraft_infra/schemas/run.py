from pydantic import BaseModel, Field, model_validator


class ScalingBounds(BaseModel):
    min_instance_count: int = Field(default=0, ge=0)
    max_instance_count: int = Field(default=100, ge=1)

    @model_validator(mode="after")
    def check_bounds(self) -> "ScalingBounds":
        if self.min_instance_count > self.max_instance_count:
            raise ValueError(
                f"min_instance_count ({self.min_instance_count}) exceeds "
                f"max_instance_count ({self.max_instance_count})"
            )
        return self


class ResourceLimits(BaseModel):
    cpu: str = Field(default="2", description="vCPU per instance, e.g. 2")
    memory: str = Field(default="4Gi", description="Memory per instance, e.g. 4Gi")
    cpu_idle: bool = Field(
        default=True, description="Throttle CPU outside of request handling"
    )

    def as_limits(self) -> dict[str, str]:
        return {"cpu": self.cpu, "memory": self.memory}
