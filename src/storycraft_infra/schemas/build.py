from pydantic import BaseModel, Field


class BuildArtifact(BaseModel):
    content_hash: str = Field(description="SHA-256 of the build definition")
    tag: str = Field(description="Content-addressed image tag")
    image: str = Field(description="Fully qualified image path including tag")
    build_context: str
