import pulumi
import pytest


class StackMocks(pulumi.runtime.Mocks):
    """Records every declared resource and fills in provider-computed outputs."""

    def __init__(self) -> None:
        self.resources: list[pulumi.runtime.MockResourceArgs] = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        self.resources.append(args)
        outputs = dict(args.inputs)

        if args.typ.startswith("gcp:serviceaccount/account:"):
            account_id = outputs.get("accountId", outputs.get("account_id"))
            project = outputs.get("project")
            outputs["email"] = f"{account_id}@{project}.iam.gserviceaccount.com"
        elif args.typ.startswith("gcp:cloudrunv2/service:"):
            outputs["uri"] = f"https://{outputs['name']}-abc123xyz-uc.a.run.app"
        elif args.typ.startswith("gcp:artifactregistry/repository:"):
            repo_id = outputs.get("repositoryId", outputs.get("repository_id"))
            outputs["name"] = repo_id
        elif args.typ.startswith("random:"):
            outputs["result"] = "generated-auth-secret"

        return [f"{args.name}_id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        if "getProject" in args.token:
            return {"number": "123456789012", "projectId": args.args.get("projectId")}
        return {}

    def with_input(self, key: str, value) -> list[pulumi.runtime.MockResourceArgs]:
        return [r for r in self.resources if r.inputs.get(key) == value]


def install_mocks() -> StackMocks:
    mocks = StackMocks()
    pulumi.runtime.set_mocks(mocks, project="storycraft", stack="test", preview=False)
    return mocks


@pytest.fixture
def pulumi_mocks():
    return install_mocks()


@pytest.fixture
def fresh_mocks():
    """Factory for tests that declare the stack more than once."""
    return install_mocks


@pytest.fixture
def build_context(tmp_path):
    context = tmp_path / "app"
    context.mkdir()
    (context / "Dockerfile").write_text(
        "FROM node:20-alpine\nWORKDIR /app\nCOPY . .\nRUN npm ci && npm run build\n"
        'CMD ["npm", "start"]\n'
    )
    return context
