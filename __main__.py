"""StoryCraft GCP infrastructure - Pulumi entry point."""

import pulumi

from storycraft_infra.config import StackSettings
from storycraft_infra.stack import build_stack, export_outputs


def main() -> None:
    settings = StackSettings.from_pulumi_config()
    stack = build_stack(settings)
    export_outputs(stack)
    pulumi.log.info("StoryCraft stack declared")


main()
