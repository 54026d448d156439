import argparse
import json
import logging
import sys
from importlib.metadata import version

from pydantic import ValidationError
from rich.console import Console

from .build import BuildDefinitionNotFound, plan_build
from .config import DEFAULT_DATABASE_ID, DEFAULT_REGION, StackSettings
from .core import (
    DEFAULT_BUILD_CONTEXT,
    DEFAULT_IMAGE_NAME,
    DEFAULT_REPOSITORY_ID,
    DEFAULT_SERVICE_NAME,
)
from .logger import logger
from .modes import verify


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="StoryCraft infrastructure operator tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Provisioning itself runs through Pulumi (`pulumi up`). This tool inspects
what is deployed.

Examples:
  # Check the live deployment against the declared stack
  storycraft-infra --verify --project-id my-project --region us-central1

  # Same, as JSON, plus an HTML report
  storycraft-infra --verify --project-id my-project --json --html report.html

  # Show the content-addressed image tag for the local build context
  storycraft-infra --image-tag --project-id my-project --build-context app
""",
    )
    try:
        ver = version("storycraft-infra")
    except Exception:
        ver = "unknown"
    parser.add_argument(
        "--version", action="version", version=f"storycraft-infra v{ver}"
    )

    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--verify",
        action="store_true",
        help="Compare the live project with the declared stack",
    )
    group.add_argument(
        "--image-tag",
        action="store_true",
        help="Print the content hash, tag and image path of the local build",
    )

    parser.add_argument("--project-id", required=True, help="GCP Project ID")
    parser.add_argument(
        "--region", default=DEFAULT_REGION, help=f"Region (default: {DEFAULT_REGION})"
    )
    parser.add_argument(
        "--service-name",
        default=DEFAULT_SERVICE_NAME,
        help=f"Cloud Run service name (default: {DEFAULT_SERVICE_NAME})",
    )
    parser.add_argument(
        "--database-id",
        default=DEFAULT_DATABASE_ID,
        help=f"Firestore database id (default: {DEFAULT_DATABASE_ID})",
    )
    parser.add_argument(
        "--repository-id",
        default=DEFAULT_REPOSITORY_ID,
        help=f"Artifact Registry repository (default: {DEFAULT_REPOSITORY_ID})",
    )
    parser.add_argument(
        "--image-name",
        default=DEFAULT_IMAGE_NAME,
        help=f"Image name (default: {DEFAULT_IMAGE_NAME})",
    )
    parser.add_argument(
        "--build-context",
        default=DEFAULT_BUILD_CONTEXT,
        help=f"Directory holding the Dockerfile (default: {DEFAULT_BUILD_CONTEXT})",
    )

    access = parser.add_mutually_exclusive_group()
    access.add_argument(
        "--public",
        dest="allow_public_access",
        action="store_true",
        default=True,
        help="Expect unauthenticated access to be allowed (default)",
    )
    access.add_argument(
        "--private",
        dest="allow_public_access",
        action="store_false",
        help="Expect the service to require authentication",
    )

    parser.add_argument("--json", action="store_true", help="Output results as JSON")
    parser.add_argument("--html", help="Write the verification report to an HTML file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def settings_from_args(args: argparse.Namespace) -> StackSettings:
    return StackSettings(
        project_id=args.project_id,
        region=args.region,
        firestore_database_id=args.database_id,
        service_name=args.service_name,
        repository_id=args.repository_id,
        image_name=args.image_name,
        build_context=args.build_context,
        allow_public_access=args.allow_public_access,
    )


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.verbose:
        logger.setLevel(logging.DEBUG)

    # Use stderr for logs/progress if stdout is piped for JSON
    log_console = Console(stderr=True, quiet=args.json)
    out_console = Console(quiet=args.json)

    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        parser.error(str(e))

    if args.image_tag:
        try:
            artifact = plan_build(settings)
        except BuildDefinitionNotFound as e:
            logger.error(str(e))
            sys.exit(1)
        if args.json:
            print(json.dumps(artifact.model_dump(), indent=2))
        else:
            out_console.print(f"hash:  {artifact.content_hash}")
            out_console.print(f"tag:   [bold]{artifact.tag}[/bold]")
            out_console.print(f"image: {artifact.image}")
        return

    try:
        report = verify.run_verify(
            settings,
            log_console,
            out_console,
            json_output=args.json,
            html_path=args.html,
        )
    except Exception as e:
        logger.error(f"Verification Failed: {e}")
        sys.exit(1)

    if not report.ok:
        sys.exit(2)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        console = Console(stderr=True)
        console.print("\n[bold red]Operation cancelled by user.[/bold red]")
        sys.exit(130)
