from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import humanize
import jinja2

from .schemas.status import VerificationReport


def generate_verification_report(report: VerificationReport, output_path: str) -> None:
    """
    Writes the verification report as a standalone HTML page.
    """
    # Setup Jinja2 environment
    template_dir = Path(__file__).parent / "templates"
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(template_dir)),
        autoescape=jinja2.select_autoescape(["html", "xml"]),
    )

    # Register custom filter for humanize
    def naturaltime_filter(value: datetime | None) -> str:
        if value is None:
            return "never"
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return str(humanize.naturaltime(datetime.now(timezone.utc) - value))

    env.filters["naturaltime"] = naturaltime_filter

    def format_date(value: Any) -> str:
        if hasattr(value, "strftime"):
            return value.strftime("%Y-%m-%d %H:%M UTC")  # type: ignore[no-any-return]
        return str(value)

    env.filters["format_date"] = format_date

    # Render HTML
    template = env.get_template("verify_report.html")
    html_content = template.render(report=report)

    Path(output_path).write_text(html_content, encoding="utf-8")
