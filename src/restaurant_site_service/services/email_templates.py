"""Jinja2 rendering of reservation emails and the email-link confirmation page.

Templates live in the package's ``templates`` directory as ``<name>.html.j2``.
Each template declares its subject line in a leading HTML comment:
``<!-- subject: New Reservation Request -->``.
"""

import logging
import re
from pathlib import Path
from typing import Any, NamedTuple

from jinja2 import Environment, FileSystemLoader, select_autoescape

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"

RESERVATION_REQUEST_TEMPLATE = "reservation_request"
RESERVATION_STATUS_TEMPLATE = "reservation_status"
RESERVATION_ACTION_RESULT_TEMPLATE = "reservation_action_result"

_SUBJECT_PATTERN = re.compile(r"<!--\s*subject:\s*([^-]+?)\s*-->", re.IGNORECASE)


class RenderedTemplate(NamedTuple):
    """Result of rendering a template."""

    subject: str
    html: str


class TemplateRenderer:
    """Renders the service's HTML templates with autoescaping enabled."""

    def __init__(self, template_dir: Path = TEMPLATE_DIR) -> None:
        """Initialize the renderer.

        Args:
            template_dir: Directory containing ``*.html.j2`` templates
        """
        self.template_dir = template_dir
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "xml", "j2"]),
            enable_async=True,
        )

    async def render(self, template_id: str, **variables: Any) -> RenderedTemplate:
        """Render a template and extract its subject line.

        Args:
            template_id: Template name without the ``.html.j2`` suffix
            **variables: Template context

        Returns:
            RenderedTemplate with subject and HTML body

        Raises:
            jinja2.TemplateNotFound: If no such template exists
        """
        template = self.env.get_template(f"{template_id}.html.j2")
        html = await template.render_async(**variables)

        match = _SUBJECT_PATTERN.search(html)
        if match:
            subject = match.group(1).strip()
        else:
            logger.warning(f"No subject found in template {template_id}, using its name")
            subject = template_id.replace("_", " ").capitalize()

        return RenderedTemplate(subject=subject, html=html)
