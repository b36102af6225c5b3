"""Template store protocol."""

from typing import Any, Protocol

from domain.entities.notification import NotificationChannel


class ITemplateStore(Protocol):
    """Looks up and renders notification templates by path, channel and locale."""

    def path_for(self, template: str, channel: NotificationChannel, locale: str) -> str:
        """Location of the template file for a channel and locale."""
        ...

    def exists(self, template: str, channel: NotificationChannel, locale: str) -> bool:
        """Whether the template is present for a channel and locale."""
        ...

    def render(
        self,
        template: str,
        channel: NotificationChannel,
        locale: str,
        data: dict[str, Any],
    ) -> str | dict[str, Any]:
        """Render a template.

        Returns a string for text templates and a dict for JSON templates.
        Raises TemplateNotFoundError or TemplateRenderingError.
        """
        ...

    def render_string(self, source: str, data: dict[str, Any]) -> str:
        """Render an inline template such as an email subject."""
        ...
