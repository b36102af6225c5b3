"""Jinja2 template store backed by the filesystem.

Layout: ``<root>/<locale>/<template><extension>``, where the template path
already carries the channel folder (``email/center-created``) and the
extension depends on the channel.
"""

from pathlib import Path
from typing import Any

import jinja2
import orjson
import structlog
from jinja2 import FileSystemLoader, StrictUndefined
from jinja2.sandbox import SandboxedEnvironment

from core.exceptions import TemplateNotFoundError, TemplateRenderingError
from domain.entities.manifest import TEMPLATE_EXTENSIONS
from domain.entities.notification import NotificationChannel

logger = structlog.get_logger()


class FileSystemTemplateStore:
    """Looks up and renders notification templates from a directory tree.

    Email bodies are rendered with HTML autoescaping. JSON templates are
    parsed first and each string value is rendered on its own, so template
    data can never break the JSON structure.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()
        loader = FileSystemLoader(str(self._root))
        self._html_env = SandboxedEnvironment(
            loader=loader,
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self._text_env = SandboxedEnvironment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            undefined=StrictUndefined,
        )

    @property
    def root(self) -> Path:
        return self._root

    def _name_for(self, template: str, channel: NotificationChannel, locale: str) -> str:
        return f"{locale}/{template}{TEMPLATE_EXTENSIONS[channel]}"

    def path_for(self, template: str, channel: NotificationChannel, locale: str) -> str:
        return str(self._root / self._name_for(template, channel, locale))

    def exists(self, template: str, channel: NotificationChannel, locale: str) -> bool:
        path = Path(self.path_for(template, channel, locale)).resolve()
        if not path.is_relative_to(self._root):
            return False
        return path.is_file()

    def render(
        self,
        template: str,
        channel: NotificationChannel,
        locale: str,
        data: dict[str, Any],
    ) -> str | dict[str, Any]:
        """Render a template for a channel and locale.

        Raises:
            TemplateNotFoundError: If the file does not exist.
            TemplateRenderingError: On syntax errors, undefined variables or
                invalid JSON.
        """
        if not self.exists(template, channel, locale):
            raise TemplateNotFoundError(
                template=template,
                locale=locale,
                path=self.path_for(template, channel, locale),
            )

        name = self._name_for(template, channel, locale)
        if name.endswith(".json"):
            return self._render_json(name, data)

        env = self._html_env if channel == NotificationChannel.EMAIL else self._text_env
        try:
            return env.get_template(name).render(data).strip()
        except jinja2.TemplateError as e:
            logger.error("notification_template_render_failed", template=name, error=str(e))
            raise TemplateRenderingError(template=name, reason=str(e)) from e

    def render_string(self, source: str, data: dict[str, Any]) -> str:
        try:
            return self._text_env.from_string(source).render(data)
        except jinja2.TemplateError as e:
            raise TemplateRenderingError(template=source, reason=str(e)) from e

    def _render_json(self, name: str, data: dict[str, Any]) -> dict[str, Any]:
        try:
            source, _, _ = self._text_env.loader.get_source(self._text_env, name)  # type: ignore[union-attr]
            document = orjson.loads(source)
        except (jinja2.TemplateNotFound, orjson.JSONDecodeError) as e:
            raise TemplateRenderingError(template=name, reason=str(e)) from e

        if not isinstance(document, dict):
            raise TemplateRenderingError(template=name, reason="JSON template must be an object")

        try:
            return self._render_value(document, data)
        except jinja2.TemplateError as e:
            logger.error("notification_template_render_failed", template=name, error=str(e))
            raise TemplateRenderingError(template=name, reason=str(e)) from e

    def _render_value(self, value: Any, data: dict[str, Any]) -> Any:
        if isinstance(value, str):
            return self._text_env.from_string(value).render(data)
        if isinstance(value, dict):
            return {key: self._render_value(item, data) for key, item in value.items()}
        if isinstance(value, list):
            return [self._render_value(item, data) for item in value]
        return value
