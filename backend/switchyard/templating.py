"""
Switchyard — Template Rendering
================================

What:  The renderer contract used by handlers that produce HTML pages, and
       its Jinja2 implementation.
How:   Template names follow the `namespace::name` convention. The Jinja2
       renderer maps `error::404` to `error/404.html` inside its template
       directories. Names without a namespace are used as given, with
       `.html` appended when they carry no suffix.

Layouts:
    Handlers pass the layout as a template name (e.g. "layout::default").
    The renderer registers a `template` filter so a page can extend it:

        {% extends layout|template %}
"""

import os
from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

NAMESPACE_SEPARATOR = "::"
DEFAULT_SUFFIX = ".html"


class TemplateRenderer(ABC):
    """Renders a named template with the given parameters to a string."""

    @abstractmethod
    def render(self, name: str, params: Optional[Mapping[str, Any]] = None) -> str:
        ...


def resolve_template_name(name: str, suffix: str = DEFAULT_SUFFIX) -> str:
    """Translates `namespace::name` into a loader path (`namespace/name.html`)."""
    if NAMESPACE_SEPARATOR in name:
        namespace, name = name.split(NAMESPACE_SEPARATOR, 1)
        name = f"{namespace}/{name}"
    if not os.path.splitext(name)[1]:
        name += suffix
    return name


class JinjaTemplateRenderer(TemplateRenderer):
    def __init__(
        self,
        directories: Union[str, os.PathLike, Iterable[Union[str, os.PathLike]], None] = None,
        environment: Optional[Environment] = None,
        suffix: str = DEFAULT_SUFFIX,
    ):
        if environment is None:
            if directories is None:
                raise ValueError("Either template directories or a Jinja2 environment is required")
            if isinstance(directories, (str, os.PathLike)):
                directories = [directories]
            environment = Environment(
                loader=FileSystemLoader([str(d) for d in directories]),
                autoescape=select_autoescape(["html", "xml"]),
            )
        self.suffix = suffix
        self.environment = environment
        self.environment.filters["template"] = self.resolve

    def resolve(self, name: str) -> str:
        return resolve_template_name(name, self.suffix)

    def render(self, name: str, params: Optional[Mapping[str, Any]] = None) -> str:
        template = self.environment.get_template(self.resolve(name))
        return template.render(**dict(params or {}))
