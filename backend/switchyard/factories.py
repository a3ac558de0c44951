"""
Switchyard — Service Factories
===============================

What:  Builds the dispatch collaborators from Settings.
How:   Plain functions, one per service, each taking the validated Settings
       (or the relevant section) and returning a ready-to-use object.
When:  Called by create_app() while wiring; every configuration problem
       surfaces here, before the first request.
"""

from typing import Optional

from starlette.responses import Response

from switchyard.config import ErrorReportingSettings, Settings, XForwardedSettings
from switchyard.emitter.asgi import AsgiEmitter
from switchyard.emitter.stack import EmitterStack
from switchyard.error_reporting import ErrorReporter, JsonResponseHandler, PrettyPageHandler
from switchyard.handlers.not_found import NotFoundHandler
from switchyard.http.request_filter import FilterUsingXForwardedHeaders
from switchyard.templating import JinjaTemplateRenderer, TemplateRenderer


def create_emitter_stack() -> EmitterStack:
    return EmitterStack([AsgiEmitter()])


def create_request_filter(config: Optional[XForwardedSettings] = None) -> FilterUsingXForwardedHeaders:
    """
    Builds the trusted-proxy filter.

    - No section or no proxies: trusts nothing
    - "*" among the proxies: trusts every remote address
    - trusted_headers absent: all X-Forwarded-* headers trusted for matched proxies
    - trusted_headers empty: no header trusted, requests pass through unchanged
    """
    if config is None or not config.trusted_proxies:
        return FilterUsingXForwardedHeaders.trust_proxies([], trusted_headers=[])

    if config.trusted_headers is None:
        return FilterUsingXForwardedHeaders.trust_proxies(config.trusted_proxies)
    return FilterUsingXForwardedHeaders.trust_proxies(
        config.trusted_proxies, trusted_headers=config.trusted_headers
    )


def create_template_renderer(settings: Settings) -> Optional[TemplateRenderer]:
    if not settings.templates_dir:
        return None
    return JinjaTemplateRenderer(settings.templates_dir)


def create_not_found_handler(
    settings: Settings,
    renderer: Optional[TemplateRenderer] = None,
    response_prototype: Optional[Response] = None,
) -> NotFoundHandler:
    return NotFoundHandler(
        response_prototype=response_prototype,
        renderer=renderer,
        template=settings.not_found_template,
        layout=settings.not_found_layout,
    )


def create_error_reporter(settings: Settings) -> ErrorReporter:
    """
    JSON handler first (when displayed), then the HTML page in debug mode.
    Without either, the reporter answers with its generic JSON 500 body.
    """
    errors: ErrorReportingSettings = settings.errors
    reporter = ErrorReporter()
    if errors.json_exceptions.display:
        reporter.push_handler(
            JsonResponseHandler(
                show_trace=errors.json_exceptions.show_trace,
                ajax_only=errors.json_exceptions.ajax_only,
            )
        )
    if settings.debug:
        reporter.push_handler(PrettyPageHandler())
    return reporter
