"""WSGI wrappers installed by ``create_app``."""

import logging
from urllib.parse import parse_qs

logger = logging.getLogger(__name__)

OVERRIDABLE_METHODS = frozenset(['PUT', 'PATCH', 'DELETE'])


def method_override_wrapper(app_wsgi):
    """Let HTML forms reach PATCH/PUT/DELETE routes.

    A POST whose query string carries ``_method=PATCH`` (or which sends an
    ``X-HTTP-Method-Override`` header) is dispatched as that method. Only the
    query string is inspected so the request body is left for Flask to parse.
    """
    def _wrapped(environ, start_response):
        if environ.get('REQUEST_METHOD', '').upper() == 'POST':
            override = environ.get('HTTP_X_HTTP_METHOD_OVERRIDE')
            if not override:
                values = parse_qs(environ.get('QUERY_STRING', '')).get('_method')
                override = values[0] if values else None
            if override and override.upper() in OVERRIDABLE_METHODS:
                environ['REQUEST_METHOD'] = override.upper()
        return app_wsgi(environ, start_response)
    return _wrapped


def request_log_wrapper(app_wsgi):
    """Log method, path and response status of every request at DEBUG."""
    def _wrapped(environ, start_response):
        _path = environ.get('PATH_INFO', '-')
        _method = environ.get('REQUEST_METHOD', '-')
        logger.debug("[WSGI] ▶ %s %s", _method, _path)

        def _sr(status, headers, exc_info=None):
            logger.debug("[WSGI] ◀ %s for %s %s", status, _method, _path)
            return start_response(status, headers, exc_info)
        return app_wsgi(environ, _sr)
    return _wrapped
