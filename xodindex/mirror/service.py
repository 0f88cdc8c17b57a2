# -*- coding: utf-8 -*-
"""
Service Description - Resolve the artifact download endpoint.

The package manager publishes a Swagger document. The mirror looks up
the operation that serves one library version by its ``operationId``
and fills its path template per artifact. Path parameters have been
spelled several ways over time, so each placeholder accepts aliases.

License
-------
MIT License
Copyright (c) 2026 xod-library-index contributors
See LICENSE file for full text.

Created
-------
2026-10-17

Modified
--------
2026-10-17
"""

# Standard library
import logging
import re
from typing import Any, Dict, List, NamedTuple, Optional
from urllib.parse import quote, urlsplit

logger = logging.getLogger(__name__)

# xodindex internal
from xodindex.core.errors import ServiceDescriptionError
from xodindex.core.fetch import ResilientFetcher


_PLACEHOLDER = re.compile(r"\{([^}]+)\}")

PARAMETER_ALIASES: Dict[str, List[str]] = {
    'orgname': ['orgname', 'owner', 'org'],
    'libname': ['libname', 'library', 'name'],
    'semver_or_latest': ['semver_or_latest', 'version', 'semverOrLatest'],
}


class ServiceOperation(NamedTuple):
    """Path template and HTTP method of a described operation."""

    path_template: str
    method: str


def service_description_urls(swagger_url: str) -> List[str]:
    """Candidate locations of the service description document."""
    normalized = swagger_url if swagger_url.endswith("/") else f"{swagger_url}/"
    return [normalized, f"{normalized}swagger.json"]


def fetch_service_description(fetcher: ResilientFetcher, swagger_url: str) -> Any:
    """Fetch the service description from the first working candidate.

    Raises
    ------
    ServiceDescriptionError
        If every candidate fails.
    """
    candidates = service_description_urls(swagger_url)
    last_error: Optional[Exception] = None
    for url in candidates:
        try:
            return fetcher.get_json(url)
        except Exception as e:
            logger.debug("Service description not available at %s: %s", url, e)
            last_error = e

    raise ServiceDescriptionError(
        f"Unable to fetch swagger spec from {', '.join(candidates)}: "
        f"{last_error if last_error is not None else 'unknown error'}"
    )


def resolve_operation(spec: Any, operation_id: str) -> ServiceOperation:
    """Find the path and method of ``operation_id`` in a Swagger document.

    Raises
    ------
    ServiceDescriptionError
        If the document has no ``paths`` or lacks the operation.
    """
    if not isinstance(spec, dict) or not isinstance(spec.get('paths'), dict):
        raise ServiceDescriptionError("Invalid swagger spec, missing paths")

    for path_template, methods in spec['paths'].items():
        if not isinstance(methods, dict):
            continue
        for method, operation in methods.items():
            if isinstance(operation, dict) and operation.get('operationId') == operation_id:
                return ServiceOperation(path_template, method.upper())

    raise ServiceDescriptionError(f"Operation {operation_id} not found in swagger spec")


def build_path(path_template: str, params: Dict[str, str]) -> str:
    """Substitute ``{placeholder}``s in ``path_template``.

    A placeholder spelled with any name of an alias group is filled from
    whichever name of that group ``params`` provides. Values are
    percent-encoded as a single path segment.

    Raises
    ------
    ServiceDescriptionError
        If a placeholder has no matching parameter.
    """
    def substitute(match) -> str:
        name = match.group(1)
        choices = next(
            (names for names in PARAMETER_ALIASES.values() if name in names),
            [name],
        )
        for choice in choices:
            if choice in params:
                return quote(str(params[choice]), safe="")
        raise ServiceDescriptionError(f"Missing path parameter: {name}")

    return _PLACEHOLDER.sub(substitute, path_template)


def api_base_url(swagger_url: str) -> str:
    """Scheme and host of the service description URL."""
    parts = urlsplit(swagger_url)
    return f"{parts.scheme}://{parts.netloc}"
