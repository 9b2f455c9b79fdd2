"""
REST Resource Client

Binds a URL template such as ``https://tenant/api/v2/users/:id`` to shared
request options and exposes CRUD verbs against it. Path placeholders are
filled from the call parameters; parameters that are not placeholders are
sent as the query string.

Every verb accepts an optional trailing callback. Without one it returns an
awaitable; with one the outcome is passed to ``callback(error, result)``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import quote, urlsplit, urlunsplit

import httpx

from idmgmt.exceptions import ArgumentError, ManagementAPIError
from idmgmt.utils import dispatch, split_callback

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"^:([A-Za-z_][A-Za-z0-9_]*)$")


@dataclass(frozen=True)
class PreparedRequest:
    """A fully resolved request, ready to send."""
    method: str
    url: str
    query: List[Tuple[str, str]]
    body: Any = None


def serialize_query(query: Mapping[str, Any], repeat_params: bool = True) -> List[Tuple[str, str]]:
    """
    Flatten query parameters into key/value pairs.

    Lists become repeated keys when ``repeat_params`` is set, otherwise a
    single comma-joined value. None values are dropped.
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            items = [_query_value(item) for item in value]
            if repeat_params:
                pairs.extend((key, item) for item in items)
            else:
                pairs.append((key, ",".join(items)))
        else:
            pairs.append((key, _query_value(value)))
    return pairs


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class RestClient:
    """
    Client for a single templated REST resource.

    Example:
        >>> users = RestClient("https://tenant.example.com/api/v2/users/:id",
        ...                    headers={"Authorization": "Bearer ..."})
        >>> user = await users.get({"id": "auth0|123"})
        >>> users.delete({"id": "auth0|123"}, lambda err, result: print(err))
    """

    def __init__(
        self,
        url_template: str,
        headers: Optional[Mapping[str, str]] = None,
        repeat_params: bool = True,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the resource client.

        Args:
            url_template: Absolute URL whose path may contain ``:name`` segments
            headers: Headers sent with every request
            repeat_params: Serialize list query values as repeated keys
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            transport: Optional httpx transport used instead of the network
        """
        if not isinstance(url_template, str) or not url_template.strip():
            raise ArgumentError("The resource URL template is invalid")

        scheme, netloc, path, _, _ = urlsplit(url_template.strip())
        self.url_template = url_template.strip()
        self._origin = (scheme, netloc)
        self._segments = tuple(path.split("/"))
        self.placeholders = tuple(
            match.group(1)
            for match in (PLACEHOLDER.match(segment) for segment in self._segments)
            if match
        )

        self.headers = dict(headers or {})
        self.repeat_params = repeat_params
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.transport = transport

    def __repr__(self) -> str:
        return f"RestClient({self.url_template!r})"

    # -- verbs --------------------------------------------------------------

    def get(self, *args):
        """GET a single resource. Accepts ``(params?, callback?)``."""
        args, callback = split_callback(args)
        request = self._prepare("GET", self._params_only(args, "get"))
        return dispatch(self._send(request), callback)

    def get_all(self, *args):
        """GET the resource collection. Accepts ``(params?, callback?)``."""
        args, callback = split_callback(args)
        request = self._prepare("GET", self._params_only(args, "get_all"))
        return dispatch(self._send(request), callback)

    def create(self, *args):
        """POST a new resource. Accepts ``(params?, body, callback?)``."""
        args, callback = split_callback(args)
        params, body = self._params_and_body(args, "create")
        request = self._prepare("POST", params, body)
        return dispatch(self._send(request), callback)

    def patch(self, *args):
        """PATCH a resource. Accepts ``(params?, body, callback?)``."""
        args, callback = split_callback(args)
        params, body = self._params_and_body(args, "patch")
        request = self._prepare("PATCH", params, body)
        return dispatch(self._send(request), callback)

    def update(self, *args):
        """PUT a resource. Accepts ``(params?, body, callback?)``."""
        args, callback = split_callback(args)
        params, body = self._params_and_body(args, "update")
        request = self._prepare("PUT", params, body)
        return dispatch(self._send(request), callback)

    def delete(self, *args):
        """DELETE a resource. Accepts ``(params?, callback?)``."""
        args, callback = split_callback(args)
        request = self._prepare("DELETE", self._params_only(args, "delete"))
        return dispatch(self._send(request), callback)

    # -- request building ---------------------------------------------------

    def _params_only(self, args: Sequence[Any], verb: str) -> Optional[Mapping[str, Any]]:
        if len(args) > 1:
            raise ArgumentError(f"The {verb} method accepts at most a params object and a callback")
        return self._check_params(args[0] if args else None, verb)

    def _params_and_body(self, args: Sequence[Any], verb: str) -> Tuple[Optional[Mapping[str, Any]], Any]:
        if len(args) == 1:
            return None, args[0]
        if len(args) == 2:
            return self._check_params(args[0], verb), args[1]
        raise ArgumentError(f"The {verb} method requires a request body")

    @staticmethod
    def _check_params(params: Any, verb: str) -> Optional[Mapping[str, Any]]:
        if params is not None and not isinstance(params, Mapping):
            raise ArgumentError(f"The {verb} method params must be a mapping")
        return params

    def build_url(self, params: Optional[Mapping[str, Any]] = None) -> Tuple[str, Dict[str, Any]]:
        """
        Fill the template placeholders from ``params``.

        Missing trailing placeholders are dropped along with their separator,
        so ``/users/:id`` resolves to ``/users`` when no id is given.

        Returns:
            Tuple of (absolute URL, remaining params for the query string)

        Raises:
            ArgumentError: If a missing placeholder is followed by further path segments
        """
        params = params or {}
        resolved: List[str] = []
        missing: Optional[str] = None

        for segment in self._segments:
            match = PLACEHOLDER.match(segment)
            value = params.get(match.group(1)) if match else None

            if match and value is None:
                missing = missing or match.group(1)
                continue
            if missing:
                raise ArgumentError(f"Missing value for URL parameter '{missing}' in {self.url_template}")

            resolved.append(quote(str(value), safe="") if match else segment)

        path = "/".join(resolved)
        query = {key: value for key, value in params.items() if key not in self.placeholders}
        return urlunsplit((*self._origin, path, "", "")), query

    def _prepare(self, method: str, params: Optional[Mapping[str, Any]], body: Any = None) -> PreparedRequest:
        url, query = self.build_url(params)
        return PreparedRequest(
            method=method,
            url=url,
            query=serialize_query(query, self.repeat_params),
            body=body,
        )

    # -- transport ----------------------------------------------------------

    async def _send(self, request: PreparedRequest) -> Any:
        """
        Perform the HTTP exchange.

        Raises:
            ManagementAPIError: If the request fails or the API returns an error status
        """
        logger.debug(f"{request.method} {request.url} query={request.query}")

        try:
            async with httpx.AsyncClient(
                headers=self.headers,
                timeout=self.timeout,
                verify=self.verify_ssl,
                transport=self.transport,
            ) as client:
                response = await client.request(
                    request.method,
                    request.url,
                    params=request.query or None,
                    json=request.body,
                )
        except httpx.RequestError as e:
            error_msg = f"Request to {request.url} failed: {e}"
            logger.error(error_msg)
            raise ManagementAPIError(error_msg) from e

        return self._parse_response(request, response)

    @staticmethod
    def _parse_response(request: PreparedRequest, response: httpx.Response) -> Any:
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = response.text or None

            error = None
            message = response.reason_phrase or f"Status code {response.status_code}"
            if isinstance(body, dict):
                error = body.get("error")
                message = body.get("message") or body.get("error_description") or error or message
            elif isinstance(body, str) and body.strip():
                message = body.strip()

            logger.error(f"Management API error ({response.status_code}) on {request.method} {request.url}: {message}")
            raise ManagementAPIError(message, status_code=response.status_code, error=error, body=body)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError:
            return response.text
