"""
Transport layer for vappnet.

This module defines the contract the network configuration operations use to
reach the vCloud Director API, a ``requests`` based implementation of it, and
the helpers that turn a response into an asynchronous task id.
"""

import re
import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Tuple

import requests
from lxml import etree

from ..constants import CONTENT_TYPES, DEFAULT_VALUES, HEADERS, PATHS, TAG_NAMES, TASK_MARKER
from .exceptions import ParseError, TaskReferenceError, TransportError
from .xml.base import find_descendant, local_name, parse_xml_string

logger = logging.getLogger("vappnet")

Response = Tuple[Optional[etree._Element], Mapping[str, str]]

_TASK_PREFIX = re.compile(r".*" + re.escape(TASK_MARKER))


class Transport(ABC):
    """
    Sends requests to the remote API and returns parsed documents.

    Implementations own authentication, session handling and status code
    handling. They raise ``TransportError`` for anything that is not a
    successful response.
    """

    def __init__(self, api_url: str):
        self.api_url = api_url.rstrip("/")

    @abstractmethod
    def send(
        self,
        method: str,
        path: str,
        body: Optional[bytes] = None,
        content_type: Optional[str] = None,
    ) -> Response:
        """
        Execute a request.

        Args:
            method: HTTP verb (GET, PUT, POST)
            path: Path relative to ``api_url``, or a fully qualified URL
            body: Optional request body
            content_type: Optional content type of the body

        Returns:
            Tuple of (parsed root element or None for an empty body, response headers)

        Raises:
            TransportError: If the request fails
        """


class HttpTransport(Transport):
    """
    Transport talking to the vCloud Director API over HTTP(S).

    Every request carries the versioned ``Accept`` header and, once known, the
    ``x-vcloud-authorization`` session token.
    """

    def __init__(
        self,
        api_url: str,
        auth_token: Optional[str] = None,
        api_version: str = DEFAULT_VALUES["API_VERSION"],
        verify_ssl: bool = True,
        timeout: float = DEFAULT_VALUES["TIMEOUT"],
        session: Optional[requests.Session] = None,
    ):
        super().__init__(api_url)
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.session = session or requests.Session()
        self.session.headers.update({
            HEADERS["ACCEPT"]: CONTENT_TYPES["ACCEPT"].format(api_version=api_version)
        })
        if auth_token:
            self.session.headers.update({HEADERS["AUTH_TOKEN"]: auth_token})

    @property
    def auth_token(self) -> Optional[str]:
        """Session token sent with every request, if any."""
        return self.session.headers.get(HEADERS["AUTH_TOKEN"])

    def login(self, username: str, password: str) -> str:
        """
        Open an API session and keep its token for later requests.

        Args:
            username: User name, usually ``user@org``
            password: Password

        Returns:
            The session token

        Raises:
            TransportError: If the login request fails or returns no token
        """
        logger.info(f"Opening API session for {username}")
        response = self._request("POST", PATHS["SESSIONS"], auth=(username, password))
        token = response.headers.get(HEADERS["AUTH_TOKEN"])
        if not token:
            raise TransportError("Login response did not include a session token", response.status_code)
        self.session.headers.update({HEADERS["AUTH_TOKEN"]: token})
        return token

    def send(
        self,
        method: str,
        path: str,
        body: Optional[bytes] = None,
        content_type: Optional[str] = None,
    ) -> Response:
        headers = {}
        if content_type:
            headers[HEADERS["CONTENT_TYPE"]] = content_type

        response = self._request(method, path, data=body, headers=headers)

        if not response.content or not response.content.strip():
            return None, response.headers

        try:
            tree, root = parse_xml_string(response.content)
        except ParseError as e:
            raise TransportError(f"Malformed response from {method.upper()} {path}: {e}", response.status_code) from e
        return root, response.headers

    def _url(self, path: str) -> str:
        if re.match(r"https?://", path):
            return path
        return "/".join([self.api_url, path.lstrip("/")])

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = self._url(path)
        logger.debug(f"{method.upper()} request to {url}")

        try:
            response = self.session.request(
                method.upper(), url, timeout=self.timeout, verify=self.verify_ssl, **kwargs
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Cannot connect to vCloud Director API at {url}: {e}")
            raise TransportError(f"Cannot connect to vCloud Director API: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error(f"{method.upper()} {url} failed with status {response.status_code}: {message}")
            raise TransportError(message, response.status_code)

        return response


def _error_message(response: requests.Response) -> str:
    """Extract the message of a vCD ``Error`` document, falling back to the status line."""
    fallback = f"HTTP {response.status_code} {response.reason or ''}".strip()
    if not response.content:
        return fallback
    try:
        tree, root = parse_xml_string(response.content)
    except ParseError:
        return fallback
    if local_name(root) != TAG_NAMES["ERROR"]:
        return fallback
    message = root.get("message") or fallback
    minor_code = root.get("minorErrorCode")
    return f"[{minor_code}] {message}" if minor_code else message


def get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Look up a response header case-insensitively."""
    value = headers.get(name)
    if value is not None:
        return value
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def task_id_from_url(url: str) -> str:
    """Strip everything up to and including the last ``task/`` from a task URL."""
    return _TASK_PREFIX.sub("", url, count=1)


def extract_task_id(headers: Mapping[str, str], document: Optional[etree._Element] = None) -> str:
    """
    Extract the id of the asynchronous task an accepted request started.

    The ``Location`` header is used when present. Otherwise a ``Task`` document
    returned as the response body provides the task URL in its ``href``.

    Args:
        headers: Response headers
        document: Parsed response body, if any

    Returns:
        Task id

    Raises:
        TaskReferenceError: If neither source references a task
    """
    location = get_header(headers, HEADERS["LOCATION"])
    if location:
        return task_id_from_url(location)

    if document is not None:
        task = document if local_name(document) == TAG_NAMES["TASK"] else find_descendant(document, TAG_NAMES["TASK"])
        if task is not None and task.get("href"):
            logger.debug("No Location header, using the href of the returned Task")
            return task_id_from_url(task.get("href"))

    raise TaskReferenceError("Response does not reference an asynchronous task")
