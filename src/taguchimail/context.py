"""
Connection context for the TaguchiMail API.

A Context holds the endpoint identity (host, organization, credentials) and
issues every request made by record objects. Commands are carried in the
``_method`` query parameter rather than the HTTP verb, since the API
overloads commands such as TRIGGER, PROOF, APPROVAL and CREATEORUPDATE.
Authentication is sent with every request in the ``auth`` parameter.
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import requests

from .config import ConfigManager
from .core.base import BaseConnection
from .core.credentials import DEFAULT_CREDENTIAL, CredentialManager
from .exceptions import ConnectionError
from .query import QueryPredicate, serialize_predicates

logger = logging.getLogger(__name__)

USER_AGENT = "taguchimail-python"
DEFAULT_TIMEOUT = 60


class Context(BaseConnection):
    """
    A TaguchiMail connection, required by every record object.

    Examples:
        >>> ctx = Context("tm.example.org", "me@example.org", "secret", "3")
        >>> ctx.base_uri
        'https://tm.example.org/admin/api/3'
        >>> body = ctx.request("subscriber", "GET", "42")
    """

    def __init__(
        self,
        hostname: str,
        username: str,
        password: str,
        organization_id: Union[str, int],
        timeout: float = DEFAULT_TIMEOUT,
        connect_timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize the context.

        Args:
            hostname: Hostname (or IP address) of the TaguchiMail instance
            username: Username (email address) of an authorized user
            password: Password of that user
            organization_id: Organization the user is authorized to access
            timeout: Read timeout in seconds
            connect_timeout: Connect timeout in seconds
        """
        super().__init__()
        self._hostname = hostname
        self._username = username
        self._password = password
        self._organization_id = organization_id
        self._base_uri = f"https://{hostname}/admin/api/{organization_id}"
        self._timeout: Tuple[float, float] = (connect_timeout, timeout)
        self._debug = False

    @classmethod
    def from_env(
        cls,
        config: Optional[ConfigManager] = None,
        credential: str = DEFAULT_CREDENTIAL,
    ) -> "Context":
        """
        Build a context from environment settings.

        Host and organization come from ``TAGUCHI_HOST`` and
        ``TAGUCHI_ORGANIZATION_ID``; the account from the JSON credential
        ``{credential}_PASSWORD`` (``TAGUCHI_CREDENTIALS_PASSWORD`` by default).

        Raises:
            ConfigurationError: If host or organization is unset
            CredentialError: If the credentials are missing or invalid
        """
        config = config or ConfigManager()
        creds = CredentialManager().get_account(credential)
        ctx = cls(
            config.require("host"),
            creds["username"],
            creds["password"],
            config.require("organization_id"),
            timeout=config.get("timeout", DEFAULT_TIMEOUT),
            connect_timeout=config.get("connect_timeout", DEFAULT_TIMEOUT),
        )
        if config.get("debug", False):
            ctx.enable_debug()
        return ctx

    # -- Identity ---------------------------------------------------------------

    @property
    def hostname(self) -> str:
        return self._hostname

    @property
    def username(self) -> str:
        return self._username

    @property
    def organization_id(self) -> Union[str, int]:
        return self._organization_id

    @property
    def base_uri(self) -> str:
        return self._base_uri

    @property
    def debug(self) -> bool:
        return self._debug

    def enable_debug(self) -> None:
        """Log every outgoing command, URL and body at INFO level."""
        self._debug = True

    def disable_debug(self) -> None:
        """Stop logging outgoing requests."""
        self._debug = False

    # -- Connection lifecycle ---------------------------------------------------

    def connect(self) -> None:
        """Open the HTTP session used for requests."""
        if self._client is None:
            self._client = requests.Session()
            self._client.headers["User-Agent"] = USER_AGENT
        self._is_connected = True
        logger.info(f"Connected to TaguchiMail at {self._hostname}")

    def disconnect(self) -> None:
        """Close the HTTP session."""
        if self._client is not None:
            self._client.close()
        self._client = None
        self._is_connected = False
        logger.debug("Disconnected from TaguchiMail")

    def health_check(self) -> bool:
        """
        Check the connection by fetching at most one list record.

        Returns:
            True if the API answers with a 2xx status, False otherwise
        """
        try:
            resp = self.send("list", "GET", parameters={"limit": "1"})
        except ConnectionError:
            return False
        return 200 <= resp.status_code < 300

    # -- Requests ---------------------------------------------------------------

    def build_params(
        self,
        command: str,
        parameters: Optional[Dict[str, Any]] = None,
        query: Optional[Iterable[Union[QueryPredicate, str]]] = None,
    ) -> List[Tuple[str, str]]:
        """
        Build the ordered query-string parameters for a request.

        Order is ``_method``, ``auth``, one ``query`` per predicate, then
        each caller-supplied parameter. Parameters whose value is None are
        left out.
        """
        params: List[Tuple[str, str]] = [
            ("_method", command),
            ("auth", f"{self._username}|{self._password}"),
        ]
        params.extend(("query", predicate) for predicate in serialize_predicates(query))
        if parameters:
            params.extend(
                (str(key), str(value))
                for key, value in parameters.items()
                if value is not None
            )
        return params

    def build_url(self, resource: str, record_id: Optional[Any] = None) -> str:
        """Return ``base_uri/resource/[record_id]``."""
        url = f"{self._base_uri}/{resource}/"
        if record_id is not None and record_id != "":
            url += str(record_id)
        return url

    def send(
        self,
        resource: str,
        command: str,
        record_id: Optional[Any] = None,
        data: Optional[Any] = None,
        parameters: Optional[Dict[str, Any]] = None,
        query: Optional[Iterable[Union[QueryPredicate, str]]] = None,
    ) -> requests.Response:
        """
        Issue a request and return the transport response.

        Status codes are not interpreted here.

        Args:
            resource: Resource type (e.g. 'subscriber')
            command: Command verb (GET, PUT, POST, CREATEORUPDATE, ...)
            record_id: Record the command applies to, if any
            data: JSON-compatible body, or an already-encoded JSON string
            parameters: Extra query parameters (sort, order, offset, limit, ...)
            query: Query predicates

        Returns:
            The requests.Response

        Raises:
            ConnectionError: If the transport fails (network, TLS, timeout)
        """
        if self._client is None:
            self.connect()

        url = self.build_url(resource, record_id)
        params = self.build_params(command, parameters, query)
        headers = {"PreAuthenticate": "true", "Accept": "application/json"}

        body: Optional[bytes] = None
        if command != "GET" and data is not None:
            encoded = data if isinstance(data, str) else json.dumps(data)
            if encoded:
                body = encoded.encode("utf-8")
                headers["Content-Type"] = "application/json"
                headers["Content-Length"] = str(len(body))

        method = "GET" if command == "GET" else "POST"

        if self._debug:
            logger.info(
                f"Sending {command} {self._redacted_url(url, params)}"
                + (f" with:\n{body.decode('utf-8')}" if body else "")
            )
        else:
            logger.debug(f"{method} {resource} command={command} id={record_id}")

        try:
            return self._client.request(
                method,
                url,
                params=params,
                data=body,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error(f"TaguchiMail {command} request to {resource} failed: {str(e)}")
            raise ConnectionError(
                f"TaguchiMail {command} request to {resource} failed: {e}"
            ) from e

    def request(
        self,
        resource: str,
        command: str,
        record_id: Optional[Any] = None,
        data: Optional[Any] = None,
        parameters: Optional[Dict[str, Any]] = None,
        query: Optional[Iterable[Union[QueryPredicate, str]]] = None,
    ) -> str:
        """
        Issue a request and return the raw response body.

        Takes the same arguments as send(). JSON decoding and status
        handling are left to the caller.
        """
        resp = self.send(resource, command, record_id, data, parameters, query)
        return resp.text

    def _redacted_url(self, url: str, params: List[Tuple[str, str]]) -> str:
        shown = [(k, "***" if k == "auth" else v) for k, v in params]
        prepared = requests.Request("GET", url, params=shown).prepare()
        return prepared.url

    def __repr__(self) -> str:
        status = "connected" if self._is_connected else "disconnected"
        return (
            f"<Context {self._base_uri} user={self._username} status={status}>"
        )
