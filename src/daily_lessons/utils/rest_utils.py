import logging
import typing

import requests

from daily_lessons.utils.env_vars import (
    get_request_timeout_seconds,
    get_supabase_anon_key,
    get_supabase_url,
)
from daily_lessons.utils.errors import DecodeError, TransportError
from daily_lessons.utils.jwt_utils import AuthSession

_LOGGER = logging.getLogger(__name__)


class SupabaseRestClient:
    """
    Thin HTTP wrapper over the backend's REST (row storage) and RPC endpoints.

    Every failure to reach the backend, including non-2xx statuses and auth
    failures, surfaces as TransportError. A 2xx response whose body is not JSON
    surfaces as DecodeError.
    """

    def __init__(
        self,
        base_url: typing.Optional[str] = None,
        anon_key: typing.Optional[str] = None,
        timeout_seconds: typing.Optional[int] = None,
    ) -> None:
        self.base_url = (base_url or get_supabase_url()).rstrip("/")
        self.anon_key = anon_key or get_supabase_anon_key()
        self.timeout_seconds = timeout_seconds or get_request_timeout_seconds()

    def _headers(self, session: AuthSession) -> dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {session.access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _send(self, method: str, url: str, session: AuthSession, **kwargs: typing.Any) -> typing.Any:
        try:
            if method == "GET":
                response = requests.get(url, headers=self._headers(session), timeout=self.timeout_seconds, **kwargs)
            else:
                response = requests.post(url, headers=self._headers(session), timeout=self.timeout_seconds, **kwargs)
            response.raise_for_status()
        except requests.exceptions.Timeout:
            _LOGGER.error(f"{method} {url} timed out after {self.timeout_seconds}s.")
            raise TransportError("The server took too long to respond. Using offline lesson.", status_code=504)
        except requests.exceptions.RequestException as e:
            status_code = e.response.status_code if e.response is not None else None
            _LOGGER.error(f"{method} {url} failed: {e}")
            if e.response is not None:
                _LOGGER.error(f"Backend error response: {e.response.text}")
            raise TransportError(status_code=status_code, context={"url": url})

        try:
            return response.json()
        except ValueError as e:
            _LOGGER.error(f"{method} {url} returned a non-JSON body: {e}", exc_info=True)
            raise DecodeError(context={"url": url})

    def rpc(
        self,
        function_name: str,
        session: AuthSession,
        params: typing.Optional[dict[str, typing.Any]] = None,
    ) -> typing.Any:
        url = f"{self.base_url}/rest/v1/rpc/{function_name}"
        _LOGGER.debug(f"Calling RPC {function_name}")
        return self._send("POST", url, session, json=params or {})

    def select(
        self,
        table_name: str,
        session: AuthSession,
        filters: dict[str, typing.Any],
        columns: str = "*",
    ) -> list[dict[str, typing.Any]]:
        """
        Equality-filtered select against a table, returning the raw rows.
        """
        url = f"{self.base_url}/rest/v1/{table_name}"
        query_params = {"select": columns}
        for column, value in filters.items():
            query_params[column] = f"eq.{value}"

        rows = self._send("GET", url, session, params=query_params)
        if not isinstance(rows, list):
            _LOGGER.error(f"Expected a list of rows from {table_name}, got {type(rows).__name__}")
            raise DecodeError(context={"table": table_name})
        return rows
