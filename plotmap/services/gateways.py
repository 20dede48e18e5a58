from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Union

import requests

from plotmap.services.plot_service import PlotError, PlotService

PlotPayload = Union[Dict[str, Any], List[Dict[str, Any]]]


class PlotGatewayError(Exception):
    """Raised when the persistence collaborator rejects or fails a request."""


class PlotGateway(Protocol):
    """Interface to wherever plots are persisted."""

    def list_plots(self) -> List[dict]:
        ...

    def upsert(self, payload: PlotPayload) -> List[dict]:
        ...

    def delete(self, plot_id: int) -> None:
        ...


class HttpPlotGateway(PlotGateway):
    """
    Talk to the plots API over HTTP.

    Writes need an admin session: call ``login`` first, or pass a session
    that already carries the admin cookie.
    """

    def __init__(
        self,
        base_url: str,
        http: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._url = self._base_url + "/api/plots"
        self._http = http or requests.Session()
        self._timeout = timeout

    def login(self, password: str) -> None:
        """Open an admin session; the cookie is kept on the HTTP session."""
        self._request("POST", self._base_url + "/api/auth/login", json={"password": password})

    def list_plots(self) -> List[dict]:
        return self._request("GET", self._url)

    def upsert(self, payload: PlotPayload) -> List[dict]:
        return self._request("POST", self._url, json=payload)

    def delete(self, plot_id: int) -> None:
        self._request("DELETE", self._url, params={"id": plot_id})

    def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = self._http.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            raise PlotGatewayError(f"Request to {url} failed: {exc}") from exc

        if not response.ok:
            raise PlotGatewayError(_error_message(response))
        try:
            return response.json()
        except ValueError as exc:
            raise PlotGatewayError(f"Invalid JSON from {url}") from exc


class LocalPlotGateway(PlotGateway):
    """In-process gateway over PlotService; needs an application context."""

    def __init__(self, service: PlotService) -> None:
        self._service = service

    def list_plots(self) -> List[dict]:
        try:
            return self._service.list_plots()
        except PlotError as exc:
            raise PlotGatewayError(str(exc)) from exc

    def upsert(self, payload: PlotPayload) -> List[dict]:
        payloads = payload if isinstance(payload, list) else [payload]
        try:
            return self._service.upsert_plots(payloads)
        except PlotError as exc:
            raise PlotGatewayError(str(exc)) from exc

    def delete(self, plot_id: int) -> None:
        try:
            self._service.delete_plot(plot_id)
        except PlotError as exc:
            raise PlotGatewayError(str(exc)) from exc


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if message:
            return str(message)
    return f"HTTP {response.status_code}"
