"""HTTP transport to the installer backend.

Requests are plain HTTP/1.1 carried over the backend's Unix domain socket (or
a loopback TCP port). Query parameter values are JSON encoded, so a boolean is
sent as ``wait=true`` and a string as ``username=%22alice%22``; the backend
decodes every query value as JSON.

The transport never retries and never imposes a timeout: long-poll requests
are bounded by the backend. Callers that need a deadline wrap the awaited call
themselves (e.g. asyncio.timeout()).
"""

import json
import logging
from collections.abc import Collection, Mapping
from typing import Any

import httpx

from subiquity_client.codec import encode
from subiquity_client.exceptions import SubiquityDecodeError, SubiquityException
from subiquity_client.redaction import ResponseLogFormatter, format_response_log, hide_password
from subiquity_client.transport.views import Endpoint

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = 'application/json; charset=utf-8'


class _NoBody:
	def __repr__(self) -> str:
		return 'NO_BODY'


# Distinguishes "no request body" from a JSON null body
NO_BODY: Any = _NoBody()


def encode_query(params: Mapping[str, Any] | None) -> dict[str, str]:
	"""JSON encode every query parameter value."""
	if not params:
		return {}
	return {key: json.dumps(encode(value)) for key, value in params.items()}


class Transport:
	"""Owns the HTTP client bound to one backend endpoint.

	open() must be called before any request; open() and close() must not be
	interleaved with in-flight requests. Requests themselves may run
	concurrently.
	"""

	def __init__(self) -> None:
		self._endpoint: Endpoint | None = None
		self._client: httpx.AsyncClient | None = None

	@property
	def endpoint(self) -> Endpoint | None:
		return self._endpoint

	@property
	def is_open(self) -> bool:
		return self._client is not None

	def open(self, endpoint: Endpoint, transport: httpx.AsyncBaseTransport | None = None) -> None:
		"""Bind to endpoint.

		Args:
			endpoint: Backend address; Unix endpoints route every connection through the socket
			transport: Optional httpx transport replacing the default connection handling
		"""
		if self._client is not None:
			raise RuntimeError(f'Transport is already open to {self._endpoint}')

		logger.info(f'Opening socket to {endpoint}')
		if transport is None and endpoint.is_unix:
			transport = httpx.AsyncHTTPTransport(uds=endpoint.address)

		self._endpoint = endpoint
		# No client-side deadline: long-poll requests are bounded by the backend.
		# trust_env=False keeps an installer-configured proxy away from the local socket.
		self._client = httpx.AsyncClient(transport=transport, timeout=None, trust_env=False)

	async def close(self) -> None:
		if self._client is None:
			return
		logger.info(f'Closing socket to {self._endpoint}')
		client, self._client = self._client, None
		await client.aclose()

	def _require_client(self) -> httpx.AsyncClient:
		if self._client is None or self._endpoint is None:
			raise RuntimeError('Transport is not open; call open() first')
		return self._client

	def url(self, path: str, params: Mapping[str, Any] | None = None) -> httpx.URL:
		if self._endpoint is None:
			raise RuntimeError('Transport is not open; call open() first')
		return httpx.URL(f'http://{self._endpoint.authority}/{path.lstrip("/")}', params=encode_query(params))

	def _loggable_url(self, path: str, params: Mapping[str, Any] | None, secret_params: Collection[str]) -> httpx.URL:
		if not params or not secret_params:
			return self.url(path, params)
		masked = {key: hide_password(str(value)) if key in secret_params else value for key, value in params.items()}
		return self.url(path, masked)

	async def request(
		self,
		method: str,
		path: str,
		params: Mapping[str, Any] | None = None,
		body: Any = NO_BODY,
		*,
		secret_params: Collection[str] = (),
	) -> httpx.Response:
		"""Send one request and return the fully read response.

		Args:
			method: HTTP method
			path: Endpoint path relative to the backend root
			params: Query parameters, JSON encoded before sending
			body: JSON body (models are encoded); NO_BODY sends no body at all
			secret_params: Query parameter names masked in the request log
		"""
		client = self._require_client()
		url = self.url(path, params)
		logger.debug(f'{method} {self._loggable_url(path, params, secret_params)}')

		headers: dict[str, str] = {}
		content: bytes | None = None
		if body is not NO_BODY:
			content = json.dumps(encode(body)).encode('utf-8')
			headers['Content-Type'] = JSON_CONTENT_TYPE

		return await client.request(method, url, content=content, headers=headers)

	async def receive(
		self,
		method: str,
		response: httpx.Response,
		format_log: ResponseLogFormatter = format_response_log,
	) -> Any:
		"""Classify a response and return its decoded JSON body.

		Raises:
			SubiquityException: for any status other than 200; the body is not parsed
			SubiquityDecodeError: when a 200 response does not contain valid JSON
		"""
		text = (await response.aread()).decode('utf-8')
		if response.status_code != 200:
			raise SubiquityException(method, response.status_code, text)

		if not text.strip():
			data = None
		else:
			try:
				data = json.loads(text)
			except json.JSONDecodeError as e:
				raise SubiquityDecodeError('JSON', None, None, f'{method} returned invalid JSON: {e}') from e

		if logger.isEnabledFor(logging.DEBUG):
			logger.debug(format_log(method, text))
		return data

	async def call(
		self,
		method: str,
		http_method: str,
		path: str,
		params: Mapping[str, Any] | None = None,
		body: Any = NO_BODY,
		*,
		format_log: ResponseLogFormatter = format_response_log,
		secret_params: Collection[str] = (),
	) -> Any:
		"""request() followed by receive(); method is the description used in logs and errors."""
		response = await self.request(http_method, path, params, body, secret_params=secret_params)
		return await self.receive(method, response, format_log)
