"""Shared fixtures: an in-process fake backend served through httpx.MockTransport."""

import json
from typing import Any

import httpx
import pytest

from subiquity_client.client.service import SubiquityClient
from subiquity_client.transport.views import Endpoint


class FakeBackend:
	"""Answers requests from a (method, path) routing table and records every request."""

	def __init__(self) -> None:
		self.routes: dict[tuple[str, str], tuple[int, str]] = {}
		self.default: tuple[int, str] | None = None
		self.requests: list[httpx.Request] = []

	def respond(self, method: str, path: str, body: Any = None, status: int = 200, raw: str | None = None) -> None:
		self.routes[(method, path)] = (status, raw if raw is not None else json.dumps(body))

	def respond_all(self, status: int, raw: str) -> None:
		self.default = (status, raw)

	def handler(self, request: httpx.Request) -> httpx.Response:
		self.requests.append(request)
		route = self.routes.get((request.method, request.url.path.lstrip('/')), self.default)
		if route is None:
			return httpx.Response(404, text=f'no route for {request.method} {request.url.path}')
		status, text = route
		return httpx.Response(status, content=text.encode('utf-8'))

	@property
	def last(self) -> httpx.Request:
		return self.requests[-1]

	def last_json(self) -> Any:
		return json.loads(self.last.content)


@pytest.fixture
def backend() -> FakeBackend:
	return FakeBackend()


@pytest.fixture
async def client(backend: FakeBackend):
	client = SubiquityClient()
	client.open(Endpoint.unix('/run/subiquity/socket'), httpx.MockTransport(backend.handler))
	yield client
	await client.close()


def storage_response(*partitions: dict[str, Any]) -> dict[str, Any]:
	"""A StorageResponseV2 payload with one disk holding the given partitions/gaps"""
	return {
		'status': 'DONE',
		'error_report': None,
		'disks': [
			{
				'id': 'disk0',
				'label': 'QEMU HARDDISK',
				'type': 'local disk',
				'size': 10737418240,
				'usage_labels': [],
				'partitions': list(partitions),
				'ok_for_guided': True,
				'ptable': 'gpt',
				'preserve': False,
				'path': '/dev/sda',
				'boot_device': False,
				'can_be_boot_device': True,
				'model': 'QEMU HARDDISK',
				'vendor': 'ATA',
				'has_in_use_partition': False,
			}
		],
		'need_root': False,
		'need_boot': True,
		'install_minimum_size': 5368709120,
	}
