"""Async client for the subiquity installer backend.

Example:
	from subiquity_client import Endpoint, SubiquityClient

	client = SubiquityClient()
	client.open(Endpoint.from_config())
	status = await client.status()
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
	from subiquity_client.client.service import SubiquityClient
	from subiquity_client.config import CONFIG
	from subiquity_client.exceptions import SubiquityDecodeError, SubiquityError, SubiquityException
	from subiquity_client.keyboard.service import KeyboardStepper
	from subiquity_client.transport.service import Transport
	from subiquity_client.transport.views import Endpoint

# Lazy imports mapping, keeps `import subiquity_client` cheap
_LAZY_IMPORTS = {
	'SubiquityClient': ('subiquity_client.client.service', 'SubiquityClient'),
	'KeyboardStepper': ('subiquity_client.keyboard.service', 'KeyboardStepper'),
	'Transport': ('subiquity_client.transport.service', 'Transport'),
	'Endpoint': ('subiquity_client.transport.views', 'Endpoint'),
	'CONFIG': ('subiquity_client.config', 'CONFIG'),
	'SubiquityError': ('subiquity_client.exceptions', 'SubiquityError'),
	'SubiquityException': ('subiquity_client.exceptions', 'SubiquityException'),
	'SubiquityDecodeError': ('subiquity_client.exceptions', 'SubiquityDecodeError'),
}


def __getattr__(name: str):
	"""Lazy import mechanism for the public API."""
	if name in _LAZY_IMPORTS:
		module_path, attr_name = _LAZY_IMPORTS[name]
		from importlib import import_module

		attr = getattr(import_module(module_path), attr_name)
		globals()[name] = attr
		return attr
	raise AttributeError(f'module {__name__!r} has no attribute {name!r}')


__all__ = [
	'SubiquityClient',
	'KeyboardStepper',
	'Transport',
	'Endpoint',
	'CONFIG',
	'SubiquityError',
	'SubiquityException',
	'SubiquityDecodeError',
]
