"""Log formatting and redaction of secret-bearing payloads.

Redaction works on the decoded object graph: a secret field is replaced by a
mask of the same length on a copy of the value, and only that copy is ever
rendered for logs. The value sent on the wire is never touched.
"""

import json
from collections.abc import Callable
from typing import Any, TypeVar

from subiquity_client.active_directory.views import ADConnectionInfo
from subiquity_client.codec import decode, encode, type_name
from subiquity_client.identity.views import IdentityData
from subiquity_client.storage.views import GuidedChoiceV2, GuidedStorageResponseV2
from subiquity_client.exceptions import SubiquityDecodeError
from subiquity_client.ubuntu_pro.views import UbuntuProCheckTokenAnswer, UbuntuProInfo, UPCSWaitResponse

T = TypeVar('T')

MAX_RESPONSE_LOG_LENGTH = 1200
ELLIPSIS = '...'
MASK_CHAR = '*'

ResponseLogFormatter = Callable[[str, str], str]


def format_response_log(method: str, response: str) -> str:
	"""Render a successful response as '==> method body', truncating long bodies."""
	formatted = response
	if len(response) > MAX_RESPONSE_LOG_LENGTH:
		formatted = response[:MAX_RESPONSE_LOG_LENGTH] + ELLIPSIS
	return f'==> {method} {formatted}'


def hide_password(password: str | None) -> str | None:
	if password is None:
		return None
	return MASK_CHAR * len(password)


def redact_guided_choice(choice: GuidedChoiceV2) -> GuidedChoiceV2:
	return choice.copy_with(password=hide_password(choice.password))


def redact_guided_response(response: GuidedStorageResponseV2) -> GuidedStorageResponseV2:
	if response.configured is None:
		return response
	return response.copy_with(configured=redact_guided_choice(response.configured))


def redact_identity(identity: IdentityData) -> IdentityData:
	return identity.copy_with(crypted_password=hide_password(identity.crypted_password))


def redact_connection_info(info: ADConnectionInfo) -> ADConnectionInfo:
	return info.copy_with(password=hide_password(info.password))


def redact_pro_info(info: UbuntuProInfo) -> UbuntuProInfo:
	return info.copy_with(token=hide_password(info.token))


def redact_check_token_answer(answer: UbuntuProCheckTokenAnswer) -> UbuntuProCheckTokenAnswer:
	if answer.subscription is None:
		return answer
	subscription = answer.subscription.copy_with(contract_token=hide_password(answer.subscription.contract_token))
	return answer.copy_with(subscription=subscription)


def redact_upcs_wait_response(response: UPCSWaitResponse) -> UPCSWaitResponse:
	return response.copy_with(contract_token=hide_password(response.contract_token))


def describe(name: str, *args: Any) -> str:
	"""Method description used in logs and errors, e.g. set_locale("en_US").

	Arguments are JSON encoded; pass redacted copies for secret-bearing values.
	"""
	return f'{name}({", ".join(json.dumps(encode(arg)) for arg in args)})'


def redacted_response_formatter(model: Any, redact: Callable[[T], T]) -> ResponseLogFormatter:
	"""Build a response log formatter that masks secrets before rendering.

	The response is decoded into model, passed through redact and re-encoded,
	then truncated like any other response. Formatting never raises: an empty
	body is logged as is, and a body that does not decode into model is
	withheld since it cannot be redacted. The caller's own decode reports the
	error.
	"""

	def format_log(method: str, response: str) -> str:
		if not response.strip():
			return format_response_log(method, response)
		try:
			value = decode(model, json.loads(response))
		except (ValueError, SubiquityDecodeError):
			return f'==> {method} <{len(response)} characters withheld, not a valid {type_name(model)}>'
		return format_response_log(method, json.dumps(encode(redact(value))))

	return format_log
