from enum import Enum

from pydantic import Field

from subiquity_client.codec import SubiquityModel


class UbuntuProInfo(SubiquityModel):
	"""Ubuntu Pro attachment. token is a secret."""

	token: str = ''


class UbuntuProCheckTokenStatus(str, Enum):
	VALID_TOKEN = 'VALID_TOKEN'
	INVALID_TOKEN = 'INVALID_TOKEN'
	EXPIRED_TOKEN = 'EXPIRED_TOKEN'
	UNKNOWN_ERROR = 'UNKNOWN_ERROR'


class UbuntuProService(SubiquityModel):
	name: str
	description: str
	auto_enabled: bool


class UbuntuProSubscription(SubiquityModel):
	contract_name: str
	account_name: str
	contract_token: str
	services: list[UbuntuProService] = Field(default_factory=list)


class UbuntuProCheckTokenAnswer(SubiquityModel):
	status: UbuntuProCheckTokenStatus
	subscription: UbuntuProSubscription | None = None


class UPCSInitiateResponse(SubiquityModel):
	"""Magic-attach code the user enters at ubuntu.com/pro/attach"""

	user_code: str
	validity_seconds: int


class UPCSWaitStatus(str, Enum):
	TOKEN_ADDED = 'TOKEN_ADDED'
	TIMEOUT = 'TIMEOUT'


class UPCSWaitResponse(SubiquityModel):
	status: UPCSWaitStatus
	contract_token: str | None = None
