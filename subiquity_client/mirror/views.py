from enum import Enum

from pydantic import Field

from subiquity_client.codec import SubiquityModel


class MirrorCheckStatus(str, Enum):
	OK = 'OK'
	RUNNING = 'RUNNING'
	FAILED = 'FAILED'


class MirrorCheckResponse(SubiquityModel):
	url: str
	status: MirrorCheckStatus
	output: str = ''


class MirrorGet(SubiquityModel):
	relevant: bool
	elected: str | None = None
	candidates: list[str] = Field(default_factory=list)
	staged: str | None = None
	use_during_installation: bool = False


class MirrorPost(SubiquityModel):
	elected: str | None = None
	candidates: list[str] | None = None
	staged: str | None = None


class MirrorPostResponse(str, Enum):
	OK = 'OK'
	NO_USABLE_MIRROR = 'NO_USABLE_MIRROR'
