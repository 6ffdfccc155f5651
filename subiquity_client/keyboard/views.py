from typing import Literal

from pydantic import Field

from subiquity_client.codec import SubiquityModel, discriminated_union


class KeyboardSetting(SubiquityModel):
	layout: str
	variant: str = ''
	toggle: str | None = None


class KeyboardVariant(SubiquityModel):
	code: str
	name: str


class KeyboardLayout(SubiquityModel):
	code: str
	name: str
	variants: list[KeyboardVariant] = Field(default_factory=list)


class KeyboardSetup(SubiquityModel):
	setting: KeyboardSetting
	layouts: list[KeyboardLayout] = Field(default_factory=list)


# Keyboard detection wizard steps


class StepPressKey(SubiquityModel):
	"""Ask the user to press one of the given symbols.

	keycodes maps the keycode the user pressed to the index of the next step.
	"""

	type: Literal['StepPressKey'] = Field(default='StepPressKey', alias='$type')
	symbols: list[str]
	keycodes: dict[int, str]


class StepKeyPresent(SubiquityModel):
	"""Ask whether symbol is present on the keyboard; yes/no are the next step indexes"""

	type: Literal['StepKeyPresent'] = Field(default='StepKeyPresent', alias='$type')
	symbol: str
	yes: str
	no: str


class StepResult(SubiquityModel):
	"""Terminal step: the detected layout and variant"""

	type: Literal['StepResult'] = Field(default='StepResult', alias='$type')
	layout: str
	variant: str


AnyStep = discriminated_union('AnyStep', StepPressKey, StepKeyPresent, StepResult)
