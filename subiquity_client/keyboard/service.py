import logging
from typing import TYPE_CHECKING

from subiquity_client.keyboard.views import AnyStep, StepKeyPresent, StepPressKey, StepResult

if TYPE_CHECKING:
	from subiquity_client.client.service import SubiquityClient

logger = logging.getLogger(__name__)


class KeyboardStepper:
	"""Walks the keyboard detection wizard one step at a time.

	The backend describes the wizard as a graph of steps addressed by index.
	Each answer selects the index of the next step until a StepResult is reached.
	"""

	def __init__(self, client: 'SubiquityClient') -> None:
		self.client = client
		self.step: AnyStep | None = None

	@property
	def result(self) -> StepResult | None:
		if isinstance(self.step, StepResult):
			return self.step
		return None

	@property
	def done(self) -> bool:
		return self.result is not None

	async def start(self) -> AnyStep:
		return await self._load('0')

	async def press_key(self, keycode: int) -> AnyStep:
		"""Report the keycode the user pressed in answer to a StepPressKey."""
		step = self._expect(StepPressKey)
		index = step.keycodes.get(keycode)
		if index is None:
			raise ValueError(f'Unexpected keycode {keycode}, expected one of {sorted(step.keycodes)}')
		return await self._load(index)

	async def answer(self, present: bool) -> AnyStep:
		"""Answer a StepKeyPresent question."""
		step = self._expect(StepKeyPresent)
		return await self._load(step.yes if present else step.no)

	def _expect(self, step_type: type) -> AnyStep:
		if self.step is None:
			raise RuntimeError('Keyboard detection has not been started')
		if isinstance(self.step, StepResult):
			raise RuntimeError(f'Keyboard detection already finished with {self.step.layout}')
		if not isinstance(self.step, step_type):
			raise RuntimeError(f'Current step is {type(self.step).__name__}, not {step_type.__name__}')
		return self.step

	async def _load(self, index: str) -> AnyStep:
		self.step = await self.client.get_keyboard_step(index)
		logger.debug(f'Keyboard step {index}: {type(self.step).__name__}')
		return self.step
