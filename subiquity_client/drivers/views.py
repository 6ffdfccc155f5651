from subiquity_client.codec import SubiquityModel


class DriversResponse(SubiquityModel):
	"""Third-party driver status.

	drivers is None while the backend is still looking for drivers.
	"""

	install: bool
	drivers: list[str] | None = None
	local_only: bool = False
	search_drivers: bool = False


class CodecsData(SubiquityModel):
	install: bool
