from subiquity_client.codec import SubiquityModel


class TimeZoneInfo(SubiquityModel):
	timezone: str
	from_geoip: bool
