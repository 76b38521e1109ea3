class WeatherAppError(Exception):
    """Base error. ``str(exc)`` is always safe to show to the user."""


class LocationNotFoundError(WeatherAppError):
    pass


class UnauthorizedError(WeatherAppError):
    pass


class UpstreamError(WeatherAppError):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class NetworkError(WeatherAppError):
    pass


class InputValidationError(WeatherAppError):
    pass


class GeolocationError(WeatherAppError):
    pass


class AssistantUnavailableError(WeatherAppError):
    pass
