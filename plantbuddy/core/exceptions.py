"""
Custom application exceptions.
"""

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""
    
    def __init__(self, detail: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(status_code=status_code, detail=detail)


class NotFoundException(AppException):
    """Resource not found exception."""
    
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(detail=detail, status_code=status.HTTP_404_NOT_FOUND)


class BadRequestException(AppException):
    """Bad request exception."""
    
    def __init__(self, detail: str = "Bad request"):
        super().__init__(detail=detail, status_code=status.HTTP_400_BAD_REQUEST)


class WeatherProviderException(AppException):
    """Weather provider call failed or returned something unusable."""
    
    def __init__(self, detail: str = "Failed to fetch weather data", status_code: int = status.HTTP_502_BAD_GATEWAY):
        super().__init__(detail=detail, status_code=status_code)


class WeatherConfigurationException(WeatherProviderException):
    """Weather provider credential is missing."""
    
    def __init__(self, detail: str = "OPENWEATHER_API_KEY not set"):
        super().__init__(detail=detail, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
