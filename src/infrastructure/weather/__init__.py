"""Weather provider implementations."""

from src.infrastructure.weather.open_meteo import OpenMeteoWeatherProvider, get_weather_provider

__all__ = ["OpenMeteoWeatherProvider", "get_weather_provider"]
