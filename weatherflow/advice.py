from typing import List

from .models import WeatherRecord

HIGH_HUMIDITY = 80
VERY_WINDY_SPEED = 15


def generate_weather_advice(record: WeatherRecord) -> str:
    temp = record.temperature_c
    description = (record.description or "").lower()

    advice: List[str] = []

    if temp > 35:
        advice.append("⚠️ Extremely hot! Stay indoors with AC.")
    elif temp > 30:
        advice.append("🌡️ Very hot. Drink lots of water.")
    elif temp > 25:
        advice.append("☀️ Perfect weather for activities!")
    elif temp > 15:
        advice.append("🌤️ Pleasant. Light jacket for evening.")
    elif temp > 5:
        advice.append("🧥 Cool weather. Dress warmly.")
    elif temp > -5:
        advice.append("❄️ Cold! Multiple layers needed.")
    else:
        advice.append("🥶 Extreme cold! Limit outdoor exposure.")

    if record.humidity > HIGH_HUMIDITY:
        advice.append("💧 High humidity makes it feel hotter.")

    if record.wind_speed > VERY_WINDY_SPEED:
        advice.append("💨 Very windy. Secure loose items.")

    if "rain" in description:
        advice.append("☂️ Bring an umbrella!")
    elif "snow" in description:
        advice.append("⛄ Watch for slippery conditions.")
    elif "storm" in description:
        advice.append("⛈️ Stay indoors if possible.")
    elif "fog" in description or "mist" in description:
        advice.append("🌫️ Reduced visibility. Drive carefully.")

    return " ".join(advice)


def _heat_index(t: float, h: float) -> float:
    # Rothfusz regression in Celsius
    return (
        -8.784695 + 1.61139411 * t + 2.33854884 * h
        - 0.14611605 * t * h - 0.012308094 * t * t
        - 0.016424828 * h * h + 0.002211732 * t * t * h
        + 0.00072546 * t * h * h - 0.000003582 * t * t * h * h
    )


def _wind_chill(t: float, wind_kmh: float) -> float:
    return 13.12 + 0.6215 * t - 11.37 * wind_kmh ** 0.16 + 0.3965 * t * wind_kmh ** 0.16


def comfort_index(record: WeatherRecord) -> str:
    t = record.temperature_c
    h = float(record.humidity)
    wind_kmh = record.wind_speed * 3.6

    if t > 27 and h > 40:
        felt = _heat_index(t, h)
    elif t <= 10 and wind_kmh >= 4.8:
        felt = _wind_chill(t, wind_kmh)
    else:
        felt = t

    if felt > 40:
        return "Dangerous"
    if felt > 32:
        return "Very Uncomfortable"
    if felt > 27:
        return "Uncomfortable"
    if felt > 21:
        return "Comfortable"
    if felt > 15:
        return "Cool"
    if felt > 5:
        return "Cold"
    if felt > -5:
        return "Very Cold"
    return "Extreme Cold"
