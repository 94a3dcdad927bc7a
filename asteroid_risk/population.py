"""
Population density lookup.

Resolves a latitude/longitude to a country with a reverse geocoding
service, then asks the World Bank for that country's most recent
population density (indicator EN.POP.DNST, people per km^2).

The impact calculator never calls this module; callers look the density
up and pass it in as ImpactParameters.population_density.
"""
import asyncio
import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

REVERSE_GEOCODE_URL = 'https://api-bdc.io/data/reverse-geocode-client'
WORLD_BANK_URL = 'https://api.worldbank.org/v2/country/{country}/indicator/EN.POP.DNST'


def _country_code(lat: float, lng: float, timeout: float) -> Optional[str]:
    resp = requests.get(
        REVERSE_GEOCODE_URL,
        params={'latitude': lat, 'longitude': lng, 'localityLanguage': 'en'},
        timeout=timeout
    )
    if not resp.ok:
        logger.warning("Reverse geocode failed for (%s, %s): HTTP %s", lat, lng, resp.status_code)
        return None
    payload = resp.json()
    if not isinstance(payload, dict):
        logger.warning("Unexpected reverse geocode response for (%s, %s)", lat, lng)
        return None
    return payload.get('countryCode') or None


def _year(entry: dict) -> Optional[int]:
    try:
        return int(entry.get('date'))
    except (TypeError, ValueError):
        return None


def _latest_density(country: str, timeout: float) -> Optional[float]:
    resp = requests.get(
        WORLD_BANK_URL.format(country=country),
        params={'format': 'json', 'per_page': 100},
        timeout=timeout
    )
    if not resp.ok:
        logger.warning("World Bank request failed for %s: HTTP %s", country, resp.status_code)
        return None

    payload = resp.json()
    # Response is [metadata, data]
    if not isinstance(payload, list) or len(payload) < 2 or not isinstance(payload[1], list):
        logger.warning("Unexpected World Bank response for %s", country)
        return None

    # Newest year first; null entries and undated years are skipped
    entries = [entry for entry in payload[1]
               if isinstance(entry, dict) and entry.get('value') is not None and _year(entry) is not None]
    for entry in sorted(entries, key=_year, reverse=True):
        try:
            return float(entry['value'])
        except (TypeError, ValueError):
            logger.debug("Skipping non-numeric density %r for %s", entry['value'], country)
    return None


def lookup_population_density(lat: float, lng: float, timeout: float = 10.0) -> Optional[float]:
    """
    Blocking population density lookup.

    Args:
        lat: Latitude (deg)
        lng: Longitude (deg)
        timeout: Per-request timeout (s)

    Returns:
        People per km^2, or None when the density is unavailable (no
        country at that location, no data, or a network failure).
    """
    try:
        country = _country_code(lat, lng, timeout)
        if country is None:
            logger.info("No country found at (%s, %s)", lat, lng)
            return None
        density = _latest_density(country, timeout)
    except (requests.RequestException, ValueError) as err:
        logger.error("Population density lookup failed for (%s, %s): %s", lat, lng, err)
        return None

    if density is not None:
        logger.debug("Population density for %s: %.1f people/km^2", country, density)
    return density


async def get_population_density(lat: float, lng: float, timeout: float = 10.0) -> Optional[float]:
    """
    Asynchronous population density lookup.

    Runs lookup_population_density in a worker thread so the event loop
    is not blocked. See lookup_population_density for the return value.
    """
    return await asyncio.to_thread(lookup_population_density, lat, lng, timeout)
