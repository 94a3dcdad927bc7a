"""
Catalog adapter for JPL small-body orbital element records.

Converts records as served by the JPL Small-Body Database (perihelion
distance in AU, angles in degrees, period in years, time of perihelion
as a TDB Julian date) into OrbitalElements usable by the orbit engine.
"""
import json
import logging
from pathlib import Path
from typing import Optional

import jax.numpy as jnp
import numpy as np
import pydantic
from pydantic import ConfigDict, Field

from asteroid_risk.constants import MKM_PER_AU, JD_J2000
from asteroid_risk.orbital_elements import OrbitalElements, validate_elements
from asteroid_risk.orbit import Orbit, positions_at
from asteroid_risk.units import convert_time

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = Path(__file__).parent / 'data' / 'sample_neos.json'


class CatalogRecord(pydantic.BaseModel):
    """
    One small-body record with JPL field names.

    Numeric fields are accepted as numbers or numeric strings, since the
    JPL API returns everything as strings.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default='Unknown', validation_alias=pydantic.AliasChoices('object_name', 'object', 'name'))
    e: float = Field(..., ge=0.0, lt=1.0, description="Eccentricity")
    q_au: float = Field(..., gt=0.0, alias='q_au_1', description="Perihelion distance (AU)")
    i_deg: float = Field(..., description="Inclination (deg)")
    w_deg: float = Field(..., description="Argument of perihelion (deg)")
    node_deg: float = Field(..., description="Longitude of the ascending node (deg)")
    p_yr: float = Field(..., gt=0.0, description="Orbital period (sidereal years)")
    tp_tdb: float = Field(..., description="Time of perihelion passage (TDB Julian date)")


def record_to_elements(record: CatalogRecord, time_units: str = 's') -> OrbitalElements:
    """
    Convert a catalog record into orbital elements.

    The semi-major axis is a = q / (1 - e), expressed in millions of km.
    The period and the time of perihelion are expressed in time_units,
    with the clock origin at J2000.0 (JD 2451545.0 TDB).

    Args:
        record: Parsed catalog record
        time_units: Time unit of the caller's clock (any OpenMDAO time
            unit, plus 'sidereal_year' and 'jd_day')

    Returns:
        Validated OrbitalElements
    """
    a_au = record.q_au / (1.0 - record.e)

    elements = OrbitalElements(
        a=a_au * MKM_PER_AU,
        e=record.e,
        i=float(np.deg2rad(record.i_deg)),
        Omega=float(np.deg2rad(record.node_deg)),
        omega=float(np.deg2rad(record.w_deg)),
        period=float(convert_time(record.p_yr, 'sidereal_year', time_units)),
        tau=float(convert_time(record.tp_tdb - JD_J2000, 'jd_day', time_units))
    )
    return validate_elements(elements)


class CatalogBody(pydantic.BaseModel):
    """
    A named body from the catalog.

    Attributes:
        name: Designation of the body (e.g. "99942 Apophis (2004 MN4)")
        elements: Orbital elements, time in the catalog's time units
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)  # Allow OrbitalElements (NamedTuple)

    name: str
    elements: OrbitalElements

    def get_orbit(self) -> Orbit:
        """Orbit engine for this body."""
        return Orbit(elements=self.elements)

    def get_position(self, t: float) -> np.ndarray:
        """Position in millions of km at clock time t."""
        return self.get_orbit().position_at(t)

    def __repr__(self) -> str:
        return f"CatalogBody(name='{self.name}', a={self.elements.a:.4f}, e={self.elements.e:.4f})"

    def __str__(self) -> str:
        return self.name


def parse_records(data, time_units: str = 's') -> list[CatalogBody]:
    """
    Convert a list of raw JPL records into catalog bodies.

    Records that fail validation are logged and skipped.

    Args:
        data: Sequence of dicts with JPL field names
        time_units: Time unit of the caller's clock

    Returns:
        List of CatalogBody, in input order
    """
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of catalog records, got {type(data).__name__}")

    bodies = []
    for index, raw in enumerate(data):
        try:
            record = CatalogRecord.model_validate(raw)
            elements = record_to_elements(record, time_units=time_units)
        except (pydantic.ValidationError, ValueError, TypeError) as err:
            logger.warning("Skipping catalog record %d: %s", index, err)
            continue
        bodies.append(CatalogBody(name=record.name, elements=elements))
        logger.debug("Parsed record %d/%d: %s", index + 1, len(data), record.name)

    logger.info("Parsed %d of %d catalog records", len(bodies), len(data))
    return bodies


def load_catalog(path: Optional[str | Path] = None, time_units: str = 's') -> list[CatalogBody]:
    """
    Load a catalog of small bodies from a JSON file.

    The file must hold a JSON array of JPL-style records.

    Args:
        path: Catalog file. Defaults to the bundled sample of near-Earth objects.
        time_units: Time unit of the caller's clock

    Returns:
        List of CatalogBody
    """
    path = Path(path) if path is not None else DEFAULT_CATALOG
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return parse_records(data, time_units=time_units)


def catalog_positions(bodies: list[CatalogBody], t: float) -> np.ndarray:
    """
    Positions of every body at clock time t.

    Returns:
        Array of shape (len(bodies), 3) in millions of km
    """
    if not bodies:
        return np.zeros((0, 3))
    elements = jnp.stack([body.elements.to_array() for body in bodies], axis=0)
    return np.asarray(positions_at(elements, t))
