"""
Unit handling for impact parameters and catalog times.

User-facing unit names are mapped onto OpenMDAO unit strings and
converted with openmdao.utils.units. Unknown names are rejected rather
than passed through unconverted.
"""
import openmdao.utils.units as om_units


class UnsupportedUnitError(ValueError):
    """Raised for a unit name that has no known conversion."""

    def __init__(self, kind: str, unit, supported):
        self.kind = kind
        self.unit = unit
        super().__init__(
            f"Unsupported {kind} unit '{unit}'. Must be one of: {', '.join(sorted(supported))}"
        )


# Accepted spellings for each length unit
LENGTH_UNITS = {
    'meter': 'm',
    'meters': 'm',
    'm': 'm',
    'kilometer': 'km',
    'kilometers': 'km',
    'km': 'km',
    'foot': 'ft',
    'feet': 'ft',
    'ft': 'ft',
    'mile': 'mi',
    'miles': 'mi',
    'mi': 'mi',
}

# Accepted spellings for each speed unit
VELOCITY_UNITS = {
    'km/s': 'km/s',
    'm/s': 'm/s',
    'mile/s': 'mi/s',
    'miles/s': 'mi/s',
    'mi/s': 'mi/s',
}


def _lookup(table: dict, kind: str, unit) -> str:
    if not isinstance(unit, str) or unit.strip().lower() not in table:
        raise UnsupportedUnitError(kind, unit, table)
    return table[unit.strip().lower()]


def length_unit(unit: str) -> str:
    """OpenMDAO unit string for a length unit name."""
    return _lookup(LENGTH_UNITS, 'length', unit)


def velocity_unit(unit: str) -> str:
    """OpenMDAO unit string for a speed unit name."""
    return _lookup(VELOCITY_UNITS, 'velocity', unit)


def to_meters(value: float, unit: str) -> float:
    """
    Convert a length to meters.

    Args:
        value: Length in the given unit
        unit: One of the names in LENGTH_UNITS (e.g. 'meter', 'km', 'miles')

    Returns:
        Length in meters

    Raises:
        UnsupportedUnitError: If the unit is not recognized.
    """
    return float(om_units.convert_units(value, length_unit(unit), 'm'))


def to_meters_per_second(value: float, unit: str) -> float:
    """
    Convert a speed to meters per second.

    Raises:
        UnsupportedUnitError: If the unit is not recognized.
    """
    return float(om_units.convert_units(value, velocity_unit(unit), 'm/s'))


def convert_time(value, from_units: str, to_units: str):
    """
    Convert a time value between OpenMDAO time units.

    In addition to OpenMDAO's own units ('s', 'h', ...), the package
    registers 'sidereal_year' and 'jd_day'.

    Raises:
        UnsupportedUnitError: If either unit is not a known time unit.
    """
    for unit in (from_units, to_units):
        if not om_units.valid_units(unit) or not om_units.is_compatible(unit, 's'):
            raise UnsupportedUnitError('time', unit, ('s', 'jd_day', 'sidereal_year'))
    return om_units.convert_units(value, from_units, to_units)
