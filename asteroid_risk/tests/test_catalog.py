"""Tests for the JPL catalog adapter"""
import json
import tempfile
import unittest
from pathlib import Path

import numpy as np

from openmdao.utils.assert_utils import assert_near_equal

from asteroid_risk.catalog import (
    CatalogBody,
    CatalogRecord,
    catalog_positions,
    load_catalog,
    parse_records,
    record_to_elements,
)
from asteroid_risk.constants import DAY, SIDEREAL_YEAR_DAYS

APOPHIS = {
    "object_name": "99942 Apophis (2004 MN4)",
    "e": "0.1914276630588215",
    "q_au_1": "0.7460599532520418",
    "i_deg": "3.336737159290412",
    "w_deg": "126.6090325814624",
    "node_deg": "203.9582838307475",
    "p_yr": "0.8859226498349523",
    "tp_tdb": "2459920.404128718932",
}


class TestRecordConversion(unittest.TestCase):

    def setUp(self):
        self.record = CatalogRecord.model_validate(APOPHIS)

    def test_parse_string_fields(self):
        self.assertEqual(self.record.name, "99942 Apophis (2004 MN4)")
        assert_near_equal(self.record.q_au, 0.7460599532520418, tolerance=1e-15)
        assert_near_equal(self.record.tp_tdb, 2459920.404128718932, tolerance=1e-15)

    def test_semi_major_axis_in_million_km(self):
        el = record_to_elements(self.record)
        e = 0.1914276630588215
        q = 0.7460599532520418
        assert_near_equal(el.a, q / (1 - e) * 149.5978707, tolerance=1e-14)
        assert_near_equal(el.e, e, tolerance=1e-15)

    def test_angles_in_radians(self):
        el = record_to_elements(self.record)
        assert_near_equal(el.i, np.deg2rad(3.336737159290412), tolerance=1e-14)
        assert_near_equal(el.omega, np.deg2rad(126.6090325814624), tolerance=1e-14)
        assert_near_equal(el.Omega, np.deg2rad(203.9582838307475), tolerance=1e-14)

    def test_times_in_seconds_since_j2000(self):
        el = record_to_elements(self.record, time_units='s')
        assert_near_equal(el.period, 0.8859226498349523 * SIDEREAL_YEAR_DAYS * DAY, tolerance=1e-12)
        assert_near_equal(el.tau, (2459920.404128718932 - 2451545.0) * DAY, tolerance=1e-12)

    def test_times_in_other_units(self):
        el_days = record_to_elements(self.record, time_units='jd_day')
        assert_near_equal(el_days.period, 0.8859226498349523 * SIDEREAL_YEAR_DAYS, tolerance=1e-12)
        assert_near_equal(el_days.tau, 2459920.404128718932 - 2451545.0, tolerance=1e-12)

        el_years = record_to_elements(self.record, time_units='sidereal_year')
        assert_near_equal(el_years.period, 0.8859226498349523, tolerance=1e-12)

    def test_bad_time_units(self):
        with self.assertRaises(ValueError):
            record_to_elements(self.record, time_units='km')

    def test_alias_keys(self):
        raw = dict(APOPHIS)
        raw['object'] = raw.pop('object_name')
        self.assertEqual(CatalogRecord.model_validate(raw).name, "99942 Apophis (2004 MN4)")

        raw.pop('object')
        self.assertEqual(CatalogRecord.model_validate(raw).name, "Unknown")

    def test_rejects_open_orbits(self):
        raw = dict(APOPHIS, e="1.2")
        with self.assertRaises(ValueError):
            CatalogRecord.model_validate(raw)


class TestCatalog(unittest.TestCase):

    def test_load_bundled_sample(self):
        bodies = load_catalog()
        self.assertEqual(len(bodies), 5)
        self.assertTrue(all(isinstance(body, CatalogBody) for body in bodies))
        names = [body.name for body in bodies]
        self.assertIn("101955 Bennu (1999 RQ36)", names)

    def test_perihelion_distance(self):
        """At the time of perihelion a body sits at q from the Sun"""
        bodies = {body.name: body for body in load_catalog()}
        body = bodies["99942 Apophis (2004 MN4)"]
        r = body.get_position(body.elements.tau)
        assert_near_equal(np.linalg.norm(r), 0.7460599532520418 * 149.5978707, tolerance=1e-10)

    def test_catalog_positions_match_single(self):
        bodies = load_catalog(time_units='jd_day')
        t = 8000.0
        r = catalog_positions(bodies, t)
        self.assertEqual(r.shape, (len(bodies), 3))
        for k, body in enumerate(bodies):
            assert_near_equal(r[k], body.get_position(t), tolerance=1e-10)

    def test_catalog_positions_empty(self):
        self.assertEqual(catalog_positions([], 0.0).shape, (0, 3))

    def test_bad_records_skipped(self):
        data = [APOPHIS, dict(APOPHIS, q_au_1="not a number"), dict(APOPHIS, object_name="Second", p_yr="-1")]
        with self.assertLogs('asteroid_risk.catalog', level='WARNING') as logs:
            bodies = parse_records(data)
        self.assertEqual(len(bodies), 1)
        self.assertEqual(len([line for line in logs.output if 'Skipping' in line]), 2)

    def test_not_a_list(self):
        with self.assertRaises(ValueError):
            parse_records({"object_name": "x"})

    def test_load_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'catalog.json'
            path.write_text(json.dumps([APOPHIS]), encoding='utf-8')
            bodies = load_catalog(path)
        self.assertEqual(len(bodies), 1)
        self.assertEqual(str(bodies[0]), "99942 Apophis (2004 MN4)")

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_catalog('/nonexistent/catalog.json')


if __name__ == '__main__':
    unittest.main()
