from __future__ import annotations

import unittest
from datetime import date

from app.domain.pump_house import LEGACY_PUMP_HOUSES, AssetOrigin, PumpHouse, map_pump_house_type
from app.ledger.identity import AssetIdentity, date_key, identity_of, parse_date_key


class TestDateKeys(unittest.TestCase):
    def test_date_key_is_unpadded(self) -> None:
        self.assertEqual(date_key(date(2025, 6, 4)), "4/6/2025")
        self.assertEqual(date_key(date(2025, 12, 31)), "31/12/2025")

    def test_parse_accepts_padded_and_unpadded(self) -> None:
        self.assertEqual(parse_date_key("4/6/2025"), date(2025, 6, 4))
        self.assertEqual(parse_date_key("04/06/2025"), date(2025, 6, 4))
        self.assertEqual(parse_date_key(" 4/6/2025 "), date(2025, 6, 4))

    def test_parse_is_strict(self) -> None:
        for text in ("", None, "REMARKS", "Pump House", "2025-06-04", "4/6/25", "31/2/2025", "4/13/2025", "4/6/2025x"):
            with self.subTest(text=text):
                self.assertIsNone(parse_date_key(text))

    def test_round_trip_of_today_key(self) -> None:
        day = date(2026, 1, 9)
        self.assertEqual(parse_date_key(date_key(day)), day)


class TestAssetIdentity(unittest.TestCase):
    def test_identity_ignores_id_and_origin(self) -> None:
        legacy = LEGACY_PUMP_HOUSES[0]
        current = PumpHouse(
            id="991",
            name=legacy.name,
            type=legacy.type,
            scheme=legacy.scheme,
            origin=AssetOrigin.CURRENT,
            zone="Zone 9",
        )
        self.assertEqual(identity_of(legacy), identity_of(current))
        self.assertEqual(identity_of(legacy), AssetIdentity("Humaipur PWSS", "Pump House I", "Basic"))

    def test_identity_is_case_sensitive(self) -> None:
        legacy = LEGACY_PUMP_HOUSES[0]
        renamed = PumpHouse(
            id=legacy.id,
            name=legacy.name.upper(),
            type=legacy.type,
            scheme=legacy.scheme,
            origin=legacy.origin,
        )
        self.assertNotEqual(identity_of(legacy), identity_of(renamed))


class TestPumpHouseTypes(unittest.TestCase):
    def test_roster_type_mapping(self) -> None:
        self.assertEqual(map_pump_house_type("OHR"), "Intermediate")
        self.assertEqual(map_pump_house_type("Non-OHR"), "Basic")
        self.assertEqual(map_pump_house_type("Non-OHR Direct"), "Direct")
        self.assertEqual(map_pump_house_type("Non-OHR-Direct"), "Direct")
        self.assertEqual(map_pump_house_type("Booster"), "Booster")
        self.assertEqual(map_pump_house_type(None), "")

    def test_legacy_fleet_order(self) -> None:
        self.assertEqual(
            [pump.station_id for pump in LEGACY_PUMP_HOUSES],
            ["DXPWMS-02", "DXPWMS-03", "DXPWMS-01", "DXPWMS-04"],
        )
        self.assertTrue(all(pump.is_legacy for pump in LEGACY_PUMP_HOUSES))


if __name__ == "__main__":
    unittest.main()
