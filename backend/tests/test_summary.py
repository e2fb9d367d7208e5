"""Tests for the sensor summary (trend and statistics) computation."""

from types import SimpleNamespace

import pytest

from smartagri.services.summary_service import calculate_trend, summarize_readings, summary_snapshot


def reading(sensor_type, value, unit):
    return SimpleNamespace(sensor_type=sensor_type, value=value, unit=unit)


class TestCalculateTrend:
    """Values are ordered newest first."""

    @pytest.mark.parametrize(
        "values,expected",
        [
            ([], "stable"),
            ([42.0], "stable"),
            ([9.4, 10, 10, 10, 10], "decreasing"),  # -6%
            ([10, 10, 10, 10, 9.4], "increasing"),  # +6.38%
            ([16, 10, 10, 10, 10], "increasing"),
            ([10.3, 10, 10, 10, 10], "stable"),  # +3%
            ([9.7, 10], "stable"),  # -3%
            ([20, 10], "increasing"),
        ],
    )
    def test_trend_classification(self, values, expected):
        assert calculate_trend(values) == expected

    def test_only_five_newest_values_count(self):
        """A large swing outside the five newest readings is ignored."""
        assert calculate_trend([10, 10, 10, 10, 10, 1]) == "stable"
        assert calculate_trend([10, 10, 10, 10, 10, 100]) == "stable"

    def test_zero_baseline_follows_sign_of_newest(self):
        assert calculate_trend([3.0, 0.0]) == "increasing"
        assert calculate_trend([-3.0, 0.0]) == "decreasing"
        assert calculate_trend([0.0, 0.0, 0.0]) == "stable"

    def test_negative_baseline(self):
        # (-20 - -10) / -10 = +100%
        assert calculate_trend([-20, -10]) == "increasing"


class TestSummarizeReadings:
    def test_groups_by_sensor_type(self):
        readings = [
            reading("temperature", 24.0, "°C"),
            reading("humidity", 60.0, "%"),
            reading("temperature", 22.0, "°C"),
            reading("temperature", 20.0, "°C"),
        ]

        summary = summarize_readings(readings)

        assert set(summary) == {"temperature", "humidity"}
        temperature = summary["temperature"]
        assert temperature.current == 24.0
        assert temperature.unit == "°C"
        assert temperature.average == pytest.approx(22.0)
        assert temperature.min == 20.0
        assert temperature.max == 24.0
        assert temperature.readings_count == 3
        assert temperature.trend == "increasing"

        humidity = summary["humidity"]
        assert humidity.readings_count == 1
        assert humidity.trend == "stable"

    def test_current_and_unit_come_from_newest(self):
        readings = [
            reading("soil_moisture", 31.0, "%"),
            reading("soil_moisture", 45.0, "% vol"),
        ]

        stats = summarize_readings(readings)["soil_moisture"]

        assert stats.current == 31.0
        assert stats.unit == "%"
        assert stats.trend == "decreasing"

    def test_empty_input(self):
        assert summarize_readings([]) == {}

    def test_snapshot_is_json_ready(self):
        summary = summarize_readings([reading("light", 800, "lux"), reading("light", 790, "lux")])

        snapshot = summary_snapshot(summary)

        assert snapshot == {
            "light": {
                "current": 800.0,
                "unit": "lux",
                "average": 795.0,
                "min": 790.0,
                "max": 800.0,
                "readings_count": 2,
                "trend": "stable",
            }
        }
