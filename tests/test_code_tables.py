import pytest

from freight_engine.schemas import TrackingStatus
from freight_engine.services.code_tables import (
    CURRENCY_CODES,
    SERVICE_TYPES,
    normalize_currency,
    service_name_for_code,
    tracking_status_for_code,
    transit_days_for_code,
)


class TestNormalizeCurrency:
    def test_quirk_codes(self):
        assert normalize_currency("UKL") == "GBP"
        assert normalize_currency("SID") == "SGD"

    def test_quirk_codes_any_case(self):
        assert normalize_currency("ukl") == "GBP"

    @pytest.mark.parametrize("code", ["CAD", "USD", "GBP", "EUR", "XYZ", ""])
    def test_other_codes_pass_through(self, code):
        assert normalize_currency(code) == code

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            CURRENCY_CODES["EUR"] = "EUR"


class TestServiceNameForCode:
    def test_known_codes(self):
        for code, name in SERVICE_TYPES.items():
            assert service_name_for_code(code) == name

    def test_unknown_codes(self):
        assert service_name_for_code("FEDEX_EXPRESS_SAVER_SATURDAY_DELIVERY") == "FedEx Express Saver Saturday Delivery"
        assert service_name_for_code("SOME_WEIRD_RATE") == "Some Weird Rate"

    def test_fallback_is_deterministic(self):
        first = service_name_for_code("EUROPE_FIRST_INTERNATIONAL_PRIORITY")
        assert first == service_name_for_code("EUROPE_FIRST_INTERNATIONAL_PRIORITY")
        assert first == "Europe First International Priority"

    @pytest.mark.parametrize("code", ["", "_", "A__B", "lower_case", "1_DAY"])
    def test_fallback_never_raises(self, code):
        name = service_name_for_code(code)
        assert "  " not in name
        assert name == name.strip()

    def test_doubled_separator(self):
        assert service_name_for_code("A__B") == "A B"


class TestTrackingStatusForCode:
    def test_delivered(self):
        assert tracking_status_for_code("DL") == TrackingStatus.DELIVERED

    def test_delays_are_exceptions(self):
        for code in ("DE", "DY", "EA", "SE"):
            assert tracking_status_for_code(code) == TrackingStatus.EXCEPTION

    def test_unknown(self):
        assert tracking_status_for_code("ZZ") == TrackingStatus.UNKNOWN
        assert tracking_status_for_code(None) == TrackingStatus.UNKNOWN


class TestTransitDaysForCode:
    def test_enumerated(self):
        assert transit_days_for_code("ONE_DAY") == 1
        assert transit_days_for_code("FIVE_DAYS") == 5
        assert transit_days_for_code("EIGHTEEN_DAYS") == 18

    def test_unknown(self):
        assert transit_days_for_code("UNKNOWN") is None
        assert transit_days_for_code("FORTY_DAYS") is None
        assert transit_days_for_code(None) is None
