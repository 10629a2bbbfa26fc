"""Tests for signal text parsing."""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from sigtrade_app.models.trading import Direction, TradeSource
from sigtrade_app.risk.models import RiskSettings
from sigtrade_app.signals.models import Signal
from sigtrade_app.signals.parser import SignalParser, parse_signal


@pytest.fixture
def parser() -> SignalParser:
    return SignalParser()


@pytest.fixture
def limits() -> RiskSettings:
    return RiskSettings(max_trade_amount=Decimal("10"))


class TestValidSignals:
    """Well-formed signal lines."""

    def test_reference_signal(self, parser, limits):
        signal = parser.parse("EURUSD CALL 60s $10", limits)

        assert signal.valid is True
        assert signal.rejection_reason is None
        assert signal.pair == "EUR/USD"
        assert signal.direction == Direction.CALL
        assert signal.duration_seconds == 60
        assert signal.amount == Decimal("10")
        assert signal.raw_text == "EURUSD CALL 60s $10"

    def test_pair_with_slash_is_normalized(self, parser, limits):
        signal = parser.parse("GBP/JPY PUT 300s $5", limits)

        assert signal.valid is True
        assert signal.pair == "GBP/JPY"
        assert signal.direction == Direction.PUT

    def test_lowercase_tokens(self, parser, limits):
        signal = parser.parse("audusd put 900s $2.50", limits)

        assert signal.valid is True
        assert signal.pair == "AUD/USD"
        assert signal.direction == Direction.PUT
        assert signal.amount == Decimal("2.50")

    @pytest.mark.parametrize("direction", ["CALL", "call", "Call", "PUT", "put", "pUt"])
    def test_direction_case_insensitive(self, parser, limits, direction):
        signal = parser.parse(f"USDCAD {direction} 60s $1", limits)

        assert signal.valid is True
        assert signal.direction.value == direction.upper()

    def test_extra_whitespace(self, parser, limits):
        signal = parser.parse("  EURUSD   CALL\t60s  $10  ", limits)

        assert signal.valid is True
        assert signal.pair == "EUR/USD"

    def test_amount_without_dollar_and_duration_without_suffix(self, parser, limits):
        signal = parser.parse("EURUSD CALL 60 7", limits)

        assert signal.valid is True
        assert signal.duration_seconds == 60
        assert signal.amount == Decimal("7")

    def test_zero_duration_is_accepted(self, parser, limits):
        signal = parser.parse("EURUSD CALL 0s $1", limits)

        assert signal.valid is True
        assert signal.duration_seconds == 0

    def test_amount_equal_to_limit_is_accepted(self, parser, limits):
        signal = parser.parse("EURUSD CALL 60s $10.00", limits)

        assert signal.valid is True

    @pytest.mark.parametrize("pair", ["EURUSD", "GBPUSD", "USDJPY", "AUDUSD", "USDCAD"])
    def test_normalized_pair_has_one_separator(self, parser, limits, pair):
        signal = parser.parse(f"{pair} CALL 60s $5", limits)

        assert signal.pair.count("/") == 1
        base, quote = signal.pair.split("/")
        assert len(base) == 3 and len(quote) == 3

    def test_received_at_is_kept(self, parser, limits):
        ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
        signal = parser.parse("EURUSD CALL 60s $10", limits, received_at=ts)

        assert signal.received_at == ts

    def test_module_level_parse(self, limits):
        assert parse_signal("EURUSD CALL 60s $10", limits).valid is True


class TestRejectedSignals:
    """Malformed or over-limit lines yield invalid signals, never exceptions."""

    @pytest.mark.parametrize("raw", [
        "",
        "   ",
        "EURUSD CALL 60s",
        "EURUSD CALL 60s $10 extra",
        "EURUSD",
    ])
    def test_wrong_token_count(self, parser, limits, raw):
        signal = parser.parse(raw, limits)

        assert signal.valid is False
        assert "invalid signal format" in signal.rejection_reason

    @pytest.mark.parametrize("pair", ["EURUS", "EURUSDX", "EUR1SD", "EU/RUSD1", "E-URUSD"])
    def test_invalid_pair(self, parser, limits, pair):
        signal = parser.parse(f"{pair} CALL 60s $10", limits)

        assert signal.valid is False
        assert "invalid currency pair" in signal.rejection_reason

    @pytest.mark.parametrize("direction", ["BUY", "SELL", "CALLS", "UP", "1"])
    def test_invalid_direction(self, parser, limits, direction):
        signal = parser.parse(f"EURUSD {direction} 60s $10", limits)

        assert signal.valid is False
        assert "invalid direction" in signal.rejection_reason

    @pytest.mark.parametrize("duration", ["abc", "-5s", "1.5s", "s", "60m", "sixty"])
    def test_invalid_duration(self, parser, limits, duration):
        signal = parser.parse(f"EURUSD CALL {duration} $10", limits)

        assert signal.valid is False
        assert "invalid duration" in signal.rejection_reason

    @pytest.mark.parametrize("amount", ["$abc", "$", "ten", "$NaN", "$inf", "$1,000"])
    def test_invalid_amount(self, parser, limits, amount):
        signal = parser.parse(f"EURUSD CALL 60s {amount}", limits)

        assert signal.valid is False
        assert "invalid amount" in signal.rejection_reason

    @pytest.mark.parametrize("amount", ["$0", "$-5", "$0.00"])
    def test_non_positive_amount(self, parser, limits, amount):
        signal = parser.parse(f"EURUSD CALL 60s {amount}", limits)

        assert signal.valid is False
        assert signal.rejection_reason == "amount must be positive"

    def test_amount_over_limit(self, parser, limits):
        signal = parser.parse("GBPUSD PUT 300s $25", limits)

        assert signal.valid is False
        assert "exceeds maximum trade limit" in signal.rejection_reason
        assert "$10" in signal.rejection_reason

    def test_limit_follows_settings(self, parser):
        signal = parser.parse("GBPUSD PUT 300s $25", RiskSettings(max_trade_amount=Decimal("50")))

        assert signal.valid is True

    def test_rejected_signal_keeps_raw_text(self, parser, limits):
        signal = parser.parse("garbage in", limits)

        assert signal.raw_text == "garbage in"
        assert signal.pair is None
        assert signal.amount is None

    def test_non_string_input(self, parser, limits):
        signal = parser.parse(None, limits)

        assert signal.valid is False
        assert signal.rejection_reason


class TestSignalToRequest:
    """Conversion of signals to trade requests."""

    def test_valid_signal_to_request(self, parser, limits):
        signal = parser.parse("EURUSD CALL 60s $10", limits)
        request = signal.to_request(TradeSource.SIGNAL, "Telegram: EURUSD CALL 60s $10")

        assert request.pair == "EUR/USD"
        assert request.amount == Decimal("10")
        assert request.is_signal_derived is True
        assert request.source_label == "Telegram: EURUSD CALL 60s $10"

    def test_invalid_signal_to_request_raises(self):
        signal = Signal.rejected("bad", "invalid signal format")

        with pytest.raises(ValueError):
            signal.to_request(TradeSource.MANUAL, "Manual: bad")

    def test_signal_ids_are_unique(self, parser, limits):
        first = parser.parse("EURUSD CALL 60s $10", limits)
        second = parser.parse("EURUSD CALL 60s $10", limits)

        assert first.signal_id != second.signal_id


class TestParsingMetrics:
    """Parse counters."""

    def test_counts_valid_and_rejected(self, parser, limits):
        parser.parse("EURUSD CALL 60s $10", limits)
        parser.parse("EURUSD CALL 60s $20", limits)
        parser.parse("EURUSD CALL 60s $30", limits)
        parser.parse("hello", limits)

        stats = parser.get_stats()

        assert stats["total_parses"] == 4
        assert stats["valid_parses"] == 1
        assert stats["rejected_parses"] == 3
        assert stats["valid_rate"] == pytest.approx(0.25)

    def test_rejections_grouped_by_rule(self, parser, limits):
        parser.parse("EURUS CALL 60s $1", limits)
        parser.parse("XYZ123 CALL 60s $1", limits)
        parser.parse("EURUSD CALL 60s $abc", limits)

        reasons = parser.get_stats()["rejections_by_reason"]

        assert reasons == {"invalid currency pair": 2, "invalid amount": 1}

    def test_empty_parser_stats(self, parser):
        stats = parser.get_stats()

        assert stats["total_parses"] == 0
        assert stats["valid_rate"] == 0
