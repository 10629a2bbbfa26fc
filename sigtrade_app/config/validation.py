"""Configuration validation utilities."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_risk_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate risk limit parameters."""
        errors = []

        for field in ("max_daily_loss", "max_trade_amount"):
            if field in params:
                value = params[field]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=field,
                        message="Must be a positive number",
                        value=value
                    ))

        if "stop_loss_percentage" in params:
            value = params["stop_loss_percentage"]
            if not _is_number(value) or value <= 0 or value > 100:
                errors.append(ValidationError(
                    field="stop_loss_percentage",
                    message="Must be a number in (0, 100]",
                    value=value
                ))

        if "max_consecutive_losses" in params:
            value = params["max_consecutive_losses"]
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                errors.append(ValidationError(
                    field="max_consecutive_losses",
                    message="Must be a positive integer",
                    value=value
                ))

        if "auto_trading_enabled" in params:
            value = params["auto_trading_enabled"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="auto_trading_enabled",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_account_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate account parameters."""
        errors = []

        if "initial_balance" in params:
            value = params["initial_balance"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="initial_balance",
                    message="Must be a non-negative number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_settlement_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate simulated settlement parameters."""
        errors = []

        min_delay = params.get("min_delay_seconds")
        max_delay = params.get("max_delay_seconds")
        for field, value in (("min_delay_seconds", min_delay), ("max_delay_seconds", max_delay)):
            if value is not None and (not _is_number(value) or value < 0):
                errors.append(ValidationError(
                    field=field,
                    message="Must be a non-negative number",
                    value=value
                ))

        if _is_number(min_delay) and _is_number(max_delay) and min_delay > max_delay:
            errors.append(ValidationError(
                field="min_delay_seconds",
                message="Must not exceed max_delay_seconds",
                value=min_delay
            ))

        if "win_probability" in params:
            value = params["win_probability"]
            if not _is_number(value) or not 0 <= value <= 1:
                errors.append(ValidationError(
                    field="win_probability",
                    message="Must be a number between 0 and 1",
                    value=value
                ))

        if "payout_multiplier" in params:
            value = params["payout_multiplier"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="payout_multiplier",
                    message="Must be a non-negative number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "risk" in config:
            errors.extend(ConfigValidator.validate_risk_params(config["risk"]))

        if "account" in config:
            errors.extend(ConfigValidator.validate_account_params(config["account"]))

        if "settlement" in config:
            errors.extend(ConfigValidator.validate_settlement_params(config["settlement"]))

        return errors
