#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List, Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sigtrade_app.config.loader import ConfigLoader
from sigtrade_app.config.validation import ConfigValidator, ValidationError
from sigtrade_app.errors import ConfigurationError


def validate_settings_file(config_dir: Optional[Path] = None) -> List[ValidationError]:
    """Validate the merged settings for a config directory."""
    loader = ConfigLoader.create(config_dir)
    config = loader.merge_config()
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)
    print(f"🔍 Validating {loader.config_file}...")

    all_valid = True

    try:
        errors = validate_settings_file(config_dir)
    except ConfigurationError as e:
        print(f"❌ Could not read settings: {e}")
        sys.exit(1)

    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        all_valid = False
    else:
        settings = loader.load_risk_settings()
        print("✅ Settings file is valid")
        print(f"   Max daily loss: ${settings.max_daily_loss}")
        print(f"   Max trade amount: ${settings.max_trade_amount}")
        print(f"   Max consecutive losses: {settings.max_consecutive_losses}")
        print(f"   Auto-trading: {'on' if settings.auto_trading_enabled else 'off'}")

    # Emergency stop must always produce a valid replacement
    print("\n📋 Testing risk setting overrides...")
    try:
        loader.load_risk_settings({"auto_trading_enabled": False, "max_trade_amount": 5})
        print("✅ Override validation passed")
    except ConfigurationError as e:
        print(f"❌ Override validation failed: {e}")
        all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
