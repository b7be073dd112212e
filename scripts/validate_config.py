#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from typing import Any, Optional

from countdown_app.config.loader import ConfigLoader
from countdown_app.config.validation import ConfigValidator, ValidationError


def validate_merged_config(overrides: Optional[dict[str, Any]] = None) -> list[ValidationError]:
    """Validate the merged defaults, config file and environment."""
    loader = ConfigLoader.create()
    config = loader.merge_config(overrides)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    print("🔍 Validating countdown configuration...")

    loader = ConfigLoader.create()
    print(f"Config directory: {loader.config_dir}")

    all_valid = True

    try:
        errors = validate_merged_config()

        if errors:
            print(f"❌ Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            config = loader.load()
            print("✅ Configuration is valid")
            print(f"  • event: {config.countdown.event_name}")
            print(f"  • database: {config.storage.db_path}")
            print(f"  • poll interval: {config.scheduler.poll_interval_seconds}s")

    except Exception as e:
        print(f"❌ Error loading configuration: {e}")
        all_valid = False

    if all_valid:
        print("\n🎉 Configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
