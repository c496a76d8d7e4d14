"""
Device Aggregator - Main Entry Point

Usage:
    python -m device_aggregator                        # Use default settings
    python -m device_aggregator --devices assets.json  # Custom device list
    python -m device_aggregator --settings my.yaml     # Custom settings file
    python -m device_aggregator --dry-run              # Print devices and exit

The aggregator will:
1. Load the device list (fatal if unreadable or malformed)
2. Poll every device at its configured interval
3. Print a summary of all latest values periodically
4. Reload the device list when its file changes
"""

import argparse
import asyncio
import sys

from .common.config import AppSettings, DeviceSet, load_settings
from .common.exceptions import ConfigError, SettingsError
from .common.logging_setup import get_service_logger, setup_logging
from .services.config.source import FileConfigSource
from .supervisor import Supervisor

logger = get_service_logger("main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="device-aggregator",
        description="Poll device value sources and aggregate their latest values",
    )
    parser.add_argument(
        "--settings", "-s",
        type=str,
        default=None,
        help="Path to settings YAML (default: $DEVAGG_SETTINGS or ./device_aggregator.yaml)",
    )
    parser.add_argument(
        "--devices", "-d",
        type=str,
        default=None,
        help="Path to the device list (overrides devices_file)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the device list and exit without polling",
    )
    return parser


def print_device_summary(settings: AppSettings, devices: DeviceSet) -> None:
    """Print a summary of the loaded device list."""
    print("\n" + "=" * 60)
    print("  DEVICE AGGREGATOR")
    print("=" * 60)

    print(f"\n  Device list: {settings.devices_file}")
    print(f"  Config poll: {settings.watcher.interval_s}s")
    print(f"  Report every: {settings.reporter.interval_s}s")
    if settings.status.enabled:
        print(f"  Status server: {settings.status.host}:{settings.status.port}")

    print(f"\n  Devices ({len(devices)}):")
    for name, config in sorted(devices.items()):
        print(f"    - {name}: {config.source_path} every {config.cycle_time_ms}ms")

    print("=" * 60 + "\n")


async def main_async(supervisor: Supervisor) -> None:
    """Run the supervisor until a shutdown signal arrives."""
    supervisor.setup_signal_handlers()
    await supervisor.run()


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.settings)
    except SettingsError as e:
        setup_logging()
        logger.error(str(e))
        return 1

    if args.devices:
        settings.devices_file = args.devices
    if args.log_level:
        settings.logging.level = args.log_level

    setup_logging(settings.logging.level, settings.logging.format == "json")

    config_source = FileConfigSource(settings.devices_file)

    if args.dry_run:
        try:
            devices = config_source.load()
        except ConfigError as e:
            logger.error(f"Error loading device list: {e}")
            return 1
        print_device_summary(settings, devices)
        print("Dry run mode - exiting without polling")
        return 0

    supervisor = Supervisor(config_source, settings)

    try:
        asyncio.run(main_async(supervisor))
    except ConfigError as e:
        logger.error(f"Error creating supervisor: {e}")
        return 1
    except OSError as e:
        logger.error(f"Error starting status server: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nStopped by user")

    return 0


if __name__ == "__main__":
    sys.exit(main())
