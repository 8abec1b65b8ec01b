#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
BF2 Migrator - Startup Script

Detects and switches the online backend a Battlefield 2 installation uses and
migrates multiplayer profiles to OpenSpy.
"""

import argparse
import getpass
import logging
import sys
from pathlib import Path

from bf2_migrator.version import load_version

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Builds the command line parser."""
    parser = argparse.ArgumentParser(description="BF2 Migrator - switch Battlefield 2 online backends")
    parser.add_argument("--config", metavar="PATH", help="Configuration file (default: config.json)")
    parser.add_argument("--dir", metavar="PATH", help="Battlefield 2 install directory (default: auto-detect)")
    parser.add_argument("--detect", action="store_true", help="Show which provider each executable uses")
    parser.add_argument("--patch", metavar="PROVIDER", help="Patch executables to PROVIDER (e.g. OpenSpy, GameSpy)")
    parser.add_argument(
        "--no-quiesce",
        action="store_true",
        help="Do not stop running game processes before patching",
    )
    parser.add_argument("--list-profiles", action="store_true", help="List the installed player profiles")
    parser.add_argument(
        "--migrate-profile",
        nargs="?",
        const="",
        metavar="PROFILE",
        help="Migrate a profile (key or name, default: the default profile) to OpenSpy",
    )
    parser.add_argument("--profiles-dir", metavar="PATH", help="Battlefield 2 profiles directory")
    parser.add_argument("--version", action="store_true", help="Show version information")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    return parser


def parse_arguments(argv=None):
    """Parses command line arguments."""
    return build_parser().parse_args(argv)


def _resolve_install_dir(args, config) -> str:
    from bf2_migrator.install import InstallDirFinder
    from bf2_migrator.registry import RegistryKeyStore

    if args.dir:
        return args.dir
    return str(InstallDirFinder(RegistryKeyStore()).find(config.install.install_dir))


def run_detect(args, config) -> int:
    from bf2_migrator.app import detect_installation

    directory = _resolve_install_dir(args, config)
    for file_name, provider in detect_installation(directory).items():
        print(f"{file_name}: {provider if provider else 'unknown/mixed modifications'}")
    return 0


def run_patch(args, config) -> int:
    from bf2_migrator.app import patch_installation, prepare_for_patch
    from bf2_migrator.patching import Patcher, Provider
    from bf2_migrator.processes import QuiescenceController
    from bf2_migrator.registry import RegistryKeyStore

    new_provider = Provider.parse(args.patch)
    directory = _resolve_install_dir(args, config)

    if not args.no_quiesce:
        quiescer = QuiescenceController(
            poll_interval=config.quiescence.poll_interval_sec,
            max_attempts=config.quiescence.max_attempts,
        )
        key_store = RegistryKeyStore() if sys.platform == "win32" else None
        prepare_for_patch(quiescer, key_store, config.quiescence.process_names)

    results = patch_installation(directory, new_provider, patcher=Patcher(use_lock=config.install.use_patch_lock))

    failed = False
    for result in results:
        if result.success and result.changed:
            print(f"Patched {result.target}: {result.old_provider} -> {result.new_provider}")
        elif result.success:
            print(f"{result.target} already uses {result.new_provider}")
        else:
            failed = True
            print(f"Failed to patch {result.target}: {result.error}")
    return 1 if failed else 0


def _resolve_profiles_dir(args, config) -> Path:
    from bf2_migrator.install import default_profiles_dir

    return Path(args.profiles_dir or config.install.profiles_dir or default_profiles_dir())


def run_list_profiles(args, config) -> int:
    from bf2_migrator.install import get_default_profile_key, list_profiles

    profiles_dir = _resolve_profiles_dir(args, config)
    default_key = get_default_profile_key(profiles_dir)
    for profile in list_profiles(profiles_dir):
        marker = " (default)" if profile.key == default_key else ""
        print(f"{profile.key}  {profile.name}{marker}")
    return 0


def run_migrate_profile(args, config) -> int:
    from bf2_migrator.app import load_login, migrate_profile
    from bf2_migrator.clients import OpenSpyClient
    from bf2_migrator.install import find_profile, get_default_profile_key, list_profiles

    profiles_dir = _resolve_profiles_dir(args, config)
    profile = find_profile(
        list_profiles(profiles_dir), args.migrate_profile, get_default_profile_key(profiles_dir),
    )
    nick, email = load_login(profile)
    password = getpass.getpass(f"Password for {nick}: ")

    client = OpenSpyClient(config.openspy.base_url, config.openspy.timeout_sec)
    created = migrate_profile(
        client, nick, email, password,
        namespace_id=config.openspy.namespace_id,
        partner_code=config.openspy.partner_code,
    )
    print(f"Migrated {nick!r} to OpenSpy" + ("" if created else " (profile already existed)"))
    return 0


def main(argv=None) -> int:
    """Main function to start the application."""
    from bf2_migrator.config import load_config
    from bf2_migrator.exceptions import BaseError
    from bf2_migrator.logging_config import setup_logging

    args = parse_arguments(argv)

    if args.version:
        print(f"BF2 Migrator v{load_version()}")
        return 0

    try:
        config = load_config(args.config)
    except BaseError as e:
        print(f"Error: {e}")
        return 1

    setup_logging(
        log_level="DEBUG" if args.debug else config.logging.level,
        log_dir=config.logging.log_dir,
        enable_file_logging=config.logging.file_logging,
        structured_json=config.logging.structured_json or None,
    )
    logger.info("Starting BF2 Migrator v%s", load_version())

    try:
        if args.list_profiles:
            return run_list_profiles(args, config)
        if args.migrate_profile is not None:
            return run_migrate_profile(args, config)
        if args.patch:
            return run_patch(args, config)
        if args.detect:
            return run_detect(args, config)
    except (BaseError, OSError) as e:
        logger.error("%s", e, extra={"error_code": getattr(e, "error_code", None)})
        print(f"Error: {e}")
        return 1

    build_parser().print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
