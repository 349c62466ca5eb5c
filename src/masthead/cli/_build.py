"""Assemble the site App from the environment for CLI commands."""

import argparse
import logging
import sys

from masthead.app import App
from masthead.config import AppConfig
from masthead.errors import ConfigurationError, StoreError
from masthead.site import create_app
from masthead.store import MemoryStore


def build_app(args: argparse.Namespace) -> App:
    """Load config from the environment, seed the store, build the App.

    Exits with status 1 on a configuration or seed-data error.
    """
    try:
        config = AppConfig.from_env()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    data_file = getattr(args, "data", None) or config.data_file
    if data_file:
        try:
            store = MemoryStore.from_json(data_file)
        except StoreError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            raise SystemExit(1) from exc
    else:
        store = MemoryStore()
    store.create_collection(config.primary_collection)
    store.create_collection(config.secondary_collection)

    return create_app(config, store)
