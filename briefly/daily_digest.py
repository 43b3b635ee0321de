"""
Briefly Daily Digest
This script fetches every registered feed once, writes the day's editor's
note to Firestore, and emails each subscriber a digest of the categories
they follow.
"""

import datetime
import json
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from briefly.composer import compose
from briefly.dispatcher import Dispatcher
from briefly.errors import ConfigError, StoreUnavailableError
from briefly.fetcher import FeedFetcher
from briefly.models import EditorsNote
from briefly.note import generate_note, subject_from_note
from briefly.parsers.rss import RSSParser
from briefly.registry import SourceRegistry
from briefly.renderer import TemplateRenderer
from briefly.services.db import FirestoreStore, NoteStore, SubscriberStore
from briefly.services.email_service import EmailService


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

REQUIRED_ENV = ("EMAIL_USER", "EMAIL_PASS", "GCP_PROJECT_ID")
IMAGE_POLICIES = ("text_card", "fallback_image")


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Loads configuration from a JSON file."""
    if config_path is None:
        config_path = os.environ.get("BRIEFLY_CONFIG")
    if config_path is None:
        # Build absolute path relative to this script
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "config.json")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        logger.warning("Config file not found at %s. Using empty config.", config_path)
        return {"feeds": {}}
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e


@dataclass(frozen=True)
class Settings:
    """Run-time tunables read from the config file."""

    top_n: int = 3
    fetch_timeout: float = 10
    fetch_workers: int = 8
    dispatch_workers: int = 4
    image_policy: str = "text_card"
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587
    sender_name: str = "Briefly News"

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "Settings":
        defaults = cls()
        try:
            settings = cls(
                top_n=int(config.get("top_n", defaults.top_n)),
                fetch_timeout=float(config.get("fetch_timeout", defaults.fetch_timeout)),
                fetch_workers=int(config.get("fetch_workers", defaults.fetch_workers)),
                dispatch_workers=int(
                    config.get("dispatch_workers", defaults.dispatch_workers)
                ),
                image_policy=str(config.get("image_policy", defaults.image_policy)),
                smtp_server=str(config.get("smtp_server", defaults.smtp_server)),
                smtp_port=int(config.get("smtp_port", defaults.smtp_port)),
                sender_name=str(config.get("sender_name", defaults.sender_name)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid setting: {e}") from e

        if settings.top_n < 1:
            raise ConfigError("top_n must be at least 1.")
        if settings.fetch_timeout <= 0:
            raise ConfigError("fetch_timeout must be positive.")
        if settings.image_policy not in IMAGE_POLICIES:
            raise ConfigError(
                f"image_policy must be one of {', '.join(IMAGE_POLICIES)}; "
                f"got '{settings.image_policy}'."
            )
        return settings


def require_env(names: Iterable[str] = REQUIRED_ENV) -> Dict[str, str]:
    """Returns the named environment variables or fails on any missing one."""
    values = {name: os.environ.get(name, "") for name in names}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigError(f"{', '.join(missing)} not set.")
    return values


@dataclass
class RunSummary:
    subscribers: int = 0
    skipped: int = 0
    sent: int = 0
    failed: int = 0


def run_digest(
    subscriber_store: SubscriberStore,
    note_store: NoteStore,
    fetcher: FeedFetcher,
    registry: SourceRegistry,
    renderer: TemplateRenderer,
    dispatcher: Dispatcher,
    fallbacks: Optional[Mapping[str, str]] = None,
    today: Optional[datetime.date] = None,
) -> RunSummary:
    """
    Runs the pipeline once.

    StoreUnavailableError from the subscriber store propagates. Source,
    note and delivery failures are logged and the run carries on.
    """
    today = today or datetime.date.today()
    summary = RunSummary()

    subscribers = subscriber_store.read_all_subscribers()
    summary.subscribers = len(subscribers)
    logger.info("Found %d subscribers.", len(subscribers))
    if not subscribers:
        logger.info("No subscribers. Nothing to do.")
        return summary

    snapshot = fetcher.fetch(registry)

    content = generate_note(snapshot, today)
    try:
        note = note_store.upsert_note(today, content)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.warning("Could not save editor's note: %s", e)
        note = EditorsNote(date=today.isoformat(), content=content)
    subject = subject_from_note(note.content)

    jobs = []
    for subscriber in subscribers:
        digest = compose(subscriber, snapshot, registry, fallbacks)
        if not digest.has_content:
            logger.info("User %s has no matching news.", subscriber["email"])
            summary.skipped += 1
            continue
        jobs.append((subscriber, subject, renderer.render(digest, note)))

    for result in dispatcher.dispatch_all(jobs):
        if result.sent:
            summary.sent += 1
        else:
            summary.failed += 1

    logger.info(
        "Run complete: %d sent, %d failed, %d skipped.",
        summary.sent,
        summary.failed,
        summary.skipped,
    )
    return summary


def main() -> int:
    """Main execution entry point."""
    logger.info("Starting Daily Digest...")
    try:
        env = require_env()
        config = load_config()
        settings = Settings.from_config(config)
        registry = SourceRegistry.from_config(config)
        store = FirestoreStore(env["GCP_PROJECT_ID"])

        fetcher = FeedFetcher(
            RSSParser(timeout=settings.fetch_timeout),
            top_n=settings.top_n,
            max_workers=settings.fetch_workers,
        )
        email_service = EmailService(
            settings.smtp_server,
            settings.smtp_port,
            env["EMAIL_USER"],
            env["EMAIL_PASS"],
            sender_name=settings.sender_name,
        )
        fallbacks = (
            registry.fallback_images
            if settings.image_policy == "fallback_image"
            else None
        )

        run_digest(
            store,
            store,
            fetcher,
            registry,
            TemplateRenderer(),
            Dispatcher(email_service, max_workers=settings.dispatch_workers),
            fallbacks=fallbacks,
        )
    except (ConfigError, StoreUnavailableError) as e:
        logger.error("Error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
