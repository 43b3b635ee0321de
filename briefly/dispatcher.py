"""
Dispatcher.

Makes exactly one delivery attempt per subscriber. A failed attempt is logged
with the recipient and the provider's error and reported as a DispatchResult;
it never stops the other deliveries.
"""

import concurrent.futures
import logging
from typing import Iterable, List, Tuple

from briefly.errors import DispatchError
from briefly.models import DispatchResult, Subscriber
from briefly.services.email_service import MailTransport

logger = logging.getLogger(__name__)

# (subscriber, subject, html document)
DispatchJob = Tuple[Subscriber, str, str]


class Dispatcher:
    """Delivers rendered digests through a MailTransport."""

    def __init__(self, transport: MailTransport, max_workers: int = 4):
        self.transport = transport
        self.max_workers = max(1, max_workers)

    def _send(self, recipient: str, subject: str, document: str) -> None:
        try:
            self.transport.send(recipient, subject, document)
        except Exception as e:  # pylint: disable=broad-exception-caught
            raise DispatchError(recipient, str(e) or e.__class__.__name__) from e

    def dispatch(
        self, subscriber: Subscriber, document: str, subject: str
    ) -> DispatchResult:
        """Sends one document to one subscriber."""
        recipient = subscriber["email"]
        try:
            self._send(recipient, subject, document)
        except DispatchError as e:
            logger.error("Failed to send to %s: %s", recipient, e.detail)
            return DispatchResult(email=recipient, sent=False, error=e.detail)
        logger.info("Sent to %s", recipient)
        return DispatchResult(email=recipient, sent=True)

    def dispatch_all(self, jobs: Iterable[DispatchJob]) -> List[DispatchResult]:
        """Dispatches every job with bounded parallelism."""
        jobs = list(jobs)
        if not jobs:
            return []
        if self.max_workers == 1:
            return [self.dispatch(sub, doc, subj) for sub, subj, doc in jobs]

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.max_workers
        ) as executor:
            futures = [
                executor.submit(self.dispatch, sub, doc, subj)
                for sub, subj, doc in jobs
            ]
            return [f.result() for f in futures]
