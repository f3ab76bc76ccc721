"""
Verification status polling

A submitted job is PENDING until the explorer reports success or failure.
Each attempt is one status request; between attempts the poller waits
``interval`` seconds. Unknown status text and transport errors both leave the
job pending and count against ``max_attempts``: one flaky status check must
not abandon a verification that is otherwise going through. Running out of
attempts is a TIMED_OUT outcome, not an error.
"""

import logging
import threading
import time
from typing import Callable, Optional

from .client import ExplorerClient
from .errors import ApiError, NetworkError
from .models import VerificationJob, VerificationOutcome

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 12
DEFAULT_INTERVAL = 5.0

SUCCESS_STATUSES = ("Success", "Pass - Verified")


def classify_status(payload: dict) -> Optional[VerificationOutcome]:
    """Map one checkverifystatus payload to a terminal outcome, or None if still pending"""
    status = str(payload.get("result") or "")
    message = str(payload.get("message") or "").strip()

    # "Pass - Verified" and "Fail - <reason>" are terminal too, beyond the plain Success/Fail pair
    if status in SUCCESS_STATUSES:
        return VerificationOutcome.verified()

    if status == "Fail":
        if message and message.upper() not in ("NOTOK", "OK"):
            return VerificationOutcome.failed(message)
        return VerificationOutcome.failed()

    if status.startswith("Fail - "):
        return VerificationOutcome.failed(status)

    return None


class Poller:
    def __init__(self, client: ExplorerClient, sleep: Callable[[float], None] = time.sleep):
        self.client = client
        self.sleep = sleep

    def _wait(self, interval: float, cancel: Optional[threading.Event]) -> None:
        if cancel is not None:
            cancel.wait(interval)
        else:
            self.sleep(interval)

    def poll(
        self,
        job: VerificationJob,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        interval: float = DEFAULT_INTERVAL,
        cancel: Optional[threading.Event] = None,
    ) -> VerificationOutcome:
        """Poll ``job`` until it reaches a terminal outcome or the attempt budget runs out"""
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if interval < 0:
            raise ValueError("interval cannot be negative")

        logger.info("Polling verification status for GUID %s", job.guid)

        for attempt in range(1, max_attempts + 1):
            if cancel is not None and cancel.is_set():
                logger.info("Polling for GUID %s cancelled", job.guid)
                return VerificationOutcome.cancelled()

            try:
                payload = self.client.check_status(job)
            except (NetworkError, ApiError) as e:
                logger.warning(
                    "Error checking status (%d/%d): %s", attempt, max_attempts, e
                )
            else:
                outcome = classify_status(payload)
                if outcome is not None:
                    logger.info("GUID %s finished: %s", job.guid, outcome.status.value)
                    return outcome

                status = str(payload.get("result") or "")
                if "Pending" in status:
                    logger.info("Verification pending... (%d/%d)", attempt, max_attempts)
                else:
                    logger.warning(
                        "Unrecognized status %r (%d/%d)", status, attempt, max_attempts
                    )

            if attempt < max_attempts:
                if cancel is not None and cancel.is_set():
                    logger.info("Polling for GUID %s cancelled", job.guid)
                    return VerificationOutcome.cancelled()
                self._wait(interval, cancel)

        logger.warning("Verification timeout after %d attempts", max_attempts)
        return VerificationOutcome.timed_out()
