"""At-most-once delivery claims backed by a create-if-absent marker."""

from datetime import datetime, timezone

from yorisoi.domain.models import ClaimResult, delivery_marker_key
from yorisoi.infrastructure.interfaces.marker_store import MarkerStore
from yorisoi.logging import setup_logging

logger = setup_logging()


class DeliveryGate:
    """Lets exactly one worker deliver the notification of a job."""

    def __init__(self, marker_store: MarkerStore):
        self._markers = marker_store

    def try_claim(self, job_id: str) -> ClaimResult:
        """
        Claims the delivery of a job's notification.

        Returns:
            ``acquired=True`` for the single caller that created the marker,
            ``acquired=False`` when another worker already claimed it.

        Raises:
            MarkerStoreError: If the marker write fails for any other reason.
        """
        key = delivery_marker_key(job_id)
        acquired = self._markers.create_if_absent(
            key, datetime.now(timezone.utc).isoformat()
        )
        if acquired:
            logger.info("Delivery claimed", extra={"job_id": job_id})
        else:
            logger.info("Delivery already claimed, skipping", extra={"job_id": job_id})
        return ClaimResult(acquired=acquired)
