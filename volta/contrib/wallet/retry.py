"""
Retry queue for wallet pass updates.

Backoff: min(BASE * 2**attempts, MAX) seconds with ±25% jitter, never less
than one second. Items that reach max_attempts are kept as ``failed`` for
manual review (admin, retry endpoint).
"""

import logging
import random
from datetime import datetime, timedelta

from django.db.models import Min
from django.utils import timezone

from volta.conf import volta_settings
from volta.contrib.wallet.models import RetryStatus, WalletRetryItem
from volta.exceptions import WalletPassError

logger = logging.getLogger(__name__)

MIN_DELAY = 1.0
JITTER = 0.25


def backoff_delay(attempts: int, rand=random.random) -> float:
    """Seconds until the next attempt after ``attempts`` failures."""
    base = volta_settings.WALLET_RETRY_BASE_DELAY
    ceiling = volta_settings.WALLET_RETRY_MAX_DELAY
    delay = min(base * (2 ** attempts), ceiling)
    jitter = delay * JITTER * (rand() * 2 - 1)
    return max(MIN_DELAY, delay + jitter)


class RetryQueue:
    """
    Persistent retry queue for wallet pass updates.

    Uses @classmethod for extensibility (consistent with other contrib services).
    """

    QUEUED = [RetryStatus.PENDING, RetryStatus.FAILED]

    @classmethod
    def enqueue(
        cls,
        enrollment,
        stamps_added: int,
        error: str = "",
        now: datetime | None = None,
    ) -> WalletRetryItem:
        """Queue a pass update for the enrollment."""
        now = now or timezone.now()
        item = WalletRetryItem.objects.create(
            enrollment=enrollment,
            stamps_added=stamps_added,
            max_attempts=volta_settings.WALLET_RETRY_MAX_ATTEMPTS,
            last_error=error,
            next_retry_at=now + timedelta(seconds=backoff_delay(0)),
        )
        logger.info(
            "Wallet update queued for retry: item=%s card=%s next=%s",
            item.pk,
            enrollment.pk,
            item.next_retry_at.isoformat(),
        )
        return item

    @classmethod
    def process_due(cls, now: datetime | None = None, backend=None) -> dict:
        """
        Retry every pending item whose next_retry_at has passed.

        Returns:
            Counts: {"processed", "succeeded", "rescheduled", "failed"}
        """
        now = now or timezone.now()
        counts = {"processed": 0, "succeeded": 0, "rescheduled": 0, "failed": 0}

        due = (
            WalletRetryItem.objects
            .filter(status=RetryStatus.PENDING, next_retry_at__lte=now)
            .select_related("enrollment__loyalty_card")
        )
        for item in due:
            counts["processed"] += 1
            if cls._attempt(item, now, backend):
                counts["succeeded"] += 1
            elif item.status == RetryStatus.FAILED:
                counts["failed"] += 1
            else:
                counts["rescheduled"] += 1

        if counts["processed"]:
            logger.info("Wallet retry run: %s", counts)
        return counts

    @classmethod
    def stats(cls, now: datetime | None = None) -> dict:
        """Queue statistics: total, pending, failed, oldest."""
        queued = WalletRetryItem.objects.filter(status__in=cls.QUEUED)
        pending = queued.filter(status=RetryStatus.PENDING).count()
        failed = queued.filter(status=RetryStatus.FAILED).count()
        oldest = queued.aggregate(oldest=Min("created_at"))["oldest"]
        return {
            "total": pending + failed,
            "pending": pending,
            "failed": failed,
            "oldest": oldest.isoformat() if oldest else None,
        }

    @classmethod
    def queue_status(cls, stats: dict) -> str:
        """idle, processing, or failed (only exhausted items left)."""
        if stats["total"] == 0:
            return "idle"
        if stats["pending"] > 0:
            return "processing"
        return "failed"

    @classmethod
    def clear(cls) -> int:
        """Drop every queued item. Returns the number removed."""
        count, _ = WalletRetryItem.objects.filter(status__in=cls.QUEUED).delete()
        logger.info("Wallet retry queue cleared (%s items removed)", count)
        return count

    @classmethod
    def retry(cls, item_id, backend=None) -> bool:
        """
        Retry one queued item now, regardless of its schedule.

        Returns:
            True if the pass was updated, False if the item is unknown or
            the update failed again
        """
        item = (
            WalletRetryItem.objects
            .filter(pk=item_id, status__in=cls.QUEUED)
            .select_related("enrollment__loyalty_card")
            .first()
        )
        if item is None:
            logger.warning("Manual wallet retry: item %s not found", item_id)
            return False
        return cls._attempt(item, timezone.now(), backend)

    @classmethod
    def _attempt(cls, item: WalletRetryItem, now: datetime, backend=None) -> bool:
        from volta.contrib.wallet.service import WalletService

        item.last_attempt_at = now
        try:
            WalletService.update_pass_stamps(item.enrollment, backend=backend)
        except WalletPassError as exc:
            item.attempts += 1
            item.last_error = exc.message
            if item.is_exhausted:
                item.status = RetryStatus.FAILED
                logger.error(
                    "Wallet retry failed permanently: item=%s attempts=%s error=%s",
                    item.pk,
                    item.attempts,
                    exc.message,
                )
            else:
                item.status = RetryStatus.PENDING
                item.next_retry_at = now + timedelta(seconds=backoff_delay(item.attempts))
                logger.warning(
                    "Wallet retry failed, will retry: item=%s attempts=%s/%s next=%s",
                    item.pk,
                    item.attempts,
                    item.max_attempts,
                    item.next_retry_at.isoformat(),
                )
            item.save()
            return False

        item.status = RetryStatus.SUCCEEDED
        item.last_error = ""
        item.save()
        logger.info("Wallet retry succeeded: item=%s", item.pk)
        return True
