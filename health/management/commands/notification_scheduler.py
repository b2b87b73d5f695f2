import logging
import time

from django.core.management.base import BaseCommand
from django.utils import timezone

from health.services.scheduler import JOBS, next_job, run_all

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Run notification housekeeping: daily program reminders at 06:00, weekly cleanup on Sunday."

    def add_arguments(self, parser):
        parser.add_argument('--once', action='store_true', help='Run every job now and exit.')

    def handle(self, *args, **options):
        if options['once']:
            results = run_all()
            reminders = len(results['program_reminders'])
            self.stdout.write(self.style.SUCCESS(
                f"program reminders due today: {reminders}; read notifications removed: {results['cleanup']}"
            ))
            return

        self.stdout.write(self.style.SUCCESS("Notification scheduler started."))
        while True:
            name, fire_at = next_job(timezone.now())
            delay = max((fire_at - timezone.now()).total_seconds(), 0)
            logger.info("next job %s at %s (in %ds)", name, fire_at.isoformat(), int(delay))
            time.sleep(delay)
            _, job = JOBS[name]
            try:
                job(timezone.now())
            except Exception:
                # a failed run is retried at the job's next slot
                logger.exception("scheduler job %s failed", name)
            # step past the slot we just served so it is not picked again
            time.sleep(1)
