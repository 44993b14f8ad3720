"""
Management command to run the overdue sweep.

Without options a single sweep runs and the command exits. ``--loop`` keeps a
SweeperWorker running until interrupted, for hosts without Celery beat.
"""

from datetime import timedelta

from django.core.management.base import BaseCommand

from notifications.sweeper import OverdueSweeper, SweeperWorker


class Command(BaseCommand):
    help = "Create deadline notifications for overdue cards and subtasks"

    def add_arguments(self, parser):
        parser.add_argument(
            "--loop",
            action="store_true",
            help="Keep sweeping on an interval until interrupted",
        )
        parser.add_argument(
            "--interval-hours",
            type=float,
            default=None,
            help="Sweep interval for --loop (defaults to OVERDUE_SWEEP_INTERVAL_HOURS)",
        )
        parser.add_argument(
            "--dedup-hours",
            type=float,
            default=None,
            help="Dedup window (defaults to OVERDUE_DEDUP_WINDOW_HOURS)",
        )

    def handle(self, *args, **options):
        dedup_hours = options.get("dedup_hours")
        dedup_window = timedelta(hours=dedup_hours) if dedup_hours is not None else None
        sweeper = OverdueSweeper(dedup_window=dedup_window)

        if not options.get("loop"):
            created = sweeper.run()
            self.stdout.write(self.style.SUCCESS(f"Created {created} deadline notifications"))
            return

        interval_hours = options.get("interval_hours")
        interval = timedelta(hours=interval_hours) if interval_hours is not None else None
        worker = SweeperWorker(sweeper=sweeper, interval=interval)

        created = worker.run_once()
        self.stdout.write(f"Initial sweep created {created} deadline notifications")
        self.stdout.write(f"Sweeping every {worker.interval}; press Ctrl+C to stop")

        worker.start()
        try:
            worker.wait()
        except KeyboardInterrupt:
            self.stdout.write("Stopping...")
        finally:
            worker.stop()
        self.stdout.write(self.style.SUCCESS("Sweeper stopped"))
