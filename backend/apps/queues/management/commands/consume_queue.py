"""
Consume a single queue.

Long-polls the named queue and routes each batch until SIGINT/SIGTERM.
"""

import signal
import threading

from django.core.management.base import BaseCommand, CommandError

from apps.core.logging import get_logger
from apps.queues.consumers import QUEUE_NAMES, build_processor

logger = get_logger(__name__)


class Command(BaseCommand):
    help = "Consume messages from one queue"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._stop_event = threading.Event()

    def add_arguments(self, parser):
        parser.add_argument(
            "--queue",
            required=True,
            choices=QUEUE_NAMES,
            help="Logical queue name",
        )
        parser.add_argument(
            "--once",
            action="store_true",
            help="Process a single batch and exit (default: run continuously)",
        )

    def handle(self, *args, **options):
        queue_name = options["queue"]
        try:
            processor = build_processor(queue_name)
        except ValueError as e:
            raise CommandError(str(e)) from e

        try:
            if options["once"]:
                count = processor.run_once()
                self.stdout.write(f"Processed {count} messages from {queue_name}")
                return

            self._setup_signal_handlers()
            processor.run(self._stop_event)
        finally:
            processor.close()

    def _setup_signal_handlers(self) -> None:
        """Setup graceful shutdown on SIGINT/SIGTERM."""
        for sig in (signal.SIGINT, signal.SIGTERM):
            signal.signal(sig, self._handle_signal)

    def _handle_signal(self, signum, frame) -> None:
        logger.info("consumer_signal_received", signal=signum)
        self._stop_event.set()
