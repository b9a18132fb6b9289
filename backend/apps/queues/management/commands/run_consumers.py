"""
Run every queue consumer in one process.

One thread per queue. SIGINT/SIGTERM stops all of them; each finishes the
batch it is working on before exiting.
"""

import signal
import threading

from django.core.management.base import BaseCommand, CommandError

from apps.core.logging import get_logger
from apps.queues.consumers import QUEUE_NAMES, build_processor

logger = get_logger(__name__)


class Command(BaseCommand):
    help = "Run consumers for all (or the selected) queues until stopped"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._stop_event = threading.Event()

    def add_arguments(self, parser):
        parser.add_argument(
            "--queues",
            nargs="+",
            choices=QUEUE_NAMES,
            default=list(QUEUE_NAMES),
            help="Queues to consume (default: all)",
        )

    def handle(self, *args, **options):
        queue_names = list(dict.fromkeys(options["queues"]))
        try:
            processors = [build_processor(name) for name in queue_names]
        except ValueError as e:
            raise CommandError(str(e)) from e

        self._setup_signal_handlers()

        threads = [
            threading.Thread(
                target=processor.run,
                args=(self._stop_event,),
                name=f"consumer-{processor.name}",
            )
            for processor in processors
        ]
        for thread in threads:
            thread.start()
        logger.info("consumers_started", queues=queue_names)

        try:
            for thread in threads:
                # Join with a timeout so the main thread stays responsive to signals
                while thread.is_alive():
                    thread.join(timeout=1.0)
        finally:
            self._stop_event.set()
            for processor in processors:
                processor.close()

        logger.info("consumers_shutdown")

    def _setup_signal_handlers(self) -> None:
        """Setup graceful shutdown on SIGINT/SIGTERM."""
        for sig in (signal.SIGINT, signal.SIGTERM):
            signal.signal(sig, self._handle_signal)

    def _handle_signal(self, signum, frame) -> None:
        logger.info("consumers_signal_received", signal=signum)
        self._stop_event.set()
