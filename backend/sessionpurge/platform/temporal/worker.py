"""Temporal worker serving the session deletion activities."""

import asyncio
import signal
from typing import Any, List, Optional

from temporalio.client import Client
from temporalio.worker import Worker

from sessionpurge.core.config import settings
from sessionpurge.core.logging import logger
from sessionpurge.platform.temporal.activities import (
    delete_session_batch_from_index_activity,
    delete_session_batch_from_postgres_activity,
    delete_session_batch_from_storage_activity,
    get_session_ids_by_query_activity,
    send_email_activity,
)

SESSION_DELETION_ACTIVITIES: List[Any] = [
    get_session_ids_by_query_activity,
    delete_session_batch_from_index_activity,
    delete_session_batch_from_postgres_activity,
    delete_session_batch_from_storage_activity,
    send_email_activity,
]


class TemporalWorker:
    """Temporal worker for the session deletion activities."""

    def __init__(self, client: Optional[Client] = None) -> None:
        """Initialize the Temporal worker.

        Args:
            client: Connected Temporal client (connects from settings if None)
        """
        self.client = client
        self.worker: Worker | None = None
        self.running = False

    async def start(self) -> None:
        """Connect and run the worker until shut down."""
        try:
            if self.client is None:
                self.client = await Client.connect(
                    settings.temporal_address, namespace=settings.TEMPORAL_NAMESPACE
                )

            task_queue = settings.TEMPORAL_TASK_QUEUE
            logger.info(f"Starting Temporal worker on task queue: {task_queue}")

            self.worker = Worker(
                self.client,
                task_queue=task_queue,
                activities=SESSION_DELETION_ACTIVITIES,
                max_concurrent_activities=16,
            )

            self.running = True
            await self.worker.run()

        except Exception as e:
            logger.error(f"Error starting Temporal worker: {e}")
            raise

    async def stop(self) -> None:
        """Stop the Temporal worker."""
        if self.worker and self.running:
            logger.info("Stopping worker gracefully")
            self.running = False
            await self.worker.shutdown()


async def main() -> None:
    """Run the worker until SIGINT or SIGTERM."""
    worker = TemporalWorker()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda: asyncio.create_task(worker.stop()))

    await worker.start()


if __name__ == "__main__":
    asyncio.run(main())
