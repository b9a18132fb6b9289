"""
Queue adapter - long-poll receive and batched delete on AWS SQS.
"""

from dataclasses import dataclass
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from apps.core.logging import get_logger
from apps.queues.exceptions import QueueDeleteError, QueueReceiveError

logger = get_logger(__name__)

# DeleteMessageBatch accepts at most 10 entries per call
DELETE_BATCH_LIMIT = 10


@dataclass(frozen=True)
class QueueMessage:
    """A received message. The receipt handle is needed to delete it."""

    message_id: str
    receipt_handle: str
    body: str


class SQSQueue:
    """One SQS queue, identified by URL."""

    def __init__(
        self,
        client: Any,
        queue_url: str,
        wait_seconds: int = 20,
        max_messages: int = 10,
    ):
        self.client = client
        self.queue_url = queue_url
        self.wait_seconds = wait_seconds
        self.max_messages = max_messages

    def receive_batch(self) -> list[QueueMessage]:
        """
        Long-poll for up to ``max_messages`` messages.

        Returns an empty list when the wait elapses with nothing to deliver.

        Raises:
            QueueReceiveError: If the receive call fails.
        """
        try:
            response = self.client.receive_message(
                QueueUrl=self.queue_url,
                MaxNumberOfMessages=self.max_messages,
                WaitTimeSeconds=self.wait_seconds,
            )
        except (ClientError, BotoCoreError) as e:
            raise QueueReceiveError(f"Failed to receive from {self.queue_url}: {e}", self.queue_url) from e

        return [
            QueueMessage(
                message_id=raw["MessageId"],
                receipt_handle=raw["ReceiptHandle"],
                body=raw.get("Body", ""),
            )
            for raw in response.get("Messages", [])
        ]

    def delete_batch(self, messages: list[QueueMessage]) -> list[str]:
        """
        Delete messages, 10 per call.

        Per-entry failures are logged and their ids returned; those messages
        will be redelivered.

        Raises:
            QueueDeleteError: If a delete call fails as a whole.
        """
        failed_ids: list[str] = []

        for i in range(0, len(messages), DELETE_BATCH_LIMIT):
            chunk = messages[i : i + DELETE_BATCH_LIMIT]
            entries = [
                {"Id": str(index), "ReceiptHandle": message.receipt_handle}
                for index, message in enumerate(chunk)
            ]

            try:
                response = self.client.delete_message_batch(
                    QueueUrl=self.queue_url,
                    Entries=entries,
                )
            except (ClientError, BotoCoreError) as e:
                logger.error(
                    "queue_delete_failed",
                    queue_url=self.queue_url,
                    count=len(chunk),
                    error=str(e),
                )
                raise QueueDeleteError(
                    f"Failed to delete {len(chunk)} messages from {self.queue_url}: {e}",
                    self.queue_url,
                    len(chunk),
                ) from e

            for failure in response.get("Failed", []):
                message = chunk[int(failure["Id"])]
                failed_ids.append(message.message_id)
                logger.warning(
                    "queue_delete_entry_failed",
                    queue_url=self.queue_url,
                    message_id=message.message_id,
                    error_code=failure.get("Code", ""),
                    error_message=failure.get("Message", ""),
                )

            logger.debug(
                "queue_messages_deleted",
                queue_url=self.queue_url,
                count=len(response.get("Successful", [])),
            )

        return failed_ids

    def delete_message(self, message: QueueMessage) -> bool:
        """Delete one message. Returns False if SQS reported it as failed."""
        return not self.delete_batch([message])
