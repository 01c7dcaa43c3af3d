"""Synchronous pull / dispatch / acknowledge loop for a subscription."""

import logging
from typing import Optional

from courier.models.error import ErrorInfo, HandlerResult
from courier.models.message import ReceivedMessage
from courier.protocols.client import Subscription
from courier.protocols.handler import MessageHandler
from courier.serialization import unserialize_message_payload

UNSUBSCRIBE_SENTINEL = "unsubscribe"

# Ack deadline of zero asks the service to redeliver immediately.
NACK_DEADLINE_SECONDS = 0


class MessageConsumer:
    """
    Synchronous message consumer for one subscription.

    Responsibilities:
    - Pull up to ``max_messages`` messages per iteration, with no client-side timeout
    - Decode payloads and route them to the handler in delivery order
    - Acknowledge or nack each message according to the ack policy
    - Stop when the ``"unsubscribe"`` sentinel payload arrives

    The sentinel is acknowledged but never passed to the handler. Messages
    pulled in the same page after the sentinel are not dispatched; they are
    nacked so the service redelivers them right away.
    """

    def __init__(
        self,
        subscription: Subscription,
        handler: MessageHandler,
        max_messages: int,
        always_ack: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize message consumer.

        Args:
            subscription: Resolved subscription handle
            handler: Callable receiving each decoded payload
            max_messages: Pull batch size
            always_ack: Acknowledge every message regardless of handler outcome.
                When False, only truthy handler responses are acknowledged and
                everything else is nacked.
            logger: Logger for handler failures (defaults to this module's logger)
        """
        self.subscription = subscription
        self.handler = handler
        self.max_messages = max_messages
        self.always_ack = always_ack
        self.logger = logger or logging.getLogger(__name__)
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def run(self) -> None:
        """
        Run the consume loop until the sentinel is received.

        Errors raised by the subscription (pull, ack, nack) propagate.
        """
        self._running = True
        while self._running:
            self.process_batch()

    def process_batch(self) -> None:
        """
        Pull one page of messages and process it.

        Clears the running flag when the page contains the sentinel.
        """
        messages = self.subscription.pull(
            request={"max_messages": self.max_messages},
            timeout=None,
        )

        for index, received_message in enumerate(messages):
            payload = unserialize_message_payload(received_message.message.data)

            if payload == UNSUBSCRIBE_SENTINEL:
                self.logger.info("Unsubscribe received on %s", self.subscription.name)
                self.subscription.acknowledge(received_message)
                self._nack_all(messages[index + 1 :])
                self._running = False
                return

            result = self.dispatch(payload)
            self._settle(received_message, result)

    def dispatch(self, payload) -> HandlerResult:
        """Invoke the handler, capturing its response or failure."""
        try:
            response = self.handler(payload)
        except Exception as exc:
            self.logger.error(
                "PubSub message handler error: %s", exc, exc_info=True
            )
            return HandlerResult(error=ErrorInfo.from_exception(exc))
        return HandlerResult(response=response)

    def _settle(self, received_message: ReceivedMessage, result: HandlerResult) -> None:
        if self.always_ack or result.succeeded:
            self.subscription.acknowledge(received_message)
            return
        self.logger.debug("Nacking message %s", received_message.ack_id)
        self.subscription.modify_ack_deadline(received_message, NACK_DEADLINE_SECONDS)

    def _nack_all(self, messages: list[ReceivedMessage]) -> None:
        for received_message in messages:
            self.subscription.modify_ack_deadline(received_message, NACK_DEADLINE_SECONDS)
