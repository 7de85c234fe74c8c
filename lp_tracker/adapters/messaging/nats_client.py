"""Message bus client implementation using core NATS subjects."""

import logging
from typing import Awaitable, Callable, Dict, Optional, Protocol

import nats
from nats.aio.client import Client as NATSClient
from nats.aio.msg import Msg
from nats.aio.subscription import Subscription


logger = logging.getLogger(__name__)

MessageHandler = Callable[[Msg], Awaitable[None]]


class MessageBusClient(Protocol):
    """Protocol for message bus client implementations."""

    async def connect(self) -> None:
        """Connect to the message bus."""
        ...

    async def disconnect(self) -> None:
        """Disconnect from the message bus."""
        ...

    async def is_connected(self) -> bool:
        """Check if client is connected to the message bus."""
        ...

    async def publish(self, subject: str, data: bytes) -> None:
        """Publish a message to the specified subject."""
        ...

    async def subscribe(self, subject: str, handler: MessageHandler, queue: str = "") -> None:
        """Subscribe to messages on the specified subject."""
        ...

    async def unsubscribe(self, subject: str) -> None:
        """Stop receiving messages on the specified subject."""
        ...


class NATSMessageBusClient:
    """NATS message bus client for request/reply style command traffic."""

    def __init__(
        self,
        servers: str,
        timeout: int = 10,
        max_reconnect_attempts: int = 10,
        reconnect_delay: int = 2,
    ):
        """Initialize NATS client.

        Args:
            servers: NATS server URLs (e.g., "nats://localhost:4222")
            timeout: Connection timeout in seconds
            max_reconnect_attempts: Maximum reconnection attempts
            reconnect_delay: Delay between reconnection attempts in seconds
        """
        self.servers = servers
        self.timeout = timeout
        self.max_reconnect_attempts = max_reconnect_attempts
        self.reconnect_delay = reconnect_delay

        self._client: Optional[NATSClient] = None
        self._subscriptions: Dict[str, Subscription] = {}
        self._connected = False

    async def connect(self) -> None:
        """Connect to NATS server."""
        if self._connected:
            logger.warning("Already connected to NATS")
            return

        try:
            logger.info(f"Connecting to NATS at {self.servers}")

            self._client = await nats.connect(
                servers=self.servers,
                connect_timeout=self.timeout,
                max_reconnect_attempts=self.max_reconnect_attempts,
                reconnect_time_wait=self.reconnect_delay,
                error_cb=self._error_callback,
                disconnected_cb=self._disconnected_callback,
                reconnected_cb=self._reconnected_callback,
            )
            self._connected = True

            logger.info("Successfully connected to NATS")

        except Exception as e:
            logger.error(f"Failed to connect to NATS: {e}")
            self._connected = False
            raise

    async def disconnect(self) -> None:
        """Drain subscriptions and disconnect from NATS server."""
        if not self._connected or not self._client:
            return

        try:
            logger.info("Disconnecting from NATS")
            await self._client.drain()
            self._connected = False
            self._client = None
            self._subscriptions = {}
            logger.info("Disconnected from NATS")
        except Exception as e:
            logger.error(f"Error during NATS disconnect: {e}")

    async def is_connected(self) -> bool:
        """Check if client is connected to NATS."""
        return (
            self._connected and self._client is not None and self._client.is_connected
        )

    async def publish(self, subject: str, data: bytes) -> None:
        """Publish a message to the specified subject."""
        if not self._client:
            raise RuntimeError("Not connected to NATS")

        try:
            await self._client.publish(subject, data)
            logger.debug(f"NATS message published - Subject: {subject}, Size: {len(data)} bytes")
        except Exception as e:
            logger.error(f"Failed to publish message to {subject}: {e}")
            raise

    async def subscribe(self, subject: str, handler: MessageHandler, queue: str = "") -> None:
        """Subscribe to messages on the specified subject.

        Args:
            subject: Subject to listen on
            handler: Coroutine called with every received message
            queue: Queue group, so replicas share the messages instead of all
                receiving them
        """
        if not self._client:
            raise RuntimeError("Not connected to NATS")

        async def _callback(msg: Msg) -> None:
            try:
                await handler(msg)
            except Exception as e:
                logger.error(f"Error processing message from {subject}: {e}")

        try:
            subscription = await self._client.subscribe(subject, queue=queue, cb=_callback)
            self._subscriptions[subject] = subscription
            logger.info(f"Subscribed to {subject} (queue group: {queue or 'none'})")
        except Exception as e:
            logger.error(f"Failed to subscribe to {subject}: {e}")
            raise

    async def unsubscribe(self, subject: str) -> None:
        """Drain the subscription on a subject.

        Messages already received are still handed to the handler before
        this returns; nothing new is delivered afterwards.
        """
        subscription = self._subscriptions.pop(subject, None)
        if subscription is None:
            return

        try:
            await subscription.drain()
            logger.info(f"Unsubscribed from {subject}")
        except Exception as e:
            logger.error(f"Failed to unsubscribe from {subject}: {e}")

    async def _error_callback(self, error):
        """Handle NATS connection errors."""
        logger.error(f"NATS error: {error}")

    async def _disconnected_callback(self):
        """Handle NATS disconnection."""
        logger.warning("Disconnected from NATS")
        self._connected = False

    async def _reconnected_callback(self):
        """Handle NATS reconnection."""
        logger.info("Reconnected to NATS")
        self._connected = True

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.disconnect()
