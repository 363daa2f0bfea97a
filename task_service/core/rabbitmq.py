import json
import logging
import threading
import time
from typing import Any, Dict, Optional

import pika
import pika.exceptions

from .config import Settings, get_settings

logger = logging.getLogger(__name__)


class TaskEventPublisher:
    """RabbitMQ publisher for task lifecycle events"""

    exchange = "task_exchange"

    def __init__(self, host: str = "rabbitmq", port: int = 5672, user: str = "admin", password: str = "admin123"):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.connection = None
        self.channel = None
        # BlockingConnection is not thread-safe; handlers and the sweep share it.
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "TaskEventPublisher":
        settings = settings or get_settings()
        return cls(
            host=settings.rabbitmq_host,
            port=settings.rabbitmq_port,
            user=settings.rabbitmq_user,
            password=settings.rabbitmq_password,
        )

    @staticmethod
    def routing_key_for(event_type: str) -> str:
        """task_created -> task.created"""
        return event_type.replace("_", ".", 1)

    @staticmethod
    def encode(event_type: str, data: Dict[str, Any]) -> str:
        return json.dumps({"event_type": event_type, "data": data})

    @property
    def is_connected(self) -> bool:
        return self.connection is not None and not self.connection.is_closed

    def _open_channel(self) -> None:
        params = pika.ConnectionParameters(
            host=self.host,
            port=self.port,
            credentials=pika.PlainCredentials(self.user, self.password),
            heartbeat=600,
            blocked_connection_timeout=300,
        )
        self.connection = pika.BlockingConnection(params)
        self.channel = self.connection.channel()
        self.channel.exchange_declare(exchange=self.exchange, exchange_type="topic", durable=True)

    def connect(self, max_retries: int = 5, retry_delay: int = 5) -> bool:
        """
        Open the broker connection and declare the topic exchange.

        Only AMQP connection errors are retried; anything else gives up at once.

        Returns:
            bool: True once connected, False when every attempt failed
        """
        attempt = 0
        while attempt < max_retries:
            attempt += 1
            try:
                self._open_channel()
            except pika.exceptions.AMQPConnectionError as e:
                logger.warning(f"Broker {self.host}:{self.port} unreachable ({attempt}/{max_retries}): {e}")
                if attempt < max_retries:
                    time.sleep(retry_delay)
                continue
            except Exception as e:
                logger.error(f"Unexpected error connecting to RabbitMQ: {e}")
                return False

            logger.info(f"Connected to RabbitMQ at {self.host}:{self.port}")
            return True

        logger.error(f"Giving up on RabbitMQ after {max_retries} attempt(s)")
        return False

    def publish_event(self, event_type: str, data: Dict[str, Any]) -> bool:
        """Send one event; returns False instead of raising when the broker is unavailable"""
        with self._lock:
            if not self.is_connected and not self.connect(max_retries=1):
                logger.warning(f"Dropping {event_type} event - no broker connection")
                return False
            return self._send(event_type, data)

    def _send(self, event_type: str, data: Dict[str, Any]) -> bool:
        routing_key = self.routing_key_for(event_type)
        try:
            self.channel.basic_publish(
                exchange=self.exchange,
                routing_key=routing_key,
                body=self.encode(event_type, data),
                properties=pika.BasicProperties(delivery_mode=2, content_type="application/json"),
            )
        except Exception as e:
            logger.error(f"Error publishing {event_type} event: {e}")
            return False

        logger.info(f"Published {event_type} event as {routing_key}")
        return True

    def close(self):
        """Close the connection and forget it"""
        connection, self.connection, self.channel = self.connection, None, None
        if connection is None or connection.is_closed:
            return
        try:
            connection.close()
            logger.info("RabbitMQ connection closed")
        except Exception as e:
            logger.error(f"Error closing connection: {e}")
