import logging
import queue
import threading
from typing import Iterator, Optional

import paho.mqtt.client as paho
from grohuh_core.domain.errors import TransportError
from grohuh_core.domain.ports import MessageSource

logger = logging.getLogger(__name__)


class MqttSubscriber(MessageSource):
    """
    Single-topic MQTT subscription exposed as an iterator of raw payloads.

    The paho network thread only enqueues payloads; the consumer takes them one at
    a time in arrival order. A lost or refused connection is not retried here: a
    disconnect stops the network thread before paho can reconnect, and once the
    queue is drained iteration raises TransportError so the supervisor can rebuild
    the whole loop.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int = 1883,
        topic: str,
        client_id: str,
        qos: int = 2,
        keepalive: int = 5,
        connect_timeout: float = 10.0,
        poll_interval: float = 1.0,
    ):
        self.host = host
        self.port = port
        self.topic = topic
        self.client_id = client_id
        self.qos = qos
        self.keepalive = keepalive
        self.connect_timeout = connect_timeout
        self.poll_interval = poll_interval

        self._queue: queue.Queue[bytes] = queue.Queue()
        self._ready = threading.Event()
        self._connected = False
        self._failure: Optional[str] = None
        self._closed = False

        self._client = paho.Client(
            paho.CallbackAPIVersion.VERSION2,
            client_id=client_id,
            clean_session=True,
            protocol=paho.MQTTv311,
        )
        self._client.on_connect = self._on_connect
        self._client.on_subscribe = self._on_subscribe
        self._client.on_message = self._on_message
        self._client.on_disconnect = self._on_disconnect

        logger.info(
            "Initializing MQTT subscriber: host=%s, port=%s, topic=%s, client_id=%s, qos=%s",
            host,
            port,
            topic,
            client_id,
            qos,
        )

        self._connect()

    def _connect(self) -> None:
        """Connect, start the network thread and wait for the broker to accept us."""
        try:
            result = self._client.connect(self.host, self.port, self.keepalive)
        except OSError as e:
            raise TransportError(f"cannot reach MQTT broker {self.host}:{self.port}: {e}") from e
        if result != paho.MQTT_ERR_SUCCESS:
            raise TransportError(f"MQTT connect failed, rc={result}")

        self._client.loop_start()

        if not self._ready.wait(self.connect_timeout):
            self.close()
            raise TransportError(f"no CONNACK from {self.host}:{self.port} within {self.connect_timeout}s")
        if self._failure:
            self.close()
            raise TransportError(self._failure)

    def _on_connect(self, client, userdata, flags, reason_code, properties) -> None:
        """Handle CONNACK: subscribe on success, record the failure otherwise."""
        if reason_code.is_failure:
            self._failure = f"MQTT connect refused: {reason_code}"
            logger.error("MQTT connect refused, reason=%s", reason_code)
        else:
            self._connected = True
            result, _mid = client.subscribe(self.topic, qos=self.qos)
            if result != paho.MQTT_ERR_SUCCESS:
                self._failure = f"MQTT subscribe to {self.topic} failed, rc={result}"
            else:
                logger.info("Connected to broker %s:%s", self.host, self.port)
        self._ready.set()

    def _on_subscribe(self, client, userdata, mid, reason_codes, properties) -> None:
        for rc in reason_codes:
            if rc.is_failure:
                self._failure = f"MQTT subscription to {self.topic} rejected: {rc}"
                logger.error("Subscription to %s rejected, reason=%s", self.topic, rc)
                return
        logger.info("Subscribed to %s", self.topic)

    def _on_message(self, client, userdata, msg) -> None:
        logger.debug("Received %d bytes on %s", len(msg.payload), msg.topic)
        self._queue.put(msg.payload)

    def _on_disconnect(self, client, userdata, flags, reason_code, properties) -> None:
        """Handle disconnection events."""
        self._connected = False
        if not self._closed:
            self._failure = f"disconnected from MQTT broker: {reason_code}"
            logger.warning("Disconnected from MQTT broker, reason=%s", reason_code)
            # no auto-reconnect; the supervisor builds a fresh subscriber
            self._client.loop_stop()

    def __iter__(self) -> Iterator[bytes]:
        while not self._closed:
            try:
                payload = self._queue.get(timeout=self.poll_interval)
            except queue.Empty:
                if self._failure:
                    raise TransportError(self._failure)
                continue
            yield payload

    def is_connected(self) -> bool:
        """Check if connected to the MQTT broker."""
        return self._connected

    def close(self) -> None:
        """Close the MQTT connection."""
        if self._closed:
            return
        logger.info("Closing MQTT connection")
        self._closed = True
        self._client.loop_stop()
        self._client.disconnect()
        self._connected = False
