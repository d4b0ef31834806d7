import logging
import signal
import threading
from typing import List, Optional

from grohuh_core.application import IngestLoop, run_forever
from grohuh_core.config.environments import Settings, get_settings
from grohuh_core.domain.trigger import SocTrigger

from grohuh_server.adapters.action.command import CommandAction
from grohuh_server.adapters.db.uow import SqlAlchemyUoW
from grohuh_server.adapters.mqtt.subscriber import MqttSubscriber

log = logging.getLogger(__name__)


def build_trigger(settings: Settings) -> SocTrigger:
    action = CommandAction.from_string(settings.TRIGGER_COMMAND, timeout=settings.TRIGGER_TIMEOUT_SEC)
    return SocTrigger(action, high=settings.SOC_HIGH_THRESHOLD, low=settings.SOC_LOW_THRESHOLD)


def build_loop(settings: Settings) -> IngestLoop:
    """Fresh transport connection and store access for one supervised run."""
    source = MqttSubscriber(
        host=settings.MQTT_BROKER,
        port=settings.MQTT_PORT,
        topic=settings.MQTT_TOPIC,
        client_id=settings.MQTT_CLIENT_ID,
        qos=settings.MQTT_QOS,
        keepalive=settings.MQTT_KEEPALIVE_SEC,
    )
    return IngestLoop(
        source,
        lambda: SqlAlchemyUoW(state_key=settings.TRIGGER_STATE_KEY),
        build_trigger(settings),
    )


def main(stop_event: Optional[threading.Event] = None) -> None:
    settings = get_settings()
    install_signals = stop_event is None
    stop_event = stop_event or threading.Event()
    current: List[IngestLoop] = []

    def _stop(signum, _frame):
        log.info("Received signal %s, shutting down", signum)
        stop_event.set()

    def _make_loop() -> IngestLoop:
        loop = build_loop(settings)
        current[:] = [loop]
        return loop

    if install_signals and threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGTERM, _stop)
        signal.signal(signal.SIGINT, _stop)

    log.info(
        "Ingesting %s from %s:%s, restart delay %ss",
        settings.MQTT_TOPIC,
        settings.MQTT_BROKER,
        settings.MQTT_PORT,
        settings.RESTART_DELAY_SEC,
    )
    log.info(
        "Trigger band high=%s low=%s command=%r state_key=%s",
        settings.SOC_HIGH_THRESHOLD,
        settings.SOC_LOW_THRESHOLD,
        settings.TRIGGER_COMMAND,
        settings.TRIGGER_STATE_KEY,
    )

    # Supervisor runs in a worker so the main thread stays free for signals.
    worker = threading.Thread(
        target=run_forever,
        args=(_make_loop, settings.RESTART_DELAY_SEC, stop_event),
        name="ingest-supervisor",
        daemon=True,
    )
    worker.start()
    while worker.is_alive() and not stop_event.is_set():
        stop_event.wait(1.0)

    # closing the source ends the running loop after the message in flight
    for loop in current:
        loop.source.close()
    worker.join(timeout=settings.TRIGGER_TIMEOUT_SEC + 5)
    log.info("Ingest service stopped")
