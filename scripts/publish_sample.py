"""
Sample Growatt publisher.

• Publishes bridge-shaped JSON messages to `settings.MQTT_TOPIC`
• Ramps SOC between --soc-start and --soc-end so the trigger band gets crossed
• Useful against a local broker with `grohuh server` running
"""

import argparse
import json
import logging
import os
import random
import time
from datetime import datetime
from typing import Any

import paho.mqtt.client as mqtt

from grohuh_core.config.environments import get_settings

log = logging.getLogger("publish_sample")


def make_message(device: str, soc: int, buffered: str = "no") -> dict[str, Any]:
    pv1 = random.randint(0, 3500)
    pv2 = random.randint(0, 3500)
    return {
        "device": device,
        "time": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "buffered": buffered,
        "values": {
            "SOC": soc,
            "pv1watt": pv1 * 10,
            "pv2watt": pv2 * 10,
            "pvpowerin": (pv1 + pv2) * 10,
            "pvpowerout": int((pv1 + pv2) * 9.6),
            "pvgridvoltage": random.randint(2250, 2400),
            "pvfrequentie": random.randint(4995, 5005),
            "pvtemperature": random.randint(250, 450),
            "pvstatus": 1,
        },
    }


def soc_ramp(start: int, end: int, step: int):
    step = abs(step) if end >= start else -abs(step)
    soc = start
    while (step > 0 and soc <= end) or (step < 0 and soc >= end):
        yield soc
        soc += step


def main() -> None:
    parser = argparse.ArgumentParser(description="Publish sample Growatt messages")
    parser.add_argument(
        "--environment",
        choices=["production", "development", "testing"],
        default="development",
    )
    parser.add_argument("--device", default="NTCRBLR00Y")
    parser.add_argument("--soc-start", type=int, default=75)
    parser.add_argument("--soc-end", type=int, default=95)
    parser.add_argument("--step", type=int, default=5)
    parser.add_argument("--interval", type=float, default=1.0, help="seconds between messages")
    args = parser.parse_args()

    os.environ["GROHUH_ENV"] = args.environment
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=f"{settings.MQTT_CLIENT_ID}-sample")
    client.connect(settings.MQTT_BROKER, settings.MQTT_PORT, settings.MQTT_KEEPALIVE_SEC)
    client.loop_start()

    try:
        for soc in soc_ramp(args.soc_start, args.soc_end, args.step):
            payload = json.dumps(make_message(args.device, soc))
            info = client.publish(settings.MQTT_TOPIC, payload, qos=settings.MQTT_QOS)
            info.wait_for_publish()
            log.info("Published SOC=%s to %s", soc, settings.MQTT_TOPIC)
            time.sleep(args.interval)
    finally:
        client.loop_stop()
        client.disconnect()


if __name__ == "__main__":
    main()
