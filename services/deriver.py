"""Status message derivation for raw sensor flags."""

from __future__ import annotations

NO_DATA_MESSAGE = "No data received yet"
AUTHORIZED_MESSAGE = "Authorized person detected - IR sensor sleeping"
INTRUSION_MESSAGE = "⚠️ ALERT: Unauthorized intrusion detected!"
ALL_CLEAR_MESSAGE = "All clear - Monitoring..."


def derive_message(ir_triggered: bool, rfid_authorized: bool) -> str:
    """Map the sensor flags to the dashboard message.

    An authorized RFID badge puts the IR sensor to sleep, so it wins over an
    IR trigger.
    """
    if rfid_authorized:
        return AUTHORIZED_MESSAGE
    if ir_triggered:
        return INTRUSION_MESSAGE
    return ALL_CLEAR_MESSAGE
