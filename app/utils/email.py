import logging
from decimal import Decimal

from app.config import settings

logger = logging.getLogger(__name__)


def send_ownership_transfer_email_to_sender(
    to_email: str,
    name: str,
    vehicle_identifier: str,
    old_plate: str,
    amount: Decimal,
    new_owner_name: str,
) -> bool:
    """
    SMTP disabled, message written to the log.
    Replace with real provider (SendGrid / Resend / SMTP) when ready.
    """
    logger.info(
        f"[TRANSFER EMAIL] From={settings.MAIL_FROM} To={to_email} | {name}: vehicle {vehicle_identifier} "
        f"(plate {old_plate}) transferred to {new_owner_name} for {amount} | {settings.AUTHORITY_NAME}"
    )
    return True


def send_ownership_transfer_email_to_receiver(
    to_email: str,
    name: str,
    vehicle_identifier: str,
    new_plate: str,
    amount: Decimal,
    previous_owner_name: str,
) -> bool:
    logger.info(
        f"[TRANSFER EMAIL] From={settings.MAIL_FROM} To={to_email} | {name}: ownership of vehicle "
        f"{vehicle_identifier} received from {previous_owner_name} for {amount}, plate {new_plate} "
        f"| {settings.AUTHORITY_NAME}"
    )
    return True


def notify_ownership_transferred(
    from_owner,
    to_owner,
    vehicle_identifier: str,
    old_plate: str,
    new_plate: str,
    amount: Decimal,
) -> None:
    """
    Tell both parties about a completed transfer.
    Best effort: any failure is logged and dropped, the transfer is already committed.
    """
    if not settings.NOTIFICATIONS_ENABLED:
        logger.debug(f"Notifications disabled, skipping transfer emails for {vehicle_identifier}")
        return

    # Sent independently: a failed sender email still lets the receiver email go out
    try:
        send_ownership_transfer_email_to_sender(
            from_owner.email, from_owner.fullName,
            vehicle_identifier, old_plate, amount, to_owner.fullName,
        )
    except Exception as e:
        logger.error(
            f"Failed to send ownership transfer notification to sender {from_owner.email} "
            f"for vehicle {vehicle_identifier}: {e}",
            exc_info=True,
        )

    try:
        send_ownership_transfer_email_to_receiver(
            to_owner.email, to_owner.fullName,
            vehicle_identifier, new_plate, amount, from_owner.fullName,
        )
    except Exception as e:
        logger.error(
            f"Failed to send ownership transfer notification to receiver {to_owner.email} "
            f"for vehicle {vehicle_identifier}: {e}",
            exc_info=True,
        )
