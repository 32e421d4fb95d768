import logging

logger = logging.getLogger(__name__)


def dispatch_otp(channel: str, target: str, code: str) -> None:
    """Deliver a one-time code to an email address or phone number.

    No mail or SMS gateway is wired in; the code is written to the log.
    """
    logger.info(f"OTP for {channel} {target}: {code}")
