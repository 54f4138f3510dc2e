"""
Transient user notifications raised by live mirrors
"""

import logging
from dataclasses import asdict, dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Toast:
    title: str
    description: str

    def to_message(self) -> dict:
        return {"type": "toast", **asdict(self)}


def log_toast(toast: Toast) -> None:
    """Default sink when a mirror has nobody to show toasts to"""
    logger.info(f"{toast.title}: {toast.description}")
