"""Receipt Processor - score purchase receipts and look the points up by id."""

from receipt_processor.config import Settings, load_settings
from receipt_processor.service import ReceiptProcessor

__all__ = ["Settings", "load_settings", "ReceiptProcessor"]
