"""Receipt processing service: validate, score, mint an id, store."""

import logging

from src.scoring import RuleEngine
from src.store import ScoreStore
from src.utils import new_receipt_id
from src.validation import validate_receipt

from receipt_processor.audit import LOGGER_NAME

log = logging.getLogger(LOGGER_NAME)


class ReceiptProcessor:
    """Glue between the HTTP/CLI surface and the engine + store."""

    def __init__(self, engine: RuleEngine | None = None, store: ScoreStore | None = None):
        self.engine = engine if engine is not None else RuleEngine()
        self.store = store if store is not None else ScoreStore()

    def process_receipt(self, receipt: dict) -> tuple[str, int]:
        """
        Score a receipt and store the result under a fresh id.
        Raises jsonschema.ValidationError if the payload is not a receipt;
        nothing is stored in that case.
        Returns (receipt_id, points).
        """
        validate_receipt(receipt)
        breakdown = self.engine.breakdown(receipt)
        if not breakdown["purchase_time_valid"]:
            log.warning(
                "Unparseable purchaseTime %r; receipt scored 0",
                receipt.get("purchaseTime"),
            )
        points = breakdown["total"]
        receipt_id = new_receipt_id()
        log.debug("Scored receipt %s: %s", receipt_id, breakdown)
        # last step that can fail; nothing after it may lose the id
        self.store.put(receipt_id, points)
        return receipt_id, points

    def get_points(self, receipt_id: str) -> int:
        """Raises src.store.ReceiptNotFoundError for an unknown id."""
        return self.store.get(receipt_id)
