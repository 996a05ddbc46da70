#!/usr/bin/env python3
"""Flask web app for the Receipt Processor."""

import logging

import jsonschema
from flask import Flask, request, jsonify

from receipt_processor.audit import LOGGER_NAME, audit_log, setup_app_logging
from receipt_processor.config import Settings, load_settings
from receipt_processor.service import ReceiptProcessor
from src.scoring import RuleEngine
from src.store import ReceiptNotFoundError, ScoreStore


def create_app(settings: Settings | None = None, store: ScoreStore | None = None) -> Flask:
    """Build the app. Settings are read once here and fixed for the process."""
    settings = settings or load_settings()
    log = setup_app_logging(settings.log_dir)

    processor = ReceiptProcessor(
        engine=RuleEngine(generated_by_llm=settings.generated_by_llm),
        store=store,
    )

    def _audit(action: str, status: str, **kwargs):
        """Audit failures are logged, never turned into a failed response."""
        if not settings.audit_enabled:
            return
        try:
            audit_log(settings.log_dir, action, status, **kwargs)
        except OSError:
            log.exception("Audit write failed: action=%s status=%s", action, status)

    app = Flask(__name__)
    app.config["RECEIPT_SETTINGS"] = settings
    app.config["RECEIPT_PROCESSOR"] = processor

    @app.route("/receipts/process", methods=["POST"])
    def api_process_receipt():
        """Score a receipt and return its id."""
        data = request.get_json(force=True, silent=True)
        if data is None:
            _audit("process", "error", error="Invalid JSON payload")
            log.info("Process rejected: body is not JSON")
            return jsonify({"error": "Invalid JSON payload"}), 400

        try:
            receipt_id, points = processor.process_receipt(data)
        except jsonschema.ValidationError as e:
            _audit("process", "error", error=e.message)
            log.info("Process rejected: %s", e.message)
            return jsonify({"error": "Receipt does not match the expected shape", "detail": e.message}), 400
        except Exception as e:
            _audit("process", "error", error=str(e))
            log.exception("Process failed")
            return jsonify({"error": str(e)}), 500

        _audit(
            "process",
            "success",
            receipt_id=receipt_id,
            points=points,
            extra={"num_items": len(data.get("items", []))},
        )
        log.info("Receipt processed: id=%s points=%d", receipt_id, points)
        return jsonify({"id": receipt_id})

    @app.route("/receipts/<receipt_id>/points", methods=["GET"])
    def api_get_points(receipt_id):
        """Return the points stored for a receipt id."""
        try:
            points = processor.get_points(receipt_id)
        except ReceiptNotFoundError:
            _audit("points", "not_found", receipt_id=receipt_id)
            log.info("Points lookup: unknown id=%s", receipt_id)
            return jsonify({"error": "No receipt found for that ID."}), 404

        _audit("points", "success", receipt_id=receipt_id, points=points)
        return jsonify({"points": points})

    @app.route("/health", methods=["GET"])
    def api_health():
        return jsonify({"status": "ok", "receipts": len(processor.store)})

    return app


if __name__ == "__main__":
    settings = load_settings()
    app = create_app(settings)
    log = logging.getLogger(LOGGER_NAME)
    log.info(
        "Receipt Processor starting on http://%s:%d | GENERATED_BY_LLM: %s | Logs: %s",
        settings.host,
        settings.port,
        settings.generated_by_llm,
        settings.log_dir,
    )
    app.run(host=settings.host, port=settings.port, threaded=True)
