from __future__ import annotations

import io
import logging
from functools import wraps

from flask import Flask, jsonify, render_template, request, send_file, session

from ..core.enums import ScanDecision, StorageMode
from ..core.exceptions import DuplicatePayload, ParseFailure, StorageError, ValidationError
from ..container import Container
from ..qr.codes import make_badge_png
from .session import ScanSession

logger = logging.getLogger(__name__)

SESSION_KEY = "scan_session_id"


def register(app: Flask, container: Container) -> None:
    service = container.scanner_service

    def current_scan_session() -> ScanSession:
        scan_session = container.sessions.get_or_create(session.get(SESSION_KEY))
        session[SESSION_KEY] = scan_session.session_id
        return scan_session

    def json_errors(view):
        """Map service exceptions to JSON error responses."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DuplicatePayload as e:
                return jsonify({
                    "success": False,
                    "error_type": "duplicate",
                    "title": "QR Code Already Scanned!",
                    "message": str(e),
                }), 409
            except ParseFailure as e:
                return jsonify({
                    "success": False,
                    "error_type": "parse_failure",
                    "title": "Invalid QR Format",
                    "message": str(e),
                }), 422
            except ValidationError as e:
                return jsonify({"success": False, "error_type": "validation_error", "message": str(e)}), 400
            except StorageError as e:
                logger.error("Storage failure in %s: %s", request.path, e)
                return jsonify({"success": False, "error_type": "storage_error", "message": "Error saving attendance"}), 503
            except Exception:
                logger.exception("Unexpected error in %s", request.path)
                return jsonify({"success": False, "message": "Error processing request"}), 500

        return wrapper

    def _outcome_response(outcome):
        body = {"success": True, "decision": outcome.decision.value}
        if outcome.decision is ScanDecision.ACCEPT and outcome.record:
            body["record"] = outcome.record.to_dict()
            body["message"] = f"Attendance recorded for {outcome.record.name}"
            body["resume_after_ms"] = service.cooldown_ms
        return jsonify(body), 200

    @app.route("/", endpoint="scanner_page")
    def scanner_page():
        scan_session = current_scan_session()
        return render_template(
            "scan.html",
            camera=scan_session.camera.value,
            cooldown_ms=service.cooldown_ms,
        )

    @app.route("/api/session/start", methods=["POST"], endpoint="api_session_start")
    @json_errors
    def api_session_start():
        scan_session = service.start_session(current_scan_session())
        return jsonify({
            "success": True,
            "state": scan_session.state.value,
            "camera": scan_session.camera.value,
            "message": f"{scan_session.camera.label} camera started. Position QR code within the frame.",
        })

    @app.route("/api/session/stop", methods=["POST"], endpoint="api_session_stop")
    @json_errors
    def api_session_stop():
        summary = service.stop_session(current_scan_session())
        return jsonify({"success": True, "record_count": summary.record_count})

    @app.route("/api/session/camera", methods=["POST"], endpoint="api_session_camera")
    @json_errors
    def api_session_camera():
        facing = service.switch_camera(current_scan_session())
        return jsonify({"success": True, "camera": facing.value, "label": facing.label})

    @app.route("/api/scan", methods=["POST"], endpoint="api_scan")
    @json_errors
    def api_scan():
        data = request.get_json(silent=True) or {}
        code = data.get("code")
        if not isinstance(code, str):
            raise ValidationError("Missing QR code text")
        outcome = service.handle_decoded(current_scan_session(), code)
        return _outcome_response(outcome)

    @app.route("/api/scan/image", methods=["POST"], endpoint="api_scan_image")
    @json_errors
    def api_scan_image():
        if "image" not in request.files:
            raise ValidationError("Missing image file")
        outcome = service.decode_image(current_scan_session(), request.files["image"].stream)
        return _outcome_response(outcome)

    @app.route("/api/records", methods=["GET"], endpoint="api_records")
    @json_errors
    def api_records():
        records = service.list_records()
        mode = service.storage_mode
        return jsonify({
            "data": [r.to_dict() for r in records],
            "total": len(records),
            "storage_mode": mode.value if mode else None,
        })

    @app.route("/api/records/<record_id>", methods=["DELETE"], endpoint="api_record_delete")
    @json_errors
    def api_record_delete(record_id: str):
        service.delete_record(current_scan_session(), record_id)
        return jsonify({"success": True, "message": "Record deleted successfully"})

    @app.route("/api/records/clear", methods=["POST"], endpoint="api_records_clear")
    @json_errors
    def api_records_clear():
        count = service.clear_all(current_scan_session())
        return jsonify({"success": True, "cleared": count})

    @app.route("/api/records/test", methods=["POST"], endpoint="api_records_test")
    @json_errors
    def api_records_test():
        record = service.add_test_record(current_scan_session())
        return jsonify({"success": True, "record": record.to_dict()}), 201

    @app.route("/api/diagnostics", methods=["GET"], endpoint="api_diagnostics")
    @json_errors
    def api_diagnostics():
        return jsonify(service.diagnostics(current_scan_session()))

    @app.route("/api/storage/test", methods=["POST"], endpoint="api_storage_test")
    @json_errors
    def api_storage_test():
        check = service.check_storage()
        if check.mode is StorageMode.REMOTE:
            message = f"Remote storage working. Found {check.record_count} records."
        else:
            message = f"Using local storage. Found {check.record_count} records."
        return jsonify({
            "success": True,
            "storage_mode": check.mode.value if check.mode else None,
            "record_count": check.record_count,
            "message": message,
        })

    @app.route("/export.csv", methods=["GET"], endpoint="export_csv")
    @json_errors
    def export_csv():
        filename, text = service.export_csv()
        return app.response_class(
            text.encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/qr/badge", methods=["GET"], endpoint="api_qr_badge")
    @json_errors
    def api_qr_badge():
        png = make_badge_png(
            request.args.get("last", ""),
            request.args.get("first", ""),
            request.args.get("country", ""),
        )
        return send_file(io.BytesIO(png), mimetype="image/png")
