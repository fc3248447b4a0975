from __future__ import annotations

import io
import secrets
from datetime import date, datetime
from functools import wraps
from typing import Optional

import qrcode
from flask import Flask, jsonify, request, send_file, session

from ..common.datetime_utils import parse_iso_date
from ..core.constants import DEFAULT_QR_TOKEN_BYTES
from ..core.exceptions import (
    AlreadyMarkedError,
    AttendanceCompleteError,
    ConflictError,
    DomainError,
    InvalidTokenError,
    TokenExpiredError,
    UserNotFoundError,
    ValidationError,
)
from ..container import Container
from .model import AttendanceRecord

_ERROR_STATUS = {
    ValidationError: 400,
    InvalidTokenError: 400,
    UserNotFoundError: 404,
    AlreadyMarkedError: 409,
    AttendanceCompleteError: 409,
    ConflictError: 409,
    TokenExpiredError: 410,
}


def _iso(value: Optional[datetime | date]) -> Optional[str]:
    return value.isoformat() if value else None


def record_to_json(r: AttendanceRecord) -> dict:
    return {
        "attendance_id": r.attendance_id,
        "user_id": r.user_id,
        "attendance_date": _iso(r.attendance_date),
        "check_in_time": _iso(r.check_in_time),
        "check_out_time": _iso(r.check_out_time),
        "status": r.status.value,
        "marked_by": r.marked_by,
    }


def render_qr_png(data: str) -> io.BytesIO:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf


def register(app: Flask, container: Container) -> None:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "unauthenticated", "message": "Login required"}), 401
            return view(*args, **kwargs)

        return wrapper

    def _current_user_id() -> int:
        return int(session["user_id"])

    def _token_from_body() -> str:
        data = request.get_json(silent=True) or {}
        token = data.get("token")
        if not isinstance(token, str) or not token:
            raise ValidationError("QR token is required")
        return token

    def _parse_date_arg(name: str) -> date:
        value = request.args.get(name)
        if not value:
            raise ValidationError(f"Missing query parameter: {name}")
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"Invalid date for {name} (YYYY-MM-DD)")

    def _parse_user_id_arg() -> Optional[int]:
        value = request.args.get("user_id")
        if value is None or value == "":
            return None
        try:
            return int(value)
        except ValueError:
            raise ValidationError("Invalid user_id")

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = _ERROR_STATUS.get(type(e), 400)
        return jsonify({"error": e.code, "message": str(e), "retryable": e.retryable}), status

    @app.route("/api/attendance/token/register", methods=["POST"], endpoint="attendance_register_token")
    @login_required
    def register_token():
        """User registers the token their client will display as a QR code."""
        container.attendance_service.issue_token(_current_user_id(), _token_from_body())
        return jsonify({"success": True}), 200

    @app.route("/api/attendance/token/qr", methods=["POST"], endpoint="attendance_token_qr")
    @login_required
    def token_qr():
        """Issue a fresh random token and return it rendered as a QR code."""
        raw = secrets.token_urlsafe(DEFAULT_QR_TOKEN_BYTES)
        issued = container.attendance_service.issue_token(_current_user_id(), raw)
        response = send_file(render_qr_png(raw), mimetype="image/png")
        response.headers["X-Token-Expires-At"] = issued.expires_at.isoformat()
        return response

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @login_required
    def mark():
        """Operator scans a user's token: first scan checks in, second checks out."""
        record = container.attendance_service.resolve_scan(_token_from_body())
        return jsonify({
            "message": "Attendance marked successfully",
            "timestamp": container.clock.now().isoformat(),
            "attendance": record_to_json(record),
        }), 200

    @app.route("/api/attendance/my", methods=["GET"], endpoint="attendance_my")
    @login_required
    def my_attendance():
        records = container.attendance_service.list_my_attendance(_current_user_id())
        return jsonify([record_to_json(r) for r in records]), 200

    @app.route("/api/attendance/percentage/my", methods=["GET"], endpoint="attendance_percentage_my")
    @login_required
    def my_percentage():
        result = container.report_service.compute_my_percentage(_current_user_id())
        return jsonify(result.to_dict()), 200

    @app.route("/api/attendance/percentage", methods=["GET"], endpoint="attendance_percentage")
    @login_required
    def percentage():
        start = _parse_date_arg("start")
        end = _parse_date_arg("end")
        user_id = _parse_user_id_arg()

        results = container.report_service.compute_percentage_for_range(start, end, user_id)
        return jsonify([r.to_dict() for r in results]), 200
