"""HTTP transport for the RPC router.

``GET /api/rpc/<procedure>?input=<json>`` for queries and
``POST /api/rpc/<procedure>`` with a JSON body for mutations. The caller's
credential is an ID token in the ``Authorization: Bearer`` header or a
session cookie minted by ``POST /api/session``.
"""

import json
from datetime import timedelta
from typing import Any, Optional

from flask import Blueprint, current_app, jsonify, make_response, request

from ..errors import QuotebookError, ValidationError
from ..log import get_logger
from ..rpc.context import RequestContext, create_context
from ..rpc.router import Access, ProcedureKind
from ..services import Services

LOG = get_logger("web.rpc")

bp = Blueprint("rpc", __name__)

STATUS_BY_CODE = {
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "VALIDATION": 400,
}


def _services() -> Services:
    return current_app.extensions["quotebook"]


def _bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return None


def _session_cookie() -> Optional[str]:
    return request.cookies.get(_services().config.session_cookie_name) or None


def _read_input() -> Any:
    if request.method == "GET":
        raw = request.args.get("input")
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise ValidationError(f"Malformed input parameter: {e}") from e

    if not request.data:
        return None
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("Request body must be JSON")
    return payload


def error_response(error: QuotebookError):
    status = STATUS_BY_CODE.get(error.code, 500)
    return jsonify({"error": {"code": error.code, "message": error.message}}), status


def _clear_cookie(response, ctx: RequestContext) -> None:
    if ctx.clear_session:
        config = ctx.services.config
        response.delete_cookie(
            config.session_cookie_name,
            secure=config.session_secure,
            httponly=True,
            samesite="Lax",
        )


@bp.route("/api/rpc/<procedure>", methods=["GET", "POST"])
def call_procedure(procedure: str):
    router = current_app.config["QUOTEBOOK_ROUTER"]
    services = _services()
    ctx = create_context(services, _bearer_token(), _session_cookie())

    try:
        proc = router.get(procedure)
        if proc.kind == ProcedureKind.MUTATION and request.method != "POST":
            raise ValidationError(f"'{procedure}' is a mutation and must be called with POST")
        result = router.call(ctx, procedure, _read_input())
    except QuotebookError as e:
        LOG.info("%s %s failed: %s %s", request.method, procedure, e.code, e.message)
        return error_response(e)

    response = make_response(jsonify({"result": result}))
    _clear_cookie(response, ctx)
    return response


@bp.route("/api/session", methods=["POST"])
def create_session():
    """Exchange an ID token for a session cookie."""
    services = _services()
    payload = request.get_json(silent=True) or {}
    token = payload.get("idToken") or payload.get("id_token")

    router = current_app.config["QUOTEBOOK_ROUTER"]
    try:
        if not token:
            raise ValidationError("idToken is required")
        ctx = create_context(services, token)
        router.authorize(ctx, Access.PROTECTED)
        cookie = services.verifier.create_session(
            token, timedelta(seconds=services.config.session_max_age)
        )
    except QuotebookError as e:
        return error_response(e)

    LOG.info("Session started for %s", ctx.user.email)
    config = services.config
    response = make_response(jsonify({"result": router.call(ctx, "auth.me")}))
    response.set_cookie(
        config.session_cookie_name,
        cookie,
        max_age=config.session_max_age,
        secure=config.session_secure,
        httponly=True,
        samesite="Lax",
    )
    return response
