"""Flask adapter that serves the report handler over plain HTTP."""

import uuid

from flask import Flask, Response, jsonify, request

from report_collector.config import load_config
from report_collector.handler import create_handler
from report_collector.sink import MemorySink


def build_event(flask_request) -> dict:
    """Translate a Flask request into the API Gateway HTTP API event shape."""
    request_id = flask_request.headers.get("X-Request-Id") or str(uuid.uuid4())
    return {
        "requestContext": {
            "requestId": request_id,
            "http": {
                "sourceIp": flask_request.remote_addr,
                "method": flask_request.method,
                "path": flask_request.path,
            },
        },
        "headers": dict(flask_request.headers),
        "body": flask_request.get_data(as_text=True),
        "isBase64Encoded": False,
    }


def create_app(config=None, handler=None):
    """Flask application factory."""
    app = Flask(__name__)

    if config is None:
        config = load_config()
    if handler is None:
        handler = create_handler(config)

    app.config["components"] = {"config": config, "handler": handler}

    @app.route("/health")
    def health():
        return jsonify({"status": "healthy"})

    @app.route("/api/reports")
    def recent_reports():
        sink = handler.emitter.sink
        if not isinstance(sink, MemorySink):
            return jsonify({"error": "records are not kept in memory"}), 404
        count = request.args.get("count", 50, type=int)
        return jsonify(sink.records[::-1][:max(count, 0)])

    @app.route(config.route, methods=["POST"])
    def receive_report():
        result = handler.handle(build_event(request))
        return Response(
            result.body, status=result.status_code, mimetype="application/json"
        )

    return app
