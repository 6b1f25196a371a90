"""依赖解析 HTTP API（基于 Flask）

供宿主管理界面查询缺失依赖、被依赖关系与依赖安装列表。
"""

from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from plugdeps.core.exceptions import PlugDepsError
from plugdeps.web.blueprints.dependencies_bp import dependencies_bp

logger = logging.getLogger(__name__)


def create_app(config: dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__)
    app.config.update(config or {})
    app.register_blueprint(dependencies_bp)

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc):  # type: ignore[no-untyped-def]
        """将所有 HTTP 异常统一返回 JSON"""
        return jsonify(error=exc.description), exc.code

    @app.errorhandler(PlugDepsError)
    def handle_plugdeps_error(exc):  # type: ignore[no-untyped-def]
        return jsonify(error=str(exc), code=exc.code), 400

    @app.errorhandler(Exception)
    def handle_generic_exception(exc):  # type: ignore[no-untyped-def]  # noqa: ARG001
        """捕获未处理异常，返回 500 JSON"""
        logger.exception("未处理的异常")
        return jsonify(error="服务器内部错误"), 500

    return app


app = create_app()
