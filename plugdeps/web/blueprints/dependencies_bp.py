"""依赖解析 API Blueprint

每个请求独立执行一次解析，不跨请求缓存。
app.config["PLUGDEPS_RESOLVER"] 可替换解析入口（测试时注入假数据）。
"""

from __future__ import annotations

from flask import Blueprint, Response, current_app, jsonify

from plugdeps.core.graph import DependencyGraph
from plugdeps.web.responses import not_found, ok

dependencies_bp = Blueprint("dependencies", __name__, url_prefix="/api/dependencies")


def _graph() -> DependencyGraph:
    resolver = current_app.config.get("PLUGDEPS_RESOLVER")
    if resolver is not None:
        return resolver()
    from plugdeps.core.resolver import resolve_from_config
    return resolve_from_config(
        use_components_file=bool(current_app.config.get("PLUGDEPS_USE_COMPONENTS_FILE")),
        offline=bool(current_app.config.get("PLUGDEPS_OFFLINE")),
    )


@dependencies_bp.route("", methods=["GET"])
def listing() -> Response:
    return jsonify(_graph().dependencies_listing())


@dependencies_bp.route("/summary", methods=["GET"])
def summary() -> Response:
    return jsonify(_graph().summary())


@dependencies_bp.route("/missing", methods=["GET"])
def missing() -> Response:
    graph = _graph()
    return jsonify(missing=sorted(graph.missing_slugs()), all_satisfied=graph.all_satisfied())


@dependencies_bp.route("/<slug>/dependents", methods=["GET"])
def dependents(slug: str) -> Response:
    graph = _graph()
    names = graph.dependents_of(slug)
    return jsonify(slug=slug, dependents=names, text=", ".join(names))


@dependencies_bp.route("/components/<path:identifier>/required", methods=["GET"])
def component_required(identifier: str) -> tuple[Response, int] | Response:
    graph = _graph()
    if graph.get(identifier) is None:
        return not_found(f"插件 '{identifier}' ")
    return ok({"identifier": identifier, "required": graph.is_required(identifier)})
