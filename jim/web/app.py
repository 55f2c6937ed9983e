"""Web 打包服务（基于 Flask）

把 Jimfile 的打包/压缩挂到 URL 上，修改源文件后刷新页面即可拿到
最新结果，无需重新执行命令行:

    GET /javascripts/<name>.js       -> bundle
    GET /javascripts/<name>.min.js   -> compress（后缀由 compressed_suffix 配置）

每个请求都会新建 Index 和 Bundler，完整地重新解析一遍，不做缓存。

启动方式: jim server --port 8888
"""

from __future__ import annotations

import html
import logging
import re
import traceback
from collections.abc import Callable

from flask import Blueprint, Flask, Response, abort

from jim.core.bundler import Bundler
from jim.core.config import Config

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^([\w\-.]+)\.js$")

_ERROR_TEMPLATE = """\
<p>jim 打包失败。执行 {action}({name}) 时出错。</p>
<p>{message}</p>
<pre>{trace}</pre>
"""


def create_bundle_blueprint(
    bundler_factory: Callable[[], Bundler],
    bundle_uri: str = "/javascripts/",
    compressed_suffix: str = ".min",
) -> Blueprint:
    """创建打包路由

    参数:
        bundler_factory: 每个请求调用一次，返回新的 Bundler
        bundle_uri: URL 前缀
        compressed_suffix: 名称以此结尾时走 compress
    """
    prefix = "/" + bundle_uri.strip("/") if bundle_uri.strip("/") else ""
    bp = Blueprint("bundles", __name__, url_prefix=prefix or None)

    @bp.route("/<path:filename>", methods=["GET"])
    def serve(filename: str) -> Response:
        m = _NAME_RE.match(filename)
        if not m:
            abort(404)
        name = m.group(1)
        if compressed_suffix and name.endswith(compressed_suffix):
            return _run("compress", name[: -len(compressed_suffix)], bundler_factory)
        return _run("bundle", name, bundler_factory)

    return bp


def _run(action: str, name: str, bundler_factory: Callable[[], Bundler]) -> Response:
    try:
        bundler = bundler_factory()
        # 传空字符串表示不写文件，直接返回内容
        content = getattr(bundler, action)("")
        return Response(content, status=200, mimetype="text/javascript")
    except Exception as e:  # noqa: BLE001  任何失败都以 500 诊断页返回
        logger.exception("打包失败: %s(%s)", action, name)
        body = _ERROR_TEMPLATE.format(
            action=action,
            name=html.escape(name),
            message=html.escape(f"{e} ({type(e).__name__})"),
            trace=html.escape(traceback.format_exc()),
        )
        return Response(body, status=500, mimetype="text/html")


def create_app(config: Config | None = None) -> Flask:
    """创建挂载了打包路由的 Flask 应用"""
    from jim.services.container import ServiceContainer

    if config is None:
        from jim.core.config import get_config
        config = get_config()

    def factory() -> Bundler:
        return ServiceContainer(config).bundler

    app = Flask(__name__)
    app.register_blueprint(create_bundle_blueprint(
        factory,
        bundle_uri=config.bundle_uri,
        compressed_suffix=config.compressed_suffix,
    ))
    return app


def run_server(host: str = "127.0.0.1", port: int = 8888) -> None:
    app = create_app()
    logger.info("jim 打包服务启动: http://%s:%d", host, port)
    app.run(host=host, port=port)
