"""网络工具 — URL 判断、协议校验与下载"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from pathlib import Path
from urllib.parse import unquote, urlparse

from jim.core.exceptions import FetchError, ValidationError

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def is_url(source: str) -> bool:
    """判断来源是否为 URL（带 scheme 且不是 Windows 盘符）"""
    parsed = urlparse(str(source))
    return len(parsed.scheme) > 1 and bool(parsed.netloc)


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )


def url_basename(url: str, default: str = "download") -> str:
    """取 URL 路径的最后一段作为文件名"""
    name = unquote(urlparse(url).path.rstrip("/").split("/")[-1])
    return name or default


def download(url: str, dest: Path) -> Path:
    """下载 URL 到 dest，失败时清理残留文件并抛出 FetchError

    不做重试，也不设置超时。
    """
    validate_url_scheme(url, context="install")
    dest.parent.mkdir(parents=True, exist_ok=True)
    logger.debug("下载: %s -> %s", url, dest)
    try:
        with urllib.request.urlopen(url) as resp:  # nosec B310
            dest.write_bytes(resp.read())
    except (urllib.error.HTTPError, urllib.error.URLError, OSError) as e:
        dest.unlink(missing_ok=True)
        raise FetchError(f"下载失败: {url} - {e}") from e
    return dest
