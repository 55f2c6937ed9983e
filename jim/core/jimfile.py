"""Jimfile 解析

Jimfile 为按行书写的需求清单，顺序即打包顺序:

    // 注释（也可以用 #）
    bundle_path: public/javascripts/bundled.js
    compressed_path: public/javascripts/compressed.js
    vendor_dir: public/javascripts/vendor

    jquery 1.4.1
    sammy
    lib/my-plugin.js

- `key: value` 为选项行
- 以 .js 结尾或包含 "/" 的行是直接引用的文件
- 其余为 `name [version]`
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from jim.core.exceptions import ConfigError
from jim.core.models import Requirement

logger = logging.getLogger(__name__)

OPTION_KEYS = frozenset(("bundle_path", "compressed_path", "vendor_dir"))

_OPTION_RE = re.compile(r"^(?P<key>[a-z_]+)\s*:\s*(?P<value>.*)$")

JIMFILE_TEMPLATE = """\
// Jimfile: 每行一个需求，打包顺序与书写顺序一致。
// 格式: <name> [version]，或直接写 .js 文件路径。
// 选项:
bundle_path: public/javascripts/bundled.js
compressed_path: public/javascripts/compressed.js
vendor_dir: public/javascripts/vendor

// jquery 1.4.1
"""


@dataclass
class Manifest:
    """解析后的 Jimfile"""

    requirements: list[Requirement] = field(default_factory=list)
    options: dict[str, str] = field(default_factory=dict)
    path: Path | None = None

    def base_dir(self) -> Path:
        """相对路径的基准目录: Jimfile 所在目录"""
        return self.path.parent if self.path else Path(".")


def _is_file_ref(token: str) -> bool:
    return "/" in token or token.lower().endswith(".js")


def parse_jimfile(text: str, path: Path | None = None) -> Manifest:
    manifest = Manifest(path=path)
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith(("//", "#")):
            continue

        m = _OPTION_RE.match(line)
        if m and m.group("key") in OPTION_KEYS:
            manifest.options[m.group("key")] = m.group("value").strip()
            continue

        tokens = line.split()
        if _is_file_ref(tokens[0]):
            manifest.requirements.append(
                Requirement(name=Path(tokens[0]).stem, path=tokens[0]),
            )
        elif len(tokens) <= 2:
            version = tokens[1] if len(tokens) == 2 else None
            manifest.requirements.append(Requirement(name=tokens[0], version=version))
        else:
            raise ConfigError(f"Jimfile 第 {lineno} 行无法解析: {raw!r}")
    return manifest


def load_jimfile(path: str | Path) -> Manifest:
    """读取 Jimfile

    异常:
        ConfigError: 文件不存在
    """
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f"Jimfile 不存在: {p}")
    manifest = parse_jimfile(p.read_text(encoding="utf-8"), path=p)
    logger.debug("已加载 Jimfile %s: %d 个需求", p, len(manifest.requirements))
    return manifest
