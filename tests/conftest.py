"""测试共享 fixture — 在临时目录里生成各类待安装的脚本库

生成的目录结构:

  fixtures/
    jquery/jquery-1.4.1.js           文件名带版本
    color/jquery.color.js            与 jquery 内容不同（冲突用例）
    mustache/mustache.js             同目录 package.json 给出 name/version/author
    mustache/package.json
    comments/infoincomments.js       注释头声明 name/version
    noversion/noversion.js           没有任何版本信号
    archives/jquery.metadata-2.0.zip 3 个脚本 + test/test.js
    sammy-0.5.0/                     目录安装，含 test/ 与 test_ 开头的文件
"""

from __future__ import annotations

import json
import zipfile
from pathlib import Path

import pytest

JQUERY_141 = (
    "/*!\n"
    " * jQuery JavaScript Library v1.4.1\n"
    " * Dual licensed under the MIT or GPL Version 2 licenses.\n"
    " */\n"
    "(function(window){ window.jQuery = {fn: {jquery: '1.4.1'}}; })(this);\n"
)
JQUERY_COLOR = "(function(jQuery){ jQuery.fx.step.color = function(){}; })(jQuery);\n"
MUSTACHE = "var Mustache = function(){ return {to_html: function(){}}; }();\n"
INFO_IN_COMMENTS = (
    "/**\n"
    " * My Project\n"
    " * name: myproject\n"
    " * version: 1.2.2\n"
    " */\n"
    "var myproject = {};\n"
)
NO_VERSION = "var noversion = true;\n"


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def build_fixtures(root: Path) -> Path:
    _write(root / "jquery" / "jquery-1.4.1.js", JQUERY_141)
    _write(root / "color" / "jquery.color.js", JQUERY_COLOR)
    _write(root / "mustache" / "mustache.js", MUSTACHE)
    _write(root / "mustache" / "package.json", json.dumps({
        "name": "mustache",
        "version": "0.2.2",
        "author": "Jan Lehnardt",
        "description": "logic-less templates",
    }))
    _write(root / "comments" / "infoincomments.js", INFO_IN_COMMENTS)
    _write(root / "noversion" / "noversion.js", NO_VERSION)

    archive = root / "archives" / "jquery.metadata-2.0.zip"
    archive.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("jquery.metadata/jquery.metadata.js", "/* metadata */\nvar m = 1;\n")
        zf.writestr("jquery.metadata/jquery.metadata.min.js", "var m=1;\n")
        zf.writestr("jquery.metadata/jquery.metadata.pack.js", "eval('var m=1');\n")
        zf.writestr("jquery.metadata/test/test.js", "test('metadata');\n")
        zf.writestr("jquery.metadata/README", "read me\n")

    sammy = root / "sammy-0.5.0"
    _write(sammy / "lib" / "sammy.js", "var Sammy = function(){};\n")
    _write(sammy / "lib" / "plugins" / "sammy.template.js", "Sammy.Template = {};\n")
    _write(sammy / "lib" / "plugins" / "sammy.haml.js", "Sammy.Haml = {};\n")
    _write(sammy / "lib" / "test_sammy_application.js", "test('app');\n")
    _write(sammy / "test" / "qunit-spec.js", "QUnit.spec = {};\n")
    _write(sammy / "README.md", "# sammy\n")
    return root


@pytest.fixture()
def fixtures(tmp_path: Path) -> Path:
    """生成 fixture 库，返回根目录"""
    return build_fixtures(tmp_path / "fixtures")


@pytest.fixture()
def jimhome(tmp_path: Path) -> Path:
    """空的 JIMHOME，安装后的包位于 jimhome/lib"""
    home = tmp_path / "jimhome"
    home.mkdir()
    return home


def make_store(store: Path, packages: dict[str, str]) -> Path:
    """直接按存储布局造数据: {"jquery-1.4.1": "内容"} -> store/jquery-1.4.1/jquery.js"""
    for dirname, content in packages.items():
        name = dirname.rpartition("-")[0]
        _write(store / dirname / f"{name}.js", content)
        _write(store / dirname / "package.json", json.dumps({
            "name": name, "version": dirname.rpartition("-")[2],
        }))
    return store


@pytest.fixture()
def store_factory():
    return make_store
