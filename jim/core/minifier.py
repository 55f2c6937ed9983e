"""JS 压缩

压缩算法本身交给 rjsmin，这里只做一层薄封装，方便 Bundler 注入替换。
"""

from __future__ import annotations

from rjsmin import jsmin


def minify(source: str) -> str:
    """压缩单个脚本，保留 /*! ... */ 版权注释"""
    return jsmin(source, keep_bang_comments=True)
