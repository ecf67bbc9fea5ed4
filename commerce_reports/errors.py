"""报表服务使用的异常类型。"""

from __future__ import annotations

from typing import Optional

# 按 HTTP 状态码归类上游错误，未列出的状态统一为 UPSTREAM_ERROR。
_STATUS_CODES = {
    401: "AUTH_FAILED",
    404: "NOT_FOUND",
}


class ReportsError(RuntimeError):
    """报表服务的基础异常。"""


class MissingCredentialsError(ReportsError):
    """调用参数与环境变量均未提供完整的 WooCommerce 凭证。"""


class UpstreamError(ReportsError):
    """
    最后一个可尝试的报表接口返回了非 2xx 响应。

    属性:
        report (str): 报表名称，例如 `revenue stats`。
        status_code (int): HTTP 状态码。
        reason (str): HTTP 状态描述文本。
        code (str): 归类后的错误码。
    """

    def __init__(self, report: str, status_code: int, reason: Optional[str] = None) -> None:
        self.report = report
        self.status_code = status_code
        self.reason = reason or ""
        self.code = _STATUS_CODES.get(status_code, "UPSTREAM_ERROR")
        super().__init__(f"Failed to fetch {report}: {self.reason}")
