"""对 WooCommerce 报表接口发起带凭证的单次 GET 请求。"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx

from .base import CredentialProvider

logger = logging.getLogger(__name__)


@dataclass
class TransportResponse:
    """
    一次 GET 请求的结果。

    属性:
        ok (bool): 状态码是否为 2xx。
        status (int): HTTP 状态码。
        reason (str): HTTP 状态描述文本。
        json (Any): 2xx 时解析后的 JSON，否则为 None。
    """

    ok: bool
    status: int
    reason: str
    json: Any = None


class ReportTransport:
    """
    负责把凭证以 `consumer_key` / `consumer_secret` 查询参数附加到请求上。

    非 2xx 响应不会抛出异常，而是返回 ok=False 交由调用方决定是否回退；
    DNS、连接等传输层错误（httpx.TransportError）直接向上抛出，不做重试。
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        参数:
            credentials: 站点地址与 API 凭证，只读使用。
            client: 外部注入的 httpx 客户端，未提供时每次请求临时创建。
            timeout: 临时客户端的超时秒数，None 表示不限制。
        """
        self._credentials = credentials
        self._client = client
        self._timeout = timeout

    def _auth_params(self) -> dict[str, str]:
        return {
            "consumer_key": self._credentials.consumer_key,
            "consumer_secret": self._credentials.consumer_secret,
        }

    async def get(self, url: str, params: Optional[Mapping[str, Any]] = None) -> TransportResponse:
        """
        功能说明:
            发起一次 GET 请求，凭证参数位于查询串最前，所有参数均做 URL 编码。
        参数:
            url (str): 完整的接口地址（不含查询串）。
            params (Optional[Mapping[str, Any]]): 额外查询参数，值为 None 的项会被忽略。
        返回:
            TransportResponse: 状态与解析后的 JSON。
        """
        query = self._auth_params()
        for key, value in (params or {}).items():
            if value is not None:
                query[key] = str(value)

        logger.debug("GET %s", url)
        if self._client is not None:
            response = await self._client.get(url, params=query)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(url, params=query)

        if not response.is_success:
            logger.debug("GET %s -> %s %s", url, response.status_code, response.reason_phrase)
            return TransportResponse(
                ok=False,
                status=response.status_code,
                reason=response.reason_phrase,
            )
        return TransportResponse(
            ok=True,
            status=response.status_code,
            reason=response.reason_phrase,
            json=response.json(),
        )
