"""商品报表服务的配置模型，支持环境变量加载。"""

import os
from dataclasses import dataclass, field
from typing import Optional

from .errors import MissingCredentialsError


@dataclass(frozen=True)
class WooCommerceCredentialConfig:
    """
    存放 WooCommerce REST API 所需的访问凭证。

    属性:
        site_url (str): 站点根地址，例如 `https://shop.example.com`。
        consumer_key (str): WooCommerce 生成的 consumer key。
        consumer_secret (str): 与 consumer key 配套的 secret。
    """

    site_url: str
    consumer_key: str
    consumer_secret: str

    @classmethod
    def from_env(cls) -> "WooCommerceCredentialConfig":
        """
        功能说明:
            从环境变量读取 WooCommerce 凭证，缺失任意一项即抛出异常。
        返回:
            WooCommerceCredentialConfig: 填充完成的凭证实例。
        """
        return resolve_woocommerce_credentials()


def resolve_woocommerce_credentials(
    site_url: Optional[str] = None,
    consumer_key: Optional[str] = None,
    consumer_secret: Optional[str] = None,
) -> WooCommerceCredentialConfig:
    """
    功能说明:
        合并调用参数与环境变量得到最终凭证，调用参数优先。
    参数:
        site_url (Optional[str]): 站点地址，缺省读取 `WP_SITE_URL`。
        consumer_key (Optional[str]): 缺省读取 `WC_CONSUMER_KEY`。
        consumer_secret (Optional[str]): 缺省读取 `WC_CONSUMER_SECRET`。
    返回:
        WooCommerceCredentialConfig: 完整的凭证。
    """
    site_url = site_url or os.getenv("WP_SITE_URL")
    consumer_key = consumer_key or os.getenv("WC_CONSUMER_KEY")
    consumer_secret = consumer_secret or os.getenv("WC_CONSUMER_SECRET")
    if not site_url or not consumer_key or not consumer_secret:
        raise MissingCredentialsError(
            "Missing WooCommerce credentials. Provide site_url, wc_consumer_key, "
            "wc_consumer_secret or set WP_SITE_URL, WC_CONSUMER_KEY, WC_CONSUMER_SECRET."
        )
    return WooCommerceCredentialConfig(
        site_url=site_url,
        consumer_key=consumer_key,
        consumer_secret=consumer_secret,
    )


@dataclass
class ReportsConfig:
    """
    定义报表查询层面的默认参数。

    属性:
        default_range (str): 未指定时使用的时间范围标记。
        default_interval (str): 时间序列的默认聚合粒度。
        top_products_limit (int): 热销榜默认返回条数。
        request_timeout (Optional[float]): HTTP 超时秒数，None 表示不限制。
    """

    default_range: str = "last_7_days"
    default_interval: str = "day"
    top_products_limit: int = 10
    request_timeout: Optional[float] = None

    @classmethod
    def from_env(cls, prefix: str = "REPORTS_") -> "ReportsConfig":
        """
        功能说明:
            从环境变量加载报表默认参数。
        参数:
            prefix (str): 环境变量前缀。
        返回:
            ReportsConfig: 配置实例。
        """
        timeout_raw = os.getenv(f"{prefix}REQUEST_TIMEOUT")
        return cls(
            default_range=os.getenv(f"{prefix}DEFAULT_RANGE", "last_7_days"),
            default_interval=os.getenv(f"{prefix}DEFAULT_INTERVAL", "day"),
            top_products_limit=int(os.getenv(f"{prefix}TOP_LIMIT", 10)),
            request_timeout=float(timeout_raw) if timeout_raw else None,
        )


@dataclass
class AppConfig:
    """
    顶层组合配置，聚合凭证与报表设置。

    属性:
        woocommerce (Optional[WooCommerceCredentialConfig]): 环境中配置的凭证，
            未配置时为 None，此时需要在每次调用时传入。
        reports (ReportsConfig): 报表默认参数。
    """

    woocommerce: Optional[WooCommerceCredentialConfig] = None
    reports: ReportsConfig = field(default_factory=ReportsConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """
        功能说明:
            统一从环境变量载入所有子配置，凭证缺失时不报错。
        返回:
            AppConfig: 完整的应用配置实例。
        """
        try:
            woocommerce: Optional[WooCommerceCredentialConfig] = WooCommerceCredentialConfig.from_env()
        except MissingCredentialsError:
            woocommerce = None
        return cls(woocommerce=woocommerce, reports=ReportsConfig.from_env())
