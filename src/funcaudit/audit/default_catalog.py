"""Sample catalog seeded into an empty store."""

from __future__ import annotations

from funcaudit.models.function_entry import FunctionEntry

DEFAULT_CATALOG: tuple[FunctionEntry, ...] = (
    FunctionEntry(
        id="1",
        app_name="抖音 (TikTok)",
        function_name="扫一扫",
        path="打开抖音-首页-左上角更多-扫一扫",
        landing_page="snssdk1128://qrcode",
        example_queries=["打开抖音扫一扫", "使用抖音扫一扫", "抖音怎么扫码"],
    ),
    FunctionEntry(
        id="2",
        app_name="支付宝 (Alipay)",
        function_name="收钱码",
        path="打开支付宝-收钱",
        landing_page="alipays://platformapi/startapp?appId=20000056",
        example_queries=["打开支付宝收钱", "我的收款码", "展示支付宝收钱码"],
    ),
    FunctionEntry(
        id="3",
        app_name="微信 (WeChat)",
        function_name="朋友圈",
        path="打开微信-发现-朋友圈",
        landing_page="weixin://dl/moments",
        example_queries=["打开微信朋友圈", "看看朋友圈", "我想发个朋友圈"],
    ),
)
