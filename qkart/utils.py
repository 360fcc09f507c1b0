"""工具"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import quote

if TYPE_CHECKING:
    from typing import Optional

    from httpx import Response


def build_products_url(search: Optional[str] = None) -> str:
    """构造产品接口的路径，有搜索词时走搜索接口"""
    if search is None or search.strip() == '':
        return '/products'
    return f'/products/search?value={quote(search.strip())}'


def bearer_headers(token: str) -> dict[str, str]:
    """带 Bearer token 的请求头"""
    if not token:
        raise ValueError('token 不能为空')
    return {'Authorization': f'Bearer {token}'}


def extract_message(response: Response) -> Optional[str]:
    """从失败响应的 JSON 中取出 message，取不到时返回 None"""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    message = body.get('message')
    if isinstance(message, str) and message:
        return message
    return None
