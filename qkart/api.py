"""后端接口"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from .config import ENDPOINT, TIMEOUT
from .exceptions import BackendRejectedError, BackendUnavailableError, NoProductsFoundError
from .logger import logger as base_logger
from .models import CartEntry, Product, Session
from .utils import bearer_headers, build_products_url, extract_message

if TYPE_CHECKING:
    from typing import Any, Optional, Self

    from loguru import Logger


T = TypeVar('T')

_products_adapter = TypeAdapter(list[Product])
_cart_adapter = TypeAdapter(list[CartEntry])


class BackendClient:
    """
    QKart 后端的异步客户端

    所有失败都会转成 `exceptions` 里的异常：
    400 且带 message 时抛出 `BackendRejectedError`，
    产品接口 404 时抛出 `NoProductsFoundError`，
    其余情况（网络错误、其他非 2xx、响应不是合法 JSON）抛出 `BackendUnavailableError`
    """

    def __init__(
        self,
        endpoint: str = ENDPOINT,
        timeout: float = TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[Logger] = None,
    ):
        self.endpoint = endpoint.rstrip('/')
        self.logger = logger if logger is not None else base_logger
        self.__client = httpx.AsyncClient(base_url=self.endpoint, timeout=timeout, transport=transport)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.__client.aclose()

    async def _request(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        json: Any = None,
    ) -> httpx.Response:
        """发送请求，网络层面的错误统一转成 `BackendUnavailableError`"""
        self.logger.info(f'{method} "{url}"')
        try:
            response = await self.__client.request(method, url, headers=headers, json=json)
        except httpx.HTTPError as he:
            self.logger.error(f'{method} "{url}" 请求失败\n{he!r}')
            raise BackendUnavailableError(self.endpoint + url) from he
        self.logger.debug(f'{method} "{url}" 响应 {response.status_code}')
        return response

    def _raise_for_status(self, response: httpx.Response, url: str) -> None:
        """非 2xx 时抛出对应的异常"""
        if response.is_success:
            return
        if response.status_code == 400:
            message = extract_message(response)
            if message is not None:
                self.logger.warning(f'"{url}" 被后端拒绝：{message}')
                raise BackendRejectedError(response.status_code, message)
        self.logger.error(f'"{url}" 响应状态码 {response.status_code}')
        raise BackendUnavailableError(self.endpoint + url)

    def _parse(self, adapter: TypeAdapter[T], response: httpx.Response, url: str) -> T:
        """按数据模型解析响应体，解析失败视为后端故障"""
        try:
            return adapter.validate_json(response.content)
        except ValidationError as ve:
            self.logger.error(f'"{url}" 的响应不符合数据模型\n{ve}')
            raise BackendUnavailableError(self.endpoint + url) from ve

    async def fetch_products(self) -> list[Product]:
        """获取完整的产品目录"""
        return await self.search_products(None)

    async def search_products(self, text: Optional[str]) -> list[Product]:
        """按关键词搜索产品，关键词为空时返回完整目录"""
        url = build_products_url(text)
        response = await self._request('GET', url)
        if response.status_code == 404:
            self.logger.info(f'"{url}" 没有匹配的产品')
            raise NoProductsFoundError(self.endpoint + url)
        self._raise_for_status(response, url)
        return self._parse(_products_adapter, response, url)

    async def fetch_cart(self, token: str) -> list[CartEntry]:
        """获取当前用户的购物车记录"""
        url = '/cart'
        response = await self._request('GET', url, headers=bearer_headers(token))
        self._raise_for_status(response, url)
        return self._parse(_cart_adapter, response, url)

    async def update_cart(self, token: str, product_id: str, qty: int) -> list[CartEntry]:
        """把某个产品的数量设为 `qty`，返回更新后的完整购物车记录"""
        url = '/cart'
        response = await self._request(
            'POST',
            url,
            headers=bearer_headers(token),
            json={'productId': product_id, 'qty': qty},
        )
        self._raise_for_status(response, url)
        return self._parse(_cart_adapter, response, url)

    async def login(self, username: str, password: str) -> Session:
        """登录，返回会话信息"""
        url = '/auth/login'
        response = await self._request('POST', url, json={'username': username, 'password': password})
        self._raise_for_status(response, url)
        try:
            return Session.model_validate_json(response.content)
        except ValidationError as ve:
            self.logger.error(f'"{url}" 的响应不符合数据模型\n{ve}')
            raise BackendUnavailableError(self.endpoint + url) from ve

    async def register(self, username: str, password: str) -> None:
        """注册新用户"""
        url = '/auth/register'
        response = await self._request('POST', url, json={'username': username, 'password': password})
        self._raise_for_status(response, url)
