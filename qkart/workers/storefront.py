"""产品页"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exceptions import NoProductsFoundError, QKartError
from ..handlers import auth
from ..handlers.cart import find_unmatched, reconcile, summarize
from ..handlers.mutator import CartMutator
from ..logger import logger as base_logger
from ..models import Notice

if TYPE_CHECKING:
    from typing import Awaitable, Callable, Literal, Optional

    from loguru import Logger

    from ..api import BackendClient
    from ..handlers.auth import SessionContext
    from ..models import CartItem, CartSummary, Product, Session


class Storefront:
    """
    产品页的状态：产品目录、当前展示的产品、购物车和提示

    所有异常都转成 `notices` 里的提示，失败时购物车保持不变；
    购物车只会被后端响应整体替换，不会原地修改
    """

    def __init__(self, client: BackendClient, context: SessionContext):
        self.client = client
        self.context = context

        self.catalog: list[Product] = list()  # 完整的产品目录，用于合并购物车
        self.products: list[Product] = list()  # 当前展示的产品（可能经过搜索过滤）
        self.no_products: bool = False  # 没有匹配的产品
        self.items: Optional[list[CartItem]] = None  # None 表示没有购物车（未登录）
        self.notices: list[Notice] = list()
        self.unmatched: list[str] = list()  # 最近一次获取购物车时在产品目录中找不到的产品编号

        self.mutator = CartMutator(client, self.logger)

    @property
    def logger(self) -> Logger:
        if self.context.username is None:
            return base_logger
        return base_logger.bind(username=self.context.username)

    @property
    def summary(self) -> CartSummary:
        return summarize(self.items)

    def notify(self, message: str, variant: Literal['success', 'warning', 'error'] = 'error') -> None:
        self.notices.append(Notice(message=message, variant=variant))

    def _notify_error(self, error: QKartError) -> None:
        self.notify(error.message, error.variant)

    async def load_products(self) -> None:
        """获取完整的产品目录，已登录时接着获取购物车"""
        self.no_products = False
        try:
            catalog = await self.client.fetch_products()
        except NoProductsFoundError:
            self.no_products = True
            self.products = list()
        except QKartError as qe:
            self.logger.error(f'获取产品目录失败\n{qe}')
            self._notify_error(qe)
        else:
            self.catalog = catalog
            self.products = list(catalog)
            self.logger.info(f'产品目录共 {len(catalog)} 个产品')

        if self.context.is_authenticated:
            await self.load_cart()

    async def search(self, text: str) -> None:
        """按关键词过滤展示的产品，关键词为空时同时刷新用于合并购物车的完整目录"""
        self.no_products = False
        try:
            products = await self.client.search_products(text)
        except NoProductsFoundError:
            self.no_products = True
            self.products = list()
        except QKartError as qe:
            self.logger.error(f'搜索 "{text}" 失败\n{qe}')
            self._notify_error(qe)
        else:
            self.products = products
            if not text or not text.strip():
                self.catalog = list(products)

    async def load_cart(self) -> None:
        """从后端获取购物车，获取失败时视为没有购物车"""
        session = self.context.session
        if session is None:
            self.items = None
            self.unmatched = list()
            return
        try:
            entries = await self.client.fetch_cart(session.token)
        except QKartError as qe:
            if not self._is_current(session):
                return
            self.logger.error(f'获取购物车失败\n{qe}')
            self._notify_error(qe)
            self.items = None
        else:
            if not self._is_current(session):
                return
            self.unmatched = find_unmatched(entries, self.catalog)
            self.items = reconcile(entries, self.catalog, self.logger)

    def _is_current(self, session: Optional[Session]) -> bool:
        """请求期间会话没有变化（没有退出或切换用户）"""
        if self.context.session is session:
            return True
        self.logger.warning('请求期间会话已变化，丢弃响应')
        return False

    async def _update(self, update: Callable[[], Awaitable[list[CartItem]]]) -> bool:
        """执行一次购物车更新，会话在请求期间变化时丢弃结果"""
        session = self.context.session
        try:
            items = await update()
        except QKartError as qe:
            if self._is_current(session):
                self._notify_error(qe)
            return False
        if not self._is_current(session):
            return False
        self.items = items
        return True

    async def add_to_cart(self, product_id: str) -> bool:
        """产品卡片的 ADD TO CART，返回购物车是否已更新"""
        return await self._update(
            lambda: self.mutator.add_to_cart(self.context.token, self.items, self.catalog, product_id)
        )

    async def increment(self, product_id: str) -> bool:
        """购物车侧栏的 +"""
        return await self._update(
            lambda: self.mutator.increment(self.context.token, self.items or [], self.catalog, product_id)
        )

    async def decrement(self, product_id: str) -> bool:
        """购物车侧栏的 -"""
        return await self._update(
            lambda: self.mutator.decrement(self.context.token, self.items or [], self.catalog, product_id)
        )

    async def login(self, username: str, password: str) -> bool:
        try:
            await auth.login(self.client, self.context, username, password)
        except QKartError as qe:
            self._notify_error(qe)
            return False
        self.mutator.logger = self.logger
        self.notify('Logged in successfully', 'success')
        await self.load_cart()
        return True

    async def register(self, username: str, password: str, confirm_password: str) -> bool:
        try:
            await auth.register(self.client, username, password, confirm_password)
        except QKartError as qe:
            self._notify_error(qe)
            return False
        self.notify('Success', 'success')
        return True

    def logout(self) -> None:
        """结束会话，清掉购物车"""
        self.context.end()
        self.items = None
        self.unmatched = list()
        self.mutator.logger = self.logger
