"""修改购物车内产品的数量"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exceptions import (
    AuthRequiredError,
    DuplicateItemError,
    InvalidQuantityError,
    UpdatePendingError,
)
from ..logger import logger as base_logger
from ..models import UpdateOptions
from .cart import is_item_in_cart, reconcile

if TYPE_CHECKING:
    from typing import Optional, Sequence

    from loguru import Logger

    from ..api import BackendClient
    from ..models import CartItem, Product


class CartMutator:
    """
    把用户的操作（加购、加一、减一）转成一次后端更新，并用后端返回的购物车重新生成展示数据

    不做乐观更新：只有后端成功响应后才返回新的购物车数据，失败时抛出异常，调用方的数据保持不变
    """

    def __init__(self, client: BackendClient, logger: Optional[Logger] = None):
        self.client = client
        self.logger = logger if logger is not None else base_logger
        self.__pending: set[str] = set()  # 有未完成更新请求的产品编号

    @property
    def pending(self) -> frozenset[str]:
        return frozenset(self.__pending)

    def is_pending(self, product_id: str) -> bool:
        return product_id in self.__pending

    async def set_quantity(
        self,
        token: Optional[str],
        items: Optional[Sequence[CartItem]],
        catalog: Sequence[Product],
        product_id: str,
        qty: int,
        options: Optional[UpdateOptions] = None,
    ) -> list[CartItem]:
        """
        把 `product_id` 的数量设为 `qty`（绝对值，不是增量），返回新的购物车数据

        按顺序检查，不通过时不发请求：
        1. 未登录，抛出 `AuthRequiredError`
        2. `qty` 不是非负整数，抛出 `InvalidQuantityError`
        3. 不允许重复加购且产品已在购物车内，抛出 `DuplicateItemError`
        4. 该产品已有未完成的更新，抛出 `UpdatePendingError`
        """
        if options is None:
            options = UpdateOptions()

        if not token:
            self.logger.warning(f'未登录，拒绝修改 "{product_id}" 的数量')
            raise AuthRequiredError()

        if isinstance(qty, bool) or not isinstance(qty, int) or qty < 0:
            self.logger.warning(f'"{product_id}" 的目标数量 {qty!r} 不合法')
            raise InvalidQuantityError(qty)

        if not options.prevent_duplicate and is_item_in_cart(items, product_id):
            self.logger.warning(f'"{product_id}" 已在购物车内，拒绝重复加购')
            raise DuplicateItemError(product_id)

        if product_id in self.__pending:
            self.logger.warning(f'"{product_id}" 已有未完成的更新，忽略本次操作')
            raise UpdatePendingError(product_id)

        self.__pending.add(product_id)
        try:
            self.logger.info(f'更新 "{product_id}" 的数量为 {qty}')
            entries = await self.client.update_cart(token, product_id, qty)
        finally:
            self.__pending.discard(product_id)

        result: list[CartItem] = reconcile(entries, catalog, self.logger)  # type: ignore
        self.logger.debug(f'更新 "{product_id}" 成功，购物车内共 {len(result)} 种产品')
        return result

    async def add_to_cart(
        self,
        token: Optional[str],
        items: Optional[Sequence[CartItem]],
        catalog: Sequence[Product],
        product_id: str,
    ) -> list[CartItem]:
        """产品卡片上的加购，已在购物车内时拒绝"""
        return await self.set_quantity(token, items, catalog, product_id, 1, UpdateOptions())

    async def increment(
        self,
        token: Optional[str],
        items: Sequence[CartItem],
        catalog: Sequence[Product],
        product_id: str,
    ) -> list[CartItem]:
        """购物车侧栏的 + 按钮"""
        qty = _current_qty(items, product_id) + 1
        return await self.set_quantity(
            token, items, catalog, product_id, qty, UpdateOptions(prevent_duplicate=True)
        )

    async def decrement(
        self,
        token: Optional[str],
        items: Sequence[CartItem],
        catalog: Sequence[Product],
        product_id: str,
    ) -> list[CartItem]:
        """购物车侧栏的 - 按钮，数量为 1 时减一即移除"""
        qty = _current_qty(items, product_id) - 1
        return await self.set_quantity(
            token, items, catalog, product_id, qty, UpdateOptions(prevent_duplicate=True)
        )


def _current_qty(items: Optional[Sequence[CartItem]], product_id: str) -> int:
    """产品在购物车内的当前数量，不在购物车内时为 0"""
    for item in items or ():
        if item.product_id == product_id:
            return item.qty
    return 0
