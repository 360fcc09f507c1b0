"""购物车数据的合并和统计"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..logger import logger as base_logger
from ..models import CartItem, CartSummary

if TYPE_CHECKING:
    from typing import Iterable, Optional, Protocol, Sequence

    from loguru import Logger

    from ..models import CartEntry, Product

    class _HasQty(Protocol):
        product_id: str
        qty: int


def reconcile(
    entries: Optional[Iterable[CartEntry]],
    catalog: Sequence[Product],
    logger: Optional[Logger] = None,
) -> Optional[list[CartItem]]:
    """
    用产品目录补全购物车记录，生成展示用的购物车数据

    * `entries` 为 None 表示没有购物车（未登录），此时返回 None，和空购物车 `[]` 区分
    * 数量为 0 的记录视为已移除，不展示
    * 在产品目录里找不到的记录会被丢弃（两份数据可能短暂不同步），丢弃数量会记录到日志
    * 结果保持 `entries` 的顺序
    """
    if entries is None:
        return None
    if logger is None:
        logger = base_logger

    products = {p.id: p for p in catalog}
    result: list[CartItem] = list()
    dropped: list[str] = list()
    for entry in entries:
        if entry.qty == 0:
            continue
        product = products.get(entry.product_id)
        if product is None:
            dropped.append(entry.product_id)
            continue
        result.append(CartItem.merge(entry, product))

    if dropped:
        logger.warning(f'{len(dropped)} 条购物车记录在产品目录中找不到，已丢弃 {dropped}')
    return result


def find_unmatched(entries: Optional[Iterable[CartEntry]], catalog: Sequence[Product]) -> list[str]:
    """返回在产品目录中找不到的购物车记录的产品编号"""
    if entries is None:
        return list()
    known = {p.id for p in catalog}
    return [e.product_id for e in entries if e.qty > 0 and e.product_id not in known]


def total_value(items: Optional[Iterable[CartItem]] = None) -> float:
    """购物车总价"""
    if items is None:
        return 0
    return sum((item.subtotal for item in items), 0)


def item_count(items: Optional[Iterable[_HasQty]] = None) -> int:
    """购物车总件数"""
    if items is None:
        return 0
    return sum(item.qty for item in items)


def summarize(items: Optional[Sequence[CartItem]] = None) -> CartSummary:
    return CartSummary(item_count=item_count(items), total_value=total_value(items))


def is_item_in_cart(items: Optional[Iterable[_HasQty]], product_id: str) -> bool:
    """产品是否已在购物车内（数量大于 0）"""
    if items is None:
        return False
    return any(item.product_id == product_id and item.qty > 0 for item in items)
