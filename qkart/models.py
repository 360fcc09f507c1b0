"""数据模型"""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Product(BaseModel):
    """
    产品目录中的一个产品

    ---

    * _id，产品编号，str
    * 名称，str
    * 类目，str
    * 单价，非负小数
    * 评分，[0, 5] 的整数
    * 图片链接，str
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., alias='_id', description='产品编号')
    name: str = Field('', description='产品名称')
    category: str = Field('', description='产品类目')
    cost: float = Field(..., ge=0, description='单价')
    rating: int = Field(0, ge=0, le=5, description='评分')
    image: str = Field('', description='图片链接')


class CartEntry(BaseModel):
    """后端保存的购物车记录，只有产品编号和数量"""

    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(
        ...,
        validation_alias=AliasChoices('productId', 'product_id'),
        serialization_alias='productId',
        description='产品编号',
    )
    qty: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices('qty', 'quantity'),
        description='数量，为 0 时视为不在购物车内',
    )


class CartItem(BaseModel):
    """购物车记录和产品目录合并后的展示用数据"""

    product_id: str = Field(..., description='产品编号')
    qty: int = Field(..., ge=0, description='数量')
    name: str = Field('', description='产品名称')
    category: str = Field('', description='产品类目')
    cost: float = Field(..., ge=0, description='单价')
    rating: int = Field(0, ge=0, le=5, description='评分')
    image: str = Field('', description='图片链接')

    @property
    def subtotal(self) -> float:
        return self.qty * self.cost

    @classmethod
    def merge(cls, entry: CartEntry, product: Product) -> CartItem:
        """合并一条购物车记录和它对应的产品"""
        return cls(
            product_id=entry.product_id,
            qty=entry.qty,
            name=product.name,
            category=product.category,
            cost=product.cost,
            rating=product.rating,
            image=product.image,
        )


class CartSummary(BaseModel):
    """购物车的总件数和总价"""

    item_count: int = Field(0, ge=0, description='总件数')
    total_value: float = Field(0, ge=0, description='总价')


class UpdateOptions(BaseModel):
    """
    修改数量时的重复加购策略

    产品卡片的 ADD TO CART 按钮用默认值（已在购物车内则拒绝），
    购物车侧栏的 +/- 按钮用 `prevent_duplicate=True`
    """

    prevent_duplicate: bool = Field(False, description='为 False 时拒绝加购已在购物车内的产品')


class Session(BaseModel):
    """登录成功后得到的会话信息"""

    token: str = Field(..., min_length=1, description='Bearer token')
    username: str = Field(..., description='用户名')
    balance: float = Field(0, description='钱包余额')


class Notice(BaseModel):
    """展示给用户的提示"""

    message: str
    variant: Literal['success', 'warning', 'error'] = 'error'
