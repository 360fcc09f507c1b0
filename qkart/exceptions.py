"""异常"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import unquote

if TYPE_CHECKING:
    from typing import Literal


GENERIC_FAILURE_MESSAGE = (
    'Something went wrong. Check that the backend is running, reachable and returns valid JSON.'
)


class QKartError(Exception):
    """所有购物车相关异常的基类，`variant` 决定提示的样式"""

    variant: Literal['warning', 'error'] = 'error'

    def __init__(self, message: str, *args: object):
        super().__init__(*args)
        self.message = message

    def __str__(self):
        return self.message


class AuthRequiredError(QKartError):
    """未登录时尝试修改购物车"""

    variant = 'warning'

    def __init__(self, *args: object):
        super().__init__('Login to add an item to the Cart', *args)


class DuplicateItemError(QKartError):
    """加购已在购物车内的产品"""

    variant = 'warning'

    def __init__(self, product_id: str, *args: object):
        super().__init__(
            'Item already in cart. Use the cart sidebar to update quantity or remove item.', *args
        )
        self.product_id = product_id


class InvalidQuantityError(QKartError):
    """目标数量不是非负整数"""

    variant = 'warning'

    def __init__(self, qty: object, *args: object):
        super().__init__(f'Invalid quantity "{qty}", it must be a non-negative integer', *args)
        self.qty = qty


class UpdatePendingError(QKartError):
    """同一个产品已有未完成的更新请求"""

    variant = 'warning'

    def __init__(self, product_id: str, *args: object):
        super().__init__('An update for this item is already in progress. Please wait.', *args)
        self.product_id = product_id


class FormValidationError(QKartError):
    """登录、注册表单校验失败"""

    variant = 'warning'

    def __init__(self, field: str, message: str, *args: object):
        super().__init__(message, *args)
        self.field = field


class BackendRejectedError(QKartError):
    """后端以 400 拒绝请求，并给出了可以直接展示的原因"""

    def __init__(self, status: int, message: str, *args: object):
        super().__init__(message, *args)
        self.status = status


class NoProductsFoundError(QKartError):
    """产品接口返回 404，即没有匹配的产品"""

    variant = 'warning'

    def __init__(self, url: str, *args: object):
        super().__init__('No products found', *args)
        self.url = unquote(url)


class BackendUnavailableError(QKartError):
    """网络不可达、超时、非 2xx 且没有结构化信息、响应不是合法 JSON"""

    def __init__(self, url: str, message: str = GENERIC_FAILURE_MESSAGE, *args: object):
        super().__init__(message, *args)
        self.url = unquote(url)
