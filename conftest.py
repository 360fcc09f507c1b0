"""测试共用的 fixture 和假后端"""

from __future__ import annotations

import json
import os

# 测试时不写日志文件，必须在导入 qkart 之前设置
os.environ.setdefault('QKART_LOG_DIR', '')

import httpx
import pytest
import pytest_asyncio

from qkart.api import BackendClient
from qkart.handlers.auth import SessionContext
from qkart.models import Product

ENDPOINT = 'http://qkart.test/api/v1'
TOKEN = 'testtoken'

CATALOG_JSON = [
    {
        'name': 'iPhone XR',
        'category': 'Phones',
        'cost': 100,
        'rating': 4,
        'image': 'https://i.imgur.com/lulqWzW.jpg',
        '_id': 'v4sLtEcMpzabRyfx',
    },
    {
        'name': 'Basketball',
        'category': 'Sports',
        'cost': 50,
        'rating': 5,
        'image': 'https://i.imgur.com/lulqWzW.jpg',
        '_id': 'upLK9JbQ4rMhTwt4',
    },
    {
        'name': 'Tan Leatherette Weekender Duffle',
        'category': 'Fashion',
        'cost': 150,
        'rating': 4,
        'image': 'https://crio-directus-assets.s3.ap-south-1.amazonaws.com/ff071a1c-1099-48f9-9b03-f858ccc53832.png',
        '_id': 'BW0jAAeDJmlZCF8i',
    },
]


class FakeBackend:
    """
    用 `httpx.MockTransport` 模拟的 QKart 后端

    `overrides` 中的 (method, path) 会直接返回预设的响应，用于模拟故障
    """

    def __init__(self):
        self.products: list[dict] = [dict(p) for p in CATALOG_JSON]
        self.cart: list[dict] = list()
        self.users: dict[str, str] = {'criodo': 'learnwithcrio'}
        self.requests: list[httpx.Request] = list()
        self.overrides: dict[tuple[str, str], httpx.Response | Exception] = dict()

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and self._path(r) == path]

    @staticmethod
    def _path(request: httpx.Request) -> str:
        return request.url.path.removeprefix('/api/v1')

    def _authorized(self, request: httpx.Request) -> bool:
        return request.headers.get('Authorization') == f'Bearer {TOKEN}'

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = self._path(request)

        override = self.overrides.get((request.method, path))
        if isinstance(override, Exception):
            raise override
        if override is not None:
            return override

        if request.method == 'GET' and path == '/products':
            return httpx.Response(200, json=self.products)

        if request.method == 'GET' and path == '/products/search':
            value = request.url.params.get('value', '').lower()
            found = [p for p in self.products if value in p['name'].lower() or value in p['category'].lower()]
            if not found:
                return httpx.Response(404, json=[])
            return httpx.Response(200, json=found)

        if path == '/cart':
            if not self._authorized(request):
                return httpx.Response(
                    401, json={'success': False, 'message': 'Protected route, Oauth2 Bearer token not found'}
                )
            if request.method == 'GET':
                return httpx.Response(200, json=self.cart)
            body = json.loads(request.content)
            if body['productId'] not in {p['_id'] for p in self.products}:
                return httpx.Response(400, json={'success': False, 'message': "Product doesn't exist"})
            self.cart = [e for e in self.cart if e['productId'] != body['productId']]
            if body['qty'] > 0:
                self.cart.append({'productId': body['productId'], 'qty': body['qty']})
            return httpx.Response(200, json=self.cart)

        if request.method == 'POST' and path == '/auth/login':
            body = json.loads(request.content)
            if self.users.get(body['username']) != body['password']:
                return httpx.Response(400, json={'success': False, 'message': 'Password is incorrect'})
            return httpx.Response(
                201, json={'success': True, 'token': TOKEN, 'username': body['username'], 'balance': 5000}
            )

        if request.method == 'POST' and path == '/auth/register':
            body = json.loads(request.content)
            if body['username'] in self.users:
                return httpx.Response(400, json={'success': False, 'message': 'Username is already taken'})
            self.users[body['username']] = body['password']
            return httpx.Response(201, json={'success': True})

        return httpx.Response(404)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest_asyncio.fixture
async def client(backend: FakeBackend):
    async with BackendClient(ENDPOINT, transport=httpx.MockTransport(backend.handler)) as c:
        yield c


@pytest.fixture
def catalog() -> list[Product]:
    return [Product.model_validate(p) for p in CATALOG_JSON]


@pytest.fixture
def context() -> SessionContext:
    return SessionContext()
