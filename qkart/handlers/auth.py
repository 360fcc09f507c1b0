"""登录、注册和会话"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exceptions import FormValidationError
from ..logger import logger

if TYPE_CHECKING:
    from typing import Optional

    from ..api import BackendClient
    from ..models import Session


MIN_LENGTH = 6


def validate_login(username: str, password: str) -> None:
    """校验登录表单"""
    if not username:
        raise FormValidationError('username', 'Username is a required field')
    if not password:
        raise FormValidationError('password', 'Password is a required field')


def validate_register(username: str, password: str, confirm_password: str) -> None:
    """校验注册表单"""
    if not username:
        raise FormValidationError('username', 'Username is a required field')
    if len(username) < MIN_LENGTH:
        raise FormValidationError('username', f'Username must be at least {MIN_LENGTH} characters')
    if not password:
        raise FormValidationError('password', 'Password is a required field')
    if len(password) < MIN_LENGTH:
        raise FormValidationError('password', f'Password must be at least {MIN_LENGTH} characters')
    if password != confirm_password:
        raise FormValidationError('confirm_password', 'Passwords do not match')


class SessionContext:
    """
    当前登录用户的会话

    登录成功时 `start`，退出登录时 `end`，需要 token 的组件都从这里取
    """

    def __init__(self):
        self.__session: Optional[Session] = None

    @property
    def session(self) -> Optional[Session]:
        return self.__session

    @property
    def token(self) -> Optional[str]:
        return self.__session.token if self.__session is not None else None

    @property
    def username(self) -> Optional[str]:
        return self.__session.username if self.__session is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self.__session is not None

    def start(self, session: Session) -> None:
        if self.__session is not None:
            logger.warning(f'用户 "{self.__session.username}" 的会话被 "{session.username}" 替换')
        self.__session = session
        logger.info(f'用户 "{session.username}" 已登录')

    def end(self) -> None:
        if self.__session is None:
            return
        logger.info(f'用户 "{self.__session.username}" 已退出登录')
        self.__session = None


async def login(client: BackendClient, context: SessionContext, username: str, password: str) -> Session:
    """校验表单、登录，成功后开始会话"""
    validate_login(username, password)
    session = await client.login(username, password)
    context.start(session)
    return session


async def register(client: BackendClient, username: str, password: str, confirm_password: str) -> None:
    """校验表单、注册"""
    validate_register(username, password, confirm_password)
    await client.register(username, password)
    logger.info(f'用户 "{username}" 注册成功')
