"""
API 客户端

Modrinth 目录客户端：获取项目与版本列表。
"""

import json
from typing import List, Optional

import aiohttp
from loguru import logger

from modplan.models import ModLoader, ModProject, ModVersion
from modplan.exceptions import APIError, APIRateLimitError, APIServerError


MODRINTH_BASE_URL = "https://api.modrinth.com/v2"
DEFAULT_USER_AGENT = "modplan/0.2.0"


class ModrinthClient:
    """Modrinth API 客户端"""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: str = MODRINTH_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
    ):
        self._session = session
        self._owned_session = session is None
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.user_agent},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owned_session = True
        return self._session

    async def _request(self, endpoint: str, params: Optional[dict] = None):
        """发送 API 请求，404 返回 None"""
        logger.debug(f"GET {endpoint} {params or ''}")
        async with self.session.get(endpoint, params=params) as response:
            if response.status == 200:
                return await response.json()
            elif response.status == 404:
                return None
            elif response.status == 429:
                raise APIRateLimitError("Modrinth API 速率限制", response=response)
            elif response.status >= 500:
                raise APIServerError(
                    f"Modrinth 服务器错误 (状态码: {response.status})",
                    response=response,
                )
            else:
                raise APIError(
                    f"API 请求失败 (状态码: {response.status})",
                    response=response,
                )

    async def get_project(self, idx: str) -> Optional[ModProject]:
        """获取项目信息"""
        response = await self._request(f"{self.base_url}/project/{idx}")
        if response is None:
            return None
        return ModProject.from_modrinth(response)

    async def get_versions(
        self,
        idx: str,
        mc_version: Optional[str] = None,
        mod_loader: Optional[str] = None,
    ) -> List[ModVersion]:
        """
        获取项目的版本列表（顺序不保证）

        Args:
            idx: 项目 ID 或 slug
            mc_version: 游戏版本过滤，空则不过滤
            mod_loader: 加载器过滤，空或 vanilla 则不过滤
        """
        params = {}
        if mc_version:
            params["game_versions"] = json.dumps([mc_version])
        if mod_loader and mod_loader.lower() != ModLoader.VANILLA.value:
            params["loaders"] = json.dumps([mod_loader.lower()])

        response = await self._request(
            f"{self.base_url}/project/{idx}/version", params or None
        )
        if not response:
            return []
        return [ModVersion.from_modrinth(version) for version in response]

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
