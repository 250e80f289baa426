"""职位源抽象：按关键词或分类拉取 Upwork 职位。"""
from abc import ABC, abstractmethod

from gigscout.jobs.schemas import Posting


class JobSource(ABC):
    """职位源接口：返回可打分的职位列表。"""

    @abstractmethod
    async def search(self, keyword: str, limit: int = 20) -> list[Posting]:
        """按关键词拉取职位，最多返回 limit 条。"""
        ...

    @abstractmethod
    async def category(self, category: str, limit: int = 20) -> list[Posting]:
        """按分类 id 拉取职位，最多返回 limit 条。"""
        ...
