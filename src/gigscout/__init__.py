"""
gigscout：Upwork 职位拉取（Apify 远程任务）+ TTL 缓存 + 置信度打分 + 提案生成。
"""

__version__ = "0.1.0"
