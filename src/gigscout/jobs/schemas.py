"""
职位、服务项与打分结果的数据模型。

Posting 来自职位源（Apify Upwork / Mock），拉取后不可变；Offering 由调用方每次请求提供，不落盘。
"""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

JobType = Literal["hourly", "fixed"]


class ClientInfo(BaseModel):
    """发布方（客户）可靠性信号。缺失字段按 0 / 未知处理。"""
    model_config = ConfigDict(frozen=True)

    payment_verified: bool = Field(False, description="付款方式是否已验证")
    total_spent: float = Field(0.0, ge=0, description="历史总花费（美元）")
    rating: Optional[float] = Field(None, ge=0, le=5, description="客户评分 0–5")
    hire_rate: Optional[float] = Field(None, ge=0, le=100, description="雇佣率（百分比）")


class Posting(BaseModel):
    """Upwork 职位。"""
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(None, description="职位 id 或链接")
    title: str = Field(..., description="职位标题")
    description: str = Field("", description="职位描述")
    url: Optional[str] = Field(None, description="职位链接")
    skills: list[str] = Field(default_factory=list, description="要求技能")
    job_type: Optional[JobType] = Field(None, description="计费方式：hourly / fixed")
    hourly_min: Optional[float] = Field(None, ge=0, description="时薪下限")
    hourly_max: Optional[float] = Field(None, ge=0, description="时薪上限")
    budget: Optional[float] = Field(None, ge=0, description="固定价预算")
    experience_level: Optional[str] = Field(None, description="经验要求，如 Entry / Intermediate / Expert")
    country: Optional[str] = Field(None, description="客户所在国家")
    posted_at: Optional[str] = Field(None, description="发布时间（上游原样）")
    client: ClientInfo = Field(default_factory=ClientInfo, description="客户信号")

    @property
    def engagement(self) -> Optional[JobType]:
        """计费方式；未标注时按预算字段推断。"""
        if self.job_type:
            return self.job_type
        if self.hourly_min is not None or self.hourly_max is not None:
            return "hourly"
        if self.budget is not None:
            return "fixed"
        return None

    @property
    def max_budget(self) -> float:
        """时薪单取上限（无上限取下限），固定价取预算；缺失为 0。"""
        if self.engagement == "hourly":
            return float(self.hourly_max or self.hourly_min or 0)
        if self.engagement == "fixed":
            return float(self.budget or 0)
        return 0.0


class Offering(BaseModel):
    """调用方提供的服务项：名称、技能与报价区间。"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="服务名称，如 Web Development")
    skills: list[str] = Field(default_factory=list, description="该服务覆盖的技能")
    rate_min: float = Field(75.0, ge=0, description="时薪下限")
    rate_max: float = Field(120.0, ge=0, description="时薪上限")

    @property
    def average_rate(self) -> float:
        return (self.rate_min + self.rate_max) / 2


class ScoreComponent(BaseModel):
    """打分明细一行：标签 + 加分。"""
    label: str
    points: int


class ScoreBreakdown(BaseModel):
    """置信度打分结果，每次请求重新计算，不缓存。"""
    confidence: int = Field(..., ge=20, le=95, description="置信度 20–95")
    components: list[ScoreComponent] = Field(default_factory=list, description="按加分顺序排列的明细")
    matched_skills: list[str] = Field(default_factory=list, description="已覆盖的要求技能")
    missing_skills: list[str] = Field(default_factory=list, description="未覆盖的要求技能")

    def lines(self) -> list[str]:
        return [f"{c.label}: +{c.points}" for c in self.components]
