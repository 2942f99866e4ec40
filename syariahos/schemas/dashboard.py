"""Pydantic schemas for the user dashboard."""

from syariahos.schemas.base import CamelModel


class CategoryStat(CamelModel):
    category: str
    total: int
    completed: int
    rate: int


class Kpi(CamelModel):
    total_tasks: int
    completed_tasks: int
    completion_percentage: int
    tasks_by_category: list[CategoryStat]
    kepatuhan_syariah_score: int


class Goal(CamelModel):
    category: str
    current_value: int
    target_value: int
    progress: int


class ChartTrend(CamelModel):
    labels: list[str]
    values: list[int]


class DashboardRead(CamelModel):
    kpi: Kpi
    goals: list[Goal]
    overall_progress: int
    chart_trend: ChartTrend
