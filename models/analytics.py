from pydantic import BaseModel, Field


class VariationStats(BaseModel):
    """View statistics for a single variation."""
    count: int
    percentage: float  # 100 * count / total_views, one decimal, 0 when there are no views


class AnalyticsSummary(BaseModel):
    """Per-variation view counts for one test."""
    variation_a: VariationStats = Field(..., alias="variationA")
    variation_b: VariationStats = Field(..., alias="variationB")
    total_views: int = Field(..., alias="totalViews")

    class Config:
        populate_by_name = True
