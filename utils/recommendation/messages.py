"""
Recommendation Messages

User-facing text for match reasons and investment advice, kept apart from
the recommender logic.
"""


class RecommendationMessages:
    """Match-reason and advice strings."""

    @staticmethod
    def top_rating(rating: str) -> str:
        return f"Top-tier composite rating {rating}"

    STRONG_RISK_CONTROL = "Strong risk control with low historical volatility"
    GOOD_RISK_CONTROL = "Good risk control"
    EXCELLENT_RETURNS = "Excellent historical returns, consistent over the long term"
    GOOD_RETURNS = "Good historical returns"
    EXPERIENCED_MANAGEMENT = "Experienced management team with a strong track record"
    LOW_COST = "Low fees keep costs down"
    WELL_SIZED = "Well-sized fund with good liquidity"

    TOLERANCE_ADVICE = {
        "conservative": "Focus on money-market and bond funds to keep risk under control.",
        "moderate": "Combine equity and bond funds to balance return against risk.",
        "aggressive": "Allocate more to equity funds in pursuit of higher returns.",
    }

    @staticmethod
    def diversification(fund_count: int) -> str:
        """Suggest how many funds to hold."""
        return f"Hold {fund_count} funds to spread risk."

    DOLLAR_COST_AVERAGING = "Invest through regular fixed contributions to smooth out market swings."
