"""Fixed catalogues shared across the domain layer."""

from vaultledger.domain.entities import Category, FinancialRank

CATEGORIES: tuple[Category, ...] = (
    Category(id=1, name="Food & Dining", color="#f43f5e"),
    Category(id=2, name="Transportation", color="#3b82f6"),
    Category(id=3, name="Housing", color="#8b5cf6"),
    Category(id=4, name="Entertainment", color="#eab308"),
    Category(id=5, name="Shopping", color="#ec4899"),
    Category(id=6, name="Utilities", color="#06b6d4"),
    Category(id=7, name="Health", color="#10b981"),
    Category(id=8, name="Investment", color="#6366f1"),
)

DEFAULT_EXPENSE_CATEGORY_ID = 1
DEBT_PAYMENT_CATEGORY_ID = 3
SAVINGS_CATEGORY_ID = 8
TRANSFER_CATEGORY_ID = 8

DEFAULT_INCOME_SOURCE = "Manual Entry"

XP_PER_ACTION = {
    "ADD_EXPENSE": 10,
    "ADD_INCOME": 20,
    "ADD_ACCOUNT": 50,
    "PAY_DEBT": 50,
    "CONTRIBUTE_SAVINGS": 30,
    "TRANSFER": 10,
}

# Thresholds are net worth in cents.
FINANCIAL_RANKS: tuple[FinancialRank, ...] = (
    FinancialRank("Broke Baron", -100_000_000, "Survival Mode"),
    FinancialRank("Debt Destroyer", -1, "Interest Awareness"),
    FinancialRank("Ground Zero", 0, "Fresh Start"),
    FinancialRank("Saver Scout", 100_000, "Emergency Fund"),
    FinancialRank("Investor Initiate", 1_000_000, "Compound Interest"),
    FinancialRank("Capital Captain", 5_000_000, "Portfolio Diversification"),
    FinancialRank("Wealth Walker", 10_000_000, "Financial Security"),
    FinancialRank("Freedom Fighter", 50_000_000, "Semi-Retirement"),
    FinancialRank("Millionaire Mind", 100_000_000, "Financial Freedom"),
    FinancialRank("Empire Builder", 1_000_000_000, "Legacy Creation"),
)


def get_category(category_id: int) -> Category | None:
    """Return the catalogue category with the given ID."""
    for category in CATEGORIES:
        if category.id == category_id:
            return category
    return None
