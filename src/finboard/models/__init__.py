"""SQLModel table exports."""

from .account import Account
from .budget import Budget, BudgetLine
from .debt import Debt, DebtRepayment
from .expense import Expense
from .income import Income
from .investment import Investment, InvestmentTarget
from .loan import Loan, LoanRepayment
from .password import PasswordEntry
from .user import User

__all__ = [
    "Account",
    "Budget",
    "BudgetLine",
    "Debt",
    "DebtRepayment",
    "Expense",
    "Income",
    "Investment",
    "InvestmentTarget",
    "Loan",
    "LoanRepayment",
    "PasswordEntry",
    "User",
]
