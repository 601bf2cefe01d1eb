"""Public interface for the ``finance_tracker`` package.

Service operations take an open SQLAlchemy session (see ``db.client``) and
return detached read-models; the Flask app in ``finance_tracker.web`` and the
Typer console in ``finance_tracker.cli`` are thin layers over them.
"""

from .categories import (
    create_category,
    delete_category,
    get_category,
    list_categories,
    update_category,
)
from .errors import FinanceTrackerError, NotFoundError, ValidationError
from .models import (
    CategoryInput,
    CategoryView,
    TransactionInput,
    TransactionPage,
    TransactionView,
    UserSummary,
)
from .query import TransactionFilters, list_transactions
from .transactions import (
    create_transaction,
    delete_transaction,
    get_transaction,
    update_transaction,
)

__all__ = [
    # Categories
    "list_categories",
    "get_category",
    "create_category",
    "update_category",
    "delete_category",
    # Transactions
    "TransactionFilters",
    "list_transactions",
    "get_transaction",
    "create_transaction",
    "update_transaction",
    "delete_transaction",
    # Errors
    "FinanceTrackerError",
    "ValidationError",
    "NotFoundError",
    # Models
    "TransactionInput",
    "CategoryInput",
    "UserSummary",
    "CategoryView",
    "TransactionView",
    "TransactionPage",
]
