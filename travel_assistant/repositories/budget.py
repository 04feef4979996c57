"""Budget repository for per-category trip spending."""

from typing import Dict

from travel_assistant.repositories.memory import KeyValueStore

BUDGET_KEY = "budget"


class BudgetRepository:
    """Repository for budget entries.

    Each category holds a single amount. Saving a category again replaces
    its amount; amounts are never accumulated.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def set_amount(self, category: str, amount: int) -> Dict[str, int]:
        """Set the amount for a category.
        Args:
            category (str): Free-text category label.
            amount (int): Amount in won.
        Returns:
            Dict[str, int]: All entries after the update.
        """
        entries = dict(self.store.get(BUDGET_KEY, {}))
        entries[category] = amount
        self.store.put(BUDGET_KEY, entries)
        return entries

    def get_entries(self) -> Dict[str, int]:
        """Get all budget entries; empty dict if none saved."""
        return dict(self.store.get(BUDGET_KEY, {}))

    def get_total(self) -> int:
        """Sum of all category amounts."""
        return sum(amount for amount in self.get_entries().values() if isinstance(amount, (int, float)))
