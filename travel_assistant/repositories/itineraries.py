"""Itinerary repository over the key-value store."""

from typing import Dict, List

from pydantic import BaseModel

from travel_assistant.repositories.memory import KeyValueStore

ITINERARY_KEY_PREFIX = "itinerary_"


class ItineraryItem(BaseModel):
    """One scheduled stop on a travel day."""
    time: str
    place: str
    notes: str = ""


class ItineraryRepository:
    """Repository for per-date itinerary lists."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    @staticmethod
    def _key(date: str) -> str:
        return f"{ITINERARY_KEY_PREFIX}{date}"

    def add_item(self, date: str, time: str, place: str, notes: str = "") -> List[ItineraryItem]:
        """Append an item to a day and keep the day ordered by time.
        Args:
            date (str): Day key, usually `YYYY-MM-DD`.
            time (str): Time string; ordering is lexicographic.
            place (str): Place name.
            notes (str): Free-text notes.
        Returns:
            List[ItineraryItem]: The day's items after the insert.
        """
        items = list(self.store.get(self._key(date), []))
        items.append(ItineraryItem(time=time, place=place, notes=notes))
        items.sort(key=lambda item: item.time)
        self.store.put(self._key(date), items)
        return items

    def get_day(self, date: str) -> List[ItineraryItem]:
        """Get items for a date; empty list if nothing is stored."""
        return list(self.store.get(self._key(date), []))

    def list_days(self) -> Dict[str, List[ItineraryItem]]:
        """Get every stored day, keyed by date, in the order days were first saved."""
        return {
            key[len(ITINERARY_KEY_PREFIX):]: list(self.store.get(key, []))
            for key in self.store.keys(ITINERARY_KEY_PREFIX)
        }
