"""Itinerary and budget tools backed by the in-memory repositories."""

import re
from typing import List, Optional

from travel_assistant.repositories.budget import BudgetRepository
from travel_assistant.repositories.itineraries import ItineraryRepository
from travel_assistant.tools.base import TravelTool, split_params
from travel_assistant.utils.text import format_won, parse_int

# "09:00" or "09:00:메모" after the place field
_TIME_WITH_MINUTES_RE = re.compile(r"^(\d{1,2}:\d{2})(?::(.*))?$", re.DOTALL)
_LEADING_GROUP_RE = re.compile(r"\d{1,3}")
_THOUSANDS_GROUP_RE = re.compile(r"\d{3}")

ITINERARY_USAGE = (
    "🤔 형식이 좀 이상한 것 같아요!\n"
    "📝 올바른 형식:\n"
    '- 저장: "저장:날짜:장소:시간" (예: "저장:2024-01-15:경복궁:09:00")\n'
    '- 조회: "조회:날짜"\n'
    '- 전체: "전체"'
)

BUDGET_USAGE = '🤔 형식이 맞지 않아요! "항목,금액" 이렇게 써주세요. (예: "숙박,120000")'


def _parse_amount(fields: List[str]) -> Optional[int]:
    """Read the amount from the fields after the category.

    `120,000` splits into `["120", "000"]`; the fields are joined back only
    when they form thousands groups (1-3 digits, then exactly 3 digits each).
    Otherwise the first field alone is the amount and the rest is ignored.
    """
    if not fields:
        return None
    if (len(fields) > 1
            and _LEADING_GROUP_RE.fullmatch(fields[0])
            and all(_THOUSANDS_GROUP_RE.fullmatch(field) for field in fields[1:])):
        return parse_int("".join(fields))
    return parse_int(fields[0])


def budget_emoji(category: str) -> str:
    if "숙박" in category or "호텔" in category:
        return "🏨"
    if "교통" in category:
        return "🚗"
    if "식" in category or "음식" in category:
        return "🍽️"
    if "관광" in category or "입장" in category:
        return "🎫"
    if "쇼핑" in category:
        return "🛍️"
    return "💰"


class ItineraryManagerTool(TravelTool):
    name = "itinerary_manager"
    description = (
        '여행 일정을 저장하고 조회합니다. 형식: "저장:날짜:장소:시간[:메모]", "조회:날짜" 또는 "전체" '
        '(예: "저장:2024-01-15:경복궁:09:00")'
    )

    def __init__(self, repository: ItineraryRepository):
        self.repository = repository

    async def run(self, params: str) -> str:
        parts = split_params(params, ":")
        command = parts[0]

        if command == "저장" and len(parts) >= 4:
            return self._save(parts[1], parts[2], ":".join(parts[3:]))
        if command == "조회" and len(parts) == 2:
            return self._show_day(parts[1])
        if command == "전체":
            return self._show_all()
        return ITINERARY_USAGE

    def _save(self, date: str, place: str, rest: str) -> str:
        match = _TIME_WITH_MINUTES_RE.match(rest)
        if match:
            time, notes = match.group(1), (match.group(2) or "").strip()
        else:
            time, _, notes = rest.partition(":")
            time, notes = time.strip(), notes.strip()

        if not date or not place or not time:
            return ITINERARY_USAGE

        self.repository.add_item(date, time, place, notes)

        text = f"📅 일정을 저장했어요!\n📅 {date}\n⏰ {time} - {place}"
        if notes:
            text += f"\n📝 {notes}"
        return text + "\n\n시간순으로 정리해뒀어요! ✨"

    def _show_day(self, date: str) -> str:
        items = self.repository.get_day(date)
        if not items:
            return f"📅 {date}에 저장된 일정이 없어요. 일정을 추가해볼까요?"

        lines = []
        for item in items:
            line = f"⏰ {item.time} - {item.place}"
            if item.notes:
                line += f"\n📝 {item.notes}"
            lines.append(line)
        return f"📅 {date} 여행 일정\n\n" + "\n\n".join(lines)

    def _show_all(self) -> str:
        days = self.repository.list_days()
        if not days:
            return "📅 아직 저장된 여행 일정이 없어요! 함께 일정을 만들어볼까요? ✈️"

        sections = []
        for date, items in days.items():
            rows = "\n".join(f"  ⏰ {item.time} - {item.place}" for item in items)
            sections.append(f"{date}:\n{rows}")
        return "📅 모든 여행 일정\n\n" + "\n\n".join(sections)


class BudgetCalculatorTool(TravelTool):
    name = "budget_calculator"
    description = '여행 예산 항목을 저장하고 합계를 계산합니다. 형식: "항목,금액" 또는 "합계" (예: "숙박,120000")'

    def __init__(self, repository: BudgetRepository):
        self.repository = repository

    async def run(self, params: str) -> str:
        if params in ("합계", "총합"):
            return self._summary()

        parts = split_params(params, ",")
        category = parts[0]
        amount = _parse_amount(parts[1:])

        if not category or amount is None:
            return BUDGET_USAGE

        self.repository.set_amount(category, amount)
        return f"💼 예산에 반영했어요!\n{budget_emoji(category)} {category}: {format_won(amount)}"

    def _summary(self) -> str:
        entries = self.repository.get_entries()
        if not entries:
            return "💼 아직 저장된 예산 항목이 없어요! 함께 예산을 계획해볼까요?"

        details = "\n".join(
            f"{budget_emoji(category)} {category}: {format_won(amount)}"
            for category, amount in entries.items()
        )
        return (
            f"💼 예산 분석 결과\n\n{details}\n\n"
            f"💳 총 예산: {format_won(self.repository.get_total())}"
        )
