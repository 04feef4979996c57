"""Place-name to coordinate resolution with ordered fallback strategies.

Naver's free-text geocoding is unreliable for landmarks and neighbourhood
names, so a lookup walks a chain of strategies:

1. direct local search for the name as typed,
2. local search over generated query variants,
3. the dedicated geocoding endpoint.

The first strategy that yields coordinates wins. All strategies share one
deadline; once it expires the chain stops and the lookup reports no match.
Nothing is cached: identical lookups repeat the chain.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Awaitable, Dict, List, Optional, Tuple, TypeVar

from travel_assistant.config import Settings
from travel_assistant.geo.query_variants import generate_query_variants
from travel_assistant.providers.naver_client import NaverClient, ResolvedPlace

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Deadline:
    """Time budget shared by every attempt of one resolution."""

    def __init__(self, seconds: float):
        self.expires_at = time.monotonic() + seconds

    def remaining(self) -> float:
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await within the remaining budget; asyncio.TimeoutError past it."""
        if self.expired:
            # Close the coroutine so it is not reported as never awaited
            close = getattr(awaitable, "close", None)
            if close is not None:
                close()
            raise asyncio.TimeoutError()
        return await asyncio.wait_for(awaitable, timeout=self.remaining())


class ResolutionStrategy(ABC):
    """One way of turning a place name into coordinates."""

    name: str = "strategy"

    @abstractmethod
    async def resolve(self, place: str, deadline: Deadline) -> Optional[ResolvedPlace]:
        """Return coordinates for `place` or None if this strategy cannot."""
        pass


class DirectSearchStrategy(ResolutionStrategy):
    name = "direct local search"

    def __init__(self, naver: NaverClient):
        self.naver = naver

    async def resolve(self, place: str, deadline: Deadline) -> Optional[ResolvedPlace]:
        return await deadline.run(self.naver.find_place(place))


class QueryVariantStrategy(ResolutionStrategy):
    name = "query variants"

    def __init__(self,
                naver: NaverClient,
                aliases: Optional[Dict[str, List[str]]] = None,
                max_variants: int = 20,
            ):
        self.naver = naver
        self.aliases = aliases or {}
        self.max_variants = max_variants

    async def resolve(self, place: str, deadline: Deadline) -> Optional[ResolvedPlace]:
        variants = generate_query_variants(place, self.aliases, self.max_variants)
        for query in variants:
            logger.info(f"Trying query variant '{query}' for '{place}'")
            found = await deadline.run(self.naver.find_place(query))
            if found:
                return found
        return None


class GeocodeStrategy(ResolutionStrategy):
    name = "geocoding endpoint"

    def __init__(self, naver: NaverClient):
        self.naver = naver

    async def resolve(self, place: str, deadline: Deadline) -> Optional[ResolvedPlace]:
        return await deadline.run(self.naver.try_geocode(place))


class CoordinateResolver:
    """Runs resolution strategies in order until one succeeds."""

    def __init__(self, strategies: List[ResolutionStrategy], deadline_seconds: float = 20.0):
        self.strategies = strategies
        self.deadline_seconds = deadline_seconds

    @classmethod
    def for_naver(cls,
                naver: NaverClient,
                settings: Settings,
                aliases: Optional[Dict[str, List[str]]] = None,
            ) -> "CoordinateResolver":
        """Build the standard three-stage chain on top of a Naver client."""
        return cls(
            strategies=[
                DirectSearchStrategy(naver),
                QueryVariantStrategy(naver, aliases, settings.resolver_max_variants),
                GeocodeStrategy(naver),
            ],
            deadline_seconds=settings.resolver_deadline_seconds,
        )

    async def resolve(self, place: str) -> Optional[ResolvedPlace]:
        """Resolve a place name to coordinates.
        Args:
            place (str): Free-text place name.
        Returns:
            Optional[ResolvedPlace]: First match across all strategies, or None.
        """
        deadline = Deadline(self.deadline_seconds)

        for stage, strategy in enumerate(self.strategies, start=1):
            logger.info(f"Stage {stage} ({strategy.name}) for '{place}'")
            try:
                found = await strategy.resolve(place, deadline)
            except asyncio.TimeoutError:
                logger.warning(
                    f"Resolution deadline of {self.deadline_seconds}s exceeded for '{place}' "
                    f"during stage {stage} ({strategy.name})"
                )
                return None
            except Exception as e:
                logger.error(f"Stage {stage} ({strategy.name}) failed for '{place}': {e}")
                continue

            if found:
                logger.info(f"Stage {stage} resolved '{place}' -> {found.coordinates}")
                return found

        logger.error(f"All stages failed: no coordinates for '{place}'")
        return None

    async def resolve_pair(self,
                            origin: str,
                            destination: str,
                        ) -> Tuple[Optional[ResolvedPlace], Optional[ResolvedPlace]]:
        """Resolve origin and destination concurrently."""
        start, goal = await asyncio.gather(self.resolve(origin), self.resolve(destination))
        return start, goal
