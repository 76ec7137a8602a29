"""
Interactive suggestion session for one location text field.

Each keystroke produces an immediate local update, then (after a quiet
period) a final merged update. Every `update()` bumps a generation counter;
a Phase 2 result is only delivered if its generation is still the latest
and the session is open, so a slow earlier lookup never overwrites a newer
query's suggestions.
"""
from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Union

from domain.models import Suggestion
from services.location_dataset import is_query_too_short
from services.location_resolver import DEFAULT_LIMIT, LocationResolver, check_limit

DEFAULT_DEBOUNCE_SECONDS = 0.3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SuggestionUpdate:
    query: str
    suggestions: List[Suggestion] = field(default_factory=list)
    final: bool = False
    generation: int = 0
    too_short: bool = False

    def to_dict(self) -> dict:
        return {
            "type": "final" if self.final else "local",
            "query": self.query,
            "generation": self.generation,
            "too_short": self.too_short,
            "suggestions": [s.to_dict() | {"is_local": s.is_local} for s in self.suggestions],
        }


UpdateCallback = Callable[[SuggestionUpdate], Union[None, Awaitable[Any]]]


class SuggestionSession:
    def __init__(
        self,
        resolver: LocationResolver,
        on_update: UpdateCallback,
        limit: int = DEFAULT_LIMIT,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ):
        self.resolver = resolver
        self.limit = limit
        self.debounce_seconds = debounce_seconds
        self._on_update = on_update
        self._generation = 0
        self._pending: Optional[asyncio.Task] = None
        self._closed = False
        self.current_query: Optional[str] = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    async def _emit(self, update: SuggestionUpdate) -> None:
        result = self._on_update(update)
        if inspect.isawaitable(result):
            await result

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def update(self, query: str) -> SuggestionUpdate:
        """Register a new query value and emit its local suggestions.

        Must be awaited from within the event loop that owns the session.
        """
        if self._closed:
            raise RuntimeError("SuggestionSession is closed")
        check_limit(self.limit)

        self._generation += 1
        generation = self._generation
        self.current_query = query
        self._cancel_pending()

        if is_query_too_short(query):
            update = SuggestionUpdate(query=query, final=True, generation=generation, too_short=True)
            await self._emit(update)
            return update

        local = self.resolver.resolve_local(query, self.limit)
        update = SuggestionUpdate(query=query, suggestions=local, final=False, generation=generation)
        await self._emit(update)

        # The local emit may have yielded to a newer update() call.
        if self._is_current(generation):
            self._pending = asyncio.get_running_loop().create_task(
                self._run_remote(generation, query, local)
            )
        return update

    async def _run_remote(self, generation: int, query: str, local: Sequence[Suggestion]) -> None:
        if self.debounce_seconds > 0:
            await asyncio.sleep(self.debounce_seconds)
        if not self._is_current(generation):
            return

        try:
            suggestions = await asyncio.to_thread(self.resolver.resolve_remote, query, local, self.limit)
        except asyncio.CancelledError:
            logger.debug("[LOCATIONS] remote phase cancelled for %r", query)
            raise
        except Exception:
            logger.exception("[LOCATIONS] remote phase failed for %r; keeping local results", query)
            suggestions = list(local)

        if not self._is_current(generation):
            logger.debug("[LOCATIONS] discarding stale result for %r (generation %d)", query, generation)
            return
        await self._emit(
            SuggestionUpdate(query=query, suggestions=suggestions, final=True, generation=generation)
        )

    async def wait_pending(self) -> None:
        """Wait until the currently scheduled remote phase (if any) settles."""
        task = self._pending
        if task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def close(self) -> None:
        self._closed = True
        task = self._pending
        self._cancel_pending()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task
