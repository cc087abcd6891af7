from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..services import CalendarService, ImportService, ServiceContext


@dataclass(slots=True)
class ApiState:
    _context: Optional[ServiceContext] = None
    _calendar: Optional[CalendarService] = field(default=None, init=False)
    _imports: Optional[ImportService] = field(default=None, init=False)

    def use(self, context: ServiceContext) -> None:
        self._context = context
        self._calendar = CalendarService(context)
        self._imports = ImportService(context)

    def _ensure(self) -> None:
        # built on first use so importing the API never touches the store
        if self._context is None:
            self.use(ServiceContext())

    @property
    def context(self) -> ServiceContext:
        self._ensure()
        return self._context

    @property
    def calendar(self) -> CalendarService:
        self._ensure()
        return self._calendar

    @property
    def imports(self) -> ImportService:
        self._ensure()
        return self._imports


api_state = ApiState()
