from __future__ import annotations

import logging
from dataclasses import dataclass

from app.core.logging import bind

SYSTEM_ACTOR_ID = 0


@dataclass(frozen=True)
class RequestContext:
    """Identity of one inbound call.

    Built once per request by the auth dependency from a verified token and
    the stored user row, then passed explicitly into every service call.
    """

    correlation_id: int
    caller_id: int
    is_admin: bool = False

    def log(self, name: str) -> logging.LoggerAdapter:
        return bind(logging.getLogger(name), self.correlation_id)

    @classmethod
    def system(cls, correlation_id: int = 0) -> RequestContext:
        return cls(correlation_id=correlation_id, caller_id=SYSTEM_ACTOR_ID, is_admin=False)
