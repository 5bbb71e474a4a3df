"""Bot identity accessor for hosts without a richer session object."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class StaticBotSession:
    bot_id: int
    online: bool = True

    @property
    def is_online(self) -> bool:
        return self.online
