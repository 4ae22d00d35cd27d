from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.enums import VerifyStatus


@dataclass(frozen=True)
class CardVerification:
    """Answer sent back to a card reader."""

    status: VerifyStatus
    user: Optional[str] = None

    @property
    def granted(self) -> bool:
        return self.status == VerifyStatus.OK

    def to_dict(self) -> dict[str, Any]:
        if self.status == VerifyStatus.OK:
            return {"status": self.status.value, "user": self.user}
        return {"status": self.status.value}


DENIED = CardVerification(VerifyStatus.DENIED)
ERROR = CardVerification(VerifyStatus.ERROR)
