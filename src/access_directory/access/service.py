from __future__ import annotations

import hmac
import logging

from ..common.hashing import card_marker
from ..core.enums import VerifyStatus
from ..core.exceptions import StoreError, ValidationError
from ..users.service import UserService
from .model import DENIED, ERROR, CardVerification

logger = logging.getLogger(__name__)


class AccessVerificationService:
    """Use case: decide whether a physical card opens the door.

    This checks possession of an enrolled card only. It never looks at
    passwords and never echoes the UID back.
    """

    def __init__(self, users: UserService):
        self._users = users

    def verify_card(self, raw_card_id: str) -> CardVerification:
        if raw_card_id is None or not str(raw_card_id).strip():
            raise ValidationError("uid required", fields=("uid",))

        marker = card_marker(str(raw_card_id)).encode("ascii")
        try:
            records = self._users.list_users(safe=False)
        except StoreError:
            logger.exception("Card verification failed to read the user store")
            return ERROR

        for record in records:
            if not hmac.compare_digest(record.id_card_marker.encode("utf-8"), marker):
                continue
            if not record.active:
                logger.info("Card matched inactive user id=%s", record.id)
                return DENIED
            logger.info("Card accepted for user id=%s", record.id)
            return CardVerification(VerifyStatus.OK, user=record.display_name)

        logger.info("Card denied")
        return DENIED
