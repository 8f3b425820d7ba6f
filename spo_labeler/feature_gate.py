"""Confirm-then-verify gate for the tenant features label assignment needs."""
from __future__ import annotations

import logging
from enum import Enum

from spo_labeler.errors import FeatureFlagError
from spo_labeler.models import FeatureFlag
from spo_labeler.prompts import Prompter
from spo_labeler.tenant import TenantAdminClient

logger = logging.getLogger(__name__)


class GateState(str, Enum):
    UNKNOWN = "unknown"
    PROMPTED_FOR_CHANGE = "prompted_for_change"
    ENABLED = "enabled"
    DECLINED = "declined"
    FATAL = "fatal"


class FeatureGate:
    """Runs one flag from UNKNOWN to ENABLED, DECLINED or FATAL.

    A flag is only trusted once a fresh read reports it enabled; the enable
    call alone may be accepted and not take effect.
    """

    def __init__(self, tenant: TenantAdminClient, prompter: Prompter):
        self.tenant = tenant
        self.prompter = prompter

    def run(self, flag: FeatureFlag) -> GateState:
        if self.tenant.get_flag(flag):
            logger.info("%s is already enabled", flag.title)
            return GateState.ENABLED

        logger.info("%s is disabled (state=%s)", flag.title, GateState.PROMPTED_FOR_CHANGE.value)
        if not self.prompter.confirm(f"{flag.title} is not enabled. Enable it now?"):
            message = f"{flag.title} must be enabled before a default label can be set. Exiting."
            self.prompter.show(message)
            logger.warning(message)
            return GateState.DECLINED

        self.tenant.set_flag(flag, True)
        if not self.tenant.get_flag(flag):
            logger.error("%s failed to set (state=%s)", flag.title, GateState.FATAL.value)
            raise FeatureFlagError(f"{flag.title} flag failed to set")

        self.prompter.show(f"{flag.title} has been enabled.")
        logger.info("%s enabled and verified", flag.title)
        return GateState.ENABLED
