"""The label configuration run, phase by phase.

Each phase either hands its result to the next one or ends the run with a
WorkflowResult. Only a tenant flag that will not turn on is raised, as
FeatureFlagError, after it has been logged.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from spo_labeler.catalog import parse_selection, render_catalog
from spo_labeler.errors import (AssignmentError, ConnectionFailedError, FeatureFlagError,
                                LabelResolutionError, ServiceError)
from spo_labeler.feature_gate import FeatureGate, GateState
from spo_labeler.models import (REQUIRED_FLAGS, SensitivityLabel, SiteTarget, WorkflowOutcome,
                                WorkflowResult)
from spo_labeler.prompts import Prompter
from spo_labeler.sessions import Sessions

logger = logging.getLogger(__name__)


class LabelWorkflow:
    def __init__(self, prompter: Prompter, library: str = "Documents", verify: bool = False):
        self.prompter = prompter
        self.library = library
        self.verify = verify

    def _end(self, outcome: WorkflowOutcome, message: str, level: int = logging.INFO,
             **kwargs) -> WorkflowResult:
        self.prompter.show(message)
        logger.log(level, message)
        return WorkflowResult(outcome, message, **kwargs)

    def run(self, connect: Callable[[], Sessions], target: SiteTarget) -> WorkflowResult:
        """Open the sessions, then configure `target`."""
        try:
            sessions = connect()
        except ConnectionFailedError as exc:
            return self._end(WorkflowOutcome.CONNECTION_FAILED,
                             f"Failed to connect: {exc}", logging.ERROR)
        try:
            return self.configure(sessions, target)
        finally:
            sessions.close()

    def configure(self, sessions: Sessions, target: SiteTarget) -> WorkflowResult:
        """Run the feature gate, the label selection and the assignment."""
        try:
            declined = self._enable_features(sessions)
        except ServiceError as exc:
            return self._end(WorkflowOutcome.CONNECTION_FAILED,
                             f"Could not read or update tenant settings: {exc}", logging.ERROR)
        if declined is not None:
            return declined

        try:
            labels = sessions.labels.list_labels()
        except ServiceError as exc:
            return self._end(WorkflowOutcome.CONNECTION_FAILED,
                             f"Could not retrieve sensitivity labels: {exc}", logging.ERROR)
        if not labels:
            return self._end(WorkflowOutcome.EMPTY_CATALOG,
                             "No sensitivity labels were found. Create a label in the "
                             "compliance center first, then run this again.")

        label = self._select(labels)
        if label is None:
            return self._end(WorkflowOutcome.INVALID_SELECTION, "Invalid choice. Exiting.")

        return self._apply(sessions, target, label)

    def _enable_features(self, sessions: Sessions) -> Optional[WorkflowResult]:
        gate = FeatureGate(sessions.tenant, self.prompter)
        for flag in REQUIRED_FLAGS:
            try:
                state = gate.run(flag)
            except FeatureFlagError:
                logger.exception("Stopping: %s could not be enabled", flag.title)
                raise
            if state is GateState.DECLINED:
                return WorkflowResult(WorkflowOutcome.FEATURE_DECLINED,
                                      f"{flag.title} was not enabled")
        return None

    def _select(self, labels) -> Optional[SensitivityLabel]:
        self.prompter.show("Available sensitivity labels:")
        for line in render_catalog(labels):
            self.prompter.show(line)
        raw = self.prompter.ask(f"Select a label to apply (1-{len(labels)}, anything else exits)")
        index = parse_selection(raw, len(labels))
        if index is None:
            logger.info("Selection %r rejected", raw)
            return None
        label = labels[index]
        logger.info("Operator selected label %d: %s", index + 1, label.display_name)
        return label

    def _apply(self, sessions: Sessions, target: SiteTarget,
               label: SensitivityLabel) -> WorkflowResult:
        site_url = target.url
        try:
            label.id = sessions.labels.resolve_label_id(label.display_name)
            sessions.sites.set_default_label(site_url, label.id, self.library)
            if self.verify:
                current = sessions.sites.get_default_label(site_url, self.library)
                if (current or "").lower() != label.id.lower():
                    raise AssignmentError(
                        f"Read-back returned {current!r} instead of {label.id} on {site_url}"
                    )
        except (LabelResolutionError, AssignmentError, ServiceError) as exc:
            return self._end(WorkflowOutcome.ASSIGNMENT_FAILED,
                             f"Failed to set the default sensitivity label: {exc}",
                             logging.ERROR, label=label, site_url=site_url)

        return self._end(WorkflowOutcome.COMPLETED,
                         f"Default sensitivity label '{label.display_name}' set on "
                         f"{site_url} ({self.library}).",
                         label=label, site_url=site_url)
