"""
Series coordination for the Practice Planner application.

This module materializes a schedule specification into practice instances
and decides how edits and deletes apply to practices that belong to a
recurring series.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence

from loguru import logger

from ..models import Activity, PracticeInstance, ScheduleSpec, generate_id
from ..utils import DEFAULT_PRACTICE_COLOR, PLACEHOLDER_PRACTICE_DURATION_MIN, combine
from .persistence_service import PracticeStore
from .recurrence_expander import RecurrenceExpander
from .timeline_builder import TimelineBuilder


class ScopeDecision(Enum):
    """Whether an edit/delete needs the user to pick a scope."""
    SINGLE = "single"
    REQUIRES_CHOICE = "requires_choice"


class EditScope(Enum):
    """Which practices an edit or delete targets."""
    THIS_ONLY = "this_only"
    ALL_IN_SERIES = "all_in_series"


class SeriesOperationError(Exception):
    """
    Raised when a write in a multi-practice operation fails.

    Attributes:
        completed_ids: Practices written before the failure
        failed_id: Practice whose write failed, or None when the batch
            could not be saved as a whole
    """

    def __init__(self, message: str, completed_ids: Sequence[str], failed_id: Optional[str]):
        self.completed_ids = list(completed_ids)
        self.failed_id = failed_id
        super().__init__(message)


@dataclass
class PracticeChanges:
    """Fields to change on a practice; ``None`` leaves a field as it is."""
    start_time: Optional[datetime] = None
    activities: Optional[List[Activity]] = None
    tags: Optional[List[str]] = None
    color: Optional[str] = None

    @property
    def affects_timeline(self) -> bool:
        return self.start_time is not None or self.activities is not None


class SeriesCoordinator:
    """
    Creates practice series and applies scoped edits and deletes.

    Practices produced here are proposals until written to the store; the
    ``schedule``, ``edit_scope``, ``delete_scope`` and ``propagate_to_series``
    operations perform those writes.
    """

    def __init__(
        self,
        store: PracticeStore,
        expander: Optional[RecurrenceExpander] = None,
        timeline: Optional[TimelineBuilder] = None,
    ):
        self.store = store
        self.expander = expander or RecurrenceExpander()
        self.timeline = timeline or TimelineBuilder()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def create_series(
        self,
        spec: ScheduleSpec,
        template_activities: Sequence[Activity] = (),
        color: str = DEFAULT_PRACTICE_COLOR,
    ) -> List[PracticeInstance]:
        """
        Build one practice per expanded date, without persisting.

        Every practice starts at the spec's time of day and carries copies of
        ``template_activities`` with their own ids. When more than one
        practice results they all share a new series id.
        """
        dates = self.expander.expand(spec)
        series_id = generate_id("series") if len(dates) > 1 else None

        practices: List[PracticeInstance] = []
        for day in dates:
            start = combine(day, spec.start_time)
            skeleton = PracticeInstance(
                start_time=start,
                end_time=start,
                duration=PLACEHOLDER_PRACTICE_DURATION_MIN,
                activities=[a.copy(id=generate_id()) for a in template_activities],
                series_id=series_id,
                color=color,
            )
            practices.append(self.timeline.apply(skeleton))

        return practices

    def schedule(
        self,
        spec: ScheduleSpec,
        template_activities: Sequence[Activity] = (),
        color: str = DEFAULT_PRACTICE_COLOR,
    ) -> List[PracticeInstance]:
        """
        Create the practices for ``spec`` and write them in one batch.

        Raises:
            SeriesOperationError: If any practice fails to be written
        """
        practices = self.create_series(spec, template_activities, color=color)
        self._write_all(practices, self.store.create_instance, "create")
        logger.info(
            "Scheduled practices",
            count=len(practices),
            series_id=practices[0].series_id if practices else None,
        )
        return practices

    # ------------------------------------------------------------------
    # Scope resolution
    # ------------------------------------------------------------------
    def sibling_count(self, practice: PracticeInstance) -> int:
        """Number of stored practices in ``practice``'s series (1 for standalone)."""
        if practice.series_id is None:
            return 1
        return max(1, len(self.store.query_by_series_id(practice.series_id)))

    def resolve_scope(self, practice: PracticeInstance, sibling_count: int) -> ScopeDecision:
        """Return SINGLE when there is nobody else in the series to ask about."""
        if sibling_count <= 1:
            return ScopeDecision.SINGLE
        return ScopeDecision.REQUIRES_CHOICE

    # ------------------------------------------------------------------
    # Scoped edit/delete
    # ------------------------------------------------------------------
    def edit_scope(
        self,
        practice: PracticeInstance,
        scope: EditScope,
        changes: PracticeChanges,
    ) -> PracticeInstance:
        """
        Apply ``changes`` and save.

        Both scopes change only ``practice``: editing "all in series" updates
        the practice the user was viewing and leaves its siblings as they
        are. Use ``propagate_to_series`` to change every sibling.

        Raises:
            PracticeNotFoundError: If the practice is no longer stored
        """
        if scope is EditScope.ALL_IN_SERIES:
            logger.debug(
                "Series edit applies to the viewed practice only",
                practice_id=practice.id,
                series_id=practice.series_id,
            )

        updated = self._apply_changes(practice, changes)
        self.store.update_instance(updated)
        logger.debug("Updated practice", practice_id=updated.id, scope=scope.value)
        return updated

    def delete_scope(self, practice: PracticeInstance, scope: EditScope) -> List[str]:
        """
        Delete ``practice`` alone or together with its whole series.

        A series that has no other stored members is deleted as a single
        practice.

        Returns:
            Ids of the deleted practices

        Raises:
            PracticeNotFoundError: If a single-practice delete targets a missing id
            SeriesOperationError: If any delete in a series-wide operation fails
        """
        targets = [practice]
        if scope is EditScope.ALL_IN_SERIES:
            siblings = self._siblings(practice)
            if siblings:
                targets = siblings

        if len(targets) == 1:
            self.store.delete_instance(targets[0].id)
            logger.debug("Deleted practice", practice_id=targets[0].id)
            return [targets[0].id]

        self._write_all(targets, lambda p: self.store.delete_instance(p.id), "delete")
        logger.info("Deleted practice series", series_id=practice.series_id, count=len(targets))
        return [p.id for p in targets]

    def propagate_to_series(
        self,
        practice: PracticeInstance,
        changes: PracticeChanges,
    ) -> List[PracticeInstance]:
        """
        Apply ``changes`` to every practice in ``practice``'s series.

        Activities are copied to each sibling with fresh ids and laid out
        from that sibling's own start. A new start time moves each sibling
        to the new time of day on its own date.

        Returns:
            The updated practices, in series order

        Raises:
            SeriesOperationError: If any update fails
        """
        siblings = self._siblings(practice) or [practice]

        updated: List[PracticeInstance] = []
        for sibling in siblings:
            sibling_changes = PracticeChanges(
                start_time=(
                    combine(sibling.start_time.date(), changes.start_time.time())
                    if changes.start_time is not None else None
                ),
                activities=(
                    [a.copy(id=generate_id()) for a in changes.activities]
                    if changes.activities is not None and sibling.id != practice.id
                    else changes.activities
                ),
                tags=changes.tags,
                color=changes.color,
            )
            updated.append(self._apply_changes(sibling, sibling_changes))

        self._write_all(updated, self.store.update_instance, "update")
        logger.info("Propagated changes to series", series_id=practice.series_id, count=len(updated))
        return updated

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _siblings(self, practice: PracticeInstance) -> List[PracticeInstance]:
        if practice.series_id is None:
            return []
        members = self.store.query_by_series_id(practice.series_id)
        if not any(m.id != practice.id for m in members):
            logger.warning(
                "Series has no other members; treating as a single practice",
                series_id=practice.series_id,
                practice_id=practice.id,
            )
            return []
        return members

    def _apply_changes(self, practice: PracticeInstance, changes: PracticeChanges) -> PracticeInstance:
        updated = practice.copy()
        if changes.start_time is not None:
            updated.start_time = changes.start_time
        if changes.activities is not None:
            updated.activities = [a.copy() for a in changes.activities]
        if changes.tags is not None:
            updated.tags = list(changes.tags)
        if changes.color is not None:
            updated.color = changes.color
        if changes.affects_timeline:
            updated = self.timeline.apply(updated)
        return updated

    def _write_all(self, practices: Sequence[PracticeInstance], write, action: str) -> None:
        completed: List[str] = []
        try:
            with self.store.batch():
                for practice in practices:
                    try:
                        write(practice)
                    except Exception as exc:
                        logger.error(
                            f"Series {action} failed",
                            practice_id=practice.id,
                            completed=len(completed),
                            total=len(practices),
                        )
                        raise SeriesOperationError(
                            f"Failed to {action} practice {practice.id} "
                            f"after {len(completed)} of {len(practices)}: {exc}",
                            completed_ids=completed,
                            failed_id=practice.id,
                        ) from exc
                    completed.append(practice.id)
        except SeriesOperationError:
            raise
        except Exception as exc:
            # the batch itself failed to save; the store has been rolled back
            logger.error(f"Series {action} could not be saved", total=len(practices))
            raise SeriesOperationError(
                f"Failed to save {action} of {len(practices)} practices: {exc}",
                completed_ids=completed,
                failed_id=None,
            ) from exc
