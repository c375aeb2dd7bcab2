"""Synchronisation of external schedule, rider and result data.

A run fetches one source, skips the work when the payload hash matches the
previous run, then validates, diffs and upserts each record on its own so a
bad record never sinks the batch. Every run leaves a ``SyncHistory`` row
and its ``DataChange`` log.
"""

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from motosense.exceptions import (
    MotoSenseError,
    NotFoundError,
    RateLimitExceeded,
    SourceInactive,
    ValidationError,
)
from motosense.fetchers import (
    DEFAULT_SOURCES,
    DataFetcher,
    RaceResultItem,
    RaceScheduleItem,
    RaceWithResults,
    RiderDataItem,
    decode_payload,
)
from motosense.models import DataSource, Race, RaceResult, Rider, Season, SyncHistory, SyncStatus
from motosense.models.base import utcnow
from motosense.repositories import (
    ContentSnapshotRepository,
    DataChangeRepository,
    DataSourceRepository,
    RaceRepository,
    ResultRepository,
    RiderRepository,
    SyncHistoryRepository,
)
from motosense.services.change_detector import (
    SERIES_NAMES,
    DetectedChange,
    created_change,
    detect_race_changes,
    detect_result_changes,
    detect_rider_changes,
    hash_content,
    results_posted_change,
)
from motosense.services.rate_limiter import RateLimiter, get_rate_limiter
from motosense.services.results_service import ResultsService
from motosense.services.validation import validate_race_item, validate_result_item, validate_rider_item

logger = logging.getLogger(__name__)

Item = TypeVar("Item")


@dataclass
class SyncResult:
    """Outcome of one sync run."""

    success: bool = False
    records_fetched: int = 0
    records_inserted: int = 0
    records_updated: int = 0
    records_deleted: int = 0
    records_invalid: int = 0
    changes: list[DetectedChange] = field(default_factory=list)
    error: str | None = None
    sync_id: int | None = None
    content_changed: bool = False

    @property
    def critical_changes(self) -> list[DetectedChange]:
        return [c for c in self.changes if c.is_critical]


class SyncOrchestrator(ABC):
    """Base class for one source's sync run."""

    source_name: str = ""
    entity_type: str = ""

    def __init__(
        self,
        session: AsyncSession,
        fetcher: DataFetcher,
        rate_limiter: RateLimiter | None = None,
    ):
        self.session = session
        self.fetcher = fetcher
        self.rate_limiter = rate_limiter or get_rate_limiter(session)
        self.source_repo = DataSourceRepository(session)
        self.snapshot_repo = ContentSnapshotRepository(session)
        self.history_repo = SyncHistoryRepository(session)
        self.change_repo = DataChangeRepository(session)

    async def _get_source(self, now: datetime) -> DataSource:
        source = await self.source_repo.get_by_name(self.source_name)
        if source is None:
            raise NotFoundError("Data source", self.source_name)
        if not source.is_active:
            raise SourceInactive(f"Data source {self.source_name} is inactive")

        allowed = await self.rate_limiter.allow(
            source.id, source.rate_limit_requests, source.rate_limit_period, now=now
        )
        if not allowed:
            retry_after = await self.rate_limiter.retry_after(source.id, now=now)
            raise RateLimitExceeded(source.id, retry_after=retry_after or 60)
        return source

    async def sync(self, sync_type: str = "manual", now: datetime | None = None) -> SyncResult:
        """Run one sync.

        Missing, inactive or throttled sources raise before anything is
        recorded. Any failure after that is reported in the returned result.
        """
        started_at = now or utcnow()
        clock = time.monotonic()
        source = await self._get_source(started_at)
        source_id, url = source.id, source.url

        history = await self.history_repo.start(source_id, sync_type, started_at)
        result = SyncResult(sync_id=history.id)
        logger.info("Starting %s sync #%s of %s", sync_type, history.id, self.source_name)

        try:
            raw = await self.fetcher.fetch(url)
            content_hash = hash_content(raw)
            snapshot = await self.snapshot_repo.get_snapshot(source_id, url)

            if snapshot is not None and snapshot.content_hash == content_hash:
                logger.info("%s unchanged since last run, skipping", self.source_name)
            else:
                result.content_changed = True
                records = decode_payload(raw)
                result.records_fetched = len(records)
                await self.process(records, result, started_at)

            await self.snapshot_repo.record(source_id, url, content_hash, started_at)
            result.success = True
        except MotoSenseError as e:
            logger.error("Sync of %s failed: %s", self.source_name, e.message)
            result.success = False
            result.error = e.message
        except SQLAlchemyError as e:
            logger.exception("Sync of %s failed writing to the database", self.source_name)
            await self.session.rollback()
            source = await self.source_repo.get(source_id)
            history = await self.history_repo.start(source_id, sync_type, started_at)
            result = SyncResult(sync_id=history.id, error=f"Database error: {e}")

        await self._finish(source, history, result, clock)
        return result

    async def _finish(self, source: DataSource, history: SyncHistory, result: SyncResult, clock: float) -> None:
        completed_at = utcnow()
        history.status = (SyncStatus.SUCCESS if result.success else SyncStatus.FAILED).value
        history.completed_at = completed_at
        history.duration_ms = int((time.monotonic() - clock) * 1000)
        history.records_fetched = result.records_fetched
        history.records_inserted = result.records_inserted
        history.records_updated = result.records_updated
        history.records_deleted = result.records_deleted
        history.records_invalid = result.records_invalid
        history.error_message = result.error

        if result.success:
            await self.change_repo.add_many(history.id, result.changes)
        await self.source_repo.record_outcome(source, result.success, completed_at)

        for change in result.critical_changes:
            logger.warning(
                "Critical change: %s %s %s %s -> %s",
                change.entity_type, change.entity_id, change.field_name or change.change_type,
                change.old_value, change.new_value,
            )
        logger.info(
            "Finished sync #%s of %s: %s, fetched=%d inserted=%d updated=%d invalid=%d (%dms)",
            history.id, self.source_name, history.status, result.records_fetched,
            result.records_inserted, result.records_updated, result.records_invalid, history.duration_ms,
        )

    def _parse(
        self,
        record: Any,
        factory: Callable[[dict[str, Any]], Item],
        validate: Callable[[Item], list[str]],
        result: SyncResult,
    ) -> Item | None:
        """Convert and validate one record; invalid records are counted and skipped."""
        try:
            item = factory(record)
            for warning in validate(item):
                logger.warning("%s: %s", self.source_name, warning)
        except ValidationError as e:
            result.records_invalid += 1
            logger.warning("Skipping invalid %s record %s: %s", self.entity_type, e.entity_id or "?", e.message)
            return None
        return item

    @abstractmethod
    async def process(self, records: list[dict[str, Any]], result: SyncResult, now: datetime) -> None:
        """Validate, diff and upsert fetched records."""
        pass


class ScheduleSync(SyncOrchestrator):
    """Race schedule sync."""

    source_name = "SupercrossLIVE Schedule"
    entity_type = "race"

    async def process(self, records: list[dict[str, Any]], result: SyncResult, now: datetime) -> None:
        race_repo = RaceRepository(self.session)

        for record in records:
            item = self._parse(record, RaceScheduleItem.from_dict, validate_race_item, result)
            if item is None:
                continue

            race = await race_repo.get(item.id)
            if race is None:
                self.session.add(await self._new_race(item))
                await self.session.flush()
                result.records_inserted += 1
                result.changes.append(created_change("race", item.id, item.name))
                continue

            changes = detect_race_changes(race, item)
            if not changes:
                continue
            race.name = item.name
            race.date = item.starts_at
            race.track_id = item.track_id
            if item.venue is not None:
                race.venue = item.venue
            if not race.is_simulation:
                race.status = item.status
            result.records_updated += 1
            result.changes.extend(changes)

        await self.session.flush()

    async def _new_race(self, item: RaceScheduleItem) -> Race:
        starts_at = item.starts_at
        series = SERIES_NAMES[item.series]
        season = await self.session.get(Season, f"{item.series}-{starts_at.year}")
        return Race(
            id=item.id,
            name=item.name,
            series=series,
            round=item.round,
            date=starts_at,
            venue=item.venue,
            track_id=item.track_id,
            season_id=season.id if season else None,
            status=item.status,
        )


class RiderSync(SyncOrchestrator):
    """Rider roster sync."""

    source_name = "SupercrossLIVE Riders"
    entity_type = "rider"

    async def process(self, records: list[dict[str, Any]], result: SyncResult, now: datetime) -> None:
        rider_repo = RiderRepository(self.session)

        for record in records:
            item = self._parse(record, RiderDataItem.from_dict, validate_rider_item, result)
            if item is None:
                continue

            rider = await rider_repo.get(item.id)
            if rider is None:
                self.session.add(
                    Rider(
                        id=item.id,
                        first_name=item.first_name,
                        last_name=item.last_name,
                        number=item.number,
                        team=item.team,
                        series=item.series,
                        nationality=item.nationality or None,
                        status=item.status,
                        injury_details=item.injury_details,
                    )
                )
                await self.session.flush()
                result.records_inserted += 1
                result.changes.append(created_change("rider", item.id, item.name))
                continue

            changes = detect_rider_changes(rider, item)
            if not changes:
                continue
            rider.first_name = item.first_name
            rider.last_name = item.last_name
            rider.number = item.number
            rider.team = item.team
            rider.status = item.status
            rider.injury_details = item.injury_details
            result.records_updated += 1
            result.changes.extend(changes)

        await self.session.flush()


class ResultSync(SyncOrchestrator):
    """Race result sync. Newly posted results trigger scoring."""

    source_name = "SupercrossLIVE Results"
    entity_type = "result"

    async def process(self, records: list[dict[str, Any]], result: SyncResult, now: datetime) -> None:
        race_repo = RaceRepository(self.session)
        rider_repo = RiderRepository(self.session)
        result_repo = ResultRepository(self.session)
        to_score: list[str] = []

        for record in records:
            try:
                bundle = RaceWithResults.from_dict(record)
            except ValidationError as e:
                result.records_invalid += 1
                logger.warning("Skipping invalid results block: %s", e.message)
                continue

            race = await race_repo.get(bundle.race_id)
            if race is None:
                logger.warning("Skipping results for unknown race %s", bundle.race_id)
                continue

            touched = 0
            for row in bundle.results:
                item = self._parse(row, RaceResultItem.from_dict, validate_result_item, result)
                if item is None:
                    continue
                if item.race_id != race.id:
                    result.records_invalid += 1
                    logger.warning("Result %s filed under race %s", item.entity_id, race.id)
                    continue
                if await rider_repo.get(item.rider_id) is None:
                    result.records_invalid += 1
                    logger.warning("Result %s references unknown rider", item.entity_id)
                    continue

                existing = await result_repo.get_by_race_and_rider(item.race_id, item.rider_id)
                if existing is None:
                    self.session.add(
                        RaceResult(
                            race_id=item.race_id,
                            rider_id=item.rider_id,
                            position=item.position,
                            points=item.points,
                            laps=item.laps,
                            status=item.status,
                            total_time=item.total_time,
                            best_lap_time=item.best_lap_time,
                            gap=item.gap,
                        )
                    )
                    await self.session.flush()
                    result.records_inserted += 1
                    result.changes.append(created_change("result", item.entity_id, f"P{item.position}"))
                    touched += 1
                    continue

                changes = detect_result_changes(existing, item)
                existing.laps = item.laps
                existing.best_lap_time = item.best_lap_time
                existing.gap = item.gap
                if not changes:
                    continue
                existing.position = item.position
                existing.points = item.points
                existing.status = item.status
                existing.total_time = item.total_time
                result.records_updated += 1
                result.changes.extend(changes)
                touched += 1

            if not touched:
                continue

            if not race.has_results:
                result.changes.append(results_posted_change(race.id))
                logger.info("Results posted for %s", race.id)
            if ResultsService.mark_results_posted(race):
                to_score.append(race.id)

        await self.session.flush()

        results_service = ResultsService(self.session)
        # Scoring failures roll back to the savepoint; the synced results stay.
        for race_id in to_score:
            try:
                async with self.session.begin_nested():
                    await results_service.recalculate_race_scores(race_id, now=now)
            except Exception:
                logger.exception("Scoring race %s after sync failed", race_id)


SYNC_KINDS: dict[str, type[SyncOrchestrator]] = {
    "schedule": ScheduleSync,
    "riders": RiderSync,
    "results": ResultSync,
}


async def seed_sources(session: AsyncSession, sources: list[dict[str, Any]] | None = None) -> int:
    """Insert the default data sources that do not exist yet."""
    repo = DataSourceRepository(session)
    created = 0
    for data in sources if sources is not None else DEFAULT_SOURCES:
        if await repo.get(data["id"]) is None:
            await repo.create(data)
            created += 1
    if created:
        logger.info("Seeded %d data sources", created)
    return created
