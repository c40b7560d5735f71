"""정기 스캔 스케줄러 및 서비스 엔트리포인트."""

import asyncio
import logging
import signal
from datetime import UTC, datetime, timedelta

from repo_scout.config import settings
from repo_scout.scanner import ScanOrchestrator, create_client, create_orchestrator

logger = logging.getLogger(__name__)


class PeriodicScheduler:
    """시작 즉시 한 번, 이후 고정 주기로 스캔을 실행한다.

    주기는 직전 스캔의 소요 시간과 무관하다. 겹치는 실행은 오케스트레이터가 거부한다.
    """

    def __init__(self, orchestrator: ScanOrchestrator, interval_hours: float = 12.0) -> None:
        """
        Args:
            orchestrator: 스캔 오케스트레이터
            interval_hours: 스캔 주기 (시간)
        """
        self.orchestrator = orchestrator
        self.interval = timedelta(hours=interval_hours)
        self._loop_task: asyncio.Task[None] | None = None
        self._scan_tasks: set[asyncio.Task[int | None]] = set()

    @property
    def is_active(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def start(self) -> None:
        """초기 스캔을 백그라운드로 시작하고 주기 실행을 예약한다."""
        if self.is_active:
            return

        logger.info("Starting initial scan in background")
        self.trigger()
        self._loop_task = asyncio.create_task(self._schedule_loop())

    def trigger(self) -> asyncio.Task[int | None]:
        """스캔을 백그라운드 태스크로 실행한다."""
        task = asyncio.create_task(self.orchestrator.run_scan())
        self._scan_tasks.add(task)
        task.add_done_callback(self._on_scan_done)
        return task

    def _on_scan_done(self, task: asyncio.Task[int | None]) -> None:
        self._scan_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Scan failed: {error!r}")

    async def _schedule_loop(self) -> None:
        """주기적으로 스캔을 실행한다."""
        hours = self.interval.total_seconds() / 3600
        logger.info(f"Scheduled to run every {hours:g} hours")

        while True:
            next_run = datetime.now(UTC) + self.interval
            self.orchestrator.schedule_next(next_run)
            logger.info(f"Next scan at: {next_run.isoformat()}")
            try:
                await asyncio.sleep(self.interval.total_seconds())
            except asyncio.CancelledError:
                logger.info("Scheduler stopped")
                break
            logger.info("Starting scheduled scan")
            self.trigger()

    def stop(self) -> None:
        """이후 예약된 스캔을 취소한다. 진행 중인 스캔은 그대로 둔다."""
        if self._loop_task and not self._loop_task.done():
            self._loop_task.cancel()
        self._loop_task = None
        self.orchestrator.schedule_next(None)

    def time_until_next(self) -> timedelta | None:
        """다음 스캔까지 남은 시간. 예약이 없으면 None."""
        next_run = self.orchestrator.state.next_scheduled_at
        if next_run is None:
            return None
        return max(next_run - datetime.now(UTC), timedelta(0))

    async def wait_for_scans(self) -> None:
        """진행 중인 스캔 태스크가 끝날 때까지 기다린다."""
        if self._scan_tasks:
            await asyncio.gather(*self._scan_tasks, return_exceptions=True)


async def serve(interval_hours: float | None = None) -> None:
    """스케줄러를 실행하고 SIGINT/SIGTERM을 받으면 정리 후 종료한다."""
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    async with create_client(settings) as client:
        orchestrator = create_orchestrator(settings, client)
        scheduler = PeriodicScheduler(
            orchestrator,
            interval_hours=interval_hours or settings.scan_interval_hours,
        )
        scheduler.start()

        await stop_event.wait()
        logger.info("Shutdown requested")

        scheduler.stop()
        orchestrator.cancel()
        await scheduler.wait_for_scans()

    logger.info(f"Scanner stopped: {orchestrator.status().model_dump_json()}")


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def main() -> None:
    """스케줄러 엔트리포인트."""
    configure_logging()
    asyncio.run(serve())


if __name__ == "__main__":
    main()
