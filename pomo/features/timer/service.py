"""Timer core - pomodoro session state machine.

Time is never ticked. Remaining and elapsed time are derived from absolute
instants whenever they are asked for, and the end of a session is only
noticed when the status is queried.
"""
import itertools
import logging
from datetime import timedelta
from typing import Optional

from pomo.config import TimerSettings
from pomo.features.session_log.duration import format_duration
from pomo.features.session_log.service import SessionLogger
from pomo.features.timer.domain import (
    MILLISECS_IN_MINUTE,
    EndChoice,
    Mode,
    NoActiveTimerError,
    TimerPhase,
    TimerSnapshot,
    TimerState,
)
from pomo.features.timer.ports import Clock, ConfirmationGateway, NotificationSink, NoteResolver
from pomo.utils.datetime_helper import millis_between

logger = logging.getLogger(__name__)

IDLE_MARKER = "🍅"
OVERTIME_PREFIX = "+ "


class TimerCore:
    """Owns the TimerState and performs every transition on it"""

    def __init__(
        self,
        settings: TimerSettings,
        clock: Clock,
        gateway: ConfirmationGateway,
        session_logger: SessionLogger,
        notifications: NotificationSink,
        notes: Optional[NoteResolver] = None,
    ):
        self.settings = settings
        self.clock = clock
        self.gateway = gateway
        self.session_logger = session_logger
        self.notifications = notifications
        self.notes = notes
        self.state = TimerState()
        self._session_ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Durations
    # ------------------------------------------------------------------

    def next_mode_after(self, mode: Mode, pomos: Optional[int] = None) -> Mode:
        """
        Next mode in the cycle: a break after a pomodoro, otherwise a pomodoro.

        The break is long when the pomodoro count (pomos_since_start unless
        given) is a multiple of long_break_interval.
        """
        if pomos is None:
            pomos = self.state.pomos_since_start
        if mode == Mode.POMO:
            if pomos % self.settings.long_break_interval == 0:
                return Mode.LONG_BREAK
            return Mode.SHORT_BREAK
        return Mode.POMO

    def nominal_ms(self, mode: Optional[Mode] = None) -> int:
        """Configured length of a mode in milliseconds"""
        mode = mode or self.state.mode

        if mode == Mode.NO_TIMER:
            raise NoActiveTimerError("Mode NO_TIMER does not have an associated time value")

        if self.state.is_custom:
            if mode == Mode.POMO:
                minutes = self.state.custom_pomo_minutes or self.settings.custom_pomo_minutes
            else:
                minutes = self.state.custom_break_minutes or self.settings.custom_break_minutes
        elif mode == Mode.POMO:
            minutes = self.settings.pomo_minutes
        elif mode == Mode.SHORT_BREAK:
            minutes = self.settings.short_break_minutes
        else:
            minutes = self.settings.long_break_minutes

        return int(minutes * MILLISECS_IN_MINUTE)

    def countdown_ms(self) -> int:
        """Milliseconds until end_time; negative once it has passed"""
        if self.state.end_time is None:
            return 0
        return millis_between(self.clock.now(), self.state.end_time)

    def elapsed_active_ms(self) -> int:
        """
        Active time spent in the current session.

        Paused: pausedTime holds the remaining time in normal mode and the
        elapsed overtime in overtime. Running: derived from end_time, which
        has already absorbed any pauses.
        """
        if self.state.mode == Mode.NO_TIMER:
            return 0

        total = self.nominal_ms()

        if self.state.paused:
            if self.state.in_overtime:
                return total + max(0, self.state.paused_time_ms)
            return max(0, total - max(0, self.state.paused_time_ms))

        if self.state.end_time is None:
            return 0

        remaining = self.countdown_ms()
        if remaining >= 0:
            return max(0, total - remaining)
        return total + max(0, -remaining)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def start(self, mode: Optional[Mode] = None) -> bool:
        """
        Start a session, after confirmation when configured.

        Args:
            mode: Mode to start, or None for the next mode in the cycle

        Returns:
            False when the start was declined (nothing changes)
        """
        return await self._start(mode, custom=None)

    async def start_custom(
        self,
        pomo_minutes: Optional[float] = None,
        break_minutes: Optional[float] = None,
    ) -> bool:
        """Start a pomodoro with custom pomodoro and break lengths"""
        custom = (
            pomo_minutes or self.settings.custom_pomo_minutes,
            break_minutes or self.settings.custom_break_minutes,
        )
        return await self._start(Mode.POMO, custom=custom)

    async def _start(self, mode: Optional[Mode], custom: Optional[tuple]) -> bool:
        candidate = mode if mode is not None else self.next_mode_after(self.state.mode)

        if self.settings.confirm_on_session_start:
            proceed = await self.gateway.confirm_start(candidate)
            if not proceed:
                logger.info(f"Start of {candidate.value} declined")
                return False

        # Close out a different session before the new one opens
        if self.state.mode != Mode.NO_TIMER and candidate != self.state.mode:
            await self._log_current_session()

        if custom is not None:
            self.state.is_custom = True
            self.state.custom_pomo_minutes, self.state.custom_break_minutes = custom
        else:
            self.state.is_custom = False

        self.state.in_overtime = False
        await self._begin(candidate)
        return True

    async def _begin(self, mode: Mode) -> None:
        """Open a session without asking for confirmation"""
        self._setup(mode)
        self.state.paused = False
        self.state.auto_paused = False
        self.state.paused_time_ms = 0
        self._capture_active_note()
        self._mark_session_start()

        logger.info(f"Started {mode.value}, ends at {self.state.end_time}")
        self._mode_starting_notice()
        if self.settings.white_noise:
            self.notifications.start_ambient()

        if self.settings.logging_enabled:
            await self.session_logger.log_start(mode, self.state.active_note_ref)

    def pause(self) -> bool:
        """Pause a running session; returns False when there is nothing to pause"""
        if self.state.mode == Mode.NO_TIMER or self.state.paused:
            return False
        if self.state.awaiting_end_decision:
            # The expired session is neither counting down nor in overtime yet
            logger.info("Pause refused while an end decision is pending")
            return False

        if self.state.in_overtime:
            self.state.paused_time_ms = max(0, -self.countdown_ms())
        else:
            self.state.paused_time_ms = max(0, self.countdown_ms())
        self.state.paused = True

        if self.settings.white_noise:
            self.notifications.stop_ambient()

        logger.info(f"Paused {self.state.mode.value} at {self.state.paused_time_ms}ms")
        return True

    async def resume(self) -> bool:
        """Resume a paused session; returns False when not paused"""
        if not self.state.paused:
            return False

        # Overtime is open-ended and keeps its original end_time
        if not self.state.in_overtime:
            self._set_start_and_end(self.state.paused_time_ms)
        self.state.paused = False

        if self.state.auto_paused:
            # Auto-stopped sessions only really begin now
            self.state.auto_paused = False
            self._capture_active_note()
            self._mark_session_start()
            if self.settings.logging_enabled:
                await self.session_logger.log_start(self.state.mode, self.state.active_note_ref)

        self._mode_restarting_notice()
        if self.settings.white_noise:
            self.notifications.start_ambient()

        logger.info(f"Resumed {self.state.mode.value}")
        return True

    async def toggle(self) -> bool:
        """Start a pomodoro when idle, otherwise pause or resume"""
        if self.state.mode == Mode.NO_TIMER:
            return await self.start(Mode.POMO)

        if self.state.paused:
            return await self.resume()

        paused = self.pause()
        if paused:
            self.notifications.notice("Timer paused.")
        return paused

    async def quit(self) -> None:
        """Log the current session and return to idle"""
        await self._log_current_session_safely()

        if self.settings.white_noise:
            self.notifications.stop_ambient()

        self._reset()
        self.notifications.notice("Quitting pomodoro timer.")
        logger.info("Timer quit")

    async def finish_and_start_next(self) -> bool:
        """Finish the current session now and start the next one in the cycle"""
        if self.state.mode == Mode.NO_TIMER:
            self.notifications.notice("No active session to finish.")
            return False

        await self._log_current_session_safely()
        await self._advance()
        return True

    # ------------------------------------------------------------------
    # End of session
    # ------------------------------------------------------------------

    def _has_expired(self) -> bool:
        return (
            self.state.mode != Mode.NO_TIMER
            and not self.state.paused
            and self.state.end_time is not None
            and self.clock.now() >= self.state.end_time
        )

    async def query_status(self) -> str:
        """
        Display string for the timer.

        This is the only place where the end of a session is detected:
        an expired session that is neither in overtime nor waiting for a
        decision is handed to handle_timer_end() before rendering.
        """
        if (
            self._has_expired()
            and not self.state.in_overtime
            and not self.state.awaiting_end_decision
        ):
            await self.handle_timer_end()

        return self._display()

    async def handle_timer_end(self) -> None:
        """React to a session reaching its end_time"""
        if self.state.awaiting_end_decision or self.state.mode == Mode.NO_TIMER:
            return

        ended_mode = self.state.mode
        if self.settings.play_sound_on_end:
            self.notifications.play_sound()
        if self.settings.show_system_notification_on_end:
            self.notifications.show_system_notification(ended_mode, self.settings.use_emoji)

        if self.settings.confirm_on_session_end:
            await self._decide_end(ended_mode)
            return

        if self.settings.manual_advance:
            self.state.in_overtime = True
            logger.info(f"{ended_mode.value} ended, waiting for manual advance")
            return

        # Completed on time: counts with its nominal length
        self._count_finished(ended_mode)
        await self._log_current_session(duration_ms=self.nominal_ms())

        next_mode = self.next_mode_after(ended_mode)
        if (
            not self.settings.auto_start_next
            and self.settings.auto_stop_after_cycles <= self.state.cycles_since_last_auto_stop
        ):
            self._auto_stop(next_mode)
        else:
            self.state.in_overtime = False
            await self._begin(next_mode)

    async def _decide_end(self, ended_mode: Mode) -> None:
        """
        Ask how an expired session should end and apply the answer.

        The guard stays set until the answer, including an unsuccessful
        reason, has been applied. Answers that arrive after the session was
        quit or replaced are dropped.
        """
        session_id = self.state.session_id
        self.state.awaiting_end_decision = True
        try:
            # Offer the mode that follows once this session is counted
            choice = await self.gateway.confirm_end_of_session(
                self.next_mode_after(ended_mode, self.state.pomos_since_start + 1),
                allow_unsuccessful=ended_mode == Mode.POMO,
            )
            logger.info(f"End of {ended_mode.value}: user chose {choice.value}")
            if self._is_stale(session_id):
                return

            reason = None
            if choice == EndChoice.UNSUCCESSFUL and ended_mode == Mode.POMO:
                reason = await self.gateway.prompt_unsuccessful_reason()
                if self._is_stale(session_id):
                    return

            await self._apply_end_choice(choice, reason)
        finally:
            # A new session clears the guard in _setup
            if self.state.session_id == session_id:
                self.state.awaiting_end_decision = False

    def _is_stale(self, session_id: int) -> bool:
        if self.state.session_id == session_id:
            return False
        logger.info(f"Ignoring end decision, timer is now {self.state.mode.value}")
        return True

    async def _apply_end_choice(self, choice: EndChoice, reason: Optional[str] = None) -> None:
        if choice == EndChoice.CONTINUE:
            self.state.in_overtime = True
            return

        if choice == EndChoice.QUIT:
            await self._log_current_session_safely()
            if self.settings.white_noise:
                self.notifications.stop_ambient()
            self._reset()
            return

        if choice == EndChoice.UNSUCCESSFUL and self.state.mode == Mode.POMO:
            if self.settings.logging_enabled:
                await self.session_logger.log_unsuccessful(reason or "", self.state.active_note_ref)
            self.state.pomo_session_start_time = None
            self.state.in_overtime = False
            await self._begin(self.next_mode_after(Mode.POMO))
            return

        if choice == EndChoice.UNSUCCESSFUL:
            logger.warning(f"Unsuccessful is only valid for a pomodoro, advancing {self.state.mode.value}")

        await self._log_current_session()
        await self._advance()

    async def _advance(self) -> None:
        """Count the finished session and start the next mode without confirmation"""
        ended_mode = self.state.mode
        self._count_finished(ended_mode)
        self.state.in_overtime = False
        await self._begin(self.next_mode_after(ended_mode))

    def _count_finished(self, mode: Mode) -> None:
        if mode == Mode.POMO:
            self.state.pomos_since_start += 1
        elif mode.is_break:
            self.state.cycles_since_last_auto_stop += 1

    def _auto_stop(self, next_mode: Mode) -> None:
        """Set up the next session paused at its full length"""
        self._setup(next_mode)
        self.state.auto_paused = True
        self.state.paused = True
        self.state.paused_time_ms = self.nominal_ms()
        self.state.cycles_since_last_auto_stop = 0
        if self.settings.white_noise:
            self.notifications.stop_ambient()
        self.notifications.notice(f"Auto-stopped. Resume to start the {_mode_label(next_mode)}.")
        logger.info(f"Auto-stopped before {next_mode.value}")

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    async def _log_current_session(self, duration_ms: Optional[int] = None) -> None:
        mode = self.state.mode
        if not self.settings.logging_enabled or mode == Mode.NO_TIMER:
            return

        if duration_ms is None:
            duration_ms = self.elapsed_active_ms()

        if mode == Mode.POMO:
            started_at = self.state.pomo_session_start_time
        else:
            started_at = self.state.break_session_start_time

        await self.session_logger.log_session(
            mode,
            duration_ms=duration_ms,
            nominal_ms=self.nominal_ms(),
            started_at=started_at,
            note_ref=self.state.active_note_ref,
        )

        if mode == Mode.POMO:
            self.state.pomo_session_start_time = None
        else:
            self.state.break_session_start_time = None

    async def _log_current_session_safely(self) -> None:
        try:
            await self._log_current_session()
        except Exception as e:
            logger.error(f"Error logging session: {e}")
            self.notifications.notice(f"Could not write the pomodoro log: {e}")

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    def _setup(self, mode: Mode) -> None:
        self.state.mode = mode
        self.state.session_id = next(self._session_ids)
        self.state.in_overtime = False
        self.state.awaiting_end_decision = False
        self._set_start_and_end(self.nominal_ms())

    def _set_start_and_end(self, millisecs_left: int) -> None:
        now = self.clock.now()
        self.state.start_time = now
        self.state.end_time = now + timedelta(milliseconds=millisecs_left)

    def _capture_active_note(self) -> None:
        if self.notes is None:
            return
        note_ref = self.notes.active_note()
        if note_ref:
            self.state.active_note_ref = note_ref

    def _mark_session_start(self) -> None:
        if self.state.mode == Mode.POMO:
            self.state.pomo_session_start_time = self.clock.now()
        elif self.state.mode.is_break:
            self.state.break_session_start_time = self.clock.now()

    def _reset(self) -> None:
        self.state = TimerState()

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def phase(self) -> TimerPhase:
        if self.state.mode == Mode.NO_TIMER:
            return TimerPhase.IDLE
        if self.state.awaiting_end_decision:
            return TimerPhase.AWAITING_END_DECISION
        if self.state.paused:
            return TimerPhase.PAUSED
        if self.state.in_overtime:
            return TimerPhase.OVERTIME
        return TimerPhase.RUNNING

    def _display(self) -> str:
        if self.state.mode == Mode.NO_TIMER:
            return IDLE_MARKER

        symbol = ""
        if self.settings.use_emoji:
            symbol = "🍅 " if self.state.mode == Mode.POMO else "🏖️ "

        if self.state.paused:
            prefix = OVERTIME_PREFIX if self.state.in_overtime else ""
            return symbol + prefix + format_duration(self.state.paused_time_ms)

        remaining = self.countdown_ms()
        if remaining <= 0:
            if self.state.in_overtime:
                return symbol + OVERTIME_PREFIX + format_duration(-remaining)
            return symbol + format_duration(0)

        return symbol + format_duration(remaining)

    def snapshot(self) -> TimerSnapshot:
        """Structured view without side effects"""
        return TimerSnapshot(
            phase=self.phase(),
            mode=self.state.mode,
            display=self._display(),
            paused=self.state.paused,
            in_overtime=self.state.in_overtime,
            awaiting_end_decision=self.state.awaiting_end_decision,
            elapsed_ms=self.elapsed_active_ms(),
            pomos_since_start=self.state.pomos_since_start,
            cycles_since_last_auto_stop=self.state.cycles_since_last_auto_stop,
            is_custom=self.state.is_custom,
            end_time=self.state.end_time,
            active_note_ref=self.state.active_note_ref,
        )

    # ------------------------------------------------------------------
    # Notices
    # ------------------------------------------------------------------

    def _mode_starting_notice(self) -> None:
        millisecs = self.nominal_ms()
        if millisecs >= MILLISECS_IN_MINUTE:
            amount, unit = millisecs // MILLISECS_IN_MINUTE, "minute"
        else:
            amount, unit = millisecs // 1000, "second"

        custom = "custom " if self.state.is_custom else ""
        kind = "pomodoro" if self.state.mode == Mode.POMO else "break"
        self.notifications.notice(f"Starting {amount} {unit} {custom}{kind}.")

    def _mode_restarting_notice(self) -> None:
        self.notifications.notice(f"Restarting {_mode_label(self.state.mode)}.")


def _mode_label(mode: Mode) -> str:
    return "pomodoro" if mode == Mode.POMO else "break"
