import unittest

from phase_timer import ClockConfig, ClockConfigurationError, PhaseClock, PhaseCompletion


def _clock(focus=3, short=2, long=5, sessions=2) -> PhaseClock:
    return PhaseClock(
        ClockConfig(
            focus_seconds=focus,
            short_break_seconds=short,
            long_break_seconds=long,
            sessions_per_long_break=sessions,
        )
    )


def _run_down(clock: PhaseClock, count: int) -> list[PhaseCompletion]:
    completions = []
    for _ in range(count):
        completion = clock.decrement_one_unit()
        if completion is not None:
            completions.append(completion)
    return completions


class ClockConfigTests(unittest.TestCase):
    def test_defaults_match_classic_cadence(self) -> None:
        config = ClockConfig()
        self.assertEqual(25 * 60, config.focus_seconds)
        self.assertEqual(5 * 60, config.short_break_seconds)
        self.assertEqual(15 * 60, config.long_break_seconds)
        self.assertEqual(4, config.sessions_per_long_break)

    def test_rejects_negative_duration(self) -> None:
        with self.assertRaises(ClockConfigurationError):
            ClockConfig(focus_seconds=-1)

    def test_accepts_zero_duration_but_not_negative(self) -> None:
        config = ClockConfig(focus_seconds=0, short_break_seconds=0, long_break_seconds=0)
        self.assertEqual(0, config.duration_for("focus"))
        with self.assertRaises(ClockConfigurationError):
            ClockConfig(short_break_seconds=-1)

    def test_rejects_zero_sessions_per_long_break(self) -> None:
        with self.assertRaises(ClockConfigurationError) as context:
            ClockConfig(sessions_per_long_break=0)
        self.assertIn("sessions_per_long_break", str(context.exception))

    def test_rejects_non_integer_values(self) -> None:
        with self.assertRaises(ClockConfigurationError):
            ClockConfig(short_break_seconds=2.5)
        with self.assertRaises(ClockConfigurationError):
            ClockConfig(sessions_per_long_break=True)

    def test_configuration_error_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            ClockConfig(long_break_seconds=-5)


class PhaseClockTransitionTests(unittest.TestCase):
    def test_new_clock_is_idle_with_zero_counters(self) -> None:
        snapshot = _clock().snapshot()
        self.assertEqual("idle", snapshot.mode)
        self.assertIsNone(snapshot.phase)
        self.assertEqual(0, snapshot.remaining_seconds)
        self.assertEqual(0, snapshot.current_session)
        self.assertEqual(0, snapshot.completed_sessions)
        self.assertEqual(0, snapshot.duration_seconds)

    def test_full_cycle_reaches_long_break_on_cadence(self) -> None:
        clock = _clock(focus=3, short=2, long=5, sessions=2)
        self.assertTrue(clock.start())
        self.assertEqual(("running", "focus", 3), (clock.mode, clock.phase, clock.remaining_seconds))

        self.assertEqual([PhaseCompletion("focus", 1)], _run_down(clock, 3))
        self.assertEqual(("running", "short_break", 2), (clock.mode, clock.phase, clock.remaining_seconds))

        self.assertEqual([PhaseCompletion("short_break", 1)], _run_down(clock, 2))
        self.assertEqual(("focus", 2, 3), (clock.phase, clock.current_session, clock.remaining_seconds))

        self.assertEqual([PhaseCompletion("focus", 2)], _run_down(clock, 3))
        self.assertEqual(("running", "long_break", 5), (clock.mode, clock.phase, clock.remaining_seconds))
        self.assertEqual(2, clock.completed_sessions)

        self.assertEqual([PhaseCompletion("long_break", 2)], _run_down(clock, 5))
        self.assertEqual(("focus", 3), (clock.phase, clock.current_session))

    def test_single_session_cadence_always_takes_long_break(self) -> None:
        clock = _clock(focus=1, short=1, long=1, sessions=1)
        clock.start()
        phases = []
        for _ in range(6):
            clock.decrement_one_unit()
            phases.append(clock.phase)
        self.assertEqual(
            ["long_break", "focus", "long_break", "focus", "long_break", "focus"],
            phases,
        )

    def test_long_break_follows_focus_exactly_on_multiples(self) -> None:
        clock = _clock(focus=1, short=1, long=1, sessions=3)
        clock.start()
        for _ in range(12):
            if clock.phase != "focus":
                clock.decrement_one_unit()
                continue
            session = clock.current_session
            clock.decrement_one_unit()
            expected = "long_break" if session % 3 == 0 else "short_break"
            self.assertEqual(expected, clock.phase, f"after session {session}")

    def test_pause_at_one_second_then_resume_completes_same_phase(self) -> None:
        clock = _clock(focus=3)
        clock.start()
        _run_down(clock, 2)
        self.assertEqual(1, clock.remaining_seconds)

        self.assertTrue(clock.pause())
        self.assertEqual("paused", clock.mode)
        self.assertIsNone(clock.decrement_one_unit())
        self.assertEqual(1, clock.remaining_seconds)

        self.assertTrue(clock.resume())
        self.assertEqual(PhaseCompletion("focus", 1), clock.decrement_one_unit())

    def test_zero_length_short_break_advances_once_per_tick(self) -> None:
        clock = _clock(focus=2, short=0, long=5, sessions=4)
        clock.start()

        self.assertEqual([PhaseCompletion("focus", 1)], _run_down(clock, 2))
        self.assertEqual(("running", "short_break", 0), (clock.mode, clock.phase, clock.remaining_seconds))

        self.assertEqual(PhaseCompletion("short_break", 1), clock.decrement_one_unit())
        self.assertEqual(("focus", 2, 2), (clock.phase, clock.current_session, clock.remaining_seconds))

    def test_zero_length_focus_and_break_chain_one_phase_per_tick(self) -> None:
        clock = _clock(focus=0, short=0, long=0, sessions=2)
        clock.start()
        seen = [clock.decrement_one_unit() for _ in range(4)]
        self.assertEqual(
            [
                PhaseCompletion("focus", 1),
                PhaseCompletion("short_break", 1),
                PhaseCompletion("focus", 2),
                PhaseCompletion("long_break", 2),
            ],
            seen,
        )
        self.assertEqual(0, clock.remaining_seconds)

    def test_remaining_is_monotonic_and_never_negative_within_a_phase(self) -> None:
        clock = _clock(focus=4, short=3, long=6, sessions=2)
        clock.start()
        previous_phase = clock.phase
        previous_remaining = clock.remaining_seconds
        for _ in range(40):
            completion = clock.decrement_one_unit()
            self.assertGreaterEqual(clock.remaining_seconds, 0)
            self.assertLessEqual(clock.remaining_seconds, clock.snapshot().duration_seconds)
            if completion is None:
                self.assertEqual(previous_phase, clock.phase)
                self.assertLess(clock.remaining_seconds, previous_remaining)
            previous_phase = clock.phase
            previous_remaining = clock.remaining_seconds

    def test_stop_resets_cycle_but_keeps_completed_sessions(self) -> None:
        clock = _clock(focus=1)
        clock.start()
        clock.decrement_one_unit()
        self.assertEqual(1, clock.completed_sessions)

        self.assertTrue(clock.stop())
        snapshot = clock.snapshot()
        self.assertEqual(
            ("idle", None, 0, 0),
            (snapshot.mode, snapshot.phase, snapshot.remaining_seconds, snapshot.current_session),
        )
        self.assertEqual(1, snapshot.completed_sessions)

    def test_stop_then_start_reproduces_initial_focus(self) -> None:
        clock = _clock(focus=3, short=2, sessions=2)
        clock.start()
        _run_down(clock, 6)
        clock.stop()

        clock.start()
        self.assertEqual(
            ("running", "focus", 3, 1),
            (clock.mode, clock.phase, clock.remaining_seconds, clock.current_session),
        )

    def test_completed_sessions_unchanged_by_pause_resume_stop(self) -> None:
        clock = _clock(focus=5)
        clock.start()
        clock.pause()
        clock.resume()
        clock.stop()
        self.assertEqual(0, clock.completed_sessions)

    def test_skip_from_focus_counts_session_and_reports_nothing(self) -> None:
        clock = _clock(focus=3, short=2)
        clock.start()
        clock.decrement_one_unit()

        self.assertTrue(clock.skip())
        self.assertEqual(("running", "short_break", 2), (clock.mode, clock.phase, clock.remaining_seconds))
        self.assertEqual(1, clock.completed_sessions)

    def test_skip_from_paused_break_enters_running_focus(self) -> None:
        clock = _clock(focus=1, short=4)
        clock.start()
        clock.decrement_one_unit()
        clock.pause()

        self.assertTrue(clock.skip())
        self.assertEqual(("running", "focus", 2), (clock.mode, clock.phase, clock.current_session))

    def test_skip_on_cadence_enters_long_break(self) -> None:
        clock = _clock(focus=3, short=2, long=5, sessions=1)
        clock.start()
        clock.skip()
        self.assertEqual("long_break", clock.phase)


class PhaseClockNoOpTests(unittest.TestCase):
    def test_controls_are_silent_no_ops_when_idle(self) -> None:
        clock = _clock()
        self.assertFalse(clock.pause())
        self.assertFalse(clock.resume())
        self.assertFalse(clock.skip())
        self.assertFalse(clock.stop())
        self.assertIsNone(clock.decrement_one_unit())
        self.assertEqual("idle", clock.mode)

    def test_start_while_active_is_a_no_op(self) -> None:
        clock = _clock(focus=3)
        clock.start()
        clock.decrement_one_unit()
        self.assertFalse(clock.start())
        self.assertEqual(2, clock.remaining_seconds)

        clock.pause()
        self.assertFalse(clock.start())
        self.assertEqual("paused", clock.mode)

    def test_pause_twice_and_resume_while_running_are_no_ops(self) -> None:
        clock = _clock()
        clock.start()
        self.assertFalse(clock.resume())
        self.assertTrue(clock.pause())
        self.assertFalse(clock.pause())


class PhaseClockObserverTests(unittest.TestCase):
    def test_observers_receive_snapshot_after_each_transition(self) -> None:
        clock = _clock(focus=2, short=1)
        seen = []
        clock.subscribe(
            lambda snapshot, action: seen.append((action, snapshot.phase, snapshot.remaining_seconds))
        )

        clock.start()
        clock.decrement_one_unit()
        clock.decrement_one_unit()
        clock.pause()
        clock.resume()
        clock.skip()
        clock.stop()

        self.assertEqual(
            [
                ("start", "focus", 2),
                ("tick", "focus", 1),
                ("completed", "short_break", 1),
                ("pause", "short_break", 1),
                ("resume", "short_break", 1),
                ("skip", "focus", 2),
                ("stop", None, 0),
            ],
            seen,
        )

    def test_no_ops_do_not_notify_observers(self) -> None:
        clock = _clock()
        seen = []
        clock.subscribe(lambda snapshot, action: seen.append(action))
        clock.pause()
        clock.resume()
        clock.stop()
        clock.decrement_one_unit()
        self.assertEqual([], seen)

    def test_failing_observer_is_logged_and_others_still_run(self) -> None:
        clock = _clock()
        seen = []

        def broken(snapshot, action):
            raise RuntimeError("render failed")

        clock.subscribe(broken)
        clock.subscribe(lambda snapshot, action: seen.append(action))

        with self.assertLogs("phase_clock", level="ERROR") as logs:
            self.assertTrue(clock.start())

        self.assertEqual(["start"], seen)
        self.assertEqual("running", clock.mode)
        self.assertTrue(any("render failed" in line for line in logs.output))

    def test_unsubscribe_stops_delivery(self) -> None:
        clock = _clock()
        seen = []
        unsubscribe = clock.subscribe(lambda snapshot, action: seen.append(action))
        clock.start()
        unsubscribe()
        unsubscribe()
        clock.pause()
        self.assertEqual(["start"], seen)


if __name__ == "__main__":
    unittest.main()
