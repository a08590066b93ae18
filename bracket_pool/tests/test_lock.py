import unittest
from datetime import datetime, timedelta, timezone
from bracket_pool.app.engine.lock import is_locked, lock_status
from bracket_pool.app.models.enums import LockState

NOW = datetime(2025, 3, 20, 16, 0, tzinfo=timezone.utc)

class TestIsLocked(unittest.TestCase):
    def test_manual_flag_wins(self):
        self.assertTrue(is_locked(True, None, NOW))
        self.assertTrue(is_locked(True, NOW + timedelta(days=1), NOW))

    def test_no_lock_time_is_open(self):
        self.assertFalse(is_locked(False, None, NOW))

    def test_future_lock_time_is_open(self):
        self.assertFalse(is_locked(False, NOW + timedelta(hours=1), NOW))

    def test_lock_time_reached(self):
        self.assertTrue(is_locked(False, NOW - timedelta(hours=1), NOW))
        # Boundary: exactly at lock time
        self.assertTrue(is_locked(False, NOW, NOW))

    def test_naive_values_are_utc(self):
        naive_lock = datetime(2025, 3, 20, 15, 0)
        self.assertTrue(is_locked(False, naive_lock, NOW))
        self.assertFalse(is_locked(False, naive_lock, datetime(2025, 3, 20, 14, 59)))

    def test_other_timezones_compare_by_instant(self):
        plus_two = timezone(timedelta(hours=2))
        # 17:00 +02:00 is 15:00 UTC
        self.assertTrue(is_locked(False, datetime(2025, 3, 20, 17, 0, tzinfo=plus_two), NOW))

    def test_defaults_to_current_time(self):
        self.assertTrue(is_locked(False, datetime.now(timezone.utc) - timedelta(minutes=1)))
        self.assertFalse(is_locked(False, datetime.now(timezone.utc) + timedelta(days=1)))

class TestLockStatus(unittest.TestCase):
    def test_manual(self):
        state, message = lock_status(True, None, NOW)
        self.assertEqual(state, LockState.LOCKED)
        self.assertEqual(message, "Picks locked, changes can no longer be made.")

    def test_open_without_time(self):
        self.assertEqual(
            lock_status(False, None, NOW),
            (LockState.OPEN, "Picks are open, lock time not set yet.")
        )

    def test_open_until_lock_time(self):
        state, message = lock_status(False, datetime(2025, 3, 20, 16, 15, tzinfo=timezone.utc), NOW)
        self.assertEqual(state, LockState.OPEN)
        self.assertEqual(message, "Picks are open, lock time: Mar 20, 16:15 UTC.")

    def test_locked_after_lock_time(self):
        state, message = lock_status(False, datetime(2025, 3, 20, 12, 0), NOW)
        self.assertEqual(state, LockState.LOCKED)
        self.assertEqual(message, "Picks locked as of Mar 20, 12:00 UTC.")

if __name__ == '__main__':
    unittest.main()
