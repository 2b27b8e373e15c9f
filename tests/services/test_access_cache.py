"""Redis decision cache with a mocked client."""
import unittest
from unittest.mock import MagicMock

import redis

from premium_gate.gating.models import AccessDecision, AccessReason, Viewer, ViewerRole, Zone
from premium_gate.services.access.cache import AccessDecisionCache
from tests.helpers import DAY, NOW


class TestAccessDecisionCache(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.cache = AccessDecisionCache(client=self.client, ttl_seconds=60)
        self.viewer = Viewer(id="u1", role=ViewerRole.COACH)

    def test_key_layout(self):
        self.assertEqual(self.cache.key("c1", self.viewer, Zone.COACH), "access:c1:u1:COACH:COACH")
        self.assertEqual(self.cache.key("c1", Viewer(), None), "access:c1:anonymous:FREE:-")

    def test_round_trip(self):
        decision = AccessDecision(has_access=True, reason=AccessReason.TRIAL, trial_days_left=2)
        self.cache.set("c1", self.viewer, None, decision, NOW)
        key, ttl, payload = self.client.setex.call_args.args
        self.assertEqual(key, "access:c1:u1:COACH:-")
        self.assertEqual(ttl, 60)

        self.client.get.return_value = payload
        self.assertEqual(self.cache.get("c1", self.viewer, None), decision)

    def test_miss(self):
        self.client.get.return_value = None
        self.assertIsNone(self.cache.get("c1", self.viewer, None))

    def test_corrupt_entry_is_miss(self):
        self.client.get.return_value = "{not json"
        self.assertIsNone(self.cache.get("c1", self.viewer, None))

    def test_ttl_capped_at_release_date(self):
        decision = AccessDecision(
            has_access=False,
            reason=AccessReason.NONE,
            requires_upgrade=True,
            release_date=NOW.replace(second=30),
        )
        self.assertEqual(self.cache.ttl_for(decision, NOW), 30)
        later = AccessDecision(has_access=False, reason=AccessReason.NONE, release_date=NOW + DAY)
        self.assertEqual(self.cache.ttl_for(later, NOW), 60)

    def test_redis_errors_degrade_to_miss(self):
        self.client.get.side_effect = redis.ConnectionError("down")
        self.client.setex.side_effect = redis.ConnectionError("down")
        self.client.scan_iter.side_effect = redis.ConnectionError("down")
        decision = AccessDecision(has_access=True, reason=AccessReason.FREE_CONTENT)
        self.assertIsNone(self.cache.get("c1", self.viewer, None))
        self.cache.set("c1", self.viewer, None, decision, NOW)
        self.assertEqual(self.cache.invalidate("c1"), 0)

    def test_invalidate_deletes_all_viewer_keys(self):
        keys = ["access:c1:u1:COACH:-", "access:c1:anonymous:FREE:-"]
        self.client.scan_iter.return_value = iter(keys)
        self.assertEqual(self.cache.invalidate("c1"), 2)
        self.client.scan_iter.assert_called_once_with(match="access:c1:*")
        self.client.delete.assert_called_once_with(*keys)

    def test_invalidate_escapes_glob_characters(self):
        self.client.scan_iter.return_value = iter([])
        self.cache.invalidate("c*1[x]?")
        self.client.scan_iter.assert_called_once_with(match=r"access:c\*1\[x\]\?:*")

    def test_invalidate_nothing_cached(self):
        self.client.scan_iter.return_value = iter([])
        self.assertEqual(self.cache.invalidate("c1"), 0)
        self.client.delete.assert_not_called()
