from __future__ import annotations

from core.config import settings
from services.reload_bus import ReloadBus
from services.snapshots import SnapshotStore


snapshot_store = SnapshotStore(max_views=settings.snapshot_max_views)
reload_bus = ReloadBus()

# Any reload signal makes the cached lists for that topic stale.
reload_bus.subscribe(lambda signal: snapshot_store.drop_topic(signal.topic))
