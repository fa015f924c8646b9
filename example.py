#!/usr/bin/env python3
"""
Quick example demonstrating facility-automation basic usage.

Run with: PYTHONPATH=src python3 example.py

Time is passed explicitly, so the 30 minute inactivity window runs instantly.
"""

from datetime import datetime, timedelta, UTC

from facility_automation.core.bus import EventBus
from facility_automation.core.catalog import build_default_catalog
from facility_automation.core.room import ApplianceState
from facility_automation.core.settings import SettingsUpdate
from facility_automation.modules.notifications import NotificationHub
from facility_automation.modules.occupancy import OccupancyEngine, OccupancySource

print("=" * 60)
print("facility-automation Example")
print("=" * 60)

t0 = datetime(2025, 1, 15, 9, 0, tzinfo=UTC)

# 1. Catalog, bus and engine
print("\n1. Creating engine over the demo catalog...")
bus = EventBus()
engine = OccupancyEngine(build_default_catalog(now=t0), bus)
for room in engine.manager.all_rooms():
    print(f"   ✓ {room.name}: {[a.name for a in room.appliances]}")

# 2. Observers
print("\n2. Subscribing an observer...")
hub = NotificationHub(engine.get_snapshot)
hub.attach(bus)
pushes = []
hub.subscribe(lambda snapshot: pushes.append(snapshot["stats"]["activeAppliances"]))
print(f"   ✓ Initial snapshot pushed: {pushes[-1]} appliances on")

# 3. A sensor sees someone enter the office
print("\n3. Sensor reports the Office occupied...")
engine.set_occupancy(3, True, source=OccupancySource.SENSOR, now=t0)
office = engine.manager.get_room(3)
print(f"   ✓ Office: {[(a.name, a.state.value) for a in office.appliances]}")

# 4. The lab empties with a 1 minute window
print("\n4. ICT Lab becomes vacant (inactivity window: 1 minute)...")
engine.update_settings(SettingsUpdate(inactivity_minutes=1), now=t0)
engine.set_occupancy(2, False, now=t0)
print(f"   ✓ Turn-off due at {engine.get_next_timeout():%H:%M:%S}")

engine.control_appliance(5, ApplianceState.ON, now=t0 + timedelta(seconds=30))
engine.check_timeouts(t0 + timedelta(minutes=1))
lab = engine.manager.get_room(2)
print(f"   ✓ After 1 minute: {[(a.name, a.state.value) for a in lab.appliances]}")

# 5. Stale turn-off
print("\n5. Office empties, then fills again before the timer...")
engine.set_occupancy(3, False, now=t0 + timedelta(minutes=2))
engine.set_occupancy(3, True, now=t0 + timedelta(minutes=2, seconds=30))
result = engine.check_timeouts(t0 + timedelta(minutes=3))
print(f"   ✓ Fired: {len(result.fired)}, dropped as stale: {len(result.skipped)}")

# 6. Activity
print("\n6. Activity log...")
for entry in engine.get_activity_log():
    print(f"   {entry.timestamp:%H:%M:%S}  {entry.message}")
print(f"\n   Observer received {len(pushes)} snapshots")

print("\n" + "=" * 60)
print("Example complete!")
print("=" * 60)
