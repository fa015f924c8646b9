"""Constants shared across facility-automation."""

# Event types published on the EventBus
EVENT_FACILITY_CHANGED = "facility.changed"
EVENT_ACTION_SCHEDULED = "deferred_action.scheduled"

# Socket.IO event carrying the full snapshot
SNAPSHOT_EVENT = "systemData"

DEFAULT_PORT = 3000
DEFAULT_CHECK_INTERVAL = 60  # seconds between daily shutdown checks
DEFAULT_SENSOR_INTERVAL = 10  # seconds between simulated sensor ticks
