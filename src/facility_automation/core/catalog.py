"""
Default facility catalog.

The demo campus: a classroom, an ICT lab in use, and an office.
"""

from datetime import datetime, UTC
from typing import Optional

from facility_automation.core.manager import FacilityManager
from facility_automation.core.room import ApplianceCategory, ApplianceState

ON = ApplianceState.ON
OFF = ApplianceState.OFF


def build_default_catalog(now: Optional[datetime] = None) -> FacilityManager:
    """
    Create the demo rooms and appliances.

    Args:
        now: Activity time for rooms that start occupied

    Returns:
        A populated FacilityManager
    """
    if now is None:
        now = datetime.now(UTC)

    mgr = FacilityManager()

    mgr.create_room(id=1, name="Classroom")
    mgr.add_appliance(1, id=1, name="Lights", category=ApplianceCategory.LIGHT, icon="💡")
    mgr.add_appliance(1, id=2, name="AC", category=ApplianceCategory.CLIMATE, icon="❄️")

    lab = mgr.create_room(id=2, name="ICT Lab", occupied=True)
    lab.last_activity_at = now
    mgr.add_appliance(2, id=3, name="Lights", category=ApplianceCategory.LIGHT, state=ON, icon="💡")
    mgr.add_appliance(
        2, id=4, name="Computers", category=ApplianceCategory.COMPUTER, state=ON, icon="🖥️"
    )
    mgr.add_appliance(2, id=5, name="AC", category=ApplianceCategory.CLIMATE, state=ON, icon="❄️")

    mgr.create_room(id=3, name="Office")
    mgr.add_appliance(3, id=6, name="Lights", category=ApplianceCategory.LIGHT, icon="💡")
    mgr.add_appliance(3, id=7, name="Computer", category=ApplianceCategory.COMPUTER, icon="🖥️")

    return mgr
