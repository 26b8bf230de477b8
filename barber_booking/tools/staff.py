"""Barber roster."""

from typing import Optional

from barber_booking.schemas.booking_schema import StaffMember

STAFF: dict[str, StaffMember] = {
    member.id: member
    for member in [
        StaffMember(id="joao", name="João", specialties=("fades", "beard")),
        StaffMember(id="rafael", name="Rafael", specialties=("coloring",)),
        StaffMember(id="lucas", name="Lucas", specialties=("kids", "classic cuts")),
    ]
}


def get_all_staff() -> list[StaffMember]:
    return list(STAFF.values())


def get_staff(staff_id: str) -> Optional[StaffMember]:
    return STAFF.get(staff_id)
