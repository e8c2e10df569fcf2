from copy import deepcopy

from app.application.interfaces.guest_repo import GuestRepo
from app.domain.entities.guest import Guest


class InMemoryGuestRepo(GuestRepo):
    def __init__(self) -> None:
        self.guests: dict[str, Guest] = {}

    async def get_by_id(self, guest_id: str) -> Guest | None:
        guest = self.guests.get(guest_id)
        return deepcopy(guest) if guest else None

    async def find_by_email(self, business_unit_id: str, email: str) -> Guest | None:
        for guest in self.guests.values():
            if guest.business_unit_id == business_unit_id and guest.email == email:
                return deepcopy(guest)
        return None

    async def create(self, guest: Guest) -> Guest:
        if await self.find_by_email(guest.business_unit_id, guest.email):
            raise ValueError("Guest email already exists for this business unit")
        self.guests[guest.id] = deepcopy(guest)
        return guest

    async def update_contact(self, guest: Guest) -> Guest:
        if guest.id not in self.guests:
            raise ValueError("Guest not found")
        stored = self.guests[guest.id]
        stored.first_name = guest.first_name
        stored.last_name = guest.last_name
        stored.phone = guest.phone
        stored.updated_at = guest.updated_at
        return guest
