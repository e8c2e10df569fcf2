from app.domain.entities.guest import Guest


class GuestRepo:
    async def get_by_id(self, guest_id: str) -> Guest | None:
        raise NotImplementedError

    async def find_by_email(self, business_unit_id: str, email: str) -> Guest | None:
        raise NotImplementedError

    async def create(self, guest: Guest) -> Guest:
        raise NotImplementedError

    async def update_contact(self, guest: Guest) -> Guest:
        """Persiste nombre y teléfono del huésped."""
        raise NotImplementedError
