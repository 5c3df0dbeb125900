import attrs

from src.service.dining.domain.enum.staff_role import StaffRole


@attrs.frozen
class RestaurantContext:
    """Already-authenticated caller: every query and mutation is scoped by restaurant_id"""

    restaurant_id: int
    role: StaffRole

    @property
    def is_operator(self) -> bool:
        return self.role == StaffRole.ADMIN
