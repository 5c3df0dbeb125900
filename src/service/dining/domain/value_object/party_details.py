from typing import Optional

import attrs

from src.platform.exception.exceptions import ValidationError
from src.service.dining.domain.enum.food_preference import FoodPreference


@attrs.frozen
class PartyDetails:
    """Guest-facing fields shared by every row of a reservation group"""

    customer_name: str
    contact: str
    adults: int
    kids: int = 0
    food_pref: FoodPreference = FoodPreference.REGULAR
    special_req: Optional[str] = None

    @classmethod
    def create(
        cls,
        *,
        customer_name: str,
        contact: str,
        adults: int,
        kids: int = 0,
        food_pref: FoodPreference | str = FoodPreference.REGULAR,
        special_req: Optional[str] = None,
    ) -> 'PartyDetails':
        customer_name = (customer_name or '').strip()
        contact = (contact or '').strip()
        if not customer_name:
            raise ValidationError('customer_name is required')
        if not contact:
            raise ValidationError('contact is required')
        if adults < 1:
            raise ValidationError('adults must be at least 1')
        if kids < 0:
            raise ValidationError('kids cannot be negative')
        try:
            food_pref = FoodPreference(food_pref)
        except ValueError:
            raise ValidationError(
                f'food_pref must be one of {", ".join(p.value for p in FoodPreference)}'
            )
        special_req = (special_req or '').strip() or None
        return cls(
            customer_name=customer_name,
            contact=contact,
            adults=adults,
            kids=kids,
            food_pref=food_pref,
            special_req=special_req,
        )

    @property
    def party_size(self) -> int:
        return self.adults + self.kids
