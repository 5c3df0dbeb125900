from datetime import date


RESTAURANT_ID = 1
OTHER_RESTAURANT_ID = 2

SATURDAY = date(2025, 6, 14)  # day_of_week 6
SUNDAY = date(2025, 6, 15)  # day_of_week 0
NEXT_SATURDAY = date(2025, 6, 21)
