from enum import StrEnum


class FoodPreference(StrEnum):
    REGULAR = 'Regular'
    JAIN = 'Jain'
    SWAMINARAYAN = 'Swaminarayan'
