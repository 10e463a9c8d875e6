import random

# Calendar palette for bookings
BOOKING_COLORS = [
    '#3b82f6',
    '#10b981',
    '#f59e0b',
    '#8b5cf6',
    '#ec4899',
    '#14b8a6',
    '#f97316',
    '#6366f1',
    '#84cc16',
    '#06b6d4',
]

DEFAULT_EVENT_COLOR = '#3b82f6'
OUT_EVENT_COLOR = '#ef4444'


def random_booking_color() -> str:
    return random.choice(BOOKING_COLORS)
