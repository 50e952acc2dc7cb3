from .schedule import Countdown, NextPrayer, countdown, resolve_next
from .sehri import SehriReminder
