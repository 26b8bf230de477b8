from barber_booking.reports.stats import BookingStats, StatsCalculator, StatsScope

__all__ = ["BookingStats", "StatsCalculator", "StatsScope"]
