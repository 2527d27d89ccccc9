from massage_booking.reporting.reports import AdminReports, RevenueReport, summarize

__all__ = ["AdminReports", "RevenueReport", "summarize"]
