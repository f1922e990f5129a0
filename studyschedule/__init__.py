"""Class schedule manager: live / upcoming / past status, filters, calendar view."""
