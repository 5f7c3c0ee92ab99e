"""Trip domain entity: name and inclusive date range with cached day count."""
from typing import Optional
from packy.utilities.dates import calculate_days, to_date_string


class Trip:
    def __init__(self, name: str = "", departure_date: Optional[str] = None,
                 return_date: Optional[str] = None):
        self.name = name
        self.departure_date = departure_date
        self.return_date = return_date

    @property
    def calculated_days(self) -> int:
        '''Inclusive day count; 1 while either date is still unset.'''
        if not self.departure_date or not self.return_date:
            return 1
        return calculate_days(self.departure_date, self.return_date)

    def __str__(self) -> str:
        return f"{self.name} ({self.departure_date} - {self.return_date}, {self.calculated_days} days)"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return Trip(
            name=d.get("name") or "",
            departure_date=to_date_string(d.get("departureDate")),
            return_date=to_date_string(d.get("returnDate")),
        )

    def to_dict(self):
        return {
            "name": self.name,
            "departureDate": self.departure_date,
            "returnDate": self.return_date,
            "calculatedDays": self.calculated_days,
        }
