"""Dashboard schemas"""

from pydantic import BaseModel

from ..appointments.schemas import AppointmentResponse
from ..clients.schemas import ClientResponse


class DashboardResponse(BaseModel):
    today_appointments: list[AppointmentResponse]
    today_count: int
    total_clients: int
    total_professionals: int
    total_services: int
    monthly_revenue: float
    occupation_rate: int  # percent
    birthdays: list[ClientResponse]
