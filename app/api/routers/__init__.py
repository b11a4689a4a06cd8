"""
app/api/routers package marker.
"""

from app.api.routers.chatbot_router import router as chatbot_router
from app.api.routers.internet_report_router import router as internet_report_router
from app.api.routers.population_report_router import router as population_report_router
from app.api.routers.urban_rural_report_router import router as urban_rural_report_router

__all__ = [
    "chatbot_router",
    "internet_report_router",
    "population_report_router",
    "urban_rural_report_router",
]
