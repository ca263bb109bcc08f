#!/usr/bin/env python3
"""Setup script for the agency booking API."""

import asyncio
import logging
import sys
from datetime import date, time, timedelta
from pathlib import Path

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

from alembic import command
from alembic.config import Config
from sqlalchemy import func, select

from agency_api.core.database import async_session_factory, close_db
from agency_api.models import Tour
from agency_api.schemas.bus import CreateBusRequest
from agency_api.schemas.route import (
    CreateDestinationRequest,
    CreateScheduleRequest,
    SaveRouteRequest,
    SegmentPrice,
)
from agency_api.schemas.tour import CreateTourRequest
from agency_api.services.agency_service import AgencyService
from agency_api.services.bus_service import BusService
from agency_api.services.route_service import RouteService
from agency_api.services.tour_service import TourService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Sample fares between consecutive stops, in minor units
LEG_FARES = [45000, 38000]


def setup_database():
    """Apply Alembic migrations up to head."""
    logger.info("Running database migrations...")
    alembic_cfg = Config(str(server_dir / "db" / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(server_dir / "db" / "alembic"))
    command.upgrade(alembic_cfg, "head")
    logger.info("Database migrations completed")


async def create_sample_data():
    """Create a bus, a tour and a small bus network for local testing."""
    logger.info("Creating sample data...")

    async with async_session_factory() as db:
        try:
            existing_tours = await db.execute(select(func.count()).select_from(Tour))
            if existing_tours.scalar_one() > 0:
                logger.info("Sample data already exists, skipping...")
                return

            await AgencyService(db).get_settings()

            bus = await BusService(db).create_bus(CreateBusRequest(
                name="Irizar i8 Executive",
                license_plate="ABC-1234",
                rental_cost=4500000,
                total_capacity=40,
            ))

            departure = date.today() + timedelta(days=30)
            await TourService(db).create_tour(CreateTourRequest(
                title="Barrancas del Cobre",
                slug="barrancas-del-cobre",
                description="Five days through the Copper Canyon by bus and train",
                departure_date=departure,
                return_date=departure + timedelta(days=4),
                bus_id=bus.id,
                bus_cost=4500000,
                courtesies=2,
                selling_price_double=890000,
                selling_price_triple=820000,
                selling_price_quad=760000,
                selling_price_child=450000,
            ))

            routes = RouteService(db)
            stops = []
            for name, state in [("Chihuahua", "CHIH"), ("Cuauhtemoc", "CHIH"), ("Creel", "CHIH")]:
                destination = await routes.create_destination(CreateDestinationRequest(name=name, state=state))
                stops.append(destination.id)

            segments = []
            for i in range(len(stops)):
                for j in range(i + 1, len(stops)):
                    adult = sum(LEG_FARES[i:j])
                    segments.append(SegmentPrice(
                        start_destination_id=stops[i],
                        end_destination_id=stops[j],
                        adult_price=adult,
                        child_price=adult // 2,
                        duration_minutes=90 * (j - i),
                    ))

            route = await routes.save_route(SaveRouteRequest(
                name="Chihuahua - Creel",
                bus_id=bus.id,
                all_stops=stops,
                segments=segments,
            ))
            await routes.create_schedule(CreateScheduleRequest(
                route_id=route.id,
                departure_time=time(7, 30),
                day_of_week=[1, 3, 5],
            ))

            logger.info("Sample data created successfully!")

        except Exception as e:
            await db.rollback()
            logger.error(f"Failed to create sample data: {e}")
            raise


async def main():
    """Main setup function."""
    logger.info("Starting agency booking API setup...")

    await create_sample_data()
    await close_db()

    logger.info("Setup completed successfully!")
    logger.info("You can now start the API server with: cd server && uvicorn agency_api.main:app --reload")


if __name__ == "__main__":
    # Alembic's env.py drives its own event loop
    setup_database()
    asyncio.run(main())
