"""Initial agency schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

SEAT_STATUS_CHECK = "status IN ('available', 'booked', 'blocked', 'courtesy')"


def _uuid_pk() -> sa.Column:
    return sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade database schema."""
    op.create_table('agency_settings',
        _uuid_pk(),
        sa.Column('agency_name', sa.String(length=255), nullable=False),
        sa.Column('advance_payment_amount', sa.Integer(), nullable=False),
        sa.Column('payment_mode', sa.String(length=20), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('advance_payment_amount >= 0', name='ck_agency_advance_non_negative'),
        sa.CheckConstraint("payment_mode IN ('test', 'production')", name='ck_agency_payment_mode_valid'),
        sa.CheckConstraint('length(currency) = 3', name='ck_agency_currency_length'),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('buses',
        _uuid_pk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('license_plate', sa.String(length=32), nullable=True),
        sa.Column('rental_cost', sa.Integer(), nullable=False),
        sa.Column('total_capacity', sa.Integer(), nullable=False),
        sa.Column('seat_layout', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('total_capacity >= 0', name='ck_bus_total_capacity_non_negative'),
        sa.CheckConstraint('rental_cost >= 0', name='ck_bus_rental_cost_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_buses_name'), 'buses', ['name'], unique=False)

    op.create_table('hotels',
        _uuid_pk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('quoted_date', sa.Date(), nullable=True),
        sa.Column('num_nights_quoted', sa.Integer(), nullable=False),
        sa.Column('cost_per_night_double', sa.Integer(), nullable=False),
        sa.Column('cost_per_night_triple', sa.Integer(), nullable=False),
        sa.Column('cost_per_night_quad', sa.Integer(), nullable=False),
        sa.Column('capacity_double', sa.Integer(), nullable=False),
        sa.Column('capacity_triple', sa.Integer(), nullable=False),
        sa.Column('capacity_quad', sa.Integer(), nullable=False),
        sa.Column('num_double_rooms', sa.Integer(), nullable=False),
        sa.Column('num_triple_rooms', sa.Integer(), nullable=False),
        sa.Column('num_quad_rooms', sa.Integer(), nullable=False),
        sa.Column('advance_payment', sa.Integer(), nullable=False),
        sa.Column('total_paid', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('num_nights_quoted > 0', name='ck_hotel_nights_positive'),
        sa.CheckConstraint(
            'cost_per_night_double >= 0 AND cost_per_night_triple >= 0 AND cost_per_night_quad >= 0',
            name='ck_hotel_costs_non_negative'
        ),
        sa.CheckConstraint('total_paid >= advance_payment', name='ck_hotel_paid_covers_advance'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_hotels_name'), 'hotels', ['name'], unique=False)

    op.create_table('providers',
        _uuid_pk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('service_type', sa.String(length=100), nullable=False),
        sa.Column('unit_type', sa.String(length=50), nullable=False),
        sa.Column('cost_per_unit', sa.Integer(), nullable=False),
        sa.Column('selling_price_per_unit', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('cost_per_unit >= 0', name='ck_provider_cost_non_negative'),
        sa.CheckConstraint('selling_price_per_unit >= 0', name='ck_provider_price_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table('tours',
        _uuid_pk(),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('departure_date', sa.Date(), nullable=True),
        sa.Column('return_date', sa.Date(), nullable=True),
        sa.Column('bus_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('bus_capacity', sa.Integer(), nullable=False),
        sa.Column('bus_cost', sa.Integer(), nullable=False),
        sa.Column('courtesies', sa.Integer(), nullable=False),
        sa.Column('hotel_details', sa.JSON(), nullable=False),
        sa.Column('provider_details', sa.JSON(), nullable=False),
        sa.Column('total_base_cost', sa.Integer(), nullable=False),
        sa.Column('paying_clients_count', sa.Integer(), nullable=False),
        sa.Column('cost_per_paying_person', sa.Integer(), nullable=False),
        sa.Column('selling_price_double', sa.Integer(), nullable=False),
        sa.Column('selling_price_triple', sa.Integer(), nullable=False),
        sa.Column('selling_price_quad', sa.Integer(), nullable=False),
        sa.Column('selling_price_child', sa.Integer(), nullable=False),
        sa.Column('advance_payment_per_person', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('bus_capacity > 0', name='ck_tour_bus_capacity_positive'),
        sa.CheckConstraint('courtesies >= 0', name='ck_tour_courtesies_non_negative'),
        sa.CheckConstraint('courtesies < bus_capacity', name='ck_tour_courtesies_lt_capacity'),
        sa.CheckConstraint('selling_price_double > 0', name='ck_tour_price_double_positive'),
        sa.CheckConstraint('selling_price_triple > 0', name='ck_tour_price_triple_positive'),
        sa.CheckConstraint('selling_price_quad > 0', name='ck_tour_price_quad_positive'),
        sa.CheckConstraint('selling_price_child >= 0', name='ck_tour_price_child_non_negative'),
        sa.ForeignKeyConstraint(['bus_id'], ['buses.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug')
    )
    op.create_index(op.f('ix_tours_title'), 'tours', ['title'], unique=False)
    op.create_index(op.f('ix_tours_slug'), 'tours', ['slug'], unique=False)
    op.create_index(op.f('ix_tours_bus_id'), 'tours', ['bus_id'], unique=False)

    op.create_table('bus_destinations',
        _uuid_pk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('state', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table('bus_routes',
        _uuid_pk(),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('all_stops', sa.JSON(), nullable=False),
        sa.Column('bus_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['bus_id'], ['buses.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bus_routes_bus_id'), 'bus_routes', ['bus_id'], unique=False)

    op.create_table('route_segments',
        _uuid_pk(),
        sa.Column('route_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('start_destination_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('end_destination_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('adult_price', sa.Integer(), nullable=False),
        sa.Column('child_price', sa.Integer(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('distance_km', sa.Integer(), nullable=True),
        sa.CheckConstraint('adult_price > 0', name='ck_segment_adult_price_positive'),
        sa.CheckConstraint('child_price >= 0', name='ck_segment_child_price_non_negative'),
        sa.ForeignKeyConstraint(['route_id'], ['bus_routes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['start_destination_id'], ['bus_destinations.id']),
        sa.ForeignKeyConstraint(['end_destination_id'], ['bus_destinations.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('route_id', 'start_destination_id', 'end_destination_id', name='uq_route_segment_pair')
    )
    op.create_index(op.f('ix_route_segments_route_id'), 'route_segments', ['route_id'], unique=False)

    op.create_table('bus_schedules',
        _uuid_pk(),
        sa.Column('route_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('departure_time', sa.Time(), nullable=False),
        sa.Column('day_of_week', sa.JSON(), nullable=False),
        sa.Column('effective_date_start', sa.Date(), nullable=True),
        sa.Column('effective_date_end', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['route_id'], ['bus_routes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bus_schedules_route_id'), 'bus_schedules', ['route_id'], unique=False)

    op.create_table('clients',
        _uuid_pk(),
        sa.Column('contract_number', sa.String(length=16), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('identification_number', sa.String(length=50), nullable=True),
        sa.Column('contractor_age', sa.Integer(), nullable=True),
        sa.Column('tour_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('bus_route_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('number_of_people', sa.Integer(), nullable=False),
        sa.Column('companions', sa.JSON(), nullable=False),
        sa.Column('extra_services', sa.JSON(), nullable=False),
        sa.Column('room_details', sa.JSON(), nullable=False),
        sa.Column('total_amount', sa.Integer(), nullable=False),
        sa.Column('advance_payment', sa.Integer(), nullable=False),
        sa.Column('total_paid', sa.Integer(), nullable=False),
        sa.Column('payment_method', sa.String(length=32), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('number_of_people > 0', name='ck_client_people_positive'),
        sa.CheckConstraint('total_amount >= 0', name='ck_client_total_non_negative'),
        sa.CheckConstraint('total_paid >= 0', name='ck_client_paid_non_negative'),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name='ck_client_status_valid'
        ),
        sa.ForeignKeyConstraint(['tour_id'], ['tours.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['bus_route_id'], ['bus_routes.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_clients_contract_number'), 'clients', ['contract_number'], unique=True)
    op.create_index(op.f('ix_clients_email'), 'clients', ['email'], unique=False)
    op.create_index(op.f('ix_clients_tour_id'), 'clients', ['tour_id'], unique=False)
    op.create_index(op.f('ix_clients_bus_route_id'), 'clients', ['bus_route_id'], unique=False)

    op.create_table('client_payments',
        _uuid_pk(),
        sa.Column('client_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('payment_method', sa.String(length=32), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('amount > 0', name='ck_client_payment_amount_positive'),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_client_payments_client_id'), 'client_payments', ['client_id'], unique=False)

    op.create_table('bus_passengers',
        _uuid_pk(),
        sa.Column('client_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('schedule_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('seat_number', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('age', sa.Integer(), nullable=True),
        sa.Column('identification_number', sa.String(length=50), nullable=True),
        sa.Column('is_contractor', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('origin_destination_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('destination_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('fare_amount', sa.Integer(), nullable=False),
        sa.Column('boarding_status', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('seat_number > 0', name='ck_passenger_seat_positive'),
        sa.CheckConstraint('age IS NULL OR (age >= 0 AND age <= 120)', name='ck_passenger_age_range'),
        sa.CheckConstraint(
            "boarding_status IN ('pending', 'boarded', 'no_show')",
            name='ck_passenger_boarding_status_valid'
        ),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['schedule_id'], ['bus_schedules.id']),
        sa.ForeignKeyConstraint(['origin_destination_id'], ['bus_destinations.id']),
        sa.ForeignKeyConstraint(['destination_id'], ['bus_destinations.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bus_passengers_client_id'), 'bus_passengers', ['client_id'], unique=False)
    op.create_index(op.f('ix_bus_passengers_schedule_id'), 'bus_passengers', ['schedule_id'], unique=False)

    op.create_table('tour_seat_assignments',
        _uuid_pk(),
        sa.Column('tour_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('seat_number', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('client_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('booked_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('seat_number > 0', name='ck_tour_seat_number_positive'),
        sa.CheckConstraint(SEAT_STATUS_CHECK, name='ck_tour_seat_status_valid'),
        sa.ForeignKeyConstraint(['tour_id'], ['tours.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tour_id', 'seat_number', name='uq_tour_seat')
    )
    op.create_index(op.f('ix_tour_seat_assignments_tour_id'), 'tour_seat_assignments', ['tour_id'], unique=False)
    op.create_index(op.f('ix_tour_seat_assignments_client_id'), 'tour_seat_assignments', ['client_id'], unique=False)

    op.create_table('bus_seat_assignments',
        _uuid_pk(),
        sa.Column('schedule_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('seat_number', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('client_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('booked_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('seat_number > 0', name='ck_bus_seat_number_positive'),
        sa.CheckConstraint(SEAT_STATUS_CHECK, name='ck_bus_seat_status_valid'),
        sa.ForeignKeyConstraint(['schedule_id'], ['bus_schedules.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['client_id'], ['clients.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('schedule_id', 'seat_number', name='uq_schedule_seat')
    )
    op.create_index(op.f('ix_bus_seat_assignments_schedule_id'), 'bus_seat_assignments', ['schedule_id'], unique=False)
    op.create_index(op.f('ix_bus_seat_assignments_client_id'), 'bus_seat_assignments', ['client_id'], unique=False)

    op.create_table('idempotency_records',
        _uuid_pk(),
        sa.Column('idempotency_key', sa.String(length=255), nullable=False),
        sa.Column('operation', sa.String(length=100), nullable=False),
        sa.Column('request_body_hash', sa.String(length=64), nullable=False),
        sa.Column('response_status_code', sa.Integer(), nullable=False),
        sa.Column('response_body', sa.Text(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint('length(idempotency_key) > 0', name='ck_idempotency_key_not_empty'),
        sa.CheckConstraint('length(request_body_hash) = 64', name='ck_idempotency_hash_length'),
        sa.CheckConstraint(
            'response_status_code >= 100 AND response_status_code <= 599',
            name='ck_idempotency_status_code_valid'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('idempotency_key', 'operation', name='uq_idempotency_key_operation')
    )
    op.create_index(op.f('ix_idempotency_records_idempotency_key'), 'idempotency_records', ['idempotency_key'], unique=False)
    op.create_index(op.f('ix_idempotency_records_expires_at'), 'idempotency_records', ['expires_at'], unique=False)


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table('idempotency_records')
    op.drop_table('bus_seat_assignments')
    op.drop_table('tour_seat_assignments')
    op.drop_table('bus_passengers')
    op.drop_table('client_payments')
    op.drop_table('clients')
    op.drop_table('bus_schedules')
    op.drop_table('route_segments')
    op.drop_table('bus_routes')
    op.drop_table('bus_destinations')
    op.drop_table('tours')
    op.drop_table('providers')
    op.drop_table('hotels')
    op.drop_table('buses')
    op.drop_table('agency_settings')
