"""001_baseline

Baseline migration for the RouteDesk schema: orders, drivers, routes
and route stops.

Revision ID: 0001
Revises: (none)
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ------------------------------------------------------------------
    # Extensions
    # ------------------------------------------------------------------
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ------------------------------------------------------------------
    # Enum types
    # ------------------------------------------------------------------
    op.execute(
        "CREATE TYPE order_status AS ENUM "
        "('PENDING', 'ASSIGNED', 'ENROUTE', 'DELIVERED', 'CANCELLED')"
    )
    op.execute(
        "CREATE TYPE route_status AS ENUM "
        "('scheduled', 'in-progress', 'completed', 'delayed')"
    )
    op.execute(
        "CREATE TYPE stop_status AS ENUM ('pending', 'completed', 'skipped')"
    )
    op.execute(
        "CREATE TYPE driver_status AS ENUM "
        "('active', 'on-delivery', 'off-duty', 'on-break')"
    )

    # ------------------------------------------------------------------
    # Tables (dependency order)
    # ------------------------------------------------------------------

    # --- drivers ---
    op.execute("""
        CREATE TABLE drivers (
            id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            name VARCHAR(100) NOT NULL,
            phone VARCHAR(20),
            email VARCHAR(100),
            driver_status driver_status NOT NULL DEFAULT 'active',
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # --- orders ---
    op.execute("""
        CREATE TABLE orders (
            id SERIAL PRIMARY KEY,
            status order_status NOT NULL DEFAULT 'PENDING',
            customer_name VARCHAR(100),
            address TEXT NOT NULL,
            total_price NUMERIC(10, 2) NOT NULL DEFAULT 0,
            notes TEXT,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
    """)
    op.execute("CREATE INDEX ix_orders_status ON orders (status)")

    # --- routes ---
    op.execute("""
        CREATE TABLE routes (
            id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            name VARCHAR(100) NOT NULL,
            driver_id UUID NOT NULL REFERENCES drivers(id),
            status route_status NOT NULL DEFAULT 'scheduled',
            start_address TEXT NOT NULL,
            estimated_completion_time TIMESTAMP WITH TIME ZONE,
            notes TEXT,
            actual_start_time TIMESTAMP WITH TIME ZONE,
            actual_completion_time TIMESTAMP WITH TIME ZONE,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
    """)
    op.execute("CREATE INDEX ix_routes_driver_id ON routes (driver_id)")

    # --- route_stops ---
    # An order holds at most one open stop; stops close when their route completes
    op.execute("""
        CREATE TABLE route_stops (
            id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            route_id UUID NOT NULL REFERENCES routes(id) ON DELETE CASCADE,
            order_id INTEGER NOT NULL REFERENCES orders(id),
            stop_number INTEGER NOT NULL CHECK (stop_number >= 1),
            status stop_status NOT NULL DEFAULT 'pending',
            estimated_arrival_time TIMESTAMP WITH TIME ZONE,
            actual_arrival_time TIMESTAMP WITH TIME ZONE,
            is_open BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_route_stop_number UNIQUE (route_id, stop_number)
        )
    """)
    op.execute("CREATE INDEX ix_route_stops_route_id ON route_stops (route_id)")
    op.execute(
        "CREATE UNIQUE INDEX uq_route_stop_open_order "
        "ON route_stops (order_id) WHERE is_open"
    )

    # ------------------------------------------------------------------
    # updated_at trigger
    # ------------------------------------------------------------------
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = CURRENT_TIMESTAMP;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
    """)
    for table in ("drivers", "orders", "routes", "route_stops"):
        op.execute(f"""
            CREATE TRIGGER update_{table}_updated_at
            BEFORE UPDATE ON {table}
            FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()
        """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS route_stops CASCADE")
    op.execute("DROP TABLE IF EXISTS routes CASCADE")
    op.execute("DROP TABLE IF EXISTS orders CASCADE")
    op.execute("DROP TABLE IF EXISTS drivers CASCADE")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column() CASCADE")
    op.execute("DROP TYPE IF EXISTS driver_status")
    op.execute("DROP TYPE IF EXISTS stop_status")
    op.execute("DROP TYPE IF EXISTS route_status")
    op.execute("DROP TYPE IF EXISTS order_status")
