"""Add unique constraint on services to prevent same-day duplicate race

Revision ID: 9c2e7d51b0a4
Revises: 4b1f0c2ad7e9
Create Date: 2026-10-14 16:12:05.771520+00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9c2e7d51b0a4'
down_revision: Union[str, None] = '4b1f0c2ad7e9'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade database schema."""
    # Two concurrent requests for the same organization and day can both
    # pass the application-level duplicate check; this makes the second
    # INSERT fail instead of creating a second record.
    op.create_unique_constraint(
        'uq_services_organization_day',
        'services',
        ['organization_id', 'service_day'],
    )


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_constraint(
        'uq_services_organization_day',
        'services',
        type_='unique'
    )
