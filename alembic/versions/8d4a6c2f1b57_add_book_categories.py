"""add_book_categories

Revision ID: 8d4a6c2f1b57
Revises: 3f9c1d2e7a10
Create Date: 2026-10-17 15:00:00.000000

"""
from typing import Sequence, Union

from alembic import context, op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8d4a6c2f1b57'
down_revision: Union[str, None] = '3f9c1d2e7a10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'book_categories',
        sa.Column('book_id', sa.String(length=64), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False, comment='Lowercased category tag'),
        sa.ForeignKeyConstraint(['book_id'], ['books.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('book_id', 'name'),
    )
    op.create_index(op.f('ix_book_categories_name'), 'book_categories', ['name'], unique=False)

    # Backfill from the JSON column of books already mirrored
    if context.is_offline_mode():
        return

    books = sa.table('books', sa.column('id', sa.String), sa.column('categories', sa.JSON))
    book_categories = sa.table(
        'book_categories',
        sa.column('book_id', sa.String),
        sa.column('name', sa.String),
    )

    rows = []
    for book_id, categories in op.get_bind().execute(sa.select(books.c.id, books.c.categories)):
        names = {name.strip().lower() for name in categories or [] if name and name.strip()}
        rows.extend({'book_id': book_id, 'name': name} for name in sorted(names))

    if rows:
        op.bulk_insert(book_categories, rows)


def downgrade() -> None:
    op.drop_index(op.f('ix_book_categories_name'), table_name='book_categories')
    op.drop_table('book_categories')
