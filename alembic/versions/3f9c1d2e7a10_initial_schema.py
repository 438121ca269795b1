"""initial_schema

Revision ID: 3f9c1d2e7a10
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1d2e7a10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, comment="User's email address (used for login)"),
        sa.Column('hashed_password', sa.String(length=255), nullable=False, comment='Bcrypt hashed password'),
        sa.Column('username', sa.String(length=50), nullable=False, comment='Unique username shown on public profiles'),
        sa.Column('birthdate', sa.Date(), nullable=False, comment='Date of birth given at registration'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False, comment='When the user registered'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table(
        'user_profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True, comment='User biography'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table(
        'favorite_genres',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False, comment='Genre name, matched against book categories'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_favorite_genres_user_id'), 'favorite_genres', ['user_id'], unique=False)

    op.create_table(
        'books',
        sa.Column('id', sa.String(length=64), nullable=False, comment='External catalog identifier'),
        sa.Column('title', sa.String(length=500), nullable=False, comment='Book title'),
        sa.Column('authors', sa.String(length=500), nullable=False, comment='Comma-separated author names'),
        sa.Column('image', sa.Text(), nullable=True, comment='Cover image URL'),
        sa.Column('description', sa.Text(), nullable=True, comment='Book synopsis'),
        sa.Column('categories', sa.JSON(), nullable=False, comment='Category tags from the catalog'),
        sa.Column('average_rating', sa.Float(), nullable=True, comment='Mean rating, recomputed from book_ratings'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_books_average_rating'), 'books', ['average_rating'], unique=False)

    op.create_table(
        'book_lists',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False, comment='List name, unique per user'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'name', name='uq_book_list_user_name'),
    )
    op.create_index(op.f('ix_book_lists_user_id'), 'book_lists', ['user_id'], unique=False)

    op.create_table(
        'book_list_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('book_list_id', sa.Integer(), nullable=False),
        sa.Column('book_id', sa.String(length=64), nullable=False),
        sa.Column('added_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['book_list_id'], ['book_lists.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['book_id'], ['books.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('book_list_id', 'book_id', name='uq_book_list_entry'),
    )
    op.create_index(op.f('ix_book_list_entries_book_list_id'), 'book_list_entries', ['book_list_id'], unique=False)
    op.create_index(op.f('ix_book_list_entries_book_id'), 'book_list_entries', ['book_id'], unique=False)

    op.create_table(
        'book_ratings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('book_id', sa.String(length=64), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False, comment='Rating from 1-5 stars'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_book_rating_range'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['book_id'], ['books.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'book_id', name='uq_book_rating_user_book'),
    )
    op.create_index(op.f('ix_book_ratings_user_id'), 'book_ratings', ['user_id'], unique=False)
    op.create_index(op.f('ix_book_ratings_book_id'), 'book_ratings', ['book_id'], unique=False)

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('book_id', sa.String(length=64), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['book_id'], ['books.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_comments_user_id'), 'comments', ['user_id'], unique=False)
    op.create_index(op.f('ix_comments_book_id'), 'comments', ['book_id'], unique=False)

    op.create_table(
        'posts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('book_title', sa.String(length=500), nullable=True),
        sa.Column('book_author', sa.String(length=500), nullable=True),
        sa.Column('book_id', sa.String(length=64), nullable=True, comment='External catalog identifier, not enforced'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_posts_user_id'), 'posts', ['user_id'], unique=False)
    op.create_index(op.f('ix_posts_created_at'), 'posts', ['created_at'], unique=False)

    op.create_table(
        'post_comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_post_comments_post_id'), 'post_comments', ['post_id'], unique=False)
    op.create_index(op.f('ix_post_comments_user_id'), 'post_comments', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_post_comments_user_id'), table_name='post_comments')
    op.drop_index(op.f('ix_post_comments_post_id'), table_name='post_comments')
    op.drop_table('post_comments')
    op.drop_index(op.f('ix_posts_created_at'), table_name='posts')
    op.drop_index(op.f('ix_posts_user_id'), table_name='posts')
    op.drop_table('posts')
    op.drop_index(op.f('ix_comments_book_id'), table_name='comments')
    op.drop_index(op.f('ix_comments_user_id'), table_name='comments')
    op.drop_table('comments')
    op.drop_index(op.f('ix_book_ratings_book_id'), table_name='book_ratings')
    op.drop_index(op.f('ix_book_ratings_user_id'), table_name='book_ratings')
    op.drop_table('book_ratings')
    op.drop_index(op.f('ix_book_list_entries_book_id'), table_name='book_list_entries')
    op.drop_index(op.f('ix_book_list_entries_book_list_id'), table_name='book_list_entries')
    op.drop_table('book_list_entries')
    op.drop_index(op.f('ix_book_lists_user_id'), table_name='book_lists')
    op.drop_table('book_lists')
    op.drop_index(op.f('ix_books_average_rating'), table_name='books')
    op.drop_table('books')
    op.drop_index(op.f('ix_favorite_genres_user_id'), table_name='favorite_genres')
    op.drop_table('favorite_genres')
    op.drop_table('user_profiles')
    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
